"""
Command line link preview.

Usage:
    python -m linkpreview <URL> [--timeout SECONDS] [--fetch-subresources] [-v]
"""

import argparse
import json
import logging
import sys

from .errors import LinkPreviewError
from .provider import fetch_metadata_sync


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print link preview metadata for a URL as JSON.")
    parser.add_argument("url", help="The URL to fetch")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument(
        "--fetch-subresources",
        action="store_true",
        default=None,
        help="Also download the preview image and video",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log fetch details")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        metadata = fetch_metadata_sync(
            args.url, timeout=args.timeout, fetch_subresources=args.fetch_subresources
        )
    except LinkPreviewError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = metadata.model_dump()
    if metadata.image_data is not None:
        result["image_bytes"] = len(metadata.image_data)
    if metadata.video_data is not None:
        result["video_bytes"] = len(metadata.video_data)
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
