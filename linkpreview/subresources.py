"""Downloading of images and videos referenced by extracted metadata."""

from __future__ import annotations

import asyncio
import io
import logging
from urllib.parse import urlsplit

import httpx
from PIL import Image

from .config import Settings, get_settings
from .errors import Cancelled, FetchFailed, LinkPreviewError, TimedOut, UnknownError
from .schemas import LinkMetadata

logger = logging.getLogger(__name__)

SUBRESOURCE_USER_AGENT = "Mozilla/5.0 (compatible; linkpreview)"


def has_image_signature(data: bytes) -> bool:
    """Check the leading bytes for JPEG, PNG, GIF or WebP."""
    if len(data) < 8:
        return False
    if data.startswith(b"\xff\xd8\xff"):
        return True
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return True
    if data.startswith(b"GIF8"):
        return True
    return data.startswith(b"RIFF") and len(data) > 12 and data[8:12] == b"WEBP"


def validate_image(image_data: bytes) -> bool:
    """
    Validate that the data is a valid image.

    Args:
        image_data: Raw image bytes

    Returns:
        True if the bytes carry a supported signature and Pillow can verify them
    """
    if not has_image_signature(image_data):
        return False
    try:
        img = Image.open(io.BytesIO(image_data))
        img.verify()
        return True
    except Exception:
        return False


def validate_video(video_data: bytes) -> bool:
    """Check the leading bytes for MP4, WebM or AVI."""
    if len(video_data) < 12:
        return False
    if video_data[4:8] == b"ftyp":
        return True
    if video_data.startswith(b"\x1a\x45\xdf\xa3"):
        return True
    return video_data.startswith(b"RIFF") and video_data[8:12] == b"AVI "


async def _download(
    url: str,
    *,
    timeout: float,
    max_bytes: int,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bytes:
    if urlsplit(url).scheme.lower() != "https":
        raise FetchFailed(f"Refusing non-HTTPS subresource: {url}")

    try:
        async with httpx.AsyncClient(follow_redirects=True, transport=transport) as client:
            async with client.stream(
                "GET", url, headers={"User-Agent": SUBRESOURCE_USER_AGENT}, timeout=timeout
            ) as response:
                if not 200 <= response.status_code <= 299:
                    raise FetchFailed(f"HTTP {response.status_code} downloading {url}")
                declared = response.headers.get("Content-Length", "")
                if declared.isdigit() and int(declared) > max_bytes:
                    raise FetchFailed(f"Subresource {url} declares {declared} bytes, over {max_bytes}")
                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > max_bytes:
                        raise FetchFailed(f"Subresource {url} exceeds {max_bytes} bytes")
    except asyncio.CancelledError as e:
        raise Cancelled(underlying=e) from e
    except httpx.TimeoutException as e:
        raise TimedOut(f"Timed out downloading {url}", underlying=e) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchFailed(f"Failed to download {url}: {e}", underlying=e) from e
    except LinkPreviewError:
        raise
    except Exception as e:
        raise UnknownError(str(e) or None, underlying=e) from e
    return bytes(body)


async def load_image_data(
    url: str,
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bytes:
    settings = settings or get_settings()
    data = await _download(
        url,
        timeout=settings.image_timeout,
        max_bytes=settings.max_image_bytes,
        transport=transport,
    )
    if not validate_image(data):
        raise FetchFailed(f"Downloaded data from {url} is not an image")
    return data


async def load_video_data(
    url: str,
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bytes:
    settings = settings or get_settings()
    data = await _download(
        url,
        timeout=settings.video_timeout,
        max_bytes=settings.max_video_bytes,
        transport=transport,
    )
    if not validate_video(data):
        raise FetchFailed(f"Downloaded data from {url} is not a video")
    return data


async def prefetch_subresources(
    metadata: LinkMetadata,
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> LinkMetadata:
    """Return a copy of ``metadata`` with image and video bytes attached.

    A failed download leaves the URL in place and the data empty.
    """
    updates: dict[str, bytes] = {}
    if metadata.image_url and metadata.image_data is None:
        try:
            updates["image_data"] = await load_image_data(
                metadata.image_url, settings=settings, transport=transport
            )
        except Cancelled:
            raise
        except LinkPreviewError as e:
            logger.warning("Image prefetch failed for %s: %s", metadata.image_url, e)
    if metadata.video_url and metadata.video_data is None:
        try:
            updates["video_data"] = await load_video_data(
                metadata.video_url, settings=settings, transport=transport
            )
        except Cancelled:
            raise
        except LinkPreviewError as e:
            logger.warning("Video prefetch failed for %s: %s", metadata.video_url, e)
    if not updates:
        return metadata
    return metadata.model_copy(update=updates)
