from __future__ import annotations

from collections.abc import Mapping

from .config import Settings, get_settings
from .schemas import ExtractionRequest


def default_headers(settings: Settings | None = None) -> dict[str, str]:
    settings = settings or get_settings()
    return {
        "User-Agent": settings.user_agent,
        "Accept": settings.accept,
        "Accept-Encoding": settings.accept_encoding,
    }


def build_metadata_request(
    url: str,
    timeout: float | None = None,
    headers: Mapping[str, str] | None = None,
    settings: Settings | None = None,
) -> ExtractionRequest:
    """Build a GET request with browser-like headers for fetching a page's metadata.

    Headers passed by the caller replace the defaults of the same name.
    """
    settings = settings or get_settings()
    merged = default_headers(settings)
    if headers:
        lowered = {name.lower() for name in headers}
        merged = {name: value for name, value in merged.items() if name.lower() not in lowered}
        merged.update(headers)
    return ExtractionRequest(
        url=url,
        headers=merged,
        timeout=timeout if timeout is not None else settings.timeout,
    )
