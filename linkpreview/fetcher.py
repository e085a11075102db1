"""HTML fetching over HTTP."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from .errors import Cancelled, FetchFailed, TimedOut, UnknownError
from .schemas import ExtractionRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    html: str
    final_url: str


class Fetcher(Protocol):
    """Performs one request and returns the page text with the URL that answered."""

    async def fetch_html(self, request: ExtractionRequest) -> FetchedPage:
        ...


def _decode_utf8(content: bytes) -> str:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FetchFailed("Response body is not valid UTF-8.", underlying=e) from e


class HttpxFetcher:
    """Fetches pages with httpx, following redirects.

    ``transport`` is handed to the client, which lets tests swap in an
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        *,
        max_redirects: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.max_redirects = max_redirects
        self.transport = transport

    async def fetch_html(self, request: ExtractionRequest) -> FetchedPage:
        if not request.url:
            raise FetchFailed("Request has no URL.")

        logger.debug("Fetching %s (timeout %ss)", request.url, request.timeout)
        try:
            async with httpx.AsyncClient(
                follow_redirects=True,
                max_redirects=self.max_redirects,
                transport=self.transport,
            ) as client:
                response = await client.get(
                    request.url, headers=dict(request.headers), timeout=request.timeout
                )
        except asyncio.CancelledError as e:
            logger.debug("Fetch of %s cancelled", request.url)
            raise Cancelled(underlying=e) from e
        except httpx.TimeoutException as e:
            logger.warning("Timed out fetching %s: %s", request.url, e)
            raise TimedOut(f"Timed out after {request.timeout}s.", underlying=e) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Failed to fetch %s: %s", request.url, e)
            raise FetchFailed(f"Failed to fetch: {e}", underlying=e) from e
        except Exception as e:
            logger.warning("Unexpected error fetching %s: %s", request.url, e)
            raise UnknownError(str(e) or None, underlying=e) from e

        if not 200 <= response.status_code <= 299:
            logger.warning("Fetch of %s returned HTTP %s", request.url, response.status_code)
            raise FetchFailed(f"HTTP {response.status_code}")

        html = _decode_utf8(response.content)
        final_url = str(response.url) if response.url else request.url
        logger.debug("Fetched %s from %s (%d bytes)", request.url, final_url, len(response.content))
        return FetchedPage(html=html, final_url=final_url)
