"""Single-use metadata provider tying validation, fetching and extraction together."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

from .config import Settings, get_settings
from .errors import FetchFailed
from .extractor import HTMLTagExtractor, TagExtractor
from .fetcher import Fetcher, HttpxFetcher
from .guard import CallTracker
from .request_builder import build_metadata_request
from .schemas import ExtractionRequest, LinkMetadata
from .subresources import prefetch_subresources
from .validation import validate_url

logger = logging.getLogger(__name__)


class MetadataProvider:
    """Fetches a page and extracts link preview metadata from it.

    A provider services one request. Any further call raises AlreadyCalled,
    whatever the outcome of the first; create a new provider per URL.
    """

    def __init__(
        self,
        fetcher: Fetcher | None = None,
        extractor: TagExtractor | None = None,
        *,
        settings: Settings | None = None,
        timeout: float | None = None,
        fetch_subresources: bool | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.fetcher = fetcher or HttpxFetcher(max_redirects=self.settings.max_redirects)
        self.extractor = extractor or HTMLTagExtractor()
        self.timeout = timeout if timeout is not None else self.settings.timeout
        self.fetch_subresources = (
            fetch_subresources if fetch_subresources is not None else self.settings.fetch_subresources
        )
        self._tracker = CallTracker()

    @property
    def used(self) -> bool:
        return self._tracker.called

    async def fetch(self, url: str) -> LinkMetadata:
        """Fetch metadata for ``url`` using the default browser-like request."""
        url = validate_url(url)
        request = build_metadata_request(url, timeout=self.timeout, settings=self.settings)
        return await self.fetch_request(request)

    async def fetch_request(self, request: ExtractionRequest) -> LinkMetadata:
        """Fetch metadata for a caller-built request."""
        self._tracker.record_call()
        if request.url is None:
            raise FetchFailed("Request has no URL.")
        original_url = validate_url(request.url)

        page = await self.fetcher.fetch_html(request)
        base = LinkMetadata.for_response(original_url, page.final_url)
        metadata = self.extractor.extract(page.html, base)
        logger.debug(
            "Extracted metadata for %s: title=%r image=%r icon=%r",
            original_url,
            metadata.title,
            metadata.image_url,
            metadata.icon_url,
        )

        if self.fetch_subresources:
            metadata = await prefetch_subresources(metadata, settings=self.settings)
        return metadata


def fetch_metadata_sync(url: str, **provider_kwargs) -> LinkMetadata:
    """Run a fresh provider for ``url`` from synchronous code."""
    provider = MetadataProvider(**provider_kwargs)
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(provider.fetch(url))
    # Already inside an event loop; run on a private loop in a worker thread
    with ThreadPoolExecutor(max_workers=1) as executor:
        return executor.submit(asyncio.run, provider.fetch(url)).result()
