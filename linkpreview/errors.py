"""Closed error taxonomy for metadata extraction."""

from __future__ import annotations

import asyncio
from enum import Enum


class ErrorCode(str, Enum):
    INVALID_URL = "invalid_url"
    FETCH_FAILED = "fetch_failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


_DEFAULT_REASONS = {
    ErrorCode.INVALID_URL: "Invalid URL.",
    ErrorCode.FETCH_FAILED: "Metadata fetch failed.",
    ErrorCode.TIMED_OUT: "Metadata fetch timed out.",
    ErrorCode.CANCELLED: "Metadata fetch was cancelled.",
    ErrorCode.UNKNOWN: "Unknown metadata error.",
}


class LinkPreviewError(Exception):
    """Base error for link metadata extraction.

    ``reason`` is a human-readable message for logs; ``underlying`` keeps the
    description of the lower-level error that caused this one, if any.
    """

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, reason: str | None = None, *, underlying: BaseException | None = None) -> None:
        self.reason = reason
        self.underlying = str(underlying) if underlying is not None else None
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return self.reason or _DEFAULT_REASONS[self.code]


class InvalidURL(LinkPreviewError):
    code = ErrorCode.INVALID_URL


class FetchFailed(LinkPreviewError):
    code = ErrorCode.FETCH_FAILED


class AlreadyCalled(FetchFailed):
    """A provider instance was asked for metadata a second time."""

    def __init__(self) -> None:
        super().__init__("MetadataProvider.fetch() called more than once.")


class TimedOut(LinkPreviewError):
    code = ErrorCode.TIMED_OUT


class Cancelled(LinkPreviewError, asyncio.CancelledError):
    """Cancellation of the awaiting task; still a CancelledError for asyncio."""

    code = ErrorCode.CANCELLED


class UnknownError(LinkPreviewError):
    code = ErrorCode.UNKNOWN
