"""Link preview metadata: fetch a page, extract its title, image, icon and video."""

from .errors import (
    AlreadyCalled,
    Cancelled,
    ErrorCode,
    FetchFailed,
    InvalidURL,
    LinkPreviewError,
    TimedOut,
    UnknownError,
)
from .extractor import HTMLTagExtractor, TagExtractor
from .fetcher import FetchedPage, Fetcher, HttpxFetcher
from .provider import MetadataProvider, fetch_metadata_sync
from .request_builder import build_metadata_request
from .schemas import ExtractionRequest, LinkMetadata
from .subresources import load_image_data, load_video_data
from .validation import validate_url

__all__ = [
    "AlreadyCalled",
    "Cancelled",
    "ErrorCode",
    "ExtractionRequest",
    "FetchFailed",
    "FetchedPage",
    "Fetcher",
    "HTMLTagExtractor",
    "HttpxFetcher",
    "InvalidURL",
    "LinkMetadata",
    "LinkPreviewError",
    "MetadataProvider",
    "TagExtractor",
    "TimedOut",
    "UnknownError",
    "build_metadata_request",
    "fetch_metadata_sync",
    "load_image_data",
    "load_video_data",
    "validate_url",
]
