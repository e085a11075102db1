from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExtractionRequest(BaseModel):
    """A configured GET request for a page whose metadata should be extracted."""

    model_config = ConfigDict(frozen=True)

    url: str | None = None
    headers: Mapping[str, str] = Field(default_factory=dict)
    timeout: float = Field(30.0, gt=0)

    @field_validator("headers")
    @classmethod
    def copy_headers(cls, v: Mapping[str, str]) -> dict[str, str]:
        # Detach from the caller's mapping
        return dict(v)


class LinkMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    original_url: str
    url: str
    title: str | None = None
    summary: str | None = None
    icon_url: str | None = None
    image_url: str | None = None
    video_url: str | None = None
    remote_video_url: str | None = None
    image_data: bytes | None = Field(None, repr=False, exclude=True)
    video_data: bytes | None = Field(None, repr=False, exclude=True)

    @property
    def final_url(self) -> str:
        return self.url

    @classmethod
    def for_response(cls, original_url: str, final_url: str | None = None) -> LinkMetadata:
        """Seed an empty result for a page that answered at ``final_url``."""
        return cls(original_url=original_url, url=final_url or original_url)
