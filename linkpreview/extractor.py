"""Link preview metadata extraction from raw HTML text.

The extractor never builds a DOM. It finds tag boundaries with a regex, then
parses each tag's attributes independently, so attribute order does not matter
and broken markup is skipped instead of rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .schemas import LinkMetadata
from .validation import parse_url_candidate

TITLE_PATTERN = re.compile(r"<title[^>]*>([^<]*)</title>", re.IGNORECASE)
# Quoted attribute values may contain ">"
_TAG_BODY = r"""((?:[^>"']|"[^"]*"|'[^']*')*)"""
META_PATTERN = re.compile(r"<meta\b" + _TAG_BODY + ">", re.IGNORECASE)
LINK_PATTERN = re.compile(r"<link\b" + _TAG_BODY + ">", re.IGNORECASE)
ATTRIBUTE_PATTERN = re.compile(
    r"""([a-zA-Z_:][-a-zA-Z0-9_:.]*)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+))"""
)

RECOGNIZED_ATTRIBUTES = frozenset({"property", "name", "content", "rel", "href"})
ICON_REL_TOKENS = frozenset({"icon", "shortcut", "apple-touch-icon"})


class MetaCategory(str, Enum):
    TITLE = "title"
    IMAGE = "image"
    DESCRIPTION = "description"
    VIDEO = "video"
    REMOTE_VIDEO_URL = "remote_video_url"
    ICON = "icon"


# Evaluated top to bottom for every meta tag; the first matching key classifies it.
META_TAG_PRECEDENCE: tuple[tuple[str, MetaCategory], ...] = (
    ("og:title", MetaCategory.TITLE),
    ("twitter:title", MetaCategory.TITLE),
    ("og:image", MetaCategory.IMAGE),
    ("twitter:image", MetaCategory.IMAGE),
    ("og:description", MetaCategory.DESCRIPTION),
    ("description", MetaCategory.DESCRIPTION),
    ("twitter:description", MetaCategory.DESCRIPTION),
    ("og:video", MetaCategory.VIDEO),
    ("twitter:player", MetaCategory.VIDEO),
    ("og:video:url", MetaCategory.REMOTE_VIDEO_URL),
    ("og:video:secure_url", MetaCategory.REMOTE_VIDEO_URL),
    ("twitter:player:stream", MetaCategory.REMOTE_VIDEO_URL),
    ("og:icon", MetaCategory.ICON),
    ("apple-touch-icon", MetaCategory.ICON),
)

# LinkMetadata field filled by each category
CATEGORY_FIELDS: dict[MetaCategory, str] = {
    MetaCategory.TITLE: "title",
    MetaCategory.IMAGE: "image_url",
    MetaCategory.DESCRIPTION: "summary",
    MetaCategory.VIDEO: "video_url",
    MetaCategory.REMOTE_VIDEO_URL: "remote_video_url",
    MetaCategory.ICON: "icon_url",
}

TEXT_CATEGORIES = frozenset({MetaCategory.TITLE, MetaCategory.DESCRIPTION})


class TagExtractor(Protocol):
    """Turns page text into metadata, starting from a seeded base value."""

    def extract(self, html: str, base: LinkMetadata) -> LinkMetadata:
        ...


def parse_attributes(tag_body: str) -> dict[str, str]:
    """Parse ``name="value"`` pairs from the inside of a tag.

    Only recognized attribute names are kept, lowercased. The first occurrence
    of a repeated attribute wins, as in browsers.
    """
    attributes: dict[str, str] = {}
    for match in ATTRIBUTE_PATTERN.finditer(tag_body):
        name = match.group(1).lower()
        if name not in RECOGNIZED_ATTRIBUTES or name in attributes:
            continue
        value = next((g for g in match.group(2, 3, 4) if g is not None), "")
        attributes[name] = value
    return attributes


def classify_meta_tag(attributes: dict[str, str]) -> MetaCategory | None:
    keys = {
        attributes.get("property", "").strip().lower(),
        attributes.get("name", "").strip().lower(),
    }
    keys.discard("")
    if not keys:
        return None
    for key, category in META_TAG_PRECEDENCE:
        if key in keys:
            return category
    return None


def extract_title_element(html: str) -> str | None:
    """Return the trimmed text of the first <title> element, or None if empty."""
    match = TITLE_PATTERN.search(html)
    if not match:
        return None
    title = match.group(1).strip()
    return title or None


def is_icon_link(attributes: dict[str, str]) -> bool:
    rel_tokens = {token.lower() for token in attributes.get("rel", "").split()}
    return not rel_tokens.isdisjoint(ICON_REL_TOKENS)


@dataclass
class _ExtractionState:
    fields: dict[str, str]

    def is_set(self, category: MetaCategory) -> bool:
        return CATEGORY_FIELDS[category] in self.fields

    def offer(self, category: MetaCategory, content: str) -> None:
        if self.is_set(category):
            return
        if category in TEXT_CATEGORIES:
            value = content if content.strip() else None
        else:
            value = parse_url_candidate(content)
        if value is not None:
            self.fields[CATEGORY_FIELDS[category]] = value

    @property
    def complete(self) -> bool:
        return all(self.is_set(category) for category in MetaCategory)


class HTMLTagExtractor:
    """Regex-based extractor for Open Graph, Twitter Card and HTML head tags."""

    def extract(self, html: str, base: LinkMetadata) -> LinkMetadata:
        state = _ExtractionState(fields={})

        for match in META_PATTERN.finditer(html):
            # Nothing left that a later tag could change
            if state.complete:
                break
            attributes = parse_attributes(match.group(1))
            category = classify_meta_tag(attributes)
            if category is None:
                continue
            content = attributes.get("content")
            if not content:
                continue
            state.offer(category, content)

        if not state.is_set(MetaCategory.ICON):
            for match in LINK_PATTERN.finditer(html):
                attributes = parse_attributes(match.group(1))
                if not is_icon_link(attributes):
                    continue
                href = parse_url_candidate(attributes.get("href"))
                if href is not None:
                    state.fields["icon_url"] = href
                    break

        if not state.is_set(MetaCategory.TITLE):
            title = extract_title_element(html)
            if title is not None:
                state.fields["title"] = title

        # Fields already present on the base value are kept as they are
        updates = {
            field: value for field, value in state.fields.items() if getattr(base, field) is None
        }
        return base.model_copy(update=updates)
