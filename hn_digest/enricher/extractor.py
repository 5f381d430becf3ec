"""HTML meta tag extraction for page previews."""

import re
from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from hn_digest.enricher.constants import (
    DESCRIPTION_META_TAGS,
    ELLIPSIS,
    IMAGE_META_TAGS,
    MAX_DESCRIPTION_LENGTH,
)
from hn_digest.enricher.models import Metadata


_WHITESPACE = re.compile(r"\s+")


def truncate_description(text: str, limit: int = MAX_DESCRIPTION_LENGTH) -> str:
    """Truncate text to ``limit`` characters with an ellipsis marker.

    Args:
        text: Text to truncate.
        limit: Maximum length of the result, marker included.

    Returns:
        The text unchanged if it fits, otherwise a shortened copy ending
        in "...".
    """
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)].rstrip() + ELLIPSIS


def _meta_content(soup: BeautifulSoup, attr: str, value: str) -> str | None:
    meta = soup.find("meta", attrs={attr: value})
    if meta is None or not isinstance(meta, Tag):
        return None
    content = meta.get("content")
    if not isinstance(content, str):
        return None
    content = content.strip()
    return content or None


def _first_meta_content(
    soup: BeautifulSoup, candidates: tuple[tuple[str, str], ...]
) -> str | None:
    for attr, value in candidates:
        content = _meta_content(soup, attr, value)
        if content:
            return content
    return None


def extract_metadata(
    html: str | bytes,
    base_url: str | None = None,
    encoding: str | None = None,
) -> Metadata:
    """Extract preview image and description from HTML.

    Description sources are tried richest first: og:description, then
    description, then twitter:description. The image comes from og:image
    or twitter:image and is resolved against ``base_url`` when relative.

    Attribute values come back from the parser with entities decoded
    exactly once, so "&amp;lt;" in the markup reads as "&lt;".

    Args:
        html: Page HTML. Raw bytes are decoded by the parser, which honours
            ``encoding`` and falls back to the document's own declaration.
        base_url: URL the page was fetched from.
        encoding: Charset from the response headers, if any.

    Returns:
        Metadata, empty if nothing usable was found.
    """
    if not html.strip():
        return Metadata.empty()

    parser_kwargs: dict[str, Any] = {}
    if isinstance(html, bytes) and encoding:
        parser_kwargs["from_encoding"] = encoding
    soup = BeautifulSoup(html, "lxml", **parser_kwargs)

    description = _first_meta_content(soup, DESCRIPTION_META_TAGS)
    if description:
        description = _WHITESPACE.sub(" ", description).strip()
        description = truncate_description(description) if description else None

    image = _first_meta_content(soup, IMAGE_META_TAGS)
    if image:
        if base_url:
            image = urljoin(base_url, image)
        if not image.startswith(("http://", "https://")):
            image = None

    return Metadata(image=image, description=description or None)
