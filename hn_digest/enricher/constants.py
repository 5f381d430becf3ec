"""Constants for metadata enrichment."""

# Ceiling for a single page fetch; exceeding it counts as a failure
DEFAULT_ENRICH_TIMEOUT_SECONDS = 5.0

MAX_DESCRIPTION_LENGTH = 200
ELLIPSIS = "..."

# Hosts whose pages are the platform's own threads, never scraped
SKIPPED_HOSTS: frozenset[str] = frozenset({"news.ycombinator.com"})

# Description sources, richest first: (attribute, value)
DESCRIPTION_META_TAGS: tuple[tuple[str, str], ...] = (
    ("property", "og:description"),
    ("name", "description"),
    ("name", "twitter:description"),
)

IMAGE_META_TAGS: tuple[tuple[str, str], ...] = (
    ("property", "og:image"),
    ("name", "twitter:image"),
)

HTML_CONTENT_TYPES: frozenset[str] = frozenset(
    {"text/html", "application/xhtml+xml", ""}
)
