"""Hacker News content source."""

from hn_digest.source.client import HackerNewsSource
from hn_digest.source.errors import SourceError


__all__ = ["HackerNewsSource", "SourceError"]
