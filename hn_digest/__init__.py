"""Hacker News AI digest: score, rank, enrich and publish trending stories."""

__version__ = "0.1.0"
