"""Command line interface for the digest job."""

from hn_digest.cli.digest import cli


__all__ = ["cli"]
