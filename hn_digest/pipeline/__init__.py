"""Digest run orchestration."""

from hn_digest.pipeline.models import DigestRunResult
from hn_digest.pipeline.runner import DigestPipeline, run_digest


__all__ = ["DigestPipeline", "DigestRunResult", "run_digest"]
