"""Best-effort page metadata enrichment.

Fetches each ranked story's external page and extracts a preview image and
description from its meta tags. Failures degrade to empty metadata.
"""

from hn_digest.enricher.enricher import MetadataEnricher, should_enrich
from hn_digest.enricher.extractor import extract_metadata, truncate_description
from hn_digest.enricher.metrics import EnrichMetrics, EnrichOutcome
from hn_digest.enricher.models import EnrichedStory, Metadata


__all__ = [
    "EnrichMetrics",
    "EnrichOutcome",
    "EnrichedStory",
    "Metadata",
    "MetadataEnricher",
    "extract_metadata",
    "should_enrich",
    "truncate_description",
]
