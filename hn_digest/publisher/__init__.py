"""Webhook delivery for the composed digest."""

from hn_digest.publisher.errors import PublishError
from hn_digest.publisher.publisher import WebhookPublisher


__all__ = ["PublishError", "WebhookPublisher"]
