"""Message composition for the digest webhook."""

from hn_digest.composer.composer import (
    build_blocks,
    compose_message,
    domain_label,
    escape_mrkdwn,
    format_fallback_text,
    resolve_link,
)
from hn_digest.composer.models import MessagePayload


__all__ = [
    "MessagePayload",
    "build_blocks",
    "compose_message",
    "domain_label",
    "escape_mrkdwn",
    "format_fallback_text",
    "resolve_link",
]
