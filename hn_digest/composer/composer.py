"""Builds the digest message from ranked, enriched stories."""

from collections.abc import Sequence
from datetime import date
from typing import Any
from urllib.parse import urlsplit

from hn_digest.composer.constants import (
    DIGEST_TITLE,
    HEADER_EMOJI,
    MAX_ALT_TEXT_LENGTH,
    MAX_HEADER_LENGTH,
    MAX_SECTION_TEXT_LENGTH,
    MRKDWN_ESCAPES,
    NO_STORIES_TEXT,
)
from hn_digest.composer.models import MessagePayload
from hn_digest.enricher.models import EnrichedStory
from hn_digest.ranker.models import CandidateItem
from hn_digest.source.constants import HN_ITEM_URL_TEMPLATE, HN_SITE_HOST


def escape_mrkdwn(text: str) -> str:
    """Escape the control characters of Slack mrkdwn."""
    for char, entity in MRKDWN_ESCAPES:
        text = text.replace(char, entity)
    return text


def _external_host(url: str | None) -> str | None:
    if not url:
        return None
    try:
        return urlsplit(url).hostname or None
    except ValueError:
        return None


def resolve_link(item: CandidateItem) -> str:
    """Link target for a story.

    The story URL when it has a host, otherwise the discussion thread.
    Always agrees with ``domain_label(item.url)``.
    """
    if item.url is None or _external_host(item.url) is None:
        return HN_ITEM_URL_TEMPLATE.format(item_id=item.id)
    return item.url


def domain_label(url: str | None) -> str:
    """Display label for a story link.

    Args:
        url: External story URL.

    Returns:
        Host without a leading "www.", or the platform host when the URL
        is absent or unparsable.
    """
    host = _external_host(url)
    if host is None:
        return HN_SITE_HOST
    return host.removeprefix("www.")


def format_digest_date(day: date) -> str:
    """Format a date like "17 Oct 2026"."""
    return f"{day.day} {day:%b %Y}"


def header_text(day: date) -> str:
    """Title line of the digest."""
    return f"{HEADER_EMOJI} {DIGEST_TITLE} \N{EM DASH} {format_digest_date(day)}"


def _story_text(index: int, story: EnrichedStory) -> str:
    item = story.scored.item
    link = resolve_link(item)
    title = escape_mrkdwn(item.title or "")
    text = f"*{index}. {title}*\n<{link}|{domain_label(item.url)}>"

    comments = item.descendants or 0
    if comments > 0:
        text += f" \N{BULLET} {comments} comments"

    if story.metadata.description:
        text += f"\n_{escape_mrkdwn(story.metadata.description)}_"

    return text[:MAX_SECTION_TEXT_LENGTH]


def _story_block(index: int, story: EnrichedStory) -> dict[str, Any]:
    block: dict[str, Any] = {
        "type": "section",
        "text": {"type": "mrkdwn", "text": _story_text(index, story)},
    }
    if story.metadata.image:
        block["accessory"] = {
            "type": "image",
            "image_url": story.metadata.image,
            "alt_text": (story.scored.item.title or DIGEST_TITLE)[:MAX_ALT_TEXT_LENGTH],
        }
    return block


def build_blocks(stories: Sequence[EnrichedStory], day: date) -> list[dict[str, Any]]:
    """Build the Block Kit blocks for a digest.

    Layout: header, divider, then one section per story with dividers
    between stories. An empty digest gets a single "no stories" section.

    Args:
        stories: Ranked stories with metadata, best first.
        day: Digest date.

    Returns:
        Ordered list of blocks.
    """
    blocks: list[dict[str, Any]] = [
        {
            "type": "header",
            "text": {
                "type": "plain_text",
                "text": header_text(day)[:MAX_HEADER_LENGTH],
                "emoji": True,
            },
        },
        {"type": "divider"},
    ]

    if not stories:
        blocks.append(
            {"type": "section", "text": {"type": "mrkdwn", "text": NO_STORIES_TEXT}}
        )
        return blocks

    for index, story in enumerate(stories, start=1):
        blocks.append(_story_block(index, story))
        if index < len(stories):
            blocks.append({"type": "divider"})

    return blocks


def format_fallback_text(stories: Sequence[EnrichedStory], day: date) -> str:
    """Build the plain-text version of the digest.

    Args:
        stories: Ranked stories with metadata, best first.
        day: Digest date.

    Returns:
        Header line followed by one linked line per story.
    """
    heading = f"*{header_text(day)}*"
    if not stories:
        return f"{heading}\n\n{NO_STORIES_TEXT}"

    lines = []
    for index, story in enumerate(stories, start=1):
        item = story.scored.item
        link = resolve_link(item)
        title = escape_mrkdwn(item.title or "")
        lines.append(f"*{index}. <{link}|{title}>*\n<{link}|{domain_label(item.url)}>")

    return heading + "\n\n" + "\n\n".join(lines)


def compose_message(
    stories: Sequence[EnrichedStory], today: date | None = None
) -> MessagePayload:
    """Compose the webhook message for a digest run.

    Args:
        stories: Ranked stories with metadata, best first.
        today: Digest date (defaults to the local date).

    Returns:
        MessagePayload with blocks and fallback text.
    """
    day = today or date.today()
    return MessagePayload(
        blocks=build_blocks(stories, day),
        text=format_fallback_text(stories, day),
    )
