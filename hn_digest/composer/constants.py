"""Constants for message composition."""

DIGEST_TITLE = "Daily AI Updates & New Tools"
HEADER_EMOJI = "\N{ROBOT FACE}"
NO_STORIES_TEXT = "No AI-related stories found today."

# Slack block limits
MAX_HEADER_LENGTH = 150
MAX_SECTION_TEXT_LENGTH = 3000
MAX_ALT_TEXT_LENGTH = 2000

# Characters with meaning in Slack mrkdwn, escaped as entities
MRKDWN_ESCAPES: tuple[tuple[str, str], ...] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)
