"""Data models for composed messages."""

from typing import Any

from pydantic import Field

from hn_digest.data_model import StrictBaseModel


class MessagePayload(StrictBaseModel):
    """A webhook message: display blocks plus a plain-text fallback.

    Attributes:
        blocks: Ordered Block Kit blocks.
        text: Fallback text for notifications and clients without blocks.
    """

    blocks: list[dict[str, Any]] = Field(default_factory=list)
    text: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Build the JSON body for the webhook.

        Returns:
            Dictionary with ``blocks`` and ``text``.
        """
        return {"blocks": self.blocks, "text": self.text}
