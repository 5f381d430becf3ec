"""Incoming webhook publisher."""

import json

import httpx
import structlog

from hn_digest.composer.models import MessagePayload
from hn_digest.fetch.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
)
from hn_digest.fetch.redact import redact_webhook_url
from hn_digest.publisher.errors import PublishError


logger = structlog.get_logger()

# Response bodies are logged up to this many characters
MAX_LOGGED_BODY_LENGTH = 1000


class WebhookPublisher:
    """Posts a message to an incoming webhook, once.

    A non-2xx response or a transport failure is logged with full context
    and raised as PublishError.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        webhook_url: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        run_id: str = "",
    ) -> None:
        """Initialize the publisher.

        Args:
            client: Shared async client.
            webhook_url: Webhook endpoint.
            timeout_seconds: Request timeout.
            run_id: Run identifier for logging.
        """
        self._client = client
        self._webhook_url = webhook_url
        self._timeout_seconds = timeout_seconds
        self._log = logger.bind(
            component="publisher",
            run_id=run_id,
            webhook=redact_webhook_url(webhook_url),
        )

    async def publish(self, payload: MessagePayload) -> None:
        """Deliver a message.

        Args:
            payload: Composed message.

        Raises:
            PublishError: If the webhook could not be reached or rejected
                the message.
        """
        body = payload.to_dict()
        payload_json = json.dumps(body, ensure_ascii=False)

        try:
            response = await self._client.post(
                self._webhook_url,
                content=payload_json.encode("utf-8"),
                headers={"Content-Type": "application/json"},
                timeout=self._timeout_seconds,
            )
        except httpx.HTTPError as e:
            self._log.error(
                "publish_request_failed",
                error=repr(e),
                blocks=len(payload.blocks),
                payload=payload_json,
            )
            raise PublishError(f"Webhook request failed: {e!r}") from e

        if not HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX:
            response_text = response.text[:MAX_LOGGED_BODY_LENGTH]
            self._log.error(
                "publish_rejected",
                status_code=response.status_code,
                response_body=response_text,
                blocks=len(payload.blocks),
                payload=payload_json,
            )
            msg = f"Webhook returned {response.status_code}: {response_text}"
            raise PublishError(msg, status_code=response.status_code, body=response_text)

        self._log.info(
            "publish_complete",
            status_code=response.status_code,
            blocks=len(payload.blocks),
            payload_bytes=len(payload_json.encode("utf-8")),
        )
