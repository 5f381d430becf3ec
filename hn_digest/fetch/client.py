"""Async HTTP client with size limits and failure isolation."""

import time
from io import BytesIO

import httpx
import structlog

from hn_digest.fetch.config import FetchConfig
from hn_digest.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
    PURPOSE_SOURCE,
    VALID_URL_SCHEMES,
)
from hn_digest.fetch.metrics import FetchMetrics
from hn_digest.fetch.models import (
    FetchError,
    FetchErrorClass,
    FetchResult,
    ResponseSizeExceededError,
)
from hn_digest.fetch.redact import redact_url_credentials


logger = structlog.get_logger()


class AsyncHttpFetcher:
    """Async HTTP GET client that never raises.

    Every request is attempted once. Timeouts, connection failures,
    oversized bodies and error statuses are returned as a FetchResult
    carrying a classified FetchError.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: FetchConfig | None = None,
        run_id: str = "",
        purpose: str = PURPOSE_SOURCE,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Shared async client; its lifecycle belongs to the caller.
            config: Fetch configuration.
            run_id: Run identifier for logging.
            purpose: Label the requests are counted under.
        """
        self._client = client
        self._purpose = purpose
        self._config = config or FetchConfig()
        self._metrics = FetchMetrics.get_instance()
        self._log = logger.bind(component="fetch", run_id=run_id, purpose=purpose)

    async def fetch(
        self,
        url: str,
        timeout: float | None = None,
        accept: str = "*/*",
    ) -> FetchResult:
        """Fetch a URL once.

        Args:
            url: The URL to fetch.
            timeout: Request timeout in seconds (config default if omitted).
            accept: Accept header value.

        Returns:
            FetchResult with status, body and error information.
        """
        start_time_ns = time.perf_counter_ns()
        log = self._log.bind(url=redact_url_credentials(url))
        headers = {
            "User-Agent": self._config.user_agent,
            "Accept": accept,
        }

        if not url.lower().startswith(VALID_URL_SCHEMES):
            result = self._failure(
                url or "about:blank",
                FetchErrorClass.INVALID_URL,
                f"Unsupported URL scheme: {redact_url_credentials(url)!r}",
            )
        else:
            result = await self._execute(
                url=url,
                headers=headers,
                timeout=timeout or self._config.default_timeout_seconds,
            )

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_duration(self._purpose, duration_ms)
        if result.error is not None:
            self._metrics.record_failure(self._purpose, result.error.error_class)

        log.debug(
            "fetch_complete",
            status_code=result.status_code,
            bytes=result.body_size,
            duration_ms=round(duration_ms, 2),
            error_class=result.error.error_class.value if result.error else None,
        )

        return result

    async def _execute(
        self,
        url: str,
        headers: dict[str, str],
        timeout: float,
    ) -> FetchResult:
        """Execute a single HTTP request.

        Args:
            url: URL to fetch.
            headers: Request headers.
            timeout: Request timeout in seconds.

        Returns:
            FetchResult from the request.
        """
        try:
            async with self._client.stream(
                "GET",
                url,
                headers=headers,
                timeout=timeout,
                follow_redirects=True,
            ) as response:
                content_length = response.headers.get("content-length", "")
                if content_length.isdigit():
                    size = int(content_length)
                    if size > self._config.max_response_size_bytes:
                        return self._failure(
                            url,
                            FetchErrorClass.RESPONSE_SIZE_EXCEEDED,
                            f"Response size {size} exceeds limit "
                            f"{self._config.max_response_size_bytes}",
                            status_code=response.status_code,
                        )

                body = await self._read_body_with_limit(response)
                self._metrics.record_response(self._purpose, len(body))

                return FetchResult(
                    status_code=response.status_code,
                    final_url=str(response.url),
                    headers=dict(response.headers),
                    body_bytes=body,
                    error=self._classify_http_error(response.status_code),
                )

        except ResponseSizeExceededError as e:
            return self._failure(url, FetchErrorClass.RESPONSE_SIZE_EXCEEDED, str(e))

        except httpx.TimeoutException as e:
            return self._failure(
                url, FetchErrorClass.NETWORK_TIMEOUT, f"Request timed out: {e!r}"
            )

        except httpx.ConnectError as e:
            return self._failure(
                url, FetchErrorClass.CONNECTION_ERROR, f"Connection failed: {e!r}"
            )

        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            return self._failure(url, FetchErrorClass.INVALID_URL, f"Invalid URL: {e!r}")

        except Exception as e:  # noqa: BLE001
            return self._failure(
                url, FetchErrorClass.UNKNOWN, f"Unexpected error: {e!r}"
            )

    @staticmethod
    def _failure(
        url: str,
        error_class: FetchErrorClass,
        message: str,
        status_code: int | None = None,
    ) -> FetchResult:
        return FetchResult(
            status_code=status_code or 0,
            final_url=url,
            error=FetchError(
                error_class=error_class,
                message=message,
                status_code=status_code,
            ),
        )

    async def _read_body_with_limit(self, response: httpx.Response) -> bytes:
        """Read response body with size limit.

        Args:
            response: Streaming HTTP response.

        Returns:
            Response body bytes.

        Raises:
            ResponseSizeExceededError: If the size limit is exceeded.
        """
        buffer = BytesIO()
        total_read = 0
        max_size = self._config.max_response_size_bytes

        async for chunk in response.aiter_bytes(chunk_size=DEFAULT_CHUNK_SIZE):
            total_read += len(chunk)
            if total_read > max_size:
                msg = (
                    f"Response size exceeded limit of {max_size} bytes "
                    f"(read {total_read} bytes)"
                )
                raise ResponseSizeExceededError(msg)
            buffer.write(chunk)

        return buffer.getvalue()

    @staticmethod
    def _classify_http_error(status_code: int) -> FetchError | None:
        """Classify HTTP status code as error.

        Args:
            status_code: HTTP status code.

        Returns:
            FetchError if status indicates error, None otherwise.
        """
        if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
            return None

        if HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
            return FetchError(
                error_class=FetchErrorClass.HTTP_4XX,
                message=f"Client error ({status_code})",
                status_code=status_code,
            )

        if HTTP_STATUS_SERVER_ERROR_MIN <= status_code < HTTP_STATUS_SERVER_ERROR_MAX:
            return FetchError(
                error_class=FetchErrorClass.HTTP_5XX,
                message=f"Server error ({status_code})",
                status_code=status_code,
            )

        return None
