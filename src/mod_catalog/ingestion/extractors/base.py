"""
Base extractor with retry logic, rate limit handling, and error handling.

Provides the HTTP plumbing shared by every upstream client: a lazily
created async client, bounded retries for rate limited or dropped
requests, and structured logging.
"""

import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mod_catalog import __version__
from mod_catalog.config import RetryConfig, get_settings
from mod_catalog.logger import get_logger


class ExtractionError(Exception):
    """Base exception for extraction errors."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        endpoint: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)


class RateLimitError(ExtractionError):
    """Raised when the API reports an exhausted quota or abuse detection."""

    def __init__(self, message: str, *, retry_after: float | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class APIError(ExtractionError):
    """Raised when the API returns an error response."""


class ValidationError(ExtractionError):
    """Raised when a response does not match the expected contract."""


def _retry_after_seconds(response: httpx.Response) -> float | None:
    """Seconds the server asks us to wait, from Retry-After or the quota reset time."""
    retry_after = response.headers.get("Retry-After")
    if retry_after is not None:
        try:
            return max(float(retry_after), 0.0)
        except ValueError:
            return None

    reset_at = response.headers.get("X-RateLimit-Reset")
    if reset_at is not None:
        try:
            return max(float(reset_at) - time.time(), 0.0)
        except ValueError:
            return None

    return None


def is_rate_limited(response: httpx.Response) -> bool:
    """
    Check whether a response is a rate limit rejection.

    GitHub answers 429, or 403 with an exhausted quota header or a
    Retry-After header (secondary limits / abuse detection).
    """
    if response.status_code == 429:
        return True
    if response.status_code == 403:
        return (
            response.headers.get("X-RateLimit-Remaining") == "0"
            or "Retry-After" in response.headers
        )
    return False


class BaseExtractor(ABC):
    """
    Abstract base class for upstream API clients.

    Provides common functionality including:
    - HTTP client management
    - Bounded retries for rate limits and transport failures
    - Structured logging

    Subclasses must implement:
    - source_name: Identifier for the data source
    """

    def __init__(
        self,
        *,
        retry_config: RetryConfig | None = None,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            retry_config: Custom retry configuration (uses defaults if None)
            timeout: HTTP request timeout in seconds
            headers: Extra default headers for every request
        """
        settings = get_settings()
        self._retry_config = retry_config or settings.retry
        self._timeout = timeout or settings.github.timeout_seconds
        self._headers = {"User-Agent": f"mod-catalog/{__version__}", **(headers or {})}
        self._logger = get_logger(
            self.__class__.__name__,
            component="extractor",
            source=self.source_name,
        )
        self._client: httpx.AsyncClient | None = None
        self._backoff = wait_exponential(
            multiplier=self._retry_config.base_delay_seconds,
            max=self._retry_config.max_delay_seconds,
            exp_base=self._retry_config.exponential_base,
        )

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return identifier for this data source."""
        ...

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                headers=self._headers,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseExtractor":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def _wait_seconds(self, retry_state: RetryCallState) -> float:
        """Honor the server's requested delay, else back off exponentially."""
        error = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            return min(error.retry_after, self._retry_config.max_delay_seconds)
        return float(self._backoff(retry_state))

    def _create_retry_decorator(self) -> Any:
        """Create retry decorator with current configuration."""
        return retry(
            retry=retry_if_exception_type((httpx.TransportError, RateLimitError)),
            stop=stop_after_attempt(self._retry_config.max_attempts),
            wait=self._wait_seconds,
            before_sleep=self._log_retry_attempt,
            reraise=True,
        )

    def _log_retry_attempt(self, retry_state: RetryCallState) -> None:
        """Log retry attempts for observability."""
        self._logger.warning(
            "Retrying request",
            attempt=retry_state.attempt_number,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _make_request(
        self,
        method: str,
        url: str,
        *,
        check_status: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            check_status: Raise APIError for 4xx/5xx responses
            **kwargs: Additional arguments passed to httpx

        Returns:
            httpx.Response: Final response

        Raises:
            RateLimitError: If still rate limited after the last attempt
            APIError: If the API returns an error response and check_status is set
        """
        retry_decorator = self._create_retry_decorator()

        @retry_decorator
        async def _request() -> httpx.Response:
            self._logger.debug("Making request", method=method, url=url)

            response = await self.client.request(method, url, **kwargs)

            if is_rate_limited(response):
                retry_after = _retry_after_seconds(response)
                self._logger.warning(
                    "Request quota exhausted",
                    method=method,
                    url=url,
                    status_code=response.status_code,
                    retry_after=retry_after,
                )
                raise RateLimitError(
                    f"Rate limit exceeded for {method} {url}",
                    retry_after=retry_after,
                    source=self.source_name,
                    endpoint=url,
                    status_code=response.status_code,
                )

            if check_status and response.status_code >= 400:
                raise APIError(
                    f"API error: {response.status_code} for {method} {url}",
                    source=self.source_name,
                    endpoint=url,
                    status_code=response.status_code,
                )

            return response

        try:
            return await _request()  # type: ignore[no-any-return]
        except RateLimitError:
            self._logger.error(
                "Request failed after retries",
                url=url,
                attempts=self._retry_config.max_attempts,
            )
            raise
        except httpx.TransportError as e:
            self._logger.error(
                "Request failed after retries",
                url=url,
                attempts=self._retry_config.max_attempts,
                error=str(e),
            )
            raise ExtractionError(
                f"Request failed after {self._retry_config.max_attempts} attempts: {e}",
                source=self.source_name,
                endpoint=url,
                original_error=e,
            ) from e
