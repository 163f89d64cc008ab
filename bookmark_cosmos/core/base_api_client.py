"""
Async JSON API client base for the AI classification provider.

Owns the ``httpx.AsyncClient`` lifecycle, maps HTTP failures onto the
``APIClientError`` hierarchy and retries transient failures with
exponential backoff. Subclasses implement ``classify_batch``.
"""

import asyncio
import logging
import os
import random
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from bookmark_cosmos.utils.api_key_validator import APIKeyValidator

# When set to "true", requests are answered by _get_mock_response
TEST_MODE_ENV = "BOOKMARK_COSMOS_TEST_MODE"

RETRYABLE_STATUS_CODES = frozenset({408, 423, 429, 500, 502, 503, 504})


class APIClientError(Exception):
    """Base exception for API client errors."""

    pass


class RateLimitError(APIClientError):
    """Raised when API rate limits are exceeded."""

    pass


class AuthenticationError(APIClientError):
    """Raised when the API rejects the key."""

    pass


class ServiceUnavailableError(APIClientError):
    """Raised when the API reports a server-side or transient failure."""

    pass


def error_for_status(status_code: int) -> Optional[APIClientError]:
    """Translate an HTTP status code into a client error, or None on success."""
    if status_code in (401, 403):
        return AuthenticationError("Invalid API key or unauthorized access")
    if status_code == 429:
        return RateLimitError("Rate limit exceeded")
    if status_code in RETRYABLE_STATUS_CODES:
        return ServiceUnavailableError(f"Service unavailable: HTTP {status_code}")
    if status_code >= 400:
        return APIClientError(f"Request rejected: HTTP {status_code}")
    return None


class BaseAPIClient(ABC):
    """
    Base class for AI API clients.

    Use as an async context manager so the connection pool is opened and
    closed around a unit of work:

        >>> async with GeminiAPIClient(key) as client:
        ...     mapping = await client.classify_batch(sample)
    """

    def __init__(
        self,
        api_key: str,
        timeout: int = 30,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
    ):
        """
        Initialize the API client.

        Args:
            api_key: API key for authentication
            timeout: Request timeout in seconds
            max_retries: Retries after the first attempt; 0 disables retrying
            base_delay: Backoff delay before the first retry (seconds)
            max_delay: Upper bound for any backoff delay (seconds)
        """
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

        self.logger = logging.getLogger(self.__class__.__name__)
        self._client: Optional[httpx.AsyncClient] = None

        self.request_count = 0
        self.error_count = 0
        self.retry_count = 0

    async def __aenter__(self) -> "BaseAPIClient":
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._cleanup_client()

    async def _cleanup_client(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_auth_headers(self) -> Dict[str, str]:
        """Provider-specific authentication headers."""
        return {}

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "User-Agent": "BookmarkCosmos/1.0",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        headers.update(self._get_auth_headers())
        if extra:
            headers.update(extra)
        return headers

    def _calculate_retry_delay(self, attempt: int) -> float:
        """Exponential backoff for the given 0-based retry, with up to 10% jitter."""
        delay = min(self.base_delay * (2**attempt), self.max_delay)
        return delay + random.uniform(0, delay * 0.1)

    @staticmethod
    def _is_transient(error: Exception) -> bool:
        if isinstance(error, (RateLimitError, ServiceUnavailableError)):
            return True
        return isinstance(error, (httpx.TimeoutException, httpx.NetworkError))

    def _sanitize_error_message(self, message: str) -> str:
        return APIKeyValidator.mask_in_error_message(message, [self.api_key])

    def _get_mock_response(
        self, method: str, url: str, data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Response returned instead of a real request in test mode."""
        return {"test_mode": True}

    async def _send_once(
        self,
        method: str,
        url: str,
        data: Optional[Dict[str, Any]],
        headers: Dict[str, str],
    ) -> Dict[str, Any]:
        self.request_count += 1
        response = await self._client.request(method, url, json=data, headers=headers)

        error = error_for_status(response.status_code)
        if error is not None:
            raise error

        try:
            return response.json()
        except ValueError as e:
            raise APIClientError(f"Invalid JSON response: {e}") from e

    async def _make_request(
        self,
        method: str,
        url: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Send a JSON request, retrying transient failures.

        Returns:
            Decoded JSON response body

        Raises:
            AuthenticationError: On 401/403
            RateLimitError: On 429 once retries are used up
            ServiceUnavailableError: On 5xx once retries are used up
            APIClientError: On any other request or network failure
        """
        if os.getenv(TEST_MODE_ENV) == "true":
            return self._get_mock_response(method, url, data)

        if self._client is None:
            raise APIClientError("Client not initialized - use async context manager")

        request_headers = self._headers(headers)

        for attempt in range(self.max_retries + 1):
            try:
                return await self._send_once(method, url, data, request_headers)
            except (APIClientError, httpx.HTTPError) as e:
                self.error_count += 1
                message = self._sanitize_error_message(str(e) or type(e).__name__)

                if attempt < self.max_retries and self._is_transient(e):
                    delay = self._calculate_retry_delay(attempt)
                    self.retry_count += 1
                    self.logger.warning(
                        f"Request failed (attempt {attempt + 1}/{self.max_retries + 1}): "
                        f"{message}. Retrying in {delay:.1f}s"
                    )
                    await asyncio.sleep(delay)
                    continue

                self.logger.error(f"Request failed permanently: {message}")
                if isinstance(e, APIClientError):
                    raise
                raise APIClientError(message) from e

        raise APIClientError("Request retries exhausted")

    def get_statistics(self) -> Dict[str, Any]:
        """Request, error and retry counters for this client."""
        successes = self.request_count - self.error_count
        return {
            "request_count": self.request_count,
            "error_count": self.error_count,
            "retry_count": self.retry_count,
            "success_rate": successes / max(self.request_count, 1) * 100,
        }

    def get_usage_statistics(self) -> Dict[str, Any]:
        """Statistics reported after a classification run; providers add token usage."""
        return self.get_statistics()

    @abstractmethod
    async def classify_batch(self, sample: List[Dict[str, str]]) -> Dict[str, str]:
        """
        Assign a category to each bookmark in a sample.

        Args:
            sample: Bookmarks as ``{id, title, url}`` dictionaries

        Returns:
            Partial mapping of bookmark id to category

        Raises:
            APIClientError: On request or response failure
        """
        pass
