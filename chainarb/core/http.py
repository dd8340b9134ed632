"""
HTTP client wrapper with timeout, retry, and error mapping.

Provides a unified HTTP interface for all price providers.
"""

from typing import Any, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from chainarb.core.config import get_settings
from chainarb.core.errors import DataNotAvailableError, ProviderError, RateLimitError
from chainarb.core.logging import get_logger

logger = get_logger("http")


def is_transient(error: BaseException) -> bool:
    """Retry only recoverable transport/server failures, never 4xx or rate limits."""
    if isinstance(error, (RateLimitError, DataNotAvailableError)):
        return False
    return isinstance(error, ProviderError) and error.recoverable


class HttpClient:
    """
    HTTP client with built-in retry, timeout, and error handling.

    Features:
    - Configurable timeout
    - Exponential backoff retry on timeouts, network errors and 5xx
    - Rate limit handling
    - Request/response logging
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = base_url
        self.timeout = timeout or settings.http_timeout
        self.max_retries = max_retries or settings.http_max_retries
        self.default_headers = headers or {}
        self._transport = transport

        self._client: Optional[httpx.Client] = None
        self._async_client: Optional[httpx.AsyncClient] = None

    def _client_kwargs(self) -> dict[str, Any]:
        client_kwargs: dict[str, Any] = {
            "timeout": self.timeout,
            "headers": self.default_headers,
        }
        if self.base_url:
            client_kwargs["base_url"] = self.base_url
        return client_kwargs

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialized sync HTTP client."""
        if self._client is None:
            self._client = httpx.Client(**self._client_kwargs())
        return self._client

    @property
    def async_client(self) -> httpx.AsyncClient:
        """Lazy-initialized async HTTP client (bound to the running event loop)."""
        if self._async_client is None:
            client_kwargs = self._client_kwargs()
            if self._transport is not None:
                client_kwargs["transport"] = self._transport
            self._async_client = httpx.AsyncClient(**client_kwargs)
        return self._async_client

    def close(self) -> None:
        """Close the sync HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    async def aclose(self) -> None:
        """Close the async HTTP client so the next event loop gets a fresh one."""
        if self._async_client:
            await self._async_client.aclose()
            self._async_client = None

    def _retrying(self) -> dict[str, Any]:
        """Shared tenacity policy for sync and async GETs."""
        return {
            "retry": retry_if_exception(is_transient),
            "stop": stop_after_attempt(self.max_retries),
            "wait": wait_exponential(multiplier=0.5, min=0.5, max=4),
            "reraise": True,
        }

    def get(
        self,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        provider_name: str = "unknown",
    ) -> dict[str, Any]:
        """
        Make a GET request with retry logic.

        Args:
            url: Request URL (can be relative if base_url is set)
            params: Query parameters
            headers: Additional headers
            provider_name: Provider name for error reporting

        Returns:
            JSON response as dict

        Raises:
            ProviderError: On request failure
            RateLimitError: On 429 status
        """
        for attempt in Retrying(**self._retrying()):
            with attempt:
                return self._get_once(
                    url, params=params, headers=headers, provider_name=provider_name
                )
        raise ProviderError(f"No attempt made for {url}", provider=provider_name)

    def _get_once(
        self,
        url: str,
        *,
        params: Optional[dict[str, Any]],
        headers: Optional[dict[str, str]],
        provider_name: str,
    ) -> dict[str, Any]:
        try:
            logger.debug(f"GET {url} params={params}")
            response = self.client.get(url, params=params, headers=headers)
        except httpx.TransportError as e:
            raise _transport_error(e, url, provider_name) from e
        return self._handle_response(response, provider_name)

    async def aget(
        self,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        provider_name: str = "unknown",
    ) -> dict[str, Any]:
        """Async GET request with bounded exponential-backoff retry."""
        async for attempt in AsyncRetrying(**self._retrying()):
            with attempt:
                return await self._aget_once(
                    url, params=params, headers=headers, provider_name=provider_name
                )
        raise ProviderError(f"No attempt made for {url}", provider=provider_name)

    async def _aget_once(
        self,
        url: str,
        *,
        params: Optional[dict[str, Any]],
        headers: Optional[dict[str, str]],
        provider_name: str,
    ) -> dict[str, Any]:
        try:
            logger.debug(f"Async GET {url} params={params}")
            response = await self.async_client.get(url, params=params, headers=headers)
        except httpx.TransportError as e:
            raise _transport_error(e, url, provider_name) from e
        return self._handle_response(response, provider_name)

    def _handle_response(
        self,
        response: httpx.Response,
        provider_name: str,
    ) -> dict[str, Any]:
        """Handle HTTP response and convert to dict."""
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                "Rate limit exceeded",
                provider=provider_name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )

        if response.status_code == 404:
            raise DataNotAvailableError(
                f"Not found: {response.request.url}",
                provider=provider_name,
            )

        if response.status_code >= 400:
            logger.error(f"HTTP {response.status_code}: {response.text[:200]}")
            raise ProviderError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                provider=provider_name,
                recoverable=response.status_code >= 500,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                f"Invalid JSON from {response.request.url}",
                provider=provider_name,
                recoverable=False,
            ) from e


def _transport_error(error: httpx.TransportError, url: str, provider_name: str) -> ProviderError:
    """Map a timeout or network failure to a recoverable ProviderError."""
    if isinstance(error, httpx.TimeoutException):
        logger.warning(f"Timeout on GET {url}: {error}")
        message = f"Request timeout: {url}"
    else:
        logger.warning(f"Network error on GET {url}: {error}")
        message = f"Network error: {error}"
    return ProviderError(message, provider=provider_name, recoverable=True)
