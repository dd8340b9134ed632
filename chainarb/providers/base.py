"""
Base provider class for all price sources.

All providers must:
- Inherit from BaseProvider
- Implement fetch_quote() and healthcheck()
- Raise ProviderError subclasses on failure (the aggregator contains them)
- Return domain models, not raw API responses
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from chainarb.core.config import Settings, get_settings
from chainarb.core.errors import ProviderError
from chainarb.core.http import HttpClient
from chainarb.core.logging import LoggerMixin
from chainarb.domain.models import Chain, ChainQuote


class ProviderStatus(str, Enum):
    """Provider health status."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNAVAILABLE = "unavailable"


@dataclass
class HealthCheckResult:
    """Result of a provider health check."""
    status: ProviderStatus
    message: str
    latency_ms: Optional[float] = None
    details: Optional[dict[str, Any]] = None


class BaseProvider(ABC, LoggerMixin):
    """
    Abstract base class for all price providers.

    Subclasses must implement:
    - name: Provider identifier
    - fetch_quote(): Current quote for a token on one chain
    - healthcheck(): Check if provider is available
    """

    name: str = "base"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[HttpClient] = None,
    ):
        """
        Initialize provider.

        Args:
            settings: Application settings. Uses global if not provided.
            http_client: HTTP client. A new one is built if not provided.
        """
        self.settings = settings or get_settings()
        self.http = http_client or HttpClient(
            timeout=self.settings.http_timeout,
            max_retries=self.settings.http_max_retries,
        )

    def supports(self, chain: Chain) -> bool:
        """Whether this provider can quote tokens on the given chain."""
        return True

    @abstractmethod
    async def fetch_quote(self, token_id: str, chain: Chain) -> Optional[ChainQuote]:
        """
        Fetch the current quote for a token on one chain.

        Returns:
            ChainQuote, or None if the source has no usable price

        Raises:
            ProviderError: On request failure
        """

    @abstractmethod
    def healthcheck(self) -> HealthCheckResult:
        """
        Check if the provider is healthy.

        Returns:
            HealthCheckResult with status and details
        """

    async def aclose(self) -> None:
        """Release the async HTTP client at the end of an event loop."""
        await self.http.aclose()

    async def _make_request(
        self,
        url: str,
        **kwargs,
    ) -> dict[str, Any]:
        """
        Make an async GET request with error handling.

        Raises:
            ProviderError: On request failure
        """
        kwargs["provider_name"] = self.name
        try:
            return await self.http.aget(url, **kwargs)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(
                f"Request failed: {e}",
                provider=self.name,
                recoverable=True,
            ) from e
