"""
Unified exception definitions for ChainArb.

All custom exceptions inherit from ChainArbError for easy catching.
"""

from typing import Any, Optional


class ChainArbError(Exception):
    """Base exception for all ChainArb errors."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "CHAINARB_ERROR"
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for logging/serialization."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ChainArbError):
    """Configuration-related errors."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="CONFIG_ERROR", **kwargs)


class InvalidInputError(ChainArbError):
    """Request rejected before any outbound call (bad token id, chains, thresholds)."""

    def __init__(self, message: str, *, field: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        super().__init__(message, code="INVALID_INPUT", details=details, **kwargs)
        self.field = field


class ProviderError(ChainArbError):
    """Price source errors (API failures, rate limits, etc.)."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        recoverable: bool = True,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["provider"] = provider
        details["recoverable"] = recoverable
        super().__init__(message, code="PROVIDER_ERROR", details=details, **kwargs)
        self.provider = provider
        self.recoverable = recoverable


class DataNotAvailableError(ProviderError):
    """Requested data is not available (unknown token, no deployment on chain, no price)."""

    def __init__(self, message: str, *, provider: str, **kwargs):
        super().__init__(message, provider=provider, recoverable=True, **kwargs)
        self.code = "DATA_NOT_AVAILABLE"


class RateLimitError(ProviderError):
    """API rate limit exceeded."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        retry_after: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["retry_after"] = retry_after
        super().__init__(message, provider=provider, recoverable=True, details=details, **kwargs)
        self.code = "RATE_LIMIT"
        self.retry_after = retry_after
