"""
Providers module - Price source adapters

Each provider wraps an external API and returns domain models.
All providers inherit from BaseProvider for consistent interface.
"""

from chainarb.providers.base import BaseProvider, HealthCheckResult, ProviderStatus
from chainarb.providers.coingecko import CoinGeckoProvider

__all__ = [
    "BaseProvider",
    "HealthCheckResult",
    "ProviderStatus",
    "CoinGeckoProvider",
]
