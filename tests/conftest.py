"""Shared fixtures for ChainArb tests."""

import asyncio
from typing import Optional
from unittest.mock import Mock

import pytest

from chainarb.arb.aggregator import PriceAggregator
from chainarb.arb.costs import CostModel
from chainarb.arb.engine import ArbitrageEngine
from chainarb.domain.models import Chain, ChainQuote
from chainarb.providers.base import BaseProvider, HealthCheckResult, ProviderStatus


def make_settings(**overrides):
    """Create mock settings."""
    settings = Mock()
    settings.coingecko_api_key = "test_api_key"
    settings.coingecko_base_url = "https://api.test/api/v3"
    settings.http_timeout = 5
    settings.http_max_retries = 1
    settings.chain_timeout = 2.0
    settings.timezone = "UTC"
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


class FakeProvider(BaseProvider):
    """In-memory price source with per-chain errors and delays."""

    name = "fake"

    def __init__(
        self,
        prices: dict[Chain, Optional[float]],
        errors: Optional[dict[Chain, Exception]] = None,
        delays: Optional[dict[Chain, float]] = None,
        settings=None,
    ):
        super().__init__(settings=settings or make_settings(), http_client=Mock())
        self.prices = prices
        self.errors = errors or {}
        self.delays = delays or {}
        self.calls: list[Chain] = []
        self.closed = False

    async def fetch_quote(self, token_id: str, chain: Chain) -> Optional[ChainQuote]:
        self.calls.append(chain)
        if chain in self.delays:
            await asyncio.sleep(self.delays[chain])
        if chain in self.errors:
            raise self.errors[chain]
        price = self.prices.get(chain)
        if price is None:
            return None
        return ChainQuote(chain=chain, price=price, source=self.name)

    def healthcheck(self) -> HealthCheckResult:
        return HealthCheckResult(status=ProviderStatus.HEALTHY, message="OK")

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def mock_settings():
    return make_settings()


@pytest.fixture
def cost_model():
    """Default cost tables."""
    return CostModel.default()


@pytest.fixture
def make_engine():
    """Build an engine over a FakeProvider with the given prices."""

    def _make(prices, errors=None, delays=None, cost_model=None, config=None, chain_timeout=2.0):
        provider = FakeProvider(prices, errors=errors, delays=delays)
        aggregator = PriceAggregator(provider, chain_timeout=chain_timeout)
        return ArbitrageEngine(aggregator, cost_model=cost_model, config=config)

    return _make


@pytest.fixture
def provider_cls():
    """FakeProvider class, for tests that subclass it."""
    return FakeProvider
