"""
CoinGecko provider for per-chain token prices.

Quotes a token deployed on several chains by looking up its contract on
each chain's CoinGecko asset platform.

Supports:
- Contract addresses (EVM 0x..., Solana base58)
- CoinGecko coin ids (e.g. "usd-coin"), resolved to the per-chain contract
"""

import re
import time
from typing import Any, Optional

from chainarb.core.errors import DataNotAvailableError, RateLimitError
from chainarb.domain.models import Chain, ChainQuote
from chainarb.providers.base import BaseProvider, HealthCheckResult, ProviderStatus

EVM_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
BASE58_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


def is_contract_address(token_id: str) -> bool:
    return bool(EVM_ADDRESS_RE.match(token_id) or BASE58_ADDRESS_RE.match(token_id))


def _usd(market_data: dict[str, Any], key: str) -> Optional[float]:
    value = (market_data.get(key) or {}).get("usd")
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class CoinGeckoProvider(BaseProvider):
    """
    CoinGecko price provider.

    One contract lookup per (chain, token); coin ids cost one extra call to
    resolve the contract on that chain.
    """

    name = "coingecko"

    # Chain -> CoinGecko asset platform id
    PLATFORMS = {
        Chain.ETHEREUM: "ethereum",
        Chain.POLYGON: "polygon-pos",
        Chain.ARBITRUM: "arbitrum-one",
        Chain.OPTIMISM: "optimistic-ethereum",
        Chain.BASE: "base",
        Chain.BSC: "binance-smart-chain",
        Chain.AVALANCHE: "avalanche",
        Chain.SOLANA: "solana",
    }

    @property
    def base_url(self) -> str:
        return self.settings.coingecko_base_url.rstrip("/")

    @property
    def headers(self) -> dict[str, str]:
        if self.settings.coingecko_api_key:
            return {"x-cg-demo-api-key": self.settings.coingecko_api_key}
        return {}

    def supports(self, chain: Chain) -> bool:
        return chain in self.PLATFORMS

    def healthcheck(self) -> HealthCheckResult:
        """Check CoinGecko API health."""
        start_time = time.time()

        try:
            self.http.get(
                f"{self.base_url}/ping",
                headers=self.headers,
                provider_name=self.name,
            )
            latency = (time.time() - start_time) * 1000

            return HealthCheckResult(
                status=ProviderStatus.HEALTHY,
                message="CoinGecko API is responding",
                latency_ms=latency,
            )
        except RateLimitError as e:
            return HealthCheckResult(
                status=ProviderStatus.DEGRADED,
                message="CoinGecko API is rate limiting requests",
                details={"retry_after": e.retry_after},
            )
        except Exception as e:
            self.logger.warning(f"CoinGecko health check failed: {e}")
            return HealthCheckResult(
                status=ProviderStatus.UNAVAILABLE,
                message=f"CoinGecko API error: {e}",
            )

    async def fetch_quote(self, token_id: str, chain: Chain) -> Optional[ChainQuote]:
        """
        Get the current USD quote for a token on one chain.

        Args:
            token_id: Contract address or CoinGecko coin id
            chain: Chain to quote on

        Returns:
            ChainQuote, or None if CoinGecko has no positive price

        Raises:
            DataNotAvailableError: Token not listed on this chain
            ProviderError: Request failure
        """
        platform = self.PLATFORMS.get(chain)
        if platform is None:
            raise DataNotAvailableError(
                f"No CoinGecko platform for chain {chain.value}",
                provider=self.name,
            )

        if is_contract_address(token_id):
            address = token_id
        else:
            address = await self._resolve_contract(token_id, platform)

        if EVM_ADDRESS_RE.match(address):
            address = address.lower()

        data = await self._make_request(
            f"{self.base_url}/coins/{platform}/contract/{address}",
            headers=self.headers,
        )
        return self._parse_quote(data, chain)

    async def _resolve_contract(self, coin_id: str, platform: str) -> str:
        """Resolve a coin id to its contract address on the given platform."""
        data = await self._make_request(
            f"{self.base_url}/coins/{coin_id.lower()}",
            params={
                "localization": "false",
                "tickers": "false",
                "market_data": "false",
                "community_data": "false",
                "developer_data": "false",
                "sparkline": "false",
            },
            headers=self.headers,
        )
        address = (data.get("platforms") or {}).get(platform)
        if not address:
            raise DataNotAvailableError(
                f"{coin_id} is not deployed on {platform}",
                provider=self.name,
            )
        return address

    def _parse_quote(self, data: dict[str, Any], chain: Chain) -> Optional[ChainQuote]:
        market_data = data.get("market_data") or {}
        price = _usd(market_data, "current_price")
        if price is None or price <= 0:
            self.logger.debug(f"No positive USD price for {data.get('id')} on {chain.value}")
            return None

        change = market_data.get("price_change_percentage_24h")
        return ChainQuote(
            chain=chain,
            price=price,
            market_cap=_usd(market_data, "market_cap"),
            volume_24h=_usd(market_data, "total_volume"),
            price_change_24h=float(change) if change is not None else None,
            coin_id=data.get("id"),
            source=self.name,
        )
