"""
Core data models for ChainArb.

All models are dataclasses and provide to_dict() for JSON serialization.
Serialized opportunity and scan payloads use the camelCase keys consumed
by API callers.
"""

import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Iterable, Optional

from chainarb.core.errors import InvalidInputError


class Chain(str, Enum):
    """Supported chains, in canonical iteration order."""
    ETHEREUM = "ethereum"
    POLYGON = "polygon"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    BASE = "base"
    BSC = "bsc"
    AVALANCHE = "avalanche"
    SOLANA = "solana"

    @classmethod
    def parse(cls, value: "str | Chain") -> "Chain":
        """Resolve a chain name or alias, raising InvalidInputError if unknown."""
        if isinstance(value, Chain):
            return value
        if not isinstance(value, str):
            raise InvalidInputError(f"Chain must be a string, got {type(value).__name__}", field="chains")
        key = value.strip().lower()
        key = CHAIN_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            supported = ", ".join(c.value for c in cls)
            raise InvalidInputError(
                f"Unsupported chain '{value}'. Supported: {supported}",
                field="chains",
            ) from None

    @property
    def order(self) -> int:
        return list(Chain).index(self)


CHAIN_ALIASES = {
    "eth": "ethereum",
    "mainnet": "ethereum",
    "matic": "polygon",
    "polygon-pos": "polygon",
    "arbitrum-one": "arbitrum",
    "optimistic-ethereum": "optimism",
    "binance-smart-chain": "bsc",
    "bnb": "bsc",
    "avax": "avalanche",
    "sol": "solana",
}

DEFAULT_CHAINS: tuple[Chain, ...] = (
    Chain.ETHEREUM,
    Chain.POLYGON,
    Chain.ARBITRUM,
    Chain.OPTIMISM,
    Chain.BASE,
    Chain.BSC,
)


def normalize_chains(chains: Optional[Iterable["str | Chain"]]) -> list[Chain]:
    """
    Parse, dedupe and sort chains into canonical order.

    None means the default chain set. An empty collection is rejected.
    """
    if chains is None:
        return list(DEFAULT_CHAINS)
    if isinstance(chains, str):
        chains = [chains]
    parsed = {Chain.parse(c) for c in chains}
    if not parsed:
        raise InvalidInputError("At least one chain is required", field="chains")
    return sorted(parsed, key=lambda c: c.order)


class RiskLevel(str, Enum):
    """Risk tier assigned to an opportunity."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class ChainQuote:
    """
    Current USD quote for a token on one chain.

    A quote only exists with a positive price; chains without one are absent.
    """
    chain: Chain
    price: float
    market_cap: Optional[float] = None
    volume_24h: Optional[float] = None
    price_change_24h: Optional[float] = None  # Percentage
    coin_id: Optional[str] = None
    source: str = "unknown"

    def __post_init__(self):
        if not self.price or self.price <= 0:
            raise ValueError(f"ChainQuote price must be positive, got {self.price!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "chain": self.chain.value,
            "price": self.price,
            "marketCap": self.market_cap,
            "volume24h": self.volume_24h,
            "priceChange24h": self.price_change_24h,
            "coinId": self.coin_id,
            "source": self.source,
        }


@dataclass(frozen=True)
class BridgeInfo:
    """Cost and latency of moving funds between two chains."""
    protocol: str
    cost: float             # USD
    time: int               # Minutes

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CostBreakdown:
    """All USD costs deducted from gross profit."""
    buy_fee: float
    sell_fee: float
    buy_gas: float
    sell_gas: float
    bridge_cost: float

    @property
    def total(self) -> float:
        return self.buy_fee + self.sell_fee + self.buy_gas + self.sell_gas + self.bridge_cost

    def to_dict(self) -> dict[str, Any]:
        return {
            "buyFee": self.buy_fee,
            "sellFee": self.sell_fee,
            "buyGas": self.buy_gas,
            "sellGas": self.sell_gas,
            "bridgeCost": self.bridge_cost,
            "total": self.total,
        }


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """
    A net-profitable buy-here, bridge, sell-there trade.

    Derived from exactly one ordered (buy_chain, sell_chain) pair.
    """
    buy_chain: Chain
    sell_chain: Chain
    buy_price: float
    sell_price: float
    price_difference: float
    gross_profit: float
    costs: CostBreakdown
    net_profit: float
    net_profit_percentage: float
    bridge_info: BridgeInfo
    risk_level: RiskLevel
    execution_time_minutes: int
    notional_amount: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "buyChain": self.buy_chain.value,
            "sellChain": self.sell_chain.value,
            "buyPrice": self.buy_price,
            "sellPrice": self.sell_price,
            "priceDifference": self.price_difference,
            "grossProfit": self.gross_profit,
            "costs": self.costs.to_dict(),
            "netProfit": self.net_profit,
            "netProfitPercentage": self.net_profit_percentage,
            "bridgeInfo": self.bridge_info.to_dict(),
            "riskLevel": self.risk_level.value,
            "executionTimeMinutes": self.execution_time_minutes,
            "notionalAmount": self.notional_amount,
        }


@dataclass(frozen=True)
class RouteQuote:
    """Raw price gap between two chains, before any cost netting."""
    from_chain: Chain
    to_chain: Chain
    from_price: float
    to_price: float
    price_diff: float
    profit_percentage: float
    bridge_info: BridgeInfo

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_chain.value,
            "to": self.to_chain.value,
            "fromPrice": self.from_price,
            "toPrice": self.to_price,
            "priceDiff": self.price_diff,
            "profitPercentage": self.profit_percentage,
            "bridgeInfo": self.bridge_info.to_dict(),
        }


@dataclass
class ScanResult:
    """Ranked opportunities for one token scan."""
    token_id: str
    timestamp: str
    chains_scanned: int
    opportunities: list[ArbitrageOpportunity] = field(default_factory=list)
    total_opportunities: int = 0
    prices: dict[Chain, ChainQuote] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokenId": self.token_id,
            "opportunities": [o.to_dict() for o in self.opportunities],
            "totalOpportunities": self.total_opportunities,
            "chainsScanned": self.chains_scanned,
            "timestamp": self.timestamp,
            "prices": {c.value: q.to_dict() for c, q in self.prices.items()},
        }


@dataclass
class ScanRequest:
    """
    Validated caller request.

    Accepts the wire payload `{tokenId, chains?, minProfitUSD?, notionalAmount?}`.
    Omitted fields stay None so the engine applies its configured defaults.
    """
    token_id: str
    chains: Optional[list[Chain]] = None
    min_profit_usd: Optional[float] = None
    notional_amount: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanRequest":
        if not isinstance(data, dict):
            raise InvalidInputError("Request body must be an object")

        token_id = validate_token_id(data.get("tokenId", data.get("token_id")))
        chains = data.get("chains")
        if chains is not None:
            chains = normalize_chains(chains)

        min_profit = data.get("minProfitUSD", data.get("min_profit_usd"))
        if min_profit is not None:
            min_profit = validate_min_profit(min_profit)

        notional = data.get("notionalAmount", data.get("notional_amount"))
        if notional is not None:
            notional = validate_notional(notional)

        return cls(
            token_id=token_id,
            chains=chains,
            min_profit_usd=min_profit,
            notional_amount=notional,
        )


def validate_token_id(token_id: Any) -> str:
    """Return the stripped token id or raise InvalidInputError."""
    if not isinstance(token_id, str) or not token_id.strip():
        raise InvalidInputError("Token address or id is required", field="tokenId")
    token_id = token_id.strip()
    if any(ch.isspace() for ch in token_id) or "/" in token_id:
        raise InvalidInputError(f"Malformed token id: {token_id!r}", field="tokenId")
    return token_id


def _as_number(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be a number", field=name)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number, got {value!r}", field=name) from None
    if not math.isfinite(number):
        raise InvalidInputError(f"{name} must be finite, got {value!r}", field=name)
    return number


def validate_min_profit(value: Any) -> float:
    min_profit = _as_number(value, "minProfitUSD")
    if min_profit < 0:
        raise InvalidInputError("minProfitUSD must not be negative", field="minProfitUSD")
    return min_profit


def validate_notional(value: Any) -> float:
    notional = _as_number(value, "notionalAmount")
    if notional <= 0:
        raise InvalidInputError("notionalAmount must be positive", field="notionalAmount")
    return notional
