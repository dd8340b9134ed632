"""
Static cost model for cross-chain arbitrage.

Per-chain DEX fees and swap gas costs plus a bridge table keyed by
unordered chain pair. Built once at startup and never mutated; changing
the numbers is a config deployment, not an API call.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from chainarb.core.errors import ConfigurationError
from chainarb.domain.models import BridgeInfo, Chain

DEFAULT_BRIDGE = BridgeInfo(protocol="Generic Bridge", cost=20.0, time=30)
DEFAULT_DEX_FEE_PERCENT = 0.3
DEFAULT_SWAP_GAS_COST_USD = 5.0

DEX_FEE_PERCENT = {
    Chain.ETHEREUM: 0.3,    # Uniswap v2/v3 0.3% tier
    Chain.POLYGON: 0.3,     # QuickSwap
    Chain.ARBITRUM: 0.3,    # Uniswap v3 / Camelot
    Chain.OPTIMISM: 0.3,    # Uniswap v3 / Velodrome
    Chain.BASE: 0.3,        # Aerodrome / Uniswap v3
    Chain.BSC: 0.25,        # PancakeSwap v2
    Chain.AVALANCHE: 0.3,   # Trader Joe
    Chain.SOLANA: 0.25,     # Raydium
}

SWAP_GAS_COST_USD = {
    Chain.ETHEREUM: 25.0,
    Chain.POLYGON: 0.05,
    Chain.ARBITRUM: 0.5,
    Chain.OPTIMISM: 0.3,
    Chain.BASE: 0.2,
    Chain.BSC: 0.5,
    Chain.AVALANCHE: 0.8,
    Chain.SOLANA: 0.01,
}

BRIDGES = {
    (Chain.ETHEREUM, Chain.POLYGON): BridgeInfo("Polygon PoS Bridge", 15.0, 30),
    (Chain.ETHEREUM, Chain.ARBITRUM): BridgeInfo("Across", 8.0, 10),
    (Chain.ETHEREUM, Chain.OPTIMISM): BridgeInfo("Across", 8.0, 10),
    (Chain.ETHEREUM, Chain.BASE): BridgeInfo("Across", 6.0, 10),
    (Chain.ETHEREUM, Chain.BSC): BridgeInfo("Stargate", 12.0, 15),
    (Chain.ETHEREUM, Chain.AVALANCHE): BridgeInfo("Stargate", 10.0, 15),
    (Chain.ETHEREUM, Chain.SOLANA): BridgeInfo("Wormhole", 12.0, 20),
    (Chain.POLYGON, Chain.ARBITRUM): BridgeInfo("Hop", 3.0, 5),
    (Chain.POLYGON, Chain.OPTIMISM): BridgeInfo("Hop", 3.0, 5),
    (Chain.POLYGON, Chain.BASE): BridgeInfo("Across", 3.0, 5),
    (Chain.POLYGON, Chain.BSC): BridgeInfo("Stargate", 4.0, 10),
    (Chain.POLYGON, Chain.AVALANCHE): BridgeInfo("Stargate", 4.0, 10),
    (Chain.ARBITRUM, Chain.OPTIMISM): BridgeInfo("Across", 2.0, 3),
    (Chain.ARBITRUM, Chain.BASE): BridgeInfo("Across", 2.0, 3),
    (Chain.ARBITRUM, Chain.BSC): BridgeInfo("Stargate", 4.0, 10),
    (Chain.ARBITRUM, Chain.AVALANCHE): BridgeInfo("Stargate", 4.0, 10),
    (Chain.OPTIMISM, Chain.BASE): BridgeInfo("Across", 1.5, 2),
    (Chain.OPTIMISM, Chain.BSC): BridgeInfo("Stargate", 4.0, 10),
    (Chain.BASE, Chain.BSC): BridgeInfo("Stargate", 4.0, 10),
    (Chain.BSC, Chain.AVALANCHE): BridgeInfo("Stargate", 3.0, 10),
}


def pair_key(a: Chain, b: Chain) -> frozenset[Chain]:
    """Bridge table key; identical for (a, b) and (b, a)."""
    return frozenset((a, b))


@dataclass(frozen=True)
class CostModel:
    """
    Immutable trading/bridging cost tables.

    Lookups for chains or pairs missing from the tables fall back to the
    declared defaults.
    """
    dex_fee_percent: Mapping[Chain, float]
    swap_gas_cost_usd: Mapping[Chain, float]
    bridges: Mapping[frozenset, BridgeInfo]
    default_bridge: BridgeInfo = DEFAULT_BRIDGE
    default_dex_fee_percent: float = DEFAULT_DEX_FEE_PERCENT
    default_swap_gas_cost_usd: float = DEFAULT_SWAP_GAS_COST_USD

    def __post_init__(self):
        # Read-only views so the tables cannot be edited after construction.
        object.__setattr__(self, "dex_fee_percent", MappingProxyType(dict(self.dex_fee_percent)))
        object.__setattr__(self, "swap_gas_cost_usd", MappingProxyType(dict(self.swap_gas_cost_usd)))
        object.__setattr__(self, "bridges", MappingProxyType(dict(self.bridges)))

    @classmethod
    def default(cls) -> "CostModel":
        return cls(
            dex_fee_percent=DEX_FEE_PERCENT,
            swap_gas_cost_usd=SWAP_GAS_COST_USD,
            bridges={pair_key(a, b): info for (a, b), info in BRIDGES.items()},
        )

    @classmethod
    def from_config(cls, config: Optional[dict[str, Any]]) -> "CostModel":
        """
        Build from the `arbitrage.cost_model` section of config.yaml.

        Missing sections keep the built-in defaults.

        Raises:
            ConfigurationError: On unknown chains or malformed entries
        """
        if not config:
            return cls.default()

        try:
            dex_fees = dict(DEX_FEE_PERCENT)
            dex_fees.update(_chain_table(config.get("dex_fee_percent", {})))

            gas = dict(SWAP_GAS_COST_USD)
            gas.update(_chain_table(config.get("swap_gas_cost_usd", {})))

            bridges = {pair_key(a, b): info for (a, b), info in BRIDGES.items()}
            for entry in config.get("bridges", []) or []:
                a, b = _bridge_chains(entry.get("chains"))
                bridges[pair_key(a, b)] = _bridge_info(entry)

            default_bridge = DEFAULT_BRIDGE
            if config.get("default_bridge"):
                default_bridge = _bridge_info(config["default_bridge"])

            return cls(
                dex_fee_percent=dex_fees,
                swap_gas_cost_usd=gas,
                bridges=bridges,
                default_bridge=default_bridge,
                default_dex_fee_percent=float(
                    config.get("default_dex_fee_percent", DEFAULT_DEX_FEE_PERCENT)
                ),
                default_swap_gas_cost_usd=float(
                    config.get("default_swap_gas_cost_usd", DEFAULT_SWAP_GAS_COST_USD)
                ),
            )
        except ConfigurationError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid cost_model config: {e}") from e

    def dex_fee(self, chain: Chain) -> float:
        """DEX fee percentage charged on a swap on this chain."""
        return self.dex_fee_percent.get(chain, self.default_dex_fee_percent)

    def swap_gas(self, chain: Chain) -> float:
        """USD gas cost of one swap on this chain."""
        return self.swap_gas_cost_usd.get(chain, self.default_swap_gas_cost_usd)

    def bridge(self, a: Chain, b: Chain) -> BridgeInfo:
        """Bridge parameters for the unordered pair (a, b)."""
        return self.bridges.get(pair_key(a, b), self.default_bridge)

    def describe(self, chains: Iterable[Chain]) -> list[dict[str, Any]]:
        """Per-chain fee/gas rows for display."""
        return [
            {
                "chain": chain.value,
                "dexFeePercent": self.dex_fee(chain),
                "swapGasCostUSD": self.swap_gas(chain),
            }
            for chain in chains
        ]


def _chain_table(raw: dict[str, Any]) -> dict[Chain, float]:
    table = {}
    for name, value in (raw or {}).items():
        value = float(value)
        if value < 0:
            raise ConfigurationError(f"Negative cost for chain {name}: {value}")
        table[_config_chain(name)] = value
    return table


def _config_chain(name: str) -> Chain:
    try:
        return Chain(str(name).lower())
    except ValueError:
        raise ConfigurationError(f"Unknown chain in cost_model: {name}") from None


def _bridge_chains(chains: Any) -> tuple[Chain, Chain]:
    if not isinstance(chains, (list, tuple)) or len(chains) != 2:
        raise ConfigurationError(f"Bridge entry needs exactly two chains, got {chains!r}")
    a, b = (_config_chain(c) for c in chains)
    if a == b:
        raise ConfigurationError(f"Bridge entry joins {a.value} to itself")
    return a, b


def _bridge_info(entry: dict[str, Any]) -> BridgeInfo:
    info = BridgeInfo(
        protocol=str(entry["protocol"]),
        cost=float(entry["cost"]),
        time=int(entry["time"]),
    )
    if info.cost < 0 or info.time < 0:
        raise ConfigurationError(f"Bridge {info.protocol} has negative cost or time")
    return info
