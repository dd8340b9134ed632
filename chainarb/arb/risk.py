"""
Risk scoring for cross-chain arbitrage opportunities.

Deterministic additive score, then banded:
- Margin: <2% +3, <5% +2, <10% +1
- Bridge time: >30min +3, >15min +2, >5min +1
- Chain: +1 if either leg is on a flagged chain
- Band: >=6 High, >=3 Medium, else Low

The thresholds are tunable heuristics, configurable via
config.yaml['arbitrage']['risk'].
"""

from typing import Iterable, Optional

from chainarb.core.errors import ConfigurationError
from chainarb.core.logging import LoggerMixin
from chainarb.domain.models import Chain, RiskLevel

# (upper bound exclusive, points), checked in order
DEFAULT_MARGIN_BANDS = ((2.0, 3), (5.0, 2), (10.0, 1))
# (lower bound exclusive, points), checked in order
DEFAULT_BRIDGE_TIME_BANDS = ((30, 3), (15, 2), (5, 1))
DEFAULT_HIGH_RISK_CHAINS = frozenset({Chain.BSC})
DEFAULT_HIGH_THRESHOLD = 6
DEFAULT_MEDIUM_THRESHOLD = 3


class RiskScorer(LoggerMixin):
    """Assigns a Low/Medium/High tier from margin, bridge time and chains."""

    def __init__(
        self,
        margin_bands: Iterable[tuple[float, int]] = DEFAULT_MARGIN_BANDS,
        bridge_time_bands: Iterable[tuple[float, int]] = DEFAULT_BRIDGE_TIME_BANDS,
        high_risk_chains: Iterable[Chain] = DEFAULT_HIGH_RISK_CHAINS,
        high_threshold: int = DEFAULT_HIGH_THRESHOLD,
        medium_threshold: int = DEFAULT_MEDIUM_THRESHOLD,
    ):
        self.margin_bands = tuple((float(b), int(p)) for b, p in margin_bands)
        self.bridge_time_bands = tuple((float(b), int(p)) for b, p in bridge_time_bands)
        self.high_risk_chains = frozenset(high_risk_chains)
        self.high_threshold = high_threshold
        self.medium_threshold = medium_threshold

        if medium_threshold > high_threshold:
            raise ConfigurationError(
                f"medium_threshold ({medium_threshold}) exceeds high_threshold ({high_threshold})"
            )

    @classmethod
    def from_config(cls, config: Optional[dict]) -> "RiskScorer":
        """
        Build from config.yaml['arbitrage']['risk'].

        Args:
            config: Risk configuration; missing keys keep the defaults
        """
        config = config or {}
        try:
            chains = config.get("high_risk_chains")
            return cls(
                margin_bands=_bands(config.get("margin_bands"), DEFAULT_MARGIN_BANDS),
                bridge_time_bands=_bands(
                    config.get("bridge_time_bands"), DEFAULT_BRIDGE_TIME_BANDS
                ),
                high_risk_chains=(
                    DEFAULT_HIGH_RISK_CHAINS
                    if chains is None
                    else {Chain(str(c).lower()) for c in chains}
                ),
                high_threshold=int(config.get("high_threshold", DEFAULT_HIGH_THRESHOLD)),
                medium_threshold=int(config.get("medium_threshold", DEFAULT_MEDIUM_THRESHOLD)),
            )
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid risk config: {e}") from e

    def margin_points(self, profit_percentage: float) -> int:
        for upper, points in self.margin_bands:
            if profit_percentage < upper:
                return points
        return 0

    def bridge_time_points(self, bridge_time: float) -> int:
        for lower, points in self.bridge_time_bands:
            if bridge_time > lower:
                return points
        return 0

    def chain_points(self, buy_chain: Chain, sell_chain: Chain) -> int:
        if buy_chain in self.high_risk_chains or sell_chain in self.high_risk_chains:
            return 1
        return 0

    def score(
        self,
        profit_percentage: float,
        bridge_time: float,
        buy_chain: Chain,
        sell_chain: Chain,
    ) -> int:
        return (
            self.margin_points(profit_percentage)
            + self.bridge_time_points(bridge_time)
            + self.chain_points(buy_chain, sell_chain)
        )

    def assess(
        self,
        profit_percentage: float,
        bridge_time: float,
        buy_chain: Chain,
        sell_chain: Chain,
    ) -> RiskLevel:
        """
        Band the additive risk score.

        Args:
            profit_percentage: Gross profit as a percentage of buy cost
            bridge_time: Bridge transfer time in minutes
            buy_chain: Chain the token is bought on
            sell_chain: Chain the token is sold on

        Returns:
            RiskLevel
        """
        score = self.score(profit_percentage, bridge_time, buy_chain, sell_chain)
        if score >= self.high_threshold:
            return RiskLevel.HIGH
        if score >= self.medium_threshold:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW


def _bands(raw, default):
    if raw is None:
        return default
    return tuple((float(entry[0]), int(entry[1])) for entry in raw)
