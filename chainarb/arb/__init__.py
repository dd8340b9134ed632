"""
ChainArb Arbitrage Module.

Cross-chain price arbitrage detection.

Components:
- aggregator: Concurrent per-chain quote fetching
- costs: Static fee/gas/bridge cost model
- risk: Risk tier scoring
- engine: Pairwise opportunity evaluation and ranking
"""

from chainarb.arb.aggregator import PriceAggregator
from chainarb.arb.costs import CostModel
from chainarb.arb.risk import RiskScorer
from chainarb.arb.engine import ArbitrageEngine, create_engine

__all__ = [
    "PriceAggregator",
    "CostModel",
    "RiskScorer",
    "ArbitrageEngine",
    "create_engine",
]
