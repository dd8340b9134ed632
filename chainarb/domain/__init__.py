"""
Domain module - Business models

Contains pure business models without external dependencies.
All models are JSON-serializable via to_dict().
"""

from chainarb.domain.models import (
    Chain,
    DEFAULT_CHAINS,
    RiskLevel,
    ChainQuote,
    BridgeInfo,
    CostBreakdown,
    ArbitrageOpportunity,
    RouteQuote,
    ScanResult,
    ScanRequest,
    normalize_chains,
    validate_token_id,
)

__all__ = [
    "Chain",
    "DEFAULT_CHAINS",
    "RiskLevel",
    "ChainQuote",
    "BridgeInfo",
    "CostBreakdown",
    "ArbitrageOpportunity",
    "RouteQuote",
    "ScanResult",
    "ScanRequest",
    "normalize_chains",
    "validate_token_id",
]
