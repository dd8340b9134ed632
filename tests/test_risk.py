"""Tests for risk scoring."""

import pytest

from chainarb.arb.risk import RiskScorer
from chainarb.core.errors import ConfigurationError
from chainarb.domain.models import Chain, RiskLevel


@pytest.fixture
def scorer():
    return RiskScorer()


class TestRiskBands:
    """Tests for the individual score components."""

    @pytest.mark.parametrize(
        "margin,points",
        [(0.5, 3), (1.99, 3), (2.0, 2), (4.9, 2), (5.0, 1), (9.99, 1), (10.0, 0), (50, 0)],
    )
    def test_margin_points(self, scorer, margin, points):
        assert scorer.margin_points(margin) == points

    @pytest.mark.parametrize(
        "minutes,points",
        [(2, 0), (5, 0), (6, 1), (15, 1), (16, 2), (30, 2), (31, 3), (120, 3)],
    )
    def test_bridge_time_points(self, scorer, minutes, points):
        assert scorer.bridge_time_points(minutes) == points

    def test_chain_points(self, scorer):
        assert scorer.chain_points(Chain.ETHEREUM, Chain.BSC) == 1
        assert scorer.chain_points(Chain.BSC, Chain.POLYGON) == 1
        assert scorer.chain_points(Chain.ETHEREUM, Chain.BASE) == 0


class TestRiskScorer:
    """Tests for the banded risk level."""

    def test_low(self, scorer):
        # 0 + 0 + 0
        assert scorer.assess(12.0, 2, Chain.OPTIMISM, Chain.BASE) == RiskLevel.LOW

    def test_medium(self, scorer):
        # 2 + 1 + 0
        assert scorer.assess(3.0, 10, Chain.ETHEREUM, Chain.ARBITRUM) == RiskLevel.MEDIUM

    def test_high(self, scorer):
        # 3 + 2 + 1
        assert scorer.assess(1.0, 20, Chain.POLYGON, Chain.BSC) == RiskLevel.HIGH

    def test_worst_case_score(self, scorer):
        assert scorer.score(0.1, 60, Chain.BSC, Chain.ETHEREUM) == 7

    def test_deterministic(self, scorer):
        results = {scorer.assess(4.2, 15, Chain.BSC, Chain.BASE) for _ in range(20)}
        assert len(results) == 1


class TestRiskScorerConfig:
    """Tests for RiskScorer.from_config."""

    def test_empty_config_keeps_defaults(self):
        scorer = RiskScorer.from_config(None)
        assert scorer.high_risk_chains == frozenset({Chain.BSC})
        assert scorer.high_threshold == 6
        assert scorer.medium_threshold == 3

    def test_overrides(self):
        scorer = RiskScorer.from_config(
            {
                "high_risk_chains": ["solana", "bsc"],
                "high_threshold": 4,
                "margin_bands": [[1, 4]],
            }
        )
        assert Chain.SOLANA in scorer.high_risk_chains
        assert scorer.margin_points(0.5) == 4
        assert scorer.margin_points(3.0) == 0
        assert scorer.assess(0.5, 0, Chain.ETHEREUM, Chain.BASE) == RiskLevel.HIGH

    @pytest.mark.parametrize(
        "config",
        [
            {"high_risk_chains": ["dogechain"]},
            {"margin_bands": [["low", 1]]},
            {"high_threshold": 2, "medium_threshold": 5},
        ],
    )
    def test_invalid_config(self, config):
        with pytest.raises(ConfigurationError):
            RiskScorer.from_config(config)
