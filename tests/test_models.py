"""Tests for domain models and request validation."""

import pytest

from chainarb.core.errors import InvalidInputError
from chainarb.domain.models import (
    DEFAULT_CHAINS,
    BridgeInfo,
    Chain,
    ChainQuote,
    CostBreakdown,
    ScanRequest,
    normalize_chains,
    validate_token_id,
)


class TestChain:
    """Tests for Chain parsing and ordering."""

    def test_parse_aliases(self):
        assert Chain.parse("eth") is Chain.ETHEREUM
        assert Chain.parse("binance-smart-chain") is Chain.BSC
        assert Chain.parse(" Polygon ") is Chain.POLYGON
        assert Chain.parse(Chain.BASE) is Chain.BASE

    def test_parse_unknown_chain(self):
        with pytest.raises(InvalidInputError) as exc_info:
            Chain.parse("dogechain")
        assert exc_info.value.code == "INVALID_INPUT"
        assert "dogechain" in exc_info.value.message

    def test_normalize_chains_sorts_and_dedupes(self):
        result = normalize_chains(["bsc", "eth", "ethereum", "base"])
        assert result == [Chain.ETHEREUM, Chain.BASE, Chain.BSC]

    def test_normalize_chains_default(self):
        assert normalize_chains(None) == list(DEFAULT_CHAINS)
        assert len(DEFAULT_CHAINS) == 6

    def test_normalize_chains_rejects_empty(self):
        with pytest.raises(InvalidInputError):
            normalize_chains([])


class TestChainQuote:
    """Tests for ChainQuote invariants."""

    @pytest.mark.parametrize("price", [0, -1.5, None])
    def test_rejects_non_positive_price(self, price):
        with pytest.raises(ValueError):
            ChainQuote(chain=Chain.ETHEREUM, price=price)

    def test_to_dict_uses_wire_keys(self):
        q = ChainQuote(
            chain=Chain.BASE,
            price=1.01,
            market_cap=1e9,
            volume_24h=5e6,
            price_change_24h=-0.4,
        )
        data = q.to_dict()
        assert data["chain"] == "base"
        assert data["marketCap"] == 1e9
        assert data["volume24h"] == 5e6
        assert data["priceChange24h"] == -0.4


class TestCostBreakdown:
    def test_total_sums_components(self):
        costs = CostBreakdown(buy_fee=30, sell_fee=33, buy_gas=25, sell_gas=2, bridge_cost=8)
        assert costs.total == 98
        assert costs.to_dict()["total"] == 98

    def test_bridge_info_to_dict(self):
        assert BridgeInfo("Across", 8.0, 10).to_dict() == {
            "protocol": "Across",
            "cost": 8.0,
            "time": 10,
        }


class TestScanRequest:
    """Tests for wire-format request validation."""

    def test_from_dict_defaults(self):
        request = ScanRequest.from_dict({"tokenId": " 0xabc "})
        assert request.token_id == "0xabc"
        assert request.chains is None
        assert request.min_profit_usd is None
        assert request.notional_amount is None

    def test_from_dict_full(self):
        request = ScanRequest.from_dict(
            {
                "tokenId": "usd-coin",
                "chains": ["base", "eth"],
                "minProfitUSD": 0,
                "notionalAmount": "2500",
            }
        )
        assert request.chains == [Chain.ETHEREUM, Chain.BASE]
        assert request.min_profit_usd == 0
        assert request.notional_amount == 2500.0

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"tokenId": ""},
            {"tokenId": "   "},
            {"tokenId": 42},
            {"tokenId": "two words"},
            {"tokenId": "0xabc", "chains": []},
            {"tokenId": "0xabc", "chains": ["nope"]},
            {"tokenId": "0xabc", "minProfitUSD": -1},
            {"tokenId": "0xabc", "minProfitUSD": "lots"},
            {"tokenId": "0xabc", "notionalAmount": 0},
            {"tokenId": "0xabc", "minProfitUSD": "nan"},
            {"tokenId": "0xabc", "minProfitUSD": float("inf")},
            {"tokenId": "0xabc", "notionalAmount": "inf"},
            {"tokenId": "0xabc", "notionalAmount": float("nan")},
        ],
    )
    def test_from_dict_rejects_invalid(self, payload):
        with pytest.raises(InvalidInputError):
            ScanRequest.from_dict(payload)

    def test_validate_token_id_strips(self):
        assert validate_token_id("  usd-coin\n") == "usd-coin"
