"""Tests for the static cost model."""

from pathlib import Path

import pytest

from chainarb.arb.costs import DEFAULT_BRIDGE, CostModel, pair_key
from chainarb.core.config import load_yaml_config
from chainarb.core.errors import ConfigurationError
from chainarb.domain.models import BridgeInfo, Chain

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "config.yaml"


class TestCostModel:
    """Tests for CostModel lookups."""

    def test_bridge_lookup_is_symmetric(self, cost_model):
        forward = cost_model.bridge(Chain.ETHEREUM, Chain.ARBITRUM)
        backward = cost_model.bridge(Chain.ARBITRUM, Chain.ETHEREUM)
        assert forward == backward
        assert forward.protocol == "Across"

    def test_missing_pair_uses_default_bridge(self, cost_model):
        bridge = cost_model.bridge(Chain.SOLANA, Chain.BASE)
        assert bridge == DEFAULT_BRIDGE
        assert bridge.cost == 20
        assert bridge.time == 30
        assert bridge.protocol == "Generic Bridge"

    def test_missing_chain_uses_default_fee_and_gas(self):
        model = CostModel(dex_fee_percent={}, swap_gas_cost_usd={}, bridges={})
        assert model.dex_fee(Chain.ETHEREUM) == 0.3
        assert model.swap_gas(Chain.ETHEREUM) == 5.0

    def test_tables_are_read_only(self, cost_model):
        with pytest.raises(TypeError):
            cost_model.dex_fee_percent[Chain.ETHEREUM] = 0.0
        with pytest.raises(TypeError):
            cost_model.bridges[pair_key(Chain.BASE, Chain.SOLANA)] = DEFAULT_BRIDGE

    def test_source_dict_mutation_does_not_leak(self):
        fees = {Chain.ETHEREUM: 0.3}
        model = CostModel(dex_fee_percent=fees, swap_gas_cost_usd={}, bridges={})
        fees[Chain.ETHEREUM] = 5.0
        assert model.dex_fee(Chain.ETHEREUM) == 0.3

    def test_describe_rows(self, cost_model):
        rows = cost_model.describe([Chain.ETHEREUM, Chain.BSC])
        assert rows[0] == {"chain": "ethereum", "dexFeePercent": 0.3, "swapGasCostUSD": 25.0}
        assert rows[1]["dexFeePercent"] == 0.25


class TestCostModelConfig:
    """Tests for CostModel.from_config."""

    def test_empty_config_is_default(self):
        assert CostModel.from_config(None) == CostModel.default()
        assert CostModel.from_config({}) == CostModel.default()

    def test_overrides(self):
        model = CostModel.from_config(
            {
                "dex_fee_percent": {"base": 0.05},
                "swap_gas_cost_usd": {"ethereum": 40},
                "bridges": [
                    {"chains": ["solana", "base"], "protocol": "Wormhole", "cost": 9, "time": 25}
                ],
                "default_bridge": {"protocol": "Fallback", "cost": 30, "time": 45},
            }
        )
        assert model.dex_fee(Chain.BASE) == 0.05
        assert model.dex_fee(Chain.ETHEREUM) == 0.3
        assert model.swap_gas(Chain.ETHEREUM) == 40.0
        assert model.bridge(Chain.BASE, Chain.SOLANA) == BridgeInfo("Wormhole", 9.0, 25)
        assert model.bridge(Chain.SOLANA, Chain.POLYGON).protocol == "Fallback"

    @pytest.mark.parametrize(
        "config",
        [
            {"dex_fee_percent": {"dogechain": 0.3}},
            {"swap_gas_cost_usd": {"ethereum": -1}},
            {"bridges": [{"chains": ["ethereum"], "protocol": "X", "cost": 1, "time": 1}]},
            {"bridges": [{"chains": ["base", "base"], "protocol": "X", "cost": 1, "time": 1}]},
            {"bridges": [{"chains": ["base", "bsc"], "protocol": "X"}]},
            {"default_bridge": {"protocol": "X", "cost": "cheap", "time": 1}},
        ],
    )
    def test_invalid_config(self, config):
        with pytest.raises(ConfigurationError):
            CostModel.from_config(config)

    def test_shipped_config_loads(self):
        config = load_yaml_config(str(CONFIG_PATH))
        model = CostModel.from_config(config["arbitrage"]["cost_model"])
        assert model.bridge(Chain.BASE, Chain.OPTIMISM) == BridgeInfo("Across", 1.5, 2)
        assert model.default_bridge == DEFAULT_BRIDGE
