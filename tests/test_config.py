"""Tests for settings, YAML config, errors and time helpers."""

import logging
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from chainarb.core.config import Settings, get_arbitrage_config, load_yaml_config
from chainarb.core.errors import ChainArbError, InvalidInputError, RateLimitError
from chainarb.core.logging import (
    JSON_FORMAT,
    LOCAL_FORMAT,
    basic_format,
    get_logger,
    setup_logging,
)
from chainarb.core.timeutil import format_timestamp, parse_timestamp


class TestSettings:
    """Tests for environment settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.http_max_retries == 3
        assert settings.chain_timeout == 10.0
        assert settings.http_timeout * settings.http_max_retries < settings.chain_timeout
        assert settings.coingecko_base_url.startswith("https://")

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="loud")

    def test_invalid_chain_timeout(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, chain_timeout=0)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("COINGECKO_API_KEY", "from-env")
        monkeypatch.setenv("CHAIN_TIMEOUT", "2.5")
        settings = Settings(_env_file=None)
        assert settings.coingecko_api_key == "from-env"
        assert settings.chain_timeout == 2.5


class TestYamlConfig:
    """Tests for config.yaml loading."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml_config(str(tmp_path / "missing.yaml"))
        assert get_arbitrage_config(str(tmp_path / "missing.yaml")) == {}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_yaml_config(str(path)) == {}
        assert get_arbitrage_config(str(path)) == {}

    def test_shipped_config(self):
        config = get_arbitrage_config()
        assert config["min_profit_usd"] == 50
        assert config["notional_amount"] == 10000
        assert config["risk"]["high_risk_chains"] == ["bsc"]


class TestErrors:
    def test_to_dict(self):
        error = InvalidInputError("bad chain", field="chains")
        assert isinstance(error, ChainArbError)
        assert error.to_dict() == {
            "error": "INVALID_INPUT",
            "message": "bad chain",
            "details": {"field": "chains"},
        }

    def test_rate_limit_details(self):
        error = RateLimitError("slow down", provider="coingecko", retry_after=60)
        assert error.code == "RATE_LIMIT"
        assert error.details["retry_after"] == 60
        assert error.recoverable is True


class TestUtilities:
    def test_iso_format(self):
        dt = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert format_timestamp(dt) == "2024-01-02T03:04:05Z"
        assert parse_timestamp("2024-01-02T03:04:05Z") == dt

    def test_get_logger_prefix(self):
        assert get_logger("engine").name == "chainarb.engine"
        assert get_logger("chainarb.cli").name == "chainarb.cli"

    def test_setup_logging_without_yaml(self, tmp_path):
        setup_logging(config_path=str(tmp_path / "missing.yaml"), log_level="debug")
        assert logging.getLogger("chainarb").level == logging.DEBUG

    def test_basic_format_by_environment(self):
        assert basic_format(Settings(_env_file=None, chainarb_env="local")) == LOCAL_FORMAT
        assert basic_format(Settings(_env_file=None, chainarb_env="cloud")) == JSON_FORMAT

    def test_setup_logging_level_from_settings(self, tmp_path):
        settings = Settings(_env_file=None, log_level="warning")
        setup_logging(config_path=str(tmp_path / "missing.yaml"), settings=settings)
        assert logging.getLogger("chainarb").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING
