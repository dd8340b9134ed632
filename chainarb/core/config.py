"""
Configuration management for ChainArb.

Supports:
- Runtime settings: environment variables / .env file
- YAML config for static business data (cost tables, risk thresholds)
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==============================================
    # Environment
    # ==============================================
    chainarb_env: str = Field(default="local", description="Environment: local/cloud")
    log_level: str = Field(default="INFO")
    timezone: str = Field(default="UTC")

    # ==============================================
    # Price source
    # ==============================================
    coingecko_api_key: Optional[str] = Field(default=None, description="CoinGecko demo API key")
    coingecko_base_url: str = Field(default="https://api.coingecko.com/api/v3")

    # ==============================================
    # Runtime Config
    # ==============================================
    # Keep http_timeout * http_max_retries below chain_timeout
    http_timeout: int = Field(default=3, description="HTTP timeout per attempt in seconds")
    http_max_retries: int = Field(default=3, description="Attempts per request on transport errors")
    chain_timeout: float = Field(default=10.0, description="Deadline per chain quote in seconds")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v

    @field_validator("chain_timeout")
    @classmethod
    def validate_chain_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("chain_timeout must be positive")
        return v

    @property
    def is_local(self) -> bool:
        return self.chainarb_env == "local"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def find_project_root() -> Optional[Path]:
    """Find the directory holding pyproject.toml, if running from a checkout."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").exists():
            return parent
    return None


def load_yaml_config(config_path: Optional[str] = None) -> dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to config file. Defaults to config/config.yaml

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if config_path is None:
        root = find_project_root()
        if root is not None:
            config_path = str(root / "config" / "config.yaml")
        else:
            config_path = "config/config.yaml"

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_arbitrage_config(config_path: Optional[str] = None) -> dict[str, Any]:
    """Get the `arbitrage` section, or an empty dict if no config file is present."""
    try:
        config = load_yaml_config(config_path)
    except FileNotFoundError:
        return {}
    return config.get("arbitrage", {}) or {}
