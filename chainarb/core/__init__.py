"""
Core module - Engineering foundation

Contains configuration, logging, HTTP client, errors, and time utilities.
"""

from chainarb.core.config import Settings, get_settings, load_yaml_config
from chainarb.core.errors import (
    ChainArbError,
    ProviderError,
    ConfigurationError,
    DataNotAvailableError,
    InvalidInputError,
    RateLimitError,
)
from chainarb.core.logging import setup_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "load_yaml_config",
    "ChainArbError",
    "ProviderError",
    "ConfigurationError",
    "DataNotAvailableError",
    "InvalidInputError",
    "RateLimitError",
    "setup_logging",
    "get_logger",
]
