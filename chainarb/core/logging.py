"""
Logging configuration for ChainArb.

`config/logging.yaml` wins when present. Otherwise a single stderr handler
is installed, formatted for the deployment named by CHAINARB_ENV:
- local: human-readable lines
- anything else: one JSON object per line for log collectors
"""

import logging
import logging.config
import sys
from pathlib import Path
from typing import Optional

import yaml

from chainarb.core.config import Settings, find_project_root, get_settings

LOCAL_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)

# Held at WARNING under the fallback handler
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> None:
    """
    Configure logging for the CLI.

    Args:
        config_path: Path to logging.yaml. Auto-detected if not provided.
        log_level: Overrides settings.log_level (e.g. DEBUG for --verbose).
        settings: Application settings. Uses global if not provided.
    """
    settings = settings or get_settings()
    level = (log_level or settings.log_level).upper()

    if config_path is None:
        root = find_project_root()
        if root is not None:
            config_path = str(root / "config" / "logging.yaml")

    if config_path and Path(config_path).exists():
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        for handler in config.get("handlers", {}).values():
            if "filename" in handler:
                Path(handler["filename"]).parent.mkdir(parents=True, exist_ok=True)

        logging.config.dictConfig(config)
    else:
        logging.basicConfig(
            level=getattr(logging, level),
            format=basic_format(settings),
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=[logging.StreamHandler(sys.stderr)],
        )
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("chainarb").setLevel(getattr(logging, level))


def basic_format(settings: Settings) -> str:
    """Line format for the fallback handler."""
    return LOCAL_FORMAT if settings.is_local else JSON_FORMAT


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the `chainarb.` namespace."""
    if not name.startswith("chainarb"):
        name = f"chainarb.{name}"
    return logging.getLogger(name)


class LoggerMixin:
    """Mixin class to add logging capability to any class."""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
