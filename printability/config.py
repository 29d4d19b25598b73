"""
Configuration loading and validator setup.
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml

from printability.validation.settings import (
    DEFAULT_MAX_PAGES_FOR_AUTOMATED_PRINT,
    DEFAULT_NEGATIVE_BLEED_MM,
    DEFAULT_POSITIVE_BLEED_MM,
    DEFAULT_RELEASE_INTERVAL,
    Bleed,
    ReaderConfig,
    ReadStrategy,
    ValidationSettings,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration value cannot be used."""
    pass


def load_config(config_path: Optional[str] = None) -> dict:
    """
    Load configuration from YAML file.

    Looks for config in order:
    1. Explicit path if provided
    2. CONFIG_FILE environment variable
    3. ./config/local.yaml
    4. ./config/default.yaml
    """
    search_paths = []

    if config_path:
        search_paths.append(Path(config_path))

    if env_path := os.environ.get("CONFIG_FILE"):
        search_paths.append(Path(env_path))

    # Default paths relative to project root
    project_root = Path(__file__).parent.parent
    search_paths.extend([
        project_root / "config" / "local.yaml",
        project_root / "config" / "default.yaml",
    ])

    for path in search_paths:
        if path.exists():
            logger.info(f"Loading config from {path}")
            with open(path) as f:
                return yaml.safe_load(f) or {}

    logger.warning("No config file found, using defaults")
    return {}


def parse_strategy(value: Optional[str]) -> ReadStrategy:
    """Map a config/query string to a ReadStrategy (None means in-memory)."""
    if value is None:
        return ReadStrategy.IN_MEMORY
    try:
        return ReadStrategy(str(value).lower())
    except ValueError:
        choices = ", ".join(s.value for s in ReadStrategy)
        raise ConfigError(f"Unknown read strategy '{value}'. Expected one of: {choices}")


def get_validation_settings(config: dict) -> ValidationSettings:
    """
    Build validation settings from the 'validation' section.

    Config format:
        validation:
          check_left_margin: true
          check_fonts: true
          check_page_count: true
          check_pdf_version: true
          max_page_count: 14
          bleed:
            positive_mm: 0
            negative_mm: 10
    """
    validation = config.get("validation") or {}
    bleed_conf = validation.get("bleed") or {}

    max_page_count = validation.get("max_page_count", DEFAULT_MAX_PAGES_FOR_AUTOMATED_PRINT)
    if not isinstance(max_page_count, int) or max_page_count < 1:
        raise ConfigError(f"Invalid max_page_count: {max_page_count}. Must be a positive integer.")

    try:
        bleed = Bleed(
            positive_mm=int(bleed_conf.get("positive_mm", DEFAULT_POSITIVE_BLEED_MM)),
            negative_mm=int(bleed_conf.get("negative_mm", DEFAULT_NEGATIVE_BLEED_MM)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid bleed: {e}") from e

    return ValidationSettings(
        check_left_margin=bool(validation.get("check_left_margin", True)),
        check_fonts=bool(validation.get("check_fonts", True)),
        check_page_count=bool(validation.get("check_page_count", True)),
        check_pdf_version=bool(validation.get("check_pdf_version", True)),
        max_page_count=max_page_count,
        bleed=bleed,
    )


def get_reader_config(config: dict) -> tuple[ReadStrategy, ReaderConfig]:
    """
    Extract PDF reading configuration.

    Config format:
        reader:
          strategy: in_memory   # or incremental
          strict: false
          release_interval: 5
    """
    reader = config.get("reader") or {}
    strategy = parse_strategy(reader.get("strategy"))

    try:
        reader_config = ReaderConfig(
            strict=bool(reader.get("strict", False)),
            release_interval=int(reader.get("release_interval", DEFAULT_RELEASE_INTERVAL)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid reader config: {e}") from e

    return strategy, reader_config


def get_server_config(config: dict) -> dict:
    """Extract server configuration."""
    server = config.get("server") or {}
    return {
        "host": server.get("host", "0.0.0.0"),
        "port": server.get("port", 5001),
        "debug": server.get("debug", False),
        "cors_origins": server.get("cors_origins", None),
    }
