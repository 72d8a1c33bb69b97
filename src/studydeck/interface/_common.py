import logging
from typing import Any

from studydeck.application.config import AppConfig, resolve_config

VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve config with CLI overrides (None values ignored) and apply verbosity."""
    config = resolve_config(overrides)
    level = VERBOSITY_LEVELS.get(config.verbose, logging.DEBUG)
    logging.getLogger("studydeck").setLevel(level)
    return config
