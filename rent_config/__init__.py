"""
rent_config -- single public entrypoint for ledger configuration.

Responsibility:
    Provides the way to obtain settings at runtime through
    ``get_active_config()``.  The settings file is YAML; its path comes from
    the argument, else the ``RENT_LEDGER_CONFIG`` environment variable, else
    built-in defaults are used.

Architecture position:
    Configuration -- sits above ``rent_kernel`` and ``rent_modules``.
    The kernel MUST NEVER import from ``rent_config``; ``bridges`` translates
    settings into module configs.

Failure modes:
    - ``FileNotFoundError`` -- the named settings file does not exist.
    - ``ValueError`` -- unknown keys or invalid values.
"""

from __future__ import annotations

import os
from pathlib import Path

from rent_config.loader import load_settings
from rent_config.schema import LedgerSection, RentLedgerSettings, ReportingSection
from rent_kernel.logging_config import get_logger

logger = get_logger("config")

CONFIG_ENV_VAR = "RENT_LEDGER_CONFIG"


def get_active_config(path: Path | str | None = None) -> RentLedgerSettings:
    """
    The settings in effect.

    Args:
        path: Settings file.  Defaults to ``$RENT_LEDGER_CONFIG``; with
            neither, built-in defaults are returned.
    """
    source = path or os.environ.get(CONFIG_ENV_VAR)
    if not source:
        settings = RentLedgerSettings()
        logger.info("rent_config_defaults_used")
        return settings

    settings = load_settings(source)
    logger.info(
        "rent_config_loaded",
        extra={
            "path": str(source),
            "log_level": settings.log_level,
            "dialect": settings.database_url.split(":", 1)[0],
        },
    )
    return settings


__all__ = [
    "CONFIG_ENV_VAR",
    "LedgerSection",
    "RentLedgerSettings",
    "ReportingSection",
    "get_active_config",
    "load_settings",
]
