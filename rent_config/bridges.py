"""
Config -> Module Bridges.

Functions that turn ``RentLedgerSettings`` into the inputs the kernel and
modules take.  They live here because the kernel must never import
``rent_config``.

Usage:
    settings = get_active_config()
    apply_logging(settings)
    ledger = RentLedgerService(store, directory, config=build_ledger_config(settings))
"""

from __future__ import annotations

import logging

from rent_config.schema import RentLedgerSettings
from rent_kernel.logging_config import configure_logging
from rent_modules.ledger.config import LedgerConfig
from rent_modules.reporting.config import ReportingConfig


def build_ledger_config(settings: RentLedgerSettings) -> LedgerConfig:
    section = settings.ledger
    return LedgerConfig(
        upcoming_days_default=section.upcoming_days_default,
        receipt_prefix=section.receipt_prefix,
        generated_by=section.generated_by,
    )


def build_reporting_config(settings: RentLedgerSettings) -> ReportingConfig:
    section = settings.reporting
    return ReportingConfig(
        generated_by=section.generated_by,
        unknown_tenant_name=section.unknown_tenant_name,
        rate_places=section.rate_places,
        upcoming_days=section.upcoming_days,
    )


def apply_logging(settings: RentLedgerSettings) -> None:
    """Configure structured logging at the configured level."""
    configure_logging(level=logging.getLevelNamesMapping()[settings.log_level])
