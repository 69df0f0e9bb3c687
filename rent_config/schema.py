"""
Configuration Schema (``rent_config.schema``).

Responsibility
--------------
Frozen dataclasses describing the YAML configuration file: where the
record store lives, how loud logging is, and the ledger and reporting
options.

Invariants enforced
-------------------
* Every schema object is ``frozen=True``.
* ``log_level`` is a standard ``logging`` level name.
"""

from __future__ import annotations

from dataclasses import dataclass, field

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LedgerSection:
    """``ledger:`` block."""
    upcoming_days_default: int = 7
    receipt_prefix: str = "RCP"
    generated_by: str = "System"


@dataclass(frozen=True)
class ReportingSection:
    """``reporting:`` block."""
    generated_by: str = "System"
    unknown_tenant_name: str = "Unknown"
    rate_places: int = 2
    upcoming_days: int = 7


@dataclass(frozen=True)
class RentLedgerSettings:
    """Top-level settings for one ledger deployment."""
    database_url: str = "sqlite:///:memory:"
    log_level: str = "INFO"
    ledger: LedgerSection = field(default_factory=LedgerSection)
    reporting: ReportingSection = field(default_factory=ReportingSection)

    def __post_init__(self):
        if not self.database_url:
            raise ValueError("database_url cannot be empty")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )
