"""
Payment Ledger Configuration Schema.

Defaults for receipt numbering, upcoming-payment windows and the name
stamped on generated receipts.
"""

from dataclasses import dataclass
from typing import Self

from rent_kernel.logging_config import get_logger

logger = get_logger("modules.ledger.config")


@dataclass
class LedgerConfig:
    """Configuration schema for the payment ledger and receipt generator."""

    # Window used by get_upcoming_payments() when no explicit value is given
    upcoming_days_default: int = 7

    # RCP-YYYYMMDD-NNNNNN
    receipt_prefix: str = "RCP"

    # Recorded as generated_by on receipts
    generated_by: str = "System"

    def __post_init__(self):
        if self.upcoming_days_default < 0:
            raise ValueError("upcoming_days_default cannot be negative")
        if not (self.receipt_prefix.isalpha() and self.receipt_prefix.isupper()):
            raise ValueError("receipt_prefix must be upper-case letters")
        if not self.generated_by:
            raise ValueError("generated_by cannot be empty")

        logger.debug(
            "ledger_config_initialized",
            extra={
                "upcoming_days_default": self.upcoming_days_default,
                "receipt_prefix": self.receipt_prefix,
            },
        )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        return cls()
