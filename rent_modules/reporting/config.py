"""
Collection Reporter Configuration Schema.

Names stamped on reports and the rounding applied to rates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

from rent_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")


@dataclass
class ReportingConfig:
    """Configuration schema for collection reports and analytics."""

    # Recorded as generated_by on archived reports
    generated_by: str = "System"

    # Tenant name used when the directory has no record of the tenant
    unknown_tenant_name: str = "Unknown"

    # Decimal places for collection rates, percentages and averages
    rate_places: int = 2

    # Window used for upcoming_payments_count in analytics
    upcoming_days: int = 7

    def __post_init__(self):
        if not self.generated_by:
            raise ValueError("generated_by cannot be empty")
        if self.rate_places < 0:
            raise ValueError("rate_places cannot be negative")
        if self.upcoming_days < 0:
            raise ValueError("upcoming_days cannot be negative")

        logger.debug(
            "reporting_config_initialized",
            extra={
                "generated_by": self.generated_by,
                "rate_places": self.rate_places,
            },
        )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        return cls()
