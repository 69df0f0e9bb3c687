"""
Collection Reporter Module.

Period collection reports with per-property, per-tenant and
per-payment-method breakdowns, plus dashboard analytics.  The
aggregation math lives in ``calculations``; orchestration in ``service``.
"""

from rent_modules.reporting.config import ReportingConfig
from rent_modules.reporting.models import (
    CollectionTotals,
    PaymentMethodBreakdown,
    PropertyRentBreakdown,
    RentAnalytics,
    RentCollectionReport,
    ReportPeriod,
    ReportType,
    TenantRentBreakdown,
    TenantRentSummary,
)

__all__ = [
    "CollectionTotals",
    "PaymentMethodBreakdown",
    "PropertyRentBreakdown",
    "RentAnalytics",
    "RentCollectionReport",
    "ReportPeriod",
    "ReportType",
    "ReportingConfig",
    "TenantRentBreakdown",
    "TenantRentSummary",
]
