"""
Collection Reporter Domain Models (``rent_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects for archived collection reports, their
breakdowns, dashboard analytics and per-tenant summaries.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Produced by
``rent_modules.reporting.calculations`` and ``RentCollectionService``.

Invariants enforced
-------------------
* All models are ``frozen=True``; a report is never updated after it is
  archived.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``outstanding = expected - collected`` on every aggregate.
* Rates and percentages carry two decimal places.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from rent_kernel.domain.values import PaymentMethod, PropertyType
from rent_modules.deposits.models import SecurityDeposit
from rent_modules.ledger.models import RentPayment


class ReportType(Enum):
    """Kinds of collection report."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ReportPeriod:
    """Closed date window a report covers."""
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError("report period start_date must not be after end_date")

    def contains(self, value: date) -> bool:
        return self.start_date <= value <= self.end_date


@dataclass(frozen=True)
class CollectionTotals:
    """Expected, collected and outstanding rent with the collection rate."""
    expected: Decimal
    collected: Decimal
    outstanding: Decimal
    collection_rate: Decimal


@dataclass(frozen=True)
class PropertyRentBreakdown:
    """Collection figures for one property (or one apartment of a building)."""
    property_id: UUID
    property_name: str
    property_type: PropertyType
    expected_rent: Decimal
    collected_rent: Decimal
    outstanding_rent: Decimal
    collection_rate: Decimal
    tenant_count: int
    unit_id: UUID | None = None


@dataclass(frozen=True)
class TenantRentBreakdown:
    """Collection figures and lateness for one tenant."""
    tenant_id: UUID
    tenant_name: str
    property_id: UUID
    property_name: str
    expected_rent: Decimal
    collected_rent: Decimal
    outstanding_rent: Decimal
    payment_history: tuple[RentPayment, ...] = ()
    days_past_due: int = 0
    last_payment_date: date | None = None


@dataclass(frozen=True)
class PaymentMethodBreakdown:
    """Paid payments collected through one method."""
    method: PaymentMethod
    count: int
    total_amount: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class RentCollectionReport:
    """Archived collection report for a period."""
    id: UUID
    report_type: ReportType
    period: ReportPeriod
    total_expected_rent: Decimal
    total_collected_rent: Decimal
    total_outstanding_rent: Decimal
    collection_rate: Decimal
    generated_at: datetime
    generated_by: str
    property_breakdown: tuple[PropertyRentBreakdown, ...] = field(default_factory=tuple)
    tenant_breakdown: tuple[TenantRentBreakdown, ...] = field(default_factory=tuple)
    payment_method_breakdown: tuple[PaymentMethodBreakdown, ...] = field(default_factory=tuple)
    version: int = 1


@dataclass(frozen=True)
class RentAnalytics:
    """Dashboard rollup over an optional date window."""
    total_properties: int
    total_tenants: int
    total_expected_rent: Decimal
    total_collected_rent: Decimal
    total_outstanding_rent: Decimal
    collection_rate: Decimal
    average_rent_per_property: Decimal
    overdue_payments_count: int
    upcoming_payments_count: int
    payment_method_stats: tuple[PaymentMethodBreakdown, ...] = ()


@dataclass(frozen=True)
class TenantRentSummary:
    """What one tenant has paid over their tenancy."""
    tenant_id: UUID
    total_rent_paid: Decimal
    average_monthly_rent: Decimal
    tenancy_days: int
    payment_history: tuple[RentPayment, ...] = ()
    security_deposit: SecurityDeposit | None = None
