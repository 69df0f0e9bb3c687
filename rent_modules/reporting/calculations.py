"""
Collection Reporter Pure Calculation Functions.

Aggregation math for collection reports and analytics:
- Expected / collected / outstanding totals and collection rate
- Per-property (and per-apartment) breakdown
- Per-tenant breakdown with worst-case lateness
- Per-payment-method breakdown over settled payments

No I/O.  Name lookups are passed in as callables so the caller decides
where display names come from.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable, Sequence
from uuid import UUID

from rent_kernel.db.types import REPORT_DECIMAL_PLACES, ZERO, percentage
from rent_kernel.domain import calendar
from rent_kernel.domain.values import PaymentMethod, PropertyType
from rent_modules.ledger.models import PaymentStatus, RentPayment
from rent_modules.reporting.models import (
    CollectionTotals,
    PaymentMethodBreakdown,
    PropertyRentBreakdown,
    TenantRentBreakdown,
)

PropertyNameResolver = Callable[[UUID, PropertyType, UUID | None], str]
TenantNameResolver = Callable[[UUID], str | None]


def collected_amount(payment: RentPayment) -> Decimal:
    """Amount a payment contributes to collections: zero unless paid."""
    if payment.status is not PaymentStatus.PAID:
        return ZERO
    return payment.collected_amount


def collection_rate(
    collected: Decimal,
    expected: Decimal,
    places: int = REPORT_DECIMAL_PLACES,
) -> Decimal:
    """``collected / expected * 100``, rounded half-up; 0 when nothing was expected."""
    return percentage(collected, expected, places)


def days_past_due(payment: RentPayment, now: datetime) -> int:
    """Whole days since the due date, rounded up and never negative."""
    return max(0, calendar.days_past_due(payment.due_date, now))


def payments_due_between(
    payments: Iterable[RentPayment],
    start_date: date | None,
    end_date: date | None,
) -> list[RentPayment]:
    """Payments due inside the closed window; a missing bound is unbounded."""
    return [
        p for p in payments
        if (start_date is None or p.due_date >= start_date)
        and (end_date is None or p.due_date <= end_date)
    ]


def summarize_collection(
    payments: Sequence[RentPayment],
    places: int = REPORT_DECIMAL_PLACES,
) -> CollectionTotals:
    """Report-level scalars over a payment slice."""
    expected = sum((p.amount for p in payments), ZERO)
    collected = sum((collected_amount(p) for p in payments), ZERO)
    return CollectionTotals(
        expected=expected,
        collected=collected,
        outstanding=expected - collected,
        collection_rate=collection_rate(collected, expected, places),
    )


def build_property_breakdown(
    payments: Sequence[RentPayment],
    resolve_property_name: PropertyNameResolver,
    places: int = REPORT_DECIMAL_PLACES,
) -> list[PropertyRentBreakdown]:
    """
    Group payments by ``(property_id, unit_id)``.

    Groups appear in the order their first payment appears.
    ``tenant_count`` is the number of distinct tenants in the group.
    """
    groups: dict[tuple[UUID, UUID | None], list[RentPayment]] = {}
    for payment in payments:
        groups.setdefault((payment.property_id, payment.unit_id), []).append(payment)

    breakdown = []
    for (property_id, unit_id), members in groups.items():
        first = members[0]
        totals = summarize_collection(members, places)
        breakdown.append(PropertyRentBreakdown(
            property_id=property_id,
            unit_id=unit_id,
            property_name=resolve_property_name(property_id, first.property_type, unit_id),
            property_type=first.property_type,
            expected_rent=totals.expected,
            collected_rent=totals.collected,
            outstanding_rent=totals.outstanding,
            collection_rate=totals.collection_rate,
            tenant_count=len({p.tenant_id for p in members}),
        ))
    return breakdown


def build_tenant_breakdown(
    payments: Sequence[RentPayment],
    now: datetime,
    resolve_tenant_name: TenantNameResolver,
    resolve_property_name: PropertyNameResolver,
    unknown_tenant_name: str = "Unknown",
) -> list[TenantRentBreakdown]:
    """
    Group payments by tenant.

    ``days_past_due`` is the largest lateness among the tenant's overdue
    payments, not the sum.  The property shown is the one on the tenant's
    first payment in the slice.
    """
    groups: dict[UUID, list[RentPayment]] = {}
    for payment in payments:
        groups.setdefault(payment.tenant_id, []).append(payment)

    breakdown = []
    for tenant_id, history in groups.items():
        first = history[0]
        expected = sum((p.amount for p in history), ZERO)
        collected = sum((collected_amount(p) for p in history), ZERO)
        paid_dates = [p.paid_date for p in history if p.is_paid and p.paid_date]
        lateness = [
            days_past_due(p, now) for p in history
            if p.status is PaymentStatus.OVERDUE
        ]
        breakdown.append(TenantRentBreakdown(
            tenant_id=tenant_id,
            tenant_name=resolve_tenant_name(tenant_id) or unknown_tenant_name,
            property_id=first.property_id,
            property_name=resolve_property_name(
                first.property_id, first.property_type, first.unit_id,
            ),
            expected_rent=expected,
            collected_rent=collected,
            outstanding_rent=expected - collected,
            payment_history=tuple(history),
            days_past_due=max(lateness, default=0),
            last_payment_date=max(paid_dates, default=None),
        ))
    return breakdown


def build_payment_method_breakdown(
    payments: Sequence[RentPayment],
    places: int = REPORT_DECIMAL_PLACES,
) -> list[PaymentMethodBreakdown]:
    """
    Count and total settled payments per method.

    Each method's percentage is its share of everything collected; all
    percentages are 0 when nothing has been paid.
    """
    counts: dict[PaymentMethod, int] = {}
    totals: dict[PaymentMethod, Decimal] = {}
    for payment in payments:
        if payment.status is not PaymentStatus.PAID:
            continue
        method = payment.payment_method
        counts[method] = counts.get(method, 0) + 1
        totals[method] = totals.get(method, ZERO) + payment.collected_amount

    grand_total = sum(totals.values(), ZERO)
    return [
        PaymentMethodBreakdown(
            method=method,
            count=counts[method],
            total_amount=totals[method],
            percentage=percentage(totals[method], grand_total, places),
        )
        for method in counts
    ]
