"""
Tests for Collection Reporter pure calculations.

Validates:
- summarize_collection: expected / collected / outstanding / rate
- build_property_breakdown: grouping by property and unit
- build_tenant_breakdown: worst-case lateness, last payment date
- build_payment_method_breakdown: settled payments only
- rate properties under random payment sets (hypothesis)
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

from hypothesis import given, settings
from hypothesis import strategies as st

from rent_kernel.domain.values import PaymentMethod, PropertyType
from rent_modules.ledger.models import PaymentStatus
from rent_modules.reporting import calculations
from tests.modules.conftest import (
    TEST_APARTMENT_101_ID,
    TEST_APARTMENT_102_ID,
    TEST_BUILDING_ID,
    TEST_FLAT_ID,
    TEST_TENANT_ALICE_ID,
    TEST_TENANT_BOB_ID,
    build_payment,
)

NOW = datetime(2024, 3, 10, 0, 0, tzinfo=UTC)


def _paid(**overrides):
    overrides.setdefault("status", PaymentStatus.PAID)
    overrides.setdefault("paid_date", date(2024, 1, 4))
    return build_payment(**overrides)


def _property_name(property_id, property_type, unit_id):
    return f"{property_type.value}:{unit_id or property_id}"


def _tenant_name(tenant_id):
    return {TEST_TENANT_ALICE_ID: "Alice", TEST_TENANT_BOB_ID: "Bob"}.get(tenant_id)


class TestSummarizeCollection:
    """Report-level totals."""

    def test_mixed_paid_and_pending(self):
        payments = [
            _paid(
                amount=Decimal("12000"),
                actual_amount_paid=Decimal("12000"),
                due_date=date(2024, 1, 5),
                property_id=uuid4(),
            ),
            build_payment(amount=Decimal("8000"), due_date=date(2024, 1, 5), property_id=uuid4()),
        ]
        totals = calculations.summarize_collection(payments)

        assert totals.expected == Decimal("20000")
        assert totals.collected == Decimal("12000")
        assert totals.outstanding == Decimal("8000")
        assert totals.collection_rate == Decimal("60.00")

    def test_empty(self):
        totals = calculations.summarize_collection([])
        assert totals.expected == Decimal("0")
        assert totals.collection_rate == Decimal("0.00")

    def test_collected_uses_settled_amount(self):
        payment = _paid(
            amount=Decimal("10000"),
            late_fee=Decimal("500"),
            actual_amount_paid=Decimal("10500"),
        )
        totals = calculations.summarize_collection([payment])
        assert totals.collected == Decimal("10500")
        assert totals.outstanding == Decimal("-500")
        assert totals.collection_rate == Decimal("105.00")

    def test_partial_counts_as_uncollected(self):
        payment = build_payment(
            status=PaymentStatus.PARTIAL, actual_amount_paid=Decimal("5000"),
        )
        assert calculations.collected_amount(payment) == Decimal("0")


class TestPaymentsDueBetween:
    def test_bounds_inclusive(self):
        inside_start = build_payment(due_date=date(2024, 1, 1))
        inside_end = build_payment(due_date=date(2024, 1, 31))
        outside = build_payment(due_date=date(2024, 2, 1))
        result = calculations.payments_due_between(
            [inside_start, inside_end, outside], date(2024, 1, 1), date(2024, 1, 31),
        )
        assert result == [inside_start, inside_end]

    def test_open_bounds(self):
        early = build_payment(due_date=date(2023, 1, 1))
        late = build_payment(due_date=date(2025, 1, 1))
        assert calculations.payments_due_between([early, late], None, date(2024, 1, 1)) == [early]
        assert calculations.payments_due_between([early, late], date(2024, 1, 1), None) == [late]
        assert calculations.payments_due_between([early, late], None, None) == [early, late]


class TestPropertyBreakdown:
    def test_grouped_by_unit(self):
        payments = [
            build_payment(
                tenant_id=TEST_TENANT_ALICE_ID,
                property_id=TEST_BUILDING_ID,
                property_type=PropertyType.BUILDING,
                unit_id=TEST_APARTMENT_101_ID,
                amount=Decimal("12000"),
            ),
            _paid(
                tenant_id=TEST_TENANT_BOB_ID,
                property_id=TEST_BUILDING_ID,
                property_type=PropertyType.BUILDING,
                unit_id=TEST_APARTMENT_102_ID,
                amount=Decimal("11000"),
            ),
            _paid(property_id=TEST_FLAT_ID, amount=Decimal("15000")),
        ]
        breakdown = calculations.build_property_breakdown(payments, _property_name)

        assert [(b.property_id, b.unit_id) for b in breakdown] == [
            (TEST_BUILDING_ID, TEST_APARTMENT_101_ID),
            (TEST_BUILDING_ID, TEST_APARTMENT_102_ID),
            (TEST_FLAT_ID, None),
        ]
        apt_102 = breakdown[1]
        assert apt_102.property_name == f"building:{TEST_APARTMENT_102_ID}"
        assert apt_102.collected_rent == Decimal("11000")
        assert apt_102.collection_rate == Decimal("100.00")

    def test_tenant_count_is_distinct_tenants(self):
        payments = [
            build_payment(tenant_id=TEST_TENANT_BOB_ID, due_date=date(2024, 1, 5)),
            build_payment(tenant_id=TEST_TENANT_BOB_ID, due_date=date(2024, 2, 5)),
            build_payment(tenant_id=TEST_TENANT_ALICE_ID, due_date=date(2024, 3, 5)),
        ]
        (flat,) = calculations.build_property_breakdown(payments, _property_name)
        assert flat.tenant_count == 2
        assert flat.expected_rent == Decimal("45000")


class TestTenantBreakdown:
    def test_days_past_due_is_max_not_sum(self):
        payments = [
            build_payment(status=PaymentStatus.OVERDUE, due_date=NOW.date() - timedelta(days=10)),
            build_payment(status=PaymentStatus.OVERDUE, due_date=NOW.date() - timedelta(days=25)),
        ]
        (bob,) = calculations.build_tenant_breakdown(
            payments, NOW, _tenant_name, _property_name,
        )
        assert bob.days_past_due == 25
        assert bob.outstanding_rent == Decimal("30000")

    def test_pending_payments_do_not_count_as_late(self):
        payment = build_payment(due_date=date(2024, 1, 5))
        (bob,) = calculations.build_tenant_breakdown([payment], NOW, _tenant_name, _property_name)
        assert bob.days_past_due == 0

    def test_names_and_last_payment(self):
        payments = [
            _paid(paid_date=date(2024, 1, 4), due_date=date(2024, 1, 5)),
            _paid(paid_date=date(2024, 2, 6), due_date=date(2024, 2, 5)),
            build_payment(due_date=date(2024, 3, 5)),
            build_payment(tenant_id=uuid4()),
        ]
        bob, stranger = calculations.build_tenant_breakdown(
            payments, NOW, _tenant_name, _property_name, unknown_tenant_name="Former tenant",
        )
        assert bob.tenant_name == "Bob"
        assert bob.property_name == f"flat:{TEST_FLAT_ID}"
        assert bob.last_payment_date == date(2024, 2, 6)
        assert len(bob.payment_history) == 3
        assert stranger.tenant_name == "Former tenant"
        assert stranger.last_payment_date is None


class TestPaymentMethodBreakdown:
    def test_only_paid_counted(self):
        payments = [
            _paid(payment_method=PaymentMethod.UPI, amount=Decimal("3000")),
            _paid(payment_method=PaymentMethod.UPI, amount=Decimal("3000")),
            _paid(payment_method=PaymentMethod.CASH, amount=Decimal("4000")),
            build_payment(payment_method=PaymentMethod.CHEQUE),
        ]
        breakdown = {
            b.method: b for b in calculations.build_payment_method_breakdown(payments)
        }
        assert set(breakdown) == {PaymentMethod.UPI, PaymentMethod.CASH}
        assert breakdown[PaymentMethod.UPI].count == 2
        assert breakdown[PaymentMethod.UPI].total_amount == Decimal("6000")
        assert breakdown[PaymentMethod.UPI].percentage == Decimal("60.00")
        assert breakdown[PaymentMethod.CASH].percentage == Decimal("40.00")

    def test_nothing_paid(self):
        assert calculations.build_payment_method_breakdown([build_payment()]) == []


# =============================================================================
# Property tests
# =============================================================================


_amounts = st.decimals(min_value=Decimal("1"), max_value=Decimal("100000"), places=2)

_payment_specs = st.lists(
    st.tuples(
        _amounts,
        st.sampled_from(list(PaymentStatus)),
        st.sampled_from(list(PaymentMethod)),
    ),
    max_size=20,
)


def _build(specs):
    payments = []
    for amount, status, method in specs:
        if status is PaymentStatus.PAID:
            payments.append(_paid(amount=amount, payment_method=method))
        else:
            payments.append(build_payment(amount=amount, status=status, payment_method=method))
    return payments


class TestCollectionProperties:
    """Invariants that hold for any payment set."""

    @settings(max_examples=50)
    @given(_payment_specs)
    def test_rate_between_zero_and_hundred(self, specs):
        totals = calculations.summarize_collection(_build(specs))
        # Without fees or discounts nothing can be over-collected
        assert Decimal("0") <= totals.collection_rate <= Decimal("100")
        assert totals.outstanding == totals.expected - totals.collected

    @settings(max_examples=50)
    @given(_payment_specs)
    def test_rate_zero_when_nothing_expected_or_collected(self, specs):
        payments = [p for p in _build(specs) if not p.is_paid]
        assert calculations.summarize_collection(payments).collection_rate == Decimal("0.00")

    @settings(max_examples=50)
    @given(_payment_specs)
    def test_method_percentages_sum_to_hundred(self, specs):
        breakdown = calculations.build_payment_method_breakdown(_build(specs))
        if not breakdown:
            return
        total = sum(b.percentage for b in breakdown)
        # Each share is rounded to 0.01, so the sum drifts by at most half a cent per method
        assert abs(total - Decimal("100")) <= Decimal("0.005") * len(breakdown)
