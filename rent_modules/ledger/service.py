"""
Payment Ledger Service - Owns the rent payment lifecycle.

Thin orchestration layer that:
1. Validates and stores ``RentPayment`` records in the injected RecordStore
2. Checks status changes against ``RENT_PAYMENT_WORKFLOW``
3. Calls ``RentReceiptService`` when a payment settles
4. Runs the overdue sweep and monthly obligation generation

Every call re-reads what it needs from the store; the service holds no
cache.  Writes go through ``RecordStore.update`` which rejects stale
versions, so two writers racing on one payment fail loudly instead of
losing an update.

Usage:
    ledger = RentLedgerService(store, directory, clock=clock)
    payment = ledger.record_rent_payment(
        tenant_id=tenant.id, property_id=flat.id,
        property_type=PropertyType.FLAT,
        amount=Decimal("15000"), due_date=date(2024, 3, 5),
    )
    ledger.mark_as_paid(payment.id, date(2024, 3, 3), PaymentMethod.UPI)
"""

from __future__ import annotations

import dataclasses
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from rent_kernel.db.types import ZERO, to_money
from rent_kernel.domain.calendar import add_days, day_in_month, is_same_month
from rent_kernel.domain.clock import Clock, SystemClock
from rent_kernel.domain.values import PaymentMethod, PropertyType
from rent_kernel.exceptions import (
    InvalidPaymentError,
    InvalidStatusTransitionError,
    PaymentNotFoundError,
    ValidationError,
)
from rent_kernel.logging_config import LogContext, get_logger
from rent_kernel.store.record_store import Collections, RecordStore
from rent_kernel.utils.identifiers import generate_receipt_number, new_record_id
from rent_modules.directory.service import PropertyDirectory, find_tenant_property
from rent_modules.ledger.config import LedgerConfig
from rent_modules.ledger.models import PaymentStatus, RentPayment
from rent_modules.ledger.workflows import RENT_PAYMENT_WORKFLOW
from rent_modules.receipts.service import RentReceiptService

logger = get_logger("modules.ledger.service")

# Fields callers may change through update_rent_payment()
UPDATABLE_FIELDS = frozenset({
    "tenant_id",
    "property_id",
    "property_type",
    "unit_id",
    "amount",
    "due_date",
    "payment_method",
    "status",
    "late_fee",
    "discount",
    "actual_amount_paid",
    "paid_date",
    "transaction_id",
    "notes",
})

# Only these may still change once a payment is paid; the rest are on its receipt
SETTLED_EDITABLE_FIELDS = frozenset({"status", "notes"})

_MONEY_FIELDS = ("amount", "late_fee", "discount", "actual_amount_paid")

_ENUM_FIELDS = {
    "status": PaymentStatus,
    "payment_method": PaymentMethod,
    "property_type": PropertyType,
}


def _coerce_fields(values: dict[str, Any]) -> dict[str, Any]:
    """Normalize money to Decimal and enum values to members."""
    coerced = dict(values)
    for name in _MONEY_FIELDS:
        if coerced.get(name) is not None:
            try:
                coerced[name] = to_money(coerced[name])
            except (TypeError, ArithmeticError) as exc:
                raise InvalidPaymentError(str(exc), field=name) from exc
    for name, enum_cls in _ENUM_FIELDS.items():
        if coerced.get(name) is not None:
            try:
                coerced[name] = enum_cls(coerced[name])
            except ValueError as exc:
                raise InvalidPaymentError(
                    f"Invalid {name}: {coerced[name]!r}", field=name,
                ) from exc
    return coerced


class RentLedgerService:
    """
    Records, settles and sweeps rent payments.

    Collaborators:
    - RecordStore: holds the ``rent_payments`` collection
    - PropertyDirectory: tenants and their property assignment
    - RentReceiptService: issues receipts on settlement and cascades deletes
    """

    def __init__(
        self,
        store: RecordStore,
        directory: PropertyDirectory,
        receipts: RentReceiptService | None = None,
        clock: Clock | None = None,
        config: LedgerConfig | None = None,
    ):
        self._store = store
        self._directory = directory
        self._clock = clock or SystemClock()
        self._config = config or LedgerConfig.with_defaults()
        self._receipts = receipts or RentReceiptService(
            store, directory, clock=self._clock, config=self._config,
        )

    @property
    def receipts(self) -> RentReceiptService:
        return self._receipts

    # =========================================================================
    # Queries
    # =========================================================================

    def get_rent_payments(self) -> list[RentPayment]:
        return self._store.get_all(Collections.RENT_PAYMENTS)

    def get_rent_payment_by_id(self, payment_id: UUID) -> RentPayment:
        """
        Raises:
            PaymentNotFoundError: No payment with that id.
        """
        payment = self._store.find_by_id(Collections.RENT_PAYMENTS, payment_id)
        if payment is None:
            raise PaymentNotFoundError(str(payment_id))
        return payment

    def get_rent_payments_by_tenant(self, tenant_id: UUID) -> list[RentPayment]:
        return [p for p in self.get_rent_payments() if p.tenant_id == tenant_id]

    def get_rent_payments_by_property(
        self,
        property_id: UUID,
        unit_id: UUID | None = None,
    ) -> list[RentPayment]:
        """Payments for a property; narrowed to one unit when ``unit_id`` is given."""
        return [
            p for p in self.get_rent_payments()
            if p.property_id == property_id
            and (unit_id is None or p.unit_id == unit_id)
        ]

    def get_overdue_payments(self) -> list[RentPayment]:
        return [
            p for p in self.get_rent_payments()
            if p.status is PaymentStatus.OVERDUE
        ]

    def get_upcoming_payments(self, days_ahead: int | None = None) -> list[RentPayment]:
        """Pending payments due between today and ``days_ahead`` days from now, inclusive."""
        if days_ahead is None:
            days_ahead = self._config.upcoming_days_default
        if days_ahead < 0:
            raise ValidationError(f"days_ahead cannot be negative, got {days_ahead}")
        today = self._clock.today()
        horizon = add_days(today, days_ahead)
        return [
            p for p in self.get_rent_payments()
            if p.status is PaymentStatus.PENDING
            and today <= p.due_date <= horizon
        ]

    # =========================================================================
    # Recording
    # =========================================================================

    def record_rent_payment(
        self,
        tenant_id: UUID,
        property_id: UUID,
        property_type: PropertyType,
        amount: Decimal,
        due_date: date,
        payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER,
        status: PaymentStatus = PaymentStatus.PENDING,
        unit_id: UUID | None = None,
        late_fee: Decimal = ZERO,
        discount: Decimal = ZERO,
        actual_amount_paid: Decimal | None = None,
        paid_date: date | None = None,
        transaction_id: str | None = None,
        notes: str | None = None,
    ) -> RentPayment:
        """
        Validate and store a new rent payment.

        A payment recorded directly as paid gets ``actual_amount_paid``
        derived when absent and has its receipt issued immediately.

        Raises:
            InvalidPaymentError: Required field missing or amounts invalid.
        """
        fields = _coerce_fields({
            "tenant_id": tenant_id,
            "property_id": property_id,
            "property_type": property_type,
            "unit_id": unit_id,
            "amount": amount,
            "due_date": due_date,
            "payment_method": payment_method,
            "status": status,
            "late_fee": late_fee,
            "discount": discount,
            "actual_amount_paid": actual_amount_paid,
            "paid_date": paid_date,
            "transaction_id": transaction_id,
            "notes": notes,
        })
        now = self._clock.now()
        payment = RentPayment(
            id=new_record_id(),
            receipt_number=generate_receipt_number(now, self._config.receipt_prefix),
            created_at=now,
            updated_at=now,
            **fields,
        )
        if payment.is_paid and payment.actual_amount_paid is None:
            payment = dataclasses.replace(payment, actual_amount_paid=payment.amount_due)

        with LogContext.bind(tenant_id=payment.tenant_id, payment_id=payment.id):
            self._store.save(Collections.RENT_PAYMENTS, payment)
            logger.info(
                "rent_payment_recorded",
                extra={
                    "payment_id": str(payment.id),
                    "tenant_id": str(payment.tenant_id),
                    "amount": str(payment.amount),
                    "due_date": payment.due_date.isoformat(),
                    "status": payment.status.value,
                },
            )
            if payment.is_paid:
                self._receipts.generate_rent_receipt(payment.id)

        return payment

    # =========================================================================
    # Updates
    # =========================================================================

    def update_rent_payment(self, payment_id: UUID, **updates: Any) -> RentPayment:
        """
        Apply field changes to a payment.

        A change of status must be a transition of ``RENT_PAYMENT_WORKFLOW``.
        When the payment becomes paid, ``actual_amount_paid`` is derived if
        absent and the receipt is issued (once).

        Raises:
            PaymentNotFoundError: No payment with that id.
            InvalidPaymentError: Unknown field, merged record invalid, or a
                field on the receipt of a paid payment changed.
            InvalidStatusTransitionError: Status change not allowed.
            OptimisticLockError: Payment changed since it was read.
        """
        unknown = sorted(set(updates) - UPDATABLE_FIELDS)
        if unknown:
            raise InvalidPaymentError(
                f"Cannot update field(s): {', '.join(unknown)}", field=unknown[0],
            )

        current = self.get_rent_payment_by_id(payment_id)
        changes = _coerce_fields(updates)

        new_status = changes.get("status", current.status)
        if new_status is not current.status:
            if not RENT_PAYMENT_WORKFLOW.allows(current.status.value, new_status.value):
                logger.warning(
                    "rent_payment_transition_rejected",
                    extra={
                        "payment_id": str(payment_id),
                        "from_status": current.status.value,
                        "to_status": new_status.value,
                    },
                )
                raise InvalidStatusTransitionError(
                    str(payment_id), current.status.value, new_status.value,
                )
        if current.is_paid:
            fixed = sorted(
                name for name, value in changes.items()
                if name not in SETTLED_EDITABLE_FIELDS and value != getattr(current, name)
            )
            if fixed:
                raise InvalidPaymentError(
                    f"Cannot change settled payment field(s): {', '.join(fixed)}",
                    field=fixed[0],
                )
        becomes_paid = new_status is PaymentStatus.PAID and not current.is_paid

        merged = dataclasses.replace(current, **changes, updated_at=self._clock.now())
        if merged.is_paid and merged.actual_amount_paid is None:
            merged = dataclasses.replace(merged, actual_amount_paid=merged.amount_due)

        with LogContext.bind(tenant_id=merged.tenant_id, payment_id=merged.id):
            stored = self._store.update(Collections.RENT_PAYMENTS, merged)
            logger.info(
                "rent_payment_updated",
                extra={
                    "payment_id": str(payment_id),
                    "fields": sorted(changes),
                    "status": stored.status.value,
                    "version": stored.version,
                },
            )
            if becomes_paid:
                self._receipts.generate_rent_receipt(stored.id)

        return stored

    def mark_as_paid(
        self,
        payment_id: UUID,
        paid_date: date,
        payment_method: PaymentMethod,
        transaction_id: str | None = None,
        actual_amount_paid: Decimal | None = None,
    ) -> RentPayment:
        """
        Settle a pending, overdue or partial payment.

        Without ``actual_amount_paid`` the settled amount is recomputed as
        ``max(0, amount + late_fee - discount)``.

        Raises:
            PaymentNotFoundError: No payment with that id.
            InvalidPaymentError: Payment is already paid.
        """
        current = self.get_rent_payment_by_id(payment_id)
        if current.is_paid:
            logger.warning(
                "rent_payment_already_settled",
                extra={"payment_id": str(payment_id), "paid_date": current.paid_date.isoformat()},
            )
            raise InvalidPaymentError("Payment is already settled", field="status")

        updates: dict[str, Any] = {
            "status": PaymentStatus.PAID,
            "paid_date": paid_date,
            "payment_method": payment_method,
            "actual_amount_paid": actual_amount_paid,
        }
        if transaction_id is not None:
            updates["transaction_id"] = transaction_id

        logger.info(
            "rent_payment_settlement_started",
            extra={"payment_id": str(payment_id), "paid_date": paid_date.isoformat()},
        )
        return self.update_rent_payment(payment_id, **updates)

    def mark_as_overdue(self, payment_id: UUID) -> RentPayment:
        return self.update_rent_payment(payment_id, status=PaymentStatus.OVERDUE)

    def delete_rent_payment(self, payment_id: UUID) -> None:
        """
        Delete a payment and its receipt. Archived reports are untouched.

        Raises:
            PaymentNotFoundError: No payment with that id.
        """
        payment = self.get_rent_payment_by_id(payment_id)
        removed = self._receipts.delete_receipts_for_payment(payment.id)
        self._store.delete(Collections.RENT_PAYMENTS, payment.id)
        logger.info(
            "rent_payment_deleted",
            extra={
                "payment_id": str(payment.id),
                "status": payment.status.value,
                "receipts_removed": removed,
            },
        )

    # =========================================================================
    # Batch operations
    # =========================================================================

    def update_overdue_payments(self) -> list[RentPayment]:
        """
        Sweep: every pending payment due before today becomes overdue.

        The first failing write aborts the sweep; payments already moved
        stay overdue.
        """
        today = self._clock.today()
        candidates = [
            p for p in self.get_rent_payments()
            if p.status is PaymentStatus.PENDING and p.due_date < today
        ]
        logger.info(
            "overdue_sweep_started",
            extra={"as_of": today.isoformat(), "candidates": len(candidates)},
        )

        updated = [
            self.update_rent_payment(p.id, status=PaymentStatus.OVERDUE)
            for p in candidates
        ]

        logger.info(
            "overdue_sweep_completed",
            extra={"as_of": today.isoformat(), "updated": len(updated)},
        )
        return updated

    def generate_monthly_rent_payments(self, month: int, year: int) -> list[RentPayment]:
        """
        Create one pending payment per active, housed tenant for a month.

        Tenants that already owe a payment due in that month are skipped,
        so re-running for the same month creates nothing.  The due day comes
        from the tenant's rental agreement, clamped to the month's length.

        Args:
            month: Calendar month, 1-12.
            year: Calendar year.

        Returns:
            Only the payments created by this call.
        """
        if not 1 <= month <= 12:
            raise ValidationError(f"month must be between 1 and 12, got {month}")

        already_billed = {
            p.tenant_id for p in self.get_rent_payments()
            if is_same_month(p.due_date, year, month)
        }
        logger.info(
            "monthly_generation_started",
            extra={"month": month, "year": year, "already_billed": len(already_billed)},
        )

        created: list[RentPayment] = []
        for tenant in self._directory.get_tenants():
            if not tenant.is_active or tenant.id in already_billed:
                continue
            assignment = find_tenant_property(self._directory, tenant.id)
            if assignment is None:
                continue

            agreement = tenant.rental_agreement
            payment = self.record_rent_payment(
                tenant_id=tenant.id,
                property_id=assignment.property_id,
                property_type=assignment.property_type,
                unit_id=assignment.unit_id,
                amount=agreement.rent_amount,
                due_date=day_in_month(year, month, agreement.rent_due_day),
                payment_method=agreement.payment_method,
            )
            already_billed.add(tenant.id)
            created.append(payment)

        logger.info(
            "monthly_generation_completed",
            extra={"month": month, "year": year, "created": len(created)},
        )
        return created
