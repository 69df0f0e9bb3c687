"""
Payment Ledger Domain Models (``rent_modules.ledger.models``).

Responsibility
--------------
The ``RentPayment`` value object: one rent obligation and, once settled,
its settlement details.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
``RentLedgerService`` and returned to callers.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``amount > 0``; ``late_fee >= 0``; ``discount >= 0``;
  ``actual_amount_paid >= 0`` when present.
* ``paid_date`` is present if and only if ``status`` is ``paid``.

Failure modes
-------------
* Construction with violated invariants raises ``InvalidPaymentError``.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from rent_kernel.domain.values import PaymentMethod, PropertyType
from rent_kernel.exceptions import InvalidPaymentError
from rent_kernel.logging_config import get_logger

logger = get_logger("modules.ledger.models")

ZERO = Decimal("0")

_MONEY_FIELDS = ("amount", "late_fee", "discount", "actual_amount_paid")


class PaymentStatus(Enum):
    """Rent payment lifecycle states."""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    PARTIAL = "partial"


@dataclass(frozen=True)
class RentPayment:
    """A rent obligation and its settlement."""
    id: UUID
    tenant_id: UUID
    property_id: UUID
    property_type: PropertyType
    amount: Decimal
    due_date: date
    payment_method: PaymentMethod
    status: PaymentStatus = PaymentStatus.PENDING
    unit_id: UUID | None = None  # apartment within a building
    late_fee: Decimal = ZERO
    discount: Decimal = ZERO
    actual_amount_paid: Decimal | None = None
    paid_date: date | None = None
    transaction_id: str | None = None
    notes: str | None = None
    receipt_number: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 1

    def __post_init__(self):
        if self.tenant_id is None or self.property_id is None:
            raise InvalidPaymentError(
                "Rent payment must have tenant_id, property_id, amount, and due_date",
                field="tenant_id" if self.tenant_id is None else "property_id",
            )
        if self.amount is None or self.due_date is None:
            raise InvalidPaymentError(
                "Rent payment must have tenant_id, property_id, amount, and due_date",
                field="amount" if self.amount is None else "due_date",
            )

        for name in _MONEY_FIELDS:
            value = getattr(self, name)
            if isinstance(value, Decimal) and not value.is_finite():
                raise InvalidPaymentError(f"{name} must be a finite amount", field=name)

        if self.amount <= ZERO:
            logger.warning(
                "rent_payment_invalid_amount",
                extra={"payment_id": str(self.id), "amount": str(self.amount)},
            )
            raise InvalidPaymentError("Rent payment amount must be positive", field="amount")

        if self.late_fee < ZERO:
            raise InvalidPaymentError("late_fee cannot be negative", field="late_fee")

        if self.discount < ZERO:
            raise InvalidPaymentError("discount cannot be negative", field="discount")

        if self.actual_amount_paid is not None and self.actual_amount_paid < ZERO:
            raise InvalidPaymentError(
                "actual_amount_paid cannot be negative", field="actual_amount_paid"
            )

        if self.status is PaymentStatus.PAID and self.paid_date is None:
            raise InvalidPaymentError("A paid payment must have paid_date", field="paid_date")

        if self.status is not PaymentStatus.PAID and self.paid_date is not None:
            raise InvalidPaymentError(
                f"paid_date is only allowed on paid payments (status={self.status.value})",
                field="paid_date",
            )

    @property
    def amount_due(self) -> Decimal:
        """Rent plus late fee less discount, floored at zero."""
        return max(ZERO, self.amount + self.late_fee - self.discount)

    @property
    def collected_amount(self) -> Decimal:
        """What counts as collected once paid: the settled amount, else the rent."""
        if self.actual_amount_paid is not None:
            return self.actual_amount_paid
        return self.amount

    @property
    def is_paid(self) -> bool:
        return self.status is PaymentStatus.PAID
