"""
Deposit Tracker Domain Models (``rent_modules.deposits.models``).

Responsibility
--------------
Frozen dataclass value objects for security deposits held against a
tenancy and the deductions taken from them.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
``SecurityDepositService``.

Invariants enforced
-------------------
* All models are ``frozen=True``; deductions are an append-only tuple.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``amount > 0`` on deposits and deductions.
* ``refund_date`` and ``refund_amount`` are set only on refunded deposits.

Failure modes
-------------
* Construction with violated invariants raises ``ValueError``.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

ZERO = Decimal("0")


class DepositStatus(Enum):
    """Security deposit lifecycle states."""
    HELD = "held"
    REFUNDED = "refunded"
    FORFEITED = "forfeited"


class DeductionCategory(Enum):
    """Why money was kept back from a deposit."""
    DAMAGE = "damage"
    CLEANING = "cleaning"
    UNPAID_RENT = "unpaid_rent"
    OTHER = "other"


@dataclass(frozen=True)
class SecurityDepositDeduction:
    """An amount kept back from a deposit."""
    id: UUID
    description: str
    amount: Decimal
    category: DeductionCategory
    date: date
    documents: tuple[str, ...] = ()

    def __post_init__(self):
        if self.amount <= ZERO:
            raise ValueError("Deduction amount must be positive")
        if not self.description:
            raise ValueError("Deduction description cannot be empty")


@dataclass(frozen=True)
class SecurityDeposit:
    """A deposit paid at move-in and settled at move-out."""
    id: UUID
    tenant_id: UUID
    property_id: UUID
    amount: Decimal
    paid_date: date
    status: DepositStatus = DepositStatus.HELD
    deductions: tuple[SecurityDepositDeduction, ...] = field(default_factory=tuple)
    refund_date: date | None = None
    refund_amount: Decimal | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 1

    def __post_init__(self):
        if self.amount <= ZERO:
            raise ValueError("Security deposit amount must be positive")
        if self.status is not DepositStatus.REFUNDED and (
            self.refund_date is not None or self.refund_amount is not None
        ):
            raise ValueError("Only refunded deposits carry refund details")

    @property
    def total_deductions(self) -> Decimal:
        return sum((d.amount for d in self.deductions), ZERO)

    @property
    def balance(self) -> Decimal:
        """Deposit left after deductions."""
        return self.amount - self.total_deductions

    @property
    def is_held(self) -> bool:
        return self.status is DepositStatus.HELD
