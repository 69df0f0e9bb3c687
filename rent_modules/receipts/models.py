"""
Receipt Models (``rent_modules.receipts.models``).

A ``RentReceipt`` is the immutable artifact of a settled rent payment.  It
snapshots the tenant name and property address as they were when it was
generated, so later directory edits never rewrite an issued receipt.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from rent_kernel.domain.values import PaymentMethod, PropertyType


@dataclass(frozen=True)
class RentPeriod:
    """The month of occupancy a payment covers."""
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError("rent period start_date must not be after end_date")


@dataclass(frozen=True)
class RentReceipt:
    """Receipt issued once for a paid rent payment."""
    id: UUID
    receipt_number: str
    payment_id: UUID
    tenant_id: UUID
    property_id: UUID
    property_type: PropertyType
    tenant_name: str
    property_address: str
    rent_period: RentPeriod
    amount: Decimal
    total_amount: Decimal
    payment_method: PaymentMethod
    paid_date: date
    generated_at: datetime
    generated_by: str
    unit_id: UUID | None = None
    property_name: str = ""
    late_fee: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    transaction_id: str | None = None
    version: int = 1
