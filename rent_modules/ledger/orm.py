"""
Payment Ledger ORM Models (``rent_modules.ledger.orm``).

Responsibility
--------------
SQLAlchemy persistence model for the ``rent_payments`` collection.  Maps
the frozen ``RentPayment`` dataclass to a table row and back.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``rent_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``rent_kernel``.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rent_kernel.db.base import TrackedBase


class RentPaymentModel(TrackedBase):
    """
    ORM model for rent payments.

    Maps to the ``RentPayment`` frozen dataclass.

    Guarantees:
        - Monetary fields use Decimal (Numeric(38,9) via type_annotation_map).
        - status, payment_method and property_type stored as enum values.
        - receipt_number is the number assigned at creation.
    """

    __tablename__ = "rent_payments"

    __table_args__ = (
        Index("idx_rent_payments_tenant_id", "tenant_id"),
        Index("idx_rent_payments_property_id", "property_id"),
        Index("idx_rent_payments_status", "status"),
        Index("idx_rent_payments_due_date", "due_date"),
    )

    tenant_id: Mapped[UUID] = mapped_column(nullable=False)
    property_id: Mapped[UUID] = mapped_column(nullable=False)
    property_type: Mapped[str] = mapped_column(String(20), nullable=False)
    unit_id: Mapped[UUID | None] = mapped_column(nullable=True)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    late_fee: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    discount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    actual_amount_paid: Mapped[Decimal | None] = mapped_column(nullable=True)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    paid_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    payment_method: Mapped[str] = mapped_column(String(30), nullable=False)
    transaction_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    receipt_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from rent_kernel.domain.values import PaymentMethod, PropertyType
        from rent_modules.ledger.models import PaymentStatus, RentPayment

        return RentPayment(
            id=self.id,
            tenant_id=self.tenant_id,
            property_id=self.property_id,
            property_type=PropertyType(self.property_type),
            unit_id=self.unit_id,
            amount=self.amount,
            late_fee=self.late_fee,
            discount=self.discount,
            actual_amount_paid=self.actual_amount_paid,
            due_date=self.due_date,
            paid_date=self.paid_date,
            status=PaymentStatus(self.status),
            payment_method=PaymentMethod(self.payment_method),
            transaction_id=self.transaction_id,
            notes=self.notes,
            receipt_number=self.receipt_number,
            created_at=self.created_at,
            updated_at=self.updated_at,
            version=self.version,
        )

    @classmethod
    def from_dto(cls, dto) -> "RentPaymentModel":
        """Create ORM model from frozen dataclass."""
        row = cls(id=dto.id, created_at=dto.created_at, version=dto.version)
        row.update_from_dto(dto)
        return row

    def update_from_dto(self, dto) -> None:
        """Copy every mutable field from the dataclass onto this row."""
        self.tenant_id = dto.tenant_id
        self.property_id = dto.property_id
        self.property_type = dto.property_type.value
        self.unit_id = dto.unit_id
        self.amount = dto.amount
        self.late_fee = dto.late_fee
        self.discount = dto.discount
        self.actual_amount_paid = dto.actual_amount_paid
        self.due_date = dto.due_date
        self.paid_date = dto.paid_date
        self.status = dto.status.value
        self.payment_method = dto.payment_method.value
        self.transaction_id = dto.transaction_id
        self.notes = dto.notes
        self.receipt_number = dto.receipt_number
        self.updated_at = dto.updated_at or dto.created_at

    def __repr__(self) -> str:
        return f"<RentPaymentModel {self.id}: {self.amount} due {self.due_date} [{self.status}]>"
