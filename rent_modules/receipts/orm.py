"""
Receipt ORM Models (``rent_modules.receipts.orm``).

Responsibility
--------------
SQLAlchemy persistence model for the ``rent_receipts`` collection.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``rent_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``rent_kernel``.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from rent_kernel.db.base import Base


class RentReceiptModel(Base):
    """
    ORM model for rent receipts.

    Maps to the ``RentReceipt`` frozen dataclass.  The rent period is
    flattened into two date columns.

    Guarantees:
        - At most one receipt per payment (uq_rent_receipts_payment_id).
        - Rows are written once; only version changes on update.
    """

    __tablename__ = "rent_receipts"

    __table_args__ = (
        UniqueConstraint("payment_id", name="uq_rent_receipts_payment_id"),
        Index("idx_rent_receipts_tenant_id", "tenant_id"),
    )

    receipt_number: Mapped[str] = mapped_column(String(50), nullable=False)
    payment_id: Mapped[UUID] = mapped_column(nullable=False)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False)
    property_id: Mapped[UUID] = mapped_column(nullable=False)
    property_type: Mapped[str] = mapped_column(String(20), nullable=False)
    unit_id: Mapped[UUID | None] = mapped_column(nullable=True)
    tenant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    property_address: Mapped[str] = mapped_column(String(500), nullable=False)
    property_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    late_fee: Mapped[Decimal] = mapped_column(nullable=False)
    discount: Mapped[Decimal] = mapped_column(nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(nullable=False)
    payment_method: Mapped[str] = mapped_column(String(30), nullable=False)
    transaction_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    paid_date: Mapped[date] = mapped_column(Date, nullable=False)
    generated_at: Mapped[datetime] = mapped_column(nullable=False)
    generated_by: Mapped[str] = mapped_column(String(100), nullable=False)
    version: Mapped[int] = mapped_column(nullable=False, default=1)

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from rent_kernel.domain.values import PaymentMethod, PropertyType
        from rent_modules.receipts.models import RentPeriod, RentReceipt

        return RentReceipt(
            id=self.id,
            receipt_number=self.receipt_number,
            payment_id=self.payment_id,
            tenant_id=self.tenant_id,
            property_id=self.property_id,
            property_type=PropertyType(self.property_type),
            unit_id=self.unit_id,
            tenant_name=self.tenant_name,
            property_address=self.property_address,
            property_name=self.property_name,
            rent_period=RentPeriod(start_date=self.period_start, end_date=self.period_end),
            amount=self.amount,
            late_fee=self.late_fee,
            discount=self.discount,
            total_amount=self.total_amount,
            payment_method=PaymentMethod(self.payment_method),
            transaction_id=self.transaction_id,
            paid_date=self.paid_date,
            generated_at=self.generated_at,
            generated_by=self.generated_by,
            version=self.version,
        )

    @classmethod
    def from_dto(cls, dto) -> "RentReceiptModel":
        """Create ORM model from frozen dataclass."""
        return cls(
            id=dto.id,
            receipt_number=dto.receipt_number,
            payment_id=dto.payment_id,
            tenant_id=dto.tenant_id,
            property_id=dto.property_id,
            property_type=dto.property_type.value,
            unit_id=dto.unit_id,
            tenant_name=dto.tenant_name,
            property_address=dto.property_address,
            property_name=dto.property_name,
            period_start=dto.rent_period.start_date,
            period_end=dto.rent_period.end_date,
            amount=dto.amount,
            late_fee=dto.late_fee,
            discount=dto.discount,
            total_amount=dto.total_amount,
            payment_method=dto.payment_method.value,
            transaction_id=dto.transaction_id,
            paid_date=dto.paid_date,
            generated_at=dto.generated_at,
            generated_by=dto.generated_by,
            version=dto.version,
        )

    def update_from_dto(self, dto) -> None:
        # Receipts are immutable once issued
        pass

    def __repr__(self) -> str:
        return f"<RentReceiptModel {self.receipt_number}: payment {self.payment_id}>"
