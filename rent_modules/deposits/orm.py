"""
Deposit Tracker ORM Models (``rent_modules.deposits.orm``).

Responsibility
--------------
SQLAlchemy persistence models for the ``security_deposits`` collection.
Deductions live in a child table ordered by position, so the append-only
tuple on the dataclass round-trips in order.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``rent_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``rent_kernel``.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import JSON, Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rent_kernel.db.base import Base, TrackedBase


# ---------------------------------------------------------------------------
# 1. SecurityDepositModel
# ---------------------------------------------------------------------------


class SecurityDepositModel(TrackedBase):
    """
    ORM model for security deposits.

    Maps to the ``SecurityDeposit`` frozen dataclass.

    Guarantees:
        - status stored as string enum value.
        - deductions cascade with the deposit.
    """

    __tablename__ = "security_deposits"

    __table_args__ = (
        Index("idx_security_deposits_tenant_id", "tenant_id"),
        Index("idx_security_deposits_status", "status"),
    )

    tenant_id: Mapped[UUID] = mapped_column(nullable=False)
    property_id: Mapped[UUID] = mapped_column(nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    paid_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="held")
    refund_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    refund_amount: Mapped[Decimal | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    deductions: Mapped[list["SecurityDepositDeductionModel"]] = relationship(
        back_populates="deposit",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="SecurityDepositDeductionModel.position",
    )

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from rent_modules.deposits.models import DepositStatus, SecurityDeposit

        return SecurityDeposit(
            id=self.id,
            tenant_id=self.tenant_id,
            property_id=self.property_id,
            amount=self.amount,
            paid_date=self.paid_date,
            status=DepositStatus(self.status),
            deductions=tuple(d.to_dto() for d in self.deductions),
            refund_date=self.refund_date,
            refund_amount=self.refund_amount,
            notes=self.notes,
            created_at=self.created_at,
            updated_at=self.updated_at,
            version=self.version,
        )

    @classmethod
    def from_dto(cls, dto) -> "SecurityDepositModel":
        """Create ORM model from frozen dataclass."""
        model = cls(
            id=dto.id,
            tenant_id=dto.tenant_id,
            property_id=dto.property_id,
            created_at=dto.created_at,
            version=dto.version,
        )
        model.update_from_dto(dto)
        return model

    def update_from_dto(self, dto) -> None:
        """Copy mutable fields; new deductions are appended as child rows."""
        self.amount = dto.amount
        self.paid_date = dto.paid_date
        self.status = dto.status.value
        self.refund_date = dto.refund_date
        self.refund_amount = dto.refund_amount
        self.notes = dto.notes
        self.updated_at = dto.updated_at or dto.created_at

        known = {d.id for d in self.deductions}
        for position, deduction in enumerate(dto.deductions):
            if deduction.id not in known:
                self.deductions.append(
                    SecurityDepositDeductionModel.from_dto(deduction, position)
                )

    def __repr__(self) -> str:
        return f"<SecurityDepositModel tenant {self.tenant_id}: {self.amount} [{self.status}]>"


# ---------------------------------------------------------------------------
# 2. SecurityDepositDeductionModel
# ---------------------------------------------------------------------------


class SecurityDepositDeductionModel(Base):
    """
    ORM model for deposit deductions.

    Maps to the ``SecurityDepositDeduction`` frozen dataclass.  Each
    deduction belongs to exactly one SecurityDepositModel.
    """

    __tablename__ = "security_deposit_deductions"

    __table_args__ = (
        Index("idx_security_deposit_deductions_deposit_id", "deposit_id"),
    )

    deposit_id: Mapped[UUID] = mapped_column(
        ForeignKey("security_deposits.id"), nullable=False
    )
    position: Mapped[int] = mapped_column(nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    deduction_date: Mapped[date] = mapped_column(Date, nullable=False)
    documents: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    deposit: Mapped["SecurityDepositModel"] = relationship(
        back_populates="deductions",
    )

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from rent_modules.deposits.models import (
            DeductionCategory,
            SecurityDepositDeduction,
        )

        return SecurityDepositDeduction(
            id=self.id,
            description=self.description,
            amount=self.amount,
            category=DeductionCategory(self.category),
            date=self.deduction_date,
            documents=tuple(self.documents or ()),
        )

    @classmethod
    def from_dto(cls, dto, position: int) -> "SecurityDepositDeductionModel":
        """Create ORM model from frozen dataclass."""
        return cls(
            id=dto.id,
            position=position,
            description=dto.description,
            amount=dto.amount,
            category=dto.category.value,
            deduction_date=dto.date,
            documents=list(dto.documents),
        )
