"""
Collection Reporter ORM Models (``rent_modules.reporting.orm``).

Responsibility
--------------
SQLAlchemy persistence model for the ``rent_reports`` archive.  Scalars
get their own columns; the three breakdowns are stored as JSON snapshots
because an archived report must not change when payments later do.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``rent_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``rent_kernel``.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import JSON, Date, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from rent_kernel.db.base import Base
from rent_kernel.utils.serialization import from_primitive, to_primitive


class RentCollectionReportModel(Base):
    """
    ORM model for archived collection reports.

    Maps to the ``RentCollectionReport`` frozen dataclass.

    Guarantees:
        - Monetary fields use Decimal (Numeric(38,9) via type_annotation_map).
        - Breakdowns round-trip through ``rent_kernel.utils.serialization``.
        - Rows are append-only; only version changes on update.
    """

    __tablename__ = "rent_reports"

    __table_args__ = (
        Index("idx_rent_reports_generated_at", "generated_at"),
        Index("idx_rent_reports_period", "period_start", "period_end"),
    )

    report_type: Mapped[str] = mapped_column(String(20), nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    total_expected_rent: Mapped[Decimal] = mapped_column(nullable=False)
    total_collected_rent: Mapped[Decimal] = mapped_column(nullable=False)
    total_outstanding_rent: Mapped[Decimal] = mapped_column(nullable=False)
    collection_rate: Mapped[Decimal] = mapped_column(nullable=False)
    property_breakdown: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tenant_breakdown: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    payment_method_breakdown: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    generated_at: Mapped[datetime] = mapped_column(nullable=False)
    generated_by: Mapped[str] = mapped_column(String(100), nullable=False)
    version: Mapped[int] = mapped_column(nullable=False, default=1)

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from rent_modules.reporting.models import (
            PaymentMethodBreakdown,
            PropertyRentBreakdown,
            RentCollectionReport,
            ReportPeriod,
            ReportType,
            TenantRentBreakdown,
        )

        return RentCollectionReport(
            id=self.id,
            report_type=ReportType(self.report_type),
            period=ReportPeriod(start_date=self.period_start, end_date=self.period_end),
            total_expected_rent=self.total_expected_rent,
            total_collected_rent=self.total_collected_rent,
            total_outstanding_rent=self.total_outstanding_rent,
            collection_rate=self.collection_rate,
            property_breakdown=from_primitive(
                tuple[PropertyRentBreakdown, ...], self.property_breakdown,
            ),
            tenant_breakdown=from_primitive(
                tuple[TenantRentBreakdown, ...], self.tenant_breakdown,
            ),
            payment_method_breakdown=from_primitive(
                tuple[PaymentMethodBreakdown, ...], self.payment_method_breakdown,
            ),
            generated_at=self.generated_at,
            generated_by=self.generated_by,
            version=self.version,
        )

    @classmethod
    def from_dto(cls, dto) -> "RentCollectionReportModel":
        """Create ORM model from frozen dataclass."""
        return cls(
            id=dto.id,
            report_type=dto.report_type.value,
            period_start=dto.period.start_date,
            period_end=dto.period.end_date,
            total_expected_rent=dto.total_expected_rent,
            total_collected_rent=dto.total_collected_rent,
            total_outstanding_rent=dto.total_outstanding_rent,
            collection_rate=dto.collection_rate,
            property_breakdown=to_primitive(dto.property_breakdown),
            tenant_breakdown=to_primitive(dto.tenant_breakdown),
            payment_method_breakdown=to_primitive(dto.payment_method_breakdown),
            generated_at=dto.generated_at,
            generated_by=dto.generated_by,
            version=dto.version,
        )

    def update_from_dto(self, dto) -> None:
        # Archived reports are never rewritten
        pass

    def __repr__(self) -> str:
        return (
            f"<RentCollectionReportModel {self.report_type} "
            f"{self.period_start}..{self.period_end}>"
        )
