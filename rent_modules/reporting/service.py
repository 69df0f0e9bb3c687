"""
Collection Reporter Service - Archived collection reports and analytics.

Thin glue layer that:
1. Selects the payment slice for a date window from the RecordStore
2. Calls ``rent_modules.reporting.calculations`` for every aggregate
3. Resolves display names through the PropertyDirectory
4. Appends the assembled report to the ``rent_reports`` archive

Reports are never recomputed in place: asking again for the same window
archives a second, independent report built from the then-current
payments.

Usage:
    reporter = RentCollectionService(store, directory, clock=clock)
    report = reporter.generate_rent_collection_report(
        date(2024, 1, 1), date(2024, 1, 31), ReportType.MONTHLY,
    )
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from rent_kernel.db.types import ZERO, round_money
from rent_kernel.domain import calendar
from rent_kernel.domain.clock import Clock, SystemClock
from rent_kernel.domain.values import PropertyType
from rent_kernel.exceptions import (
    ReportNotFoundError,
    TenantNotFoundError,
    ValidationError,
)
from rent_kernel.logging_config import get_logger
from rent_kernel.store.record_store import Collections, RecordStore
from rent_kernel.utils.identifiers import new_record_id
from rent_modules.deposits.service import SecurityDepositService
from rent_modules.directory.service import PropertyDirectory, describe_property
from rent_modules.ledger.models import PaymentStatus, RentPayment
from rent_modules.reporting import calculations
from rent_modules.reporting.config import ReportingConfig
from rent_modules.reporting.models import (
    RentAnalytics,
    RentCollectionReport,
    ReportPeriod,
    ReportType,
    TenantRentSummary,
)

logger = get_logger("modules.reporting.service")


class RentCollectionService:
    """
    Builds collection reports, dashboard analytics and tenant summaries.

    Stateless: every call reads the current payment set from the store.
    """

    def __init__(
        self,
        store: RecordStore,
        directory: PropertyDirectory,
        deposits: SecurityDepositService | None = None,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
    ):
        self._store = store
        self._directory = directory
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()
        self._deposits = deposits or SecurityDepositService(
            store, directory, clock=self._clock,
        )

    # =========================================================================
    # Name resolution
    # =========================================================================

    def _property_name(
        self,
        property_id: UUID,
        property_type: PropertyType,
        unit_id: UUID | None,
    ) -> str:
        return describe_property(self._directory, property_id, property_type, unit_id).name

    def _tenant_name(self, tenant_id: UUID) -> str | None:
        tenant = self._directory.get_tenant_by_id(tenant_id)
        return tenant.full_name if tenant else None

    def _payments(self) -> list[RentPayment]:
        return self._store.get_all(Collections.RENT_PAYMENTS)

    # =========================================================================
    # Reports
    # =========================================================================

    def generate_rent_collection_report(
        self,
        start_date: date,
        end_date: date,
        report_type: ReportType = ReportType.CUSTOM,
    ) -> RentCollectionReport:
        """
        Aggregate payments due in ``[start_date, end_date]`` and archive the report.

        Raises:
            ValidationError: start_date is after end_date.
        """
        if start_date > end_date:
            raise ValidationError(
                f"Report start {start_date.isoformat()} is after end {end_date.isoformat()}"
            )
        report_type = ReportType(report_type)
        places = self._config.rate_places
        now = self._clock.now()

        payments = calculations.payments_due_between(self._payments(), start_date, end_date)
        logger.info(
            "rent_report_generation_started",
            extra={
                "report_type": report_type.value,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "payment_count": len(payments),
            },
        )

        totals = calculations.summarize_collection(payments, places)
        report = RentCollectionReport(
            id=new_record_id(),
            report_type=report_type,
            period=ReportPeriod(start_date=start_date, end_date=end_date),
            total_expected_rent=totals.expected,
            total_collected_rent=totals.collected,
            total_outstanding_rent=totals.outstanding,
            collection_rate=totals.collection_rate,
            property_breakdown=tuple(calculations.build_property_breakdown(
                payments, self._property_name, places,
            )),
            tenant_breakdown=tuple(calculations.build_tenant_breakdown(
                payments,
                now,
                self._tenant_name,
                self._property_name,
                self._config.unknown_tenant_name,
            )),
            payment_method_breakdown=tuple(calculations.build_payment_method_breakdown(
                payments, places,
            )),
            generated_at=now,
            generated_by=self._config.generated_by,
        )
        self._store.save(Collections.RENT_REPORTS, report)

        logger.info(
            "rent_report_archived",
            extra={
                "report_id": str(report.id),
                "report_type": report_type.value,
                "total_expected_rent": str(report.total_expected_rent),
                "total_collected_rent": str(report.total_collected_rent),
                "collection_rate": str(report.collection_rate),
            },
        )
        return report

    def generate_periodic_report(
        self,
        report_type: ReportType,
        anchor: date | None = None,
    ) -> RentCollectionReport:
        """
        Report on the month, quarter or year containing ``anchor`` (default today).

        Raises:
            ValidationError: report_type is ``custom``.
        """
        report_type = ReportType(report_type)
        if report_type is ReportType.CUSTOM:
            raise ValidationError("Custom reports need explicit start and end dates")
        start_date, end_date = calendar.report_window(
            report_type.value, anchor or self._clock.today(),
        )
        return self.generate_rent_collection_report(start_date, end_date, report_type)

    def get_rent_collection_reports(self) -> list[RentCollectionReport]:
        return self._store.get_all(Collections.RENT_REPORTS)

    def get_rent_collection_report_by_id(self, report_id: UUID) -> RentCollectionReport:
        report = self._store.find_by_id(Collections.RENT_REPORTS, report_id)
        if report is None:
            raise ReportNotFoundError(str(report_id))
        return report

    # =========================================================================
    # Analytics
    # =========================================================================

    def get_rent_analytics(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> RentAnalytics:
        """
        Dashboard rollup over payments due in the window.

        Each bound applies on its own; with neither, every payment counts.
        The upcoming count always looks at the whole ledger.
        """
        places = self._config.rate_places
        all_payments = self._payments()
        payments = calculations.payments_due_between(all_payments, start_date, end_date)
        totals = calculations.summarize_collection(payments, places)

        property_count = len({p.property_id for p in payments})
        average = (
            round_money(totals.expected / property_count, places)
            if property_count else round_money(ZERO, places)
        )

        today = self._clock.today()
        horizon = calendar.add_days(today, self._config.upcoming_days)
        upcoming = sum(
            1 for p in all_payments
            if p.status is PaymentStatus.PENDING and today <= p.due_date <= horizon
        )

        return RentAnalytics(
            total_properties=property_count,
            total_tenants=len({p.tenant_id for p in payments}),
            total_expected_rent=totals.expected,
            total_collected_rent=totals.collected,
            total_outstanding_rent=totals.outstanding,
            collection_rate=totals.collection_rate,
            average_rent_per_property=average,
            overdue_payments_count=sum(
                1 for p in payments if p.status is PaymentStatus.OVERDUE
            ),
            upcoming_payments_count=upcoming,
            payment_method_stats=tuple(
                calculations.build_payment_method_breakdown(payments, places)
            ),
        )

    def get_tenant_rent_summary(self, tenant_id: UUID) -> TenantRentSummary:
        """
        What a tenant has paid, their latest deposit and how long they have stayed.

        Average monthly rent is rent paid over the number of payments on
        record, or the agreed rent when there are none.

        Raises:
            TenantNotFoundError: Directory does not know the tenant.
        """
        tenant = self._directory.get_tenant_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(str(tenant_id))

        history = [p for p in self._payments() if p.tenant_id == tenant_id]
        total_paid = sum((p.amount for p in history if p.is_paid), ZERO)
        if history:
            average = round_money(total_paid / len(history), self._config.rate_places)
        else:
            average = tenant.rental_agreement.rent_amount

        if tenant.move_out_date is not None:
            tenancy_days = (tenant.move_out_date - tenant.move_in_date).days
        else:
            tenancy_days = calendar.days_past_due(tenant.move_in_date, self._clock.now())

        return TenantRentSummary(
            tenant_id=tenant_id,
            total_rent_paid=total_paid,
            average_monthly_rent=average,
            tenancy_days=max(0, tenancy_days),
            payment_history=tuple(history),
            security_deposit=self._deposits.get_security_deposit_by_tenant_id(tenant_id),
        )
