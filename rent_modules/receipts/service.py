"""
Receipt Generator Service.

Derives a ``RentReceipt`` from a paid ``RentPayment`` plus directory
lookups.  Generation is idempotent per payment: asking again for the same
payment returns the receipt already on file instead of writing a second one.

Usage:
    receipts = RentReceiptService(store, directory, clock)
    receipt = receipts.generate_rent_receipt(payment_id)
"""

from __future__ import annotations

from uuid import UUID

from rent_kernel.domain.calendar import rent_period_ending
from rent_kernel.domain.clock import Clock, SystemClock
from rent_kernel.exceptions import (
    PaymentNotFoundError,
    ReceiptNotAllowedError,
    ReceiptNotFoundError,
    TenantNotFoundError,
)
from rent_kernel.logging_config import get_logger
from rent_kernel.store.record_store import Collections, RecordStore
from rent_kernel.utils.identifiers import generate_receipt_number, new_record_id
from rent_modules.directory.service import PropertyDirectory, describe_property
from rent_modules.ledger.config import LedgerConfig
from rent_modules.ledger.models import PaymentStatus, RentPayment
from rent_modules.receipts.models import RentPeriod, RentReceipt

logger = get_logger("modules.receipts.service")


class RentReceiptService:
    """
    Issues and looks up rent receipts.

    Stateless: every call reads the payment and receipt collections from
    the injected store.
    """

    def __init__(
        self,
        store: RecordStore,
        directory: PropertyDirectory,
        clock: Clock | None = None,
        config: LedgerConfig | None = None,
    ):
        self._store = store
        self._directory = directory
        self._clock = clock or SystemClock()
        self._config = config or LedgerConfig.with_defaults()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_rent_receipts(self) -> list[RentReceipt]:
        return self._store.get_all(Collections.RENT_RECEIPTS)

    def get_rent_receipt_by_id(self, receipt_id: UUID) -> RentReceipt:
        receipt = self._store.find_by_id(Collections.RENT_RECEIPTS, receipt_id)
        if receipt is None:
            raise ReceiptNotFoundError(str(receipt_id))
        return receipt

    def get_rent_receipt_by_payment_id(self, payment_id: UUID) -> RentReceipt | None:
        return next(
            (r for r in self.get_rent_receipts() if r.payment_id == payment_id),
            None,
        )

    # =========================================================================
    # Generation
    # =========================================================================

    def generate_rent_receipt(self, payment_id: UUID) -> RentReceipt:
        """
        Issue the receipt for a paid payment, or return the one on file.

        Raises:
            PaymentNotFoundError: No such payment.
            ReceiptNotAllowedError: Payment is not paid.
            TenantNotFoundError: Directory does not know the payment's tenant.
        """
        payment: RentPayment | None = self._store.find_by_id(
            Collections.RENT_PAYMENTS, payment_id
        )
        if payment is None:
            raise PaymentNotFoundError(str(payment_id))

        if payment.status is not PaymentStatus.PAID or payment.paid_date is None:
            raise ReceiptNotAllowedError(str(payment_id), payment.status.value)

        existing = self.get_rent_receipt_by_payment_id(payment_id)
        if existing is not None:
            logger.info(
                "rent_receipt_already_issued",
                extra={
                    "payment_id": str(payment_id),
                    "receipt_id": str(existing.id),
                },
            )
            return existing

        tenant = self._directory.get_tenant_by_id(payment.tenant_id)
        if tenant is None:
            raise TenantNotFoundError(str(payment.tenant_id))

        display = describe_property(
            self._directory,
            payment.property_id,
            payment.property_type,
            payment.unit_id,
        )
        period_start, period_end = rent_period_ending(payment.due_date)
        now = self._clock.now()

        receipt = RentReceipt(
            id=new_record_id(),
            receipt_number=payment.receipt_number
            or generate_receipt_number(now, self._config.receipt_prefix),
            payment_id=payment.id,
            tenant_id=payment.tenant_id,
            property_id=payment.property_id,
            property_type=payment.property_type,
            unit_id=payment.unit_id,
            tenant_name=tenant.full_name,
            property_address=display.address,
            property_name=display.name,
            rent_period=RentPeriod(start_date=period_start, end_date=period_end),
            amount=payment.amount,
            late_fee=payment.late_fee,
            discount=payment.discount,
            total_amount=payment.collected_amount,
            payment_method=payment.payment_method,
            transaction_id=payment.transaction_id,
            paid_date=payment.paid_date,
            generated_at=now,
            generated_by=self._config.generated_by,
        )
        self._store.save(Collections.RENT_RECEIPTS, receipt)

        logger.info(
            "rent_receipt_generated",
            extra={
                "payment_id": str(payment.id),
                "receipt_id": str(receipt.id),
                "receipt_number": receipt.receipt_number,
                "total_amount": str(receipt.total_amount),
            },
        )
        return receipt

    # =========================================================================
    # Cascade
    # =========================================================================

    def delete_receipts_for_payment(self, payment_id: UUID) -> int:
        """Remove every receipt tied to the payment. Returns how many."""
        doomed = [r for r in self.get_rent_receipts() if r.payment_id == payment_id]
        for receipt in doomed:
            self._store.delete(Collections.RENT_RECEIPTS, receipt.id)
        if doomed:
            logger.info(
                "rent_receipts_deleted",
                extra={"payment_id": str(payment_id), "count": len(doomed)},
            )
        return len(doomed)
