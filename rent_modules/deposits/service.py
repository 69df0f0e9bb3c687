"""
Deposit Tracker Service - Security deposits and tenancy move-in/move-out.

Records the deposit a tenant pays at move-in, appends deductions, and
settles it by refund or forfeiture.  Move-in and move-out orchestration
flips the tenant's active flag and the unit's occupancy in the directory.

A deposit leaves ``held`` exactly once: refunding or forfeiting a deposit
that is already refunded or forfeited raises ``DepositNotHeldError``.

Usage:
    deposits = SecurityDepositService(store, directory, clock)
    deposits.process_tenant_move_in(tenant.id, flat.id, PropertyType.FLAT)
    deposits.add_security_deposit_deduction(
        tenant.id, "Broken window", Decimal("1500"), DeductionCategory.DAMAGE,
    )
    deposits.refund_security_deposit(tenant.id, Decimal("8500"))
"""

from __future__ import annotations

import dataclasses
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Sequence
from uuid import UUID

from rent_kernel.db.types import ZERO, to_money
from rent_kernel.domain.clock import Clock, SystemClock
from rent_kernel.domain.values import PropertyType
from rent_kernel.exceptions import (
    DepositNotFoundError,
    DepositNotHeldError,
    InvalidDeductionError,
    RecordNotFoundError,
    TenantNotFoundError,
    ValidationError,
)
from rent_kernel.logging_config import LogContext, get_logger
from rent_kernel.store.record_store import Collections, RecordStore
from rent_kernel.utils.identifiers import new_record_id
from rent_modules.deposits.models import (
    DeductionCategory,
    DepositStatus,
    SecurityDeposit,
    SecurityDepositDeduction,
)
from rent_modules.deposits.workflows import SECURITY_DEPOSIT_WORKFLOW
from rent_modules.directory.models import Tenant
from rent_modules.directory.service import PropertyDirectory

logger = get_logger("modules.deposits.service")


class SecurityDepositService:
    """
    Tracks security deposits and orchestrates tenancy changes.

    Collaborators:
    - RecordStore: holds the ``security_deposits`` collection
    - PropertyDirectory: tenant active flag and unit occupancy
    """

    def __init__(
        self,
        store: RecordStore,
        directory: PropertyDirectory,
        clock: Clock | None = None,
    ):
        self._store = store
        self._directory = directory
        self._clock = clock or SystemClock()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_security_deposits(self) -> list[SecurityDeposit]:
        return self._store.get_all(Collections.SECURITY_DEPOSITS)

    def get_security_deposit_by_tenant_id(self, tenant_id: UUID) -> SecurityDeposit | None:
        """The tenant's most recently created deposit, or None."""
        latest: SecurityDeposit | None = None
        for deposit in self.get_security_deposits():
            if deposit.tenant_id != tenant_id:
                continue
            if latest is None or _created(deposit) >= _created(latest):
                latest = deposit
        return latest

    def _require_deposit(self, tenant_id: UUID) -> SecurityDeposit:
        deposit = self.get_security_deposit_by_tenant_id(tenant_id)
        if deposit is None:
            raise DepositNotFoundError(str(tenant_id))
        return deposit

    # =========================================================================
    # Recording
    # =========================================================================

    def record_security_deposit(
        self,
        tenant_id: UUID,
        property_id: UUID,
        amount: Decimal,
        paid_date: date | None = None,
        notes: str | None = None,
    ) -> SecurityDeposit:
        """
        Record a deposit as ``held`` with no deductions.

        Raises:
            InvalidDeductionError: Amount is not positive.
        """
        amount = self._money(tenant_id, amount)
        if amount <= ZERO:
            raise InvalidDeductionError(str(tenant_id), "deposit amount must be positive")

        now = self._clock.now()
        deposit = SecurityDeposit(
            id=new_record_id(),
            tenant_id=tenant_id,
            property_id=property_id,
            amount=amount,
            paid_date=paid_date or now.date(),
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        self._store.save(Collections.SECURITY_DEPOSITS, deposit)

        logger.info(
            "security_deposit_recorded",
            extra={
                "deposit_id": str(deposit.id),
                "tenant_id": str(tenant_id),
                "amount": str(amount),
            },
        )
        return deposit

    def add_security_deposit_deduction(
        self,
        tenant_id: UUID,
        description: str,
        amount: Decimal,
        category: DeductionCategory = DeductionCategory.OTHER,
        deduction_date: date | None = None,
        documents: Sequence[str] = (),
    ) -> SecurityDeposit:
        """
        Append a deduction to the tenant's deposit.

        Raises:
            DepositNotFoundError: Tenant has no deposit.
            DepositNotHeldError: Deposit already refunded or forfeited.
            InvalidDeductionError: Amount not positive or description empty.
        """
        deposit = self._require_deposit(tenant_id)
        if not deposit.is_held:
            raise DepositNotHeldError(str(tenant_id), deposit.status.value, "deduct from")

        amount = self._money(tenant_id, amount)
        if amount <= ZERO:
            raise InvalidDeductionError(str(tenant_id), "deduction amount must be positive")
        if not description:
            raise InvalidDeductionError(str(tenant_id), "deduction needs a description")

        now = self._clock.now()
        deduction = SecurityDepositDeduction(
            id=new_record_id(),
            description=description,
            amount=amount,
            category=DeductionCategory(category),
            date=deduction_date or now.date(),
            documents=tuple(documents),
        )
        updated = self._store.update(
            Collections.SECURITY_DEPOSITS,
            dataclasses.replace(
                deposit,
                deductions=deposit.deductions + (deduction,),
                updated_at=now,
            ),
        )

        logger.info(
            "security_deposit_deduction_added",
            extra={
                "deposit_id": str(deposit.id),
                "tenant_id": str(tenant_id),
                "amount": str(amount),
                "category": deduction.category.value,
                "total_deductions": str(updated.total_deductions),
            },
        )
        return updated

    # =========================================================================
    # Settlement
    # =========================================================================

    def refund_security_deposit(
        self,
        tenant_id: UUID,
        refund_amount: Decimal,
        notes: str | None = None,
    ) -> SecurityDeposit:
        """
        Refund the tenant's held deposit.

        Raises:
            DepositNotFoundError: Tenant has no deposit.
            DepositNotHeldError: Deposit already refunded or forfeited.
            InvalidDeductionError: Refund is negative or exceeds the balance.
        """
        deposit = self._require_deposit(tenant_id)
        self._check_transition(deposit, DepositStatus.REFUNDED, "refund")

        refund_amount = self._money(tenant_id, refund_amount)
        if refund_amount < ZERO:
            raise InvalidDeductionError(str(tenant_id), "refund amount cannot be negative")
        if refund_amount > deposit.balance:
            raise InvalidDeductionError(
                str(tenant_id),
                f"refund {refund_amount} exceeds remaining balance {deposit.balance}",
            )

        now = self._clock.now()
        updated = self._store.update(
            Collections.SECURITY_DEPOSITS,
            dataclasses.replace(
                deposit,
                status=DepositStatus.REFUNDED,
                refund_date=now.date(),
                refund_amount=refund_amount,
                notes=notes if notes is not None else deposit.notes,
                updated_at=now,
            ),
        )

        logger.info(
            "security_deposit_refunded",
            extra={
                "deposit_id": str(deposit.id),
                "tenant_id": str(tenant_id),
                "refund_amount": str(refund_amount),
                "total_deductions": str(deposit.total_deductions),
            },
        )
        return updated

    def forfeit_security_deposit(
        self,
        tenant_id: UUID,
        notes: str | None = None,
    ) -> SecurityDeposit:
        """
        Keep the whole held deposit.

        Raises:
            DepositNotFoundError: Tenant has no deposit.
            DepositNotHeldError: Deposit already refunded or forfeited.
        """
        deposit = self._require_deposit(tenant_id)
        self._check_transition(deposit, DepositStatus.FORFEITED, "forfeit")

        updated = self._store.update(
            Collections.SECURITY_DEPOSITS,
            dataclasses.replace(
                deposit,
                status=DepositStatus.FORFEITED,
                notes=notes if notes is not None else deposit.notes,
                updated_at=self._clock.now(),
            ),
        )
        logger.info(
            "security_deposit_forfeited",
            extra={"deposit_id": str(deposit.id), "tenant_id": str(tenant_id)},
        )
        return updated

    # =========================================================================
    # Tenancy orchestration
    # =========================================================================

    def process_tenant_move_in(
        self,
        tenant_id: UUID,
        property_id: UUID,
        property_type: PropertyType,
        unit_id: UUID | None = None,
    ) -> SecurityDeposit | None:
        """
        Activate the tenant, occupy the unit and record the agreed deposit.

        Returns:
            The recorded deposit, or None when the agreement has no deposit.

        Raises:
            TenantNotFoundError: Directory does not know the tenant.
            ValidationError: A building move-in without ``unit_id``.
            RecordNotFoundError: The building, apartment, flat or land is unknown.
        """
        tenant = self._require_tenant(tenant_id)
        self._require_property(property_id, property_type, unit_id)
        today = self._clock.today()

        with LogContext.bind(tenant_id=tenant_id):
            logger.info(
                "tenant_move_in_started",
                extra={
                    "tenant_id": str(tenant_id),
                    "property_id": str(property_id),
                    "property_type": PropertyType(property_type).value,
                },
            )
            self._directory.update_tenant(
                tenant_id, is_active=True, move_in_date=today, move_out_date=None,
            )
            self._set_occupancy(property_id, property_type, unit_id, tenant_id)

            deposit = None
            agreed = tenant.rental_agreement.security_deposit
            if agreed > ZERO:
                deposit = self.record_security_deposit(
                    tenant_id=tenant_id,
                    property_id=property_id,
                    amount=agreed,
                    paid_date=today,
                )

            logger.info(
                "tenant_move_in_completed",
                extra={
                    "tenant_id": str(tenant_id),
                    "deposit_id": str(deposit.id) if deposit else None,
                },
            )
        return deposit

    def process_tenant_move_out(
        self,
        tenant_id: UUID,
        property_id: UUID,
        property_type: PropertyType,
        unit_id: UUID | None = None,
        move_out_date: date | None = None,
    ) -> Tenant:
        """
        Deactivate the tenant and free the unit.

        The deposit is left ``held``; settle it with refund or forfeit.

        Raises:
            TenantNotFoundError: Directory does not know the tenant.
            ValidationError: A building move-out without ``unit_id``.
            RecordNotFoundError: The building, apartment, flat or land is unknown.
        """
        self._require_tenant(tenant_id)
        self._require_property(property_id, property_type, unit_id)
        out_date = move_out_date or self._clock.today()

        with LogContext.bind(tenant_id=tenant_id):
            tenant = self._directory.update_tenant(
                tenant_id, is_active=False, move_out_date=out_date,
            )
            self._set_occupancy(property_id, property_type, unit_id, None)
            logger.info(
                "tenant_move_out_completed",
                extra={
                    "tenant_id": str(tenant_id),
                    "property_id": str(property_id),
                    "move_out_date": out_date.isoformat(),
                },
            )
        return tenant

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_tenant(self, tenant_id: UUID) -> Tenant:
        tenant = self._directory.get_tenant_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(str(tenant_id))
        return tenant

    def _require_property(
        self,
        property_id: UUID,
        property_type: PropertyType,
        unit_id: UUID | None,
    ) -> None:
        """Check the unit exists before any directory write."""
        property_type = PropertyType(property_type)

        if property_type is PropertyType.BUILDING:
            if unit_id is None:
                raise ValidationError("unit_id is required for building properties")
            building = self._directory.get_building_by_id(property_id)
            if building is None:
                raise RecordNotFoundError("buildings", str(property_id))
            if building.find_apartment(unit_id) is None:
                raise RecordNotFoundError("apartments", str(unit_id))
        elif property_type is PropertyType.FLAT:
            if self._directory.get_flat_by_id(property_id) is None:
                raise RecordNotFoundError("flats", str(property_id))
        elif self._directory.get_land_by_id(property_id) is None:
            raise RecordNotFoundError("lands", str(property_id))

    def _set_occupancy(
        self,
        property_id: UUID,
        property_type: PropertyType,
        unit_id: UUID | None,
        tenant_id: UUID | None,
    ) -> None:
        """Point the unit at ``tenant_id``, or mark it vacant when None."""
        occupied = tenant_id is not None
        property_type = PropertyType(property_type)

        if property_type is PropertyType.BUILDING:
            self._directory.update_apartment(
                unit_id, is_occupied=occupied, current_tenant_id=tenant_id,
            )
        elif property_type is PropertyType.FLAT:
            self._directory.update_flat(
                property_id, is_occupied=occupied, current_tenant_id=tenant_id,
            )
        else:
            self._directory.update_land(
                property_id, is_leased=occupied, current_tenant_id=tenant_id,
            )

    @staticmethod
    def _check_transition(deposit: SecurityDeposit, target: DepositStatus, action: str) -> None:
        if not SECURITY_DEPOSIT_WORKFLOW.allows(deposit.status.value, target.value):
            logger.warning(
                "security_deposit_transition_rejected",
                extra={
                    "deposit_id": str(deposit.id),
                    "status": deposit.status.value,
                    "action": action,
                },
            )
            raise DepositNotHeldError(str(deposit.tenant_id), deposit.status.value, action)

    @staticmethod
    def _money(tenant_id: UUID, value) -> Decimal:
        try:
            return to_money(value)
        except (TypeError, ArithmeticError) as exc:
            raise InvalidDeductionError(str(tenant_id), str(exc)) from exc


_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _created(deposit: SecurityDeposit) -> datetime:
    return deposit.created_at or _EPOCH
