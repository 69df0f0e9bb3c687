"""
Pytest fixtures for the rent ledger test suite.

Provides:
- Structured logging configured once per session, plus log capture
- A deterministic clock and an in-memory record store
- A seeded property/tenant directory
- The four ledger services wired to the store, directory and clock

Every fixture is function-scoped unless noted, so each test starts from
an empty store and a freshly seeded directory.
"""

import json
import logging
from datetime import UTC, date, datetime
from decimal import Decimal
from io import StringIO

import pytest

from rent_kernel.domain.clock import DeterministicClock
from rent_kernel.domain.values import PaymentMethod
from rent_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from rent_kernel.store.memory import InMemoryRecordStore
from rent_modules.deposits.service import SecurityDepositService
from rent_modules.directory.models import (
    Apartment,
    Building,
    Flat,
    Land,
    RentalAgreement,
    Tenant,
)
from rent_modules.directory.service import InMemoryPropertyDirectory
from rent_modules.ledger.service import RentLedgerService
from rent_modules.receipts.service import RentReceiptService
from rent_modules.reporting.service import RentCollectionService
from tests.modules.conftest import (
    TEST_APARTMENT_101_ID,
    TEST_APARTMENT_102_ID,
    TEST_BUILDING_ID,
    TEST_FLAT_ID,
    TEST_LAND_ID,
    TEST_TENANT_ALICE_ID,
    TEST_TENANT_BOB_ID,
    TEST_TENANT_CAROL_ID,
    TEST_TENANT_DAVE_ID,
)

# 2024-03-10 00:00 UTC: midnight keeps days-past-due arithmetic whole
TEST_NOW = datetime(2024, 3, 10, 0, 0, 0, tzinfo=UTC)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture rent_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, ledger):
            ledger.record_rent_payment(...)
            logs = captured_logs()
            assert any(r["message"] == "rent_payment_recorded" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("rent_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Kernel fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock fixed at TEST_NOW."""
    return DeterministicClock(TEST_NOW)


@pytest.fixture
def store():
    """Provide an empty in-memory record store."""
    return InMemoryRecordStore()


# =============================================================================
# Directory fixtures
# =============================================================================


def _agreement(
    number: str,
    rent: str,
    deposit: str,
    due_day: int,
    method: PaymentMethod,
) -> RentalAgreement:
    return RentalAgreement(
        agreement_number=number,
        start_date=date(2023, 6, 1),
        end_date=date(2025, 5, 31),
        rent_amount=Decimal(rent),
        security_deposit=Decimal(deposit),
        rent_due_day=due_day,
        payment_method=method,
    )


@pytest.fixture
def directory():
    """
    Directory with one building (two apartments), one flat and one plot.

    - Alice rents apartment 101, due on the 5th, pays by UPI
    - Bob rents the flat, due on the 31st, pays by bank transfer
    - Carol leases the land, due on the 1st, pays cash, no deposit
    - Dave has moved out and occupies nothing
    """
    d = InMemoryPropertyDirectory()
    d.add_building(Building(
        id=TEST_BUILDING_ID,
        name="Sunrise Towers",
        address="12 Hill Road",
        apartments=(
            Apartment(
                id=TEST_APARTMENT_101_ID,
                door_number="101",
                rent_amount=Decimal("12000"),
                is_occupied=True,
                current_tenant_id=TEST_TENANT_ALICE_ID,
            ),
            Apartment(id=TEST_APARTMENT_102_ID, door_number="102"),
        ),
    ))
    d.add_flat(Flat(
        id=TEST_FLAT_ID,
        name="Lake View Flat",
        address="7 Lake Street",
        door_number="3B",
        rent_amount=Decimal("15000"),
        is_occupied=True,
        current_tenant_id=TEST_TENANT_BOB_ID,
    ))
    d.add_land(Land(
        id=TEST_LAND_ID,
        name="North Plot",
        address="Survey 42, North Road",
        is_leased=True,
        current_tenant_id=TEST_TENANT_CAROL_ID,
    ))

    d.add_tenant(Tenant(
        id=TEST_TENANT_ALICE_ID,
        full_name="Alice Fernandes",
        rental_agreement=_agreement("RA-101", "12000", "24000", 5, PaymentMethod.UPI),
        move_in_date=date(2023, 6, 1),
    ))
    d.add_tenant(Tenant(
        id=TEST_TENANT_BOB_ID,
        full_name="Bob Mathew",
        rental_agreement=_agreement("RA-F1", "15000", "30000", 31, PaymentMethod.BANK_TRANSFER),
        move_in_date=date(2023, 9, 1),
    ))
    d.add_tenant(Tenant(
        id=TEST_TENANT_CAROL_ID,
        full_name="Carol Dsouza",
        rental_agreement=_agreement("RA-L1", "5000", "0", 1, PaymentMethod.CASH),
        move_in_date=date(2024, 1, 1),
    ))
    d.add_tenant(Tenant(
        id=TEST_TENANT_DAVE_ID,
        full_name="Dave Pinto",
        rental_agreement=_agreement("RA-102", "11000", "22000", 10, PaymentMethod.CHEQUE),
        move_in_date=date(2023, 1, 1),
        is_active=False,
        move_out_date=date(2023, 12, 31),
    ))
    return d


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def receipt_service(store, directory, deterministic_clock):
    """Provide a RentReceiptService."""
    return RentReceiptService(store, directory, clock=deterministic_clock)


@pytest.fixture
def ledger(store, directory, receipt_service, deterministic_clock):
    """Provide a RentLedgerService sharing the receipt service."""
    return RentLedgerService(
        store, directory, receipts=receipt_service, clock=deterministic_clock,
    )


@pytest.fixture
def deposit_service(store, directory, deterministic_clock):
    """Provide a SecurityDepositService."""
    return SecurityDepositService(store, directory, clock=deterministic_clock)


@pytest.fixture
def reporter(store, directory, deposit_service, deterministic_clock):
    """Provide a RentCollectionService."""
    return RentCollectionService(
        store, directory, deposits=deposit_service, clock=deterministic_clock,
    )
