"""
Shared fixtures for module tests.

All IDs are deterministic so tests can import and use them directly.

DESIGN RULE: Every fixture is opt-in.  No autouse.  Each test explicitly
declares what it depends on in its function signature.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from rent_kernel.domain.values import PaymentMethod, PropertyType
from rent_modules.ledger.models import PaymentStatus, RentPayment

# ---------------------------------------------------------------------------
# Deterministic directory IDs
# ---------------------------------------------------------------------------

TEST_BUILDING_ID = UUID("00000000-0000-4000-a000-000000000001")
TEST_APARTMENT_101_ID = UUID("00000000-0000-4000-a000-000000000002")
TEST_APARTMENT_102_ID = UUID("00000000-0000-4000-a000-000000000003")
TEST_FLAT_ID = UUID("00000000-0000-4000-a000-000000000010")
TEST_LAND_ID = UUID("00000000-0000-4000-a000-000000000020")
TEST_TENANT_ALICE_ID = UUID("00000000-0000-4000-a000-000000000100")
TEST_TENANT_BOB_ID = UUID("00000000-0000-4000-a000-000000000101")
TEST_TENANT_CAROL_ID = UUID("00000000-0000-4000-a000-000000000102")
TEST_TENANT_DAVE_ID = UUID("00000000-0000-4000-a000-000000000103")


def build_payment(**overrides) -> RentPayment:
    """A valid pending flat payment; keyword arguments override fields."""
    fields = {
        "id": uuid4(),
        "tenant_id": TEST_TENANT_BOB_ID,
        "property_id": TEST_FLAT_ID,
        "property_type": PropertyType.FLAT,
        "amount": Decimal("15000"),
        "due_date": date(2024, 3, 5),
        "payment_method": PaymentMethod.BANK_TRANSFER,
        "status": PaymentStatus.PENDING,
    }
    fields.update(overrides)
    return RentPayment(**fields)


@pytest.fixture
def payment_factory():
    """Provide ``build_payment`` as a fixture."""
    return build_payment
