"""
Property/Tenant Directory Models (``rent_modules.directory.models``).

Responsibility
--------------
Frozen dataclass views of the directory entities the ledger reads: tenants
with their rental agreement, buildings with apartments, flats and land.
The directory itself is an external collaborator; these DTOs carry only the
fields the ledger consumes.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* Money fields are ``Decimal``.
* ``RentalAgreement.rent_due_day`` is a day of month, 1-31.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from rent_kernel.domain.values import PaymentMethod, PropertyType


@dataclass(frozen=True)
class RentalAgreement:
    """Rent terms agreed with a tenant."""
    agreement_number: str
    start_date: date
    end_date: date
    rent_amount: Decimal
    security_deposit: Decimal = Decimal("0")
    rent_due_day: int = 1  # day of month
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    late_fee_amount: Decimal | None = None
    notice_period_days: int = 30

    def __post_init__(self):
        if not 1 <= self.rent_due_day <= 31:
            raise ValueError("rent_due_day must be between 1 and 31")
        if self.rent_amount <= 0:
            raise ValueError("rent_amount must be positive")
        if self.security_deposit < 0:
            raise ValueError("security_deposit cannot be negative")


@dataclass(frozen=True)
class Tenant:
    """A tenant as the directory knows them."""
    id: UUID
    full_name: str
    rental_agreement: RentalAgreement
    move_in_date: date
    is_active: bool = True
    move_out_date: date | None = None


@dataclass(frozen=True)
class Apartment:
    """A rentable unit inside a building."""
    id: UUID
    door_number: str
    rent_amount: Decimal = Decimal("0")
    security_deposit: Decimal = Decimal("0")
    is_occupied: bool = False
    current_tenant_id: UUID | None = None


@dataclass(frozen=True)
class Building:
    """A building holding apartments."""
    id: UUID
    name: str
    address: str
    apartments: tuple[Apartment, ...] = field(default_factory=tuple)
    property_type: PropertyType = PropertyType.BUILDING

    def find_apartment(self, unit_id: UUID) -> Apartment | None:
        return next((a for a in self.apartments if a.id == unit_id), None)


@dataclass(frozen=True)
class Flat:
    """A standalone rental flat."""
    id: UUID
    name: str
    address: str
    door_number: str = ""
    rent_amount: Decimal = Decimal("0")
    security_deposit: Decimal = Decimal("0")
    is_occupied: bool = False
    current_tenant_id: UUID | None = None
    property_type: PropertyType = PropertyType.FLAT


@dataclass(frozen=True)
class Land:
    """A plot of land that may be leased."""
    id: UUID
    name: str
    address: str
    is_leased: bool = False
    current_tenant_id: UUID | None = None
    property_type: PropertyType = PropertyType.LAND


@dataclass(frozen=True)
class PropertyAssignment:
    """Where a tenant currently lives: property, its kind, and the unit."""
    property_id: UUID
    property_type: PropertyType
    unit_id: UUID | None = None


@dataclass(frozen=True)
class PropertyDisplay:
    """Address and display name of a property (or unit) at lookup time."""
    address: str = ""
    name: str = ""
