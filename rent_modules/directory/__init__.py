"""
Property/Tenant Directory boundary.

The directory is external; this package holds its contract, the DTOs the
ledger reads, and an in-memory implementation.
"""

from rent_modules.directory.models import (
    Apartment,
    Building,
    Flat,
    Land,
    PropertyAssignment,
    PropertyDisplay,
    RentalAgreement,
    Tenant,
)
from rent_modules.directory.service import (
    InMemoryPropertyDirectory,
    PropertyDirectory,
    describe_property,
    find_tenant_property,
)

__all__ = [
    "Apartment",
    "Building",
    "Flat",
    "Land",
    "PropertyAssignment",
    "PropertyDisplay",
    "RentalAgreement",
    "Tenant",
    "InMemoryPropertyDirectory",
    "PropertyDirectory",
    "describe_property",
    "find_tenant_property",
]
