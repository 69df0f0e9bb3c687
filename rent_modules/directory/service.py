"""
Property/Tenant Directory contract and lookups.

The directory is owned by the surrounding application.  The ledger only
needs the read and occupancy-update hooks declared on ``PropertyDirectory``.
``InMemoryPropertyDirectory`` implements them over frozen DTOs for tests
and small embedders.

``describe_property`` and ``find_tenant_property`` are the two lookups the
ledger, receipt generator and reporter share.
"""

from __future__ import annotations

import dataclasses
import threading
from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from rent_kernel.domain.values import PropertyType
from rent_kernel.exceptions import RecordNotFoundError, TenantNotFoundError
from rent_kernel.logging_config import get_logger
from rent_modules.directory.models import (
    Apartment,
    Building,
    Flat,
    Land,
    PropertyAssignment,
    PropertyDisplay,
    Tenant,
)

logger = get_logger("modules.directory.service")


class PropertyDirectory(ABC):
    """Read and occupancy hooks the ledger consumes from the directory."""

    @abstractmethod
    def get_tenant_by_id(self, tenant_id: UUID) -> Tenant | None: ...

    @abstractmethod
    def get_tenants(self) -> list[Tenant]: ...

    @abstractmethod
    def get_building_by_id(self, building_id: UUID) -> Building | None: ...

    @abstractmethod
    def get_flat_by_id(self, flat_id: UUID) -> Flat | None: ...

    @abstractmethod
    def get_land_by_id(self, land_id: UUID) -> Land | None: ...

    @abstractmethod
    def get_buildings(self) -> list[Building]: ...

    @abstractmethod
    def get_flats(self) -> list[Flat]: ...

    @abstractmethod
    def get_lands(self) -> list[Land]: ...

    @abstractmethod
    def update_tenant(self, tenant_id: UUID, **changes: Any) -> Tenant: ...

    @abstractmethod
    def update_apartment(self, unit_id: UUID, **changes: Any) -> Apartment: ...

    @abstractmethod
    def update_flat(self, flat_id: UUID, **changes: Any) -> Flat: ...

    @abstractmethod
    def update_land(self, land_id: UUID, **changes: Any) -> Land: ...


class InMemoryPropertyDirectory(PropertyDirectory):
    """Dict-backed directory."""

    def __init__(self) -> None:
        self._tenants: dict[UUID, Tenant] = {}
        self._buildings: dict[UUID, Building] = {}
        self._flats: dict[UUID, Flat] = {}
        self._lands: dict[UUID, Land] = {}
        self._lock = threading.Lock()

    # Seeding

    def add_tenant(self, tenant: Tenant) -> Tenant:
        self._tenants[tenant.id] = tenant
        return tenant

    def add_building(self, building: Building) -> Building:
        self._buildings[building.id] = building
        return building

    def add_flat(self, flat: Flat) -> Flat:
        self._flats[flat.id] = flat
        return flat

    def add_land(self, land: Land) -> Land:
        self._lands[land.id] = land
        return land

    # Reads

    def get_tenant_by_id(self, tenant_id: UUID) -> Tenant | None:
        return self._tenants.get(tenant_id)

    def get_tenants(self) -> list[Tenant]:
        return list(self._tenants.values())

    def get_building_by_id(self, building_id: UUID) -> Building | None:
        return self._buildings.get(building_id)

    def get_flat_by_id(self, flat_id: UUID) -> Flat | None:
        return self._flats.get(flat_id)

    def get_land_by_id(self, land_id: UUID) -> Land | None:
        return self._lands.get(land_id)

    def get_buildings(self) -> list[Building]:
        return list(self._buildings.values())

    def get_flats(self) -> list[Flat]:
        return list(self._flats.values())

    def get_lands(self) -> list[Land]:
        return list(self._lands.values())

    # Updates

    def update_tenant(self, tenant_id: UUID, **changes: Any) -> Tenant:
        with self._lock:
            tenant = self._tenants.get(tenant_id)
            if tenant is None:
                raise TenantNotFoundError(str(tenant_id))
            updated = dataclasses.replace(tenant, **changes)
            self._tenants[tenant_id] = updated
            return updated

    def update_apartment(self, unit_id: UUID, **changes: Any) -> Apartment:
        with self._lock:
            for building in self._buildings.values():
                apartment = building.find_apartment(unit_id)
                if apartment is None:
                    continue
                updated = dataclasses.replace(apartment, **changes)
                self._buildings[building.id] = dataclasses.replace(
                    building,
                    apartments=tuple(
                        updated if a.id == unit_id else a
                        for a in building.apartments
                    ),
                )
                return updated
            raise RecordNotFoundError("apartments", str(unit_id))

    def update_flat(self, flat_id: UUID, **changes: Any) -> Flat:
        with self._lock:
            flat = self._flats.get(flat_id)
            if flat is None:
                raise RecordNotFoundError("flats", str(flat_id))
            updated = dataclasses.replace(flat, **changes)
            self._flats[flat_id] = updated
            return updated

    def update_land(self, land_id: UUID, **changes: Any) -> Land:
        with self._lock:
            land = self._lands.get(land_id)
            if land is None:
                raise RecordNotFoundError("lands", str(land_id))
            updated = dataclasses.replace(land, **changes)
            self._lands[land_id] = updated
            return updated


# =============================================================================
# Shared lookups
# =============================================================================


def describe_property(
    directory: PropertyDirectory,
    property_id: UUID,
    property_type: PropertyType,
    unit_id: UUID | None = None,
) -> PropertyDisplay:
    """
    Address and display name for a property, or empty strings when the
    directory does not know it.

    Apartments render as ``"<address>, Apt <door>"`` / ``"<name> - <door>"``.
    """
    if property_type is PropertyType.BUILDING:
        building = directory.get_building_by_id(property_id)
        if building is None:
            return PropertyDisplay()
        if unit_id is not None:
            apartment = building.find_apartment(unit_id)
            door = apartment.door_number if apartment else ""
            return PropertyDisplay(
                address=f"{building.address}, Apt {door}",
                name=f"{building.name} - {door}",
            )
        return PropertyDisplay(address=building.address, name=building.name)

    if property_type is PropertyType.FLAT:
        prop = directory.get_flat_by_id(property_id)
    else:
        prop = directory.get_land_by_id(property_id)
    if prop is None:
        return PropertyDisplay()
    return PropertyDisplay(address=prop.address, name=prop.name)


def find_tenant_property(
    directory: PropertyDirectory,
    tenant_id: UUID,
) -> PropertyAssignment | None:
    """
    The unit a tenant currently occupies.

    Buildings are searched first, then flats, then land.
    """
    for building in directory.get_buildings():
        for apartment in building.apartments:
            if apartment.current_tenant_id == tenant_id:
                return PropertyAssignment(
                    property_id=building.id,
                    property_type=PropertyType.BUILDING,
                    unit_id=apartment.id,
                )

    for flat in directory.get_flats():
        if flat.current_tenant_id == tenant_id:
            return PropertyAssignment(
                property_id=flat.id,
                property_type=PropertyType.FLAT,
            )

    for land in directory.get_lands():
        if land.current_tenant_id == tenant_id:
            return PropertyAssignment(
                property_id=land.id,
                property_type=PropertyType.LAND,
            )

    logger.debug(
        "tenant_property_unresolved",
        extra={"tenant_id": str(tenant_id)},
    )
    return None
