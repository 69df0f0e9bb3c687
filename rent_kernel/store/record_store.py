"""
RecordStore -- keyed collection persistence contract.

Responsibility:
    Defines the save/load/update/delete surface every ledger service uses.
    Services never hold records between calls; each operation reads what it
    needs from the store and writes back through it.

Architecture position:
    Kernel > Store.  Implementations: ``InMemoryRecordStore`` (this package)
    and ``rent_services.sql_record_store.SqlRecordStore``.

Invariants enforced:
    - Writes are per id, never a whole-collection overwrite (except the
      explicit ``replace_all`` used by data import).
    - ``update`` is an optimistic compare-and-set on ``version``: the caller
      passes the record it read (with the version it read) and gets back
      the stored record with ``version + 1``.

Failure modes:
    - RecordNotFoundError from get_by_id/update/delete on a missing id.
    - DuplicateRecordError from save on an existing id.
    - OptimisticLockError from update when the stored version moved on.
    - QuotaExceededError / StorageUnavailableError from the backend.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Protocol, TypeVar
from uuid import UUID

from rent_kernel.exceptions import RecordNotFoundError


class StoredRecord(Protocol):
    """Shape every stored record satisfies."""

    @property
    def id(self) -> UUID: ...

    @property
    def version(self) -> int: ...


R = TypeVar("R", bound=StoredRecord)


class Collections:
    """Collection names used by the ledger."""

    RENT_PAYMENTS = "rent_payments"
    RENT_RECEIPTS = "rent_receipts"
    SECURITY_DEPOSITS = "security_deposits"
    RENT_REPORTS = "rent_reports"

    ALL = (RENT_PAYMENTS, RENT_RECEIPTS, SECURITY_DEPOSITS, RENT_REPORTS)


class RecordStore(ABC):
    """
    Abstract keyed record store.

    Contract:
        Records are immutable values; the store hands back the exact
        instances (or equal copies) it was given, in insertion order.
    """

    @abstractmethod
    def get_all(self, collection: str) -> list:
        """Every record in the collection, in insertion order."""
        ...

    @abstractmethod
    def find_by_id(self, collection: str, record_id: UUID):
        """The record with this id, or None."""
        ...

    def get_by_id(self, collection: str, record_id: UUID):
        """
        The record with this id.

        Raises:
            RecordNotFoundError: If absent.
        """
        record = self.find_by_id(collection, record_id)
        if record is None:
            raise RecordNotFoundError(collection, str(record_id))
        return record

    @abstractmethod
    def save(self, collection: str, record: R) -> R:
        """Insert a new record. Raises DuplicateRecordError on id clash."""
        ...

    @abstractmethod
    def update(self, collection: str, record: R) -> R:
        """
        Replace a stored record if its version still matches.

        Returns:
            The stored record, with version incremented.
        """
        ...

    @abstractmethod
    def delete(self, collection: str, record_id: UUID) -> None:
        """Remove a record. Raises RecordNotFoundError when absent."""
        ...

    @abstractmethod
    def replace_all(self, collection: str, records: Iterable) -> None:
        """Discard the collection's contents and store ``records`` instead."""
        ...

    def clear(self, collection: str) -> None:
        self.replace_all(collection, ())
