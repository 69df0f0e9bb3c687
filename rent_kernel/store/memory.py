"""
In-memory RecordStore.

Used by tests and by embedders that persist elsewhere.  Every operation
holds one lock, so each call is atomic with respect to other threads.
"""

import dataclasses
import threading
from typing import Iterable
from uuid import UUID

from rent_kernel.exceptions import (
    DuplicateRecordError,
    OptimisticLockError,
    QuotaExceededError,
    RecordNotFoundError,
)
from rent_kernel.logging_config import get_logger
from rent_kernel.store.record_store import R, RecordStore

logger = get_logger("store.memory")


class InMemoryRecordStore(RecordStore):
    """
    Dict-backed record store.

    Args:
        max_records: Optional per-collection capacity. Saving beyond it
            raises QuotaExceededError.
    """

    def __init__(self, max_records: int | None = None):
        self._collections: dict[str, dict[UUID, object]] = {}
        self._max_records = max_records
        self._lock = threading.Lock()

    def _bucket(self, collection: str) -> dict[UUID, object]:
        return self._collections.setdefault(collection, {})

    def get_all(self, collection: str) -> list:
        with self._lock:
            return list(self._bucket(collection).values())

    def find_by_id(self, collection: str, record_id: UUID):
        with self._lock:
            return self._bucket(collection).get(record_id)

    def save(self, collection: str, record: R) -> R:
        with self._lock:
            bucket = self._bucket(collection)
            if record.id in bucket:
                raise DuplicateRecordError(collection, str(record.id))
            if self._max_records is not None and len(bucket) >= self._max_records:
                logger.warning(
                    "record_store_quota_exceeded",
                    extra={"collection": collection, "limit": self._max_records},
                )
                raise QuotaExceededError(collection, self._max_records)
            bucket[record.id] = record
            return record

    def update(self, collection: str, record: R) -> R:
        with self._lock:
            bucket = self._bucket(collection)
            current = bucket.get(record.id)
            if current is None:
                raise RecordNotFoundError(collection, str(record.id))
            if current.version != record.version:
                raise OptimisticLockError(
                    collection,
                    str(record.id),
                    expected_version=record.version,
                    actual_version=current.version,
                )
            stored = dataclasses.replace(record, version=record.version + 1)
            bucket[record.id] = stored
            return stored

    def delete(self, collection: str, record_id: UUID) -> None:
        with self._lock:
            bucket = self._bucket(collection)
            if record_id not in bucket:
                raise RecordNotFoundError(collection, str(record_id))
            del bucket[record_id]

    def replace_all(self, collection: str, records: Iterable) -> None:
        with self._lock:
            self._collections[collection] = {r.id: r for r in records}
