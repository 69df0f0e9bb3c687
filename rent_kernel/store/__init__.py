"""
Record store contract and the in-memory implementation.

The ledger treats persistence as a keyed collection store: every record is
a frozen dataclass with an ``id`` and a ``version``.
"""

from rent_kernel.store.memory import InMemoryRecordStore
from rent_kernel.store.record_store import Collections, RecordStore, StoredRecord

__all__ = [
    "Collections",
    "InMemoryRecordStore",
    "RecordStore",
    "StoredRecord",
]
