"""
Unit tests for InMemoryRecordStore.

Verifies:
- Insertion order is preserved
- Duplicate ids and quota overflow are rejected
- update() is a compare-and-set on version
"""

import dataclasses
from decimal import Decimal

import pytest

from rent_kernel.exceptions import (
    DuplicateRecordError,
    OptimisticLockError,
    QuotaExceededError,
    RecordNotFoundError,
)
from rent_kernel.store.memory import InMemoryRecordStore
from rent_kernel.store.record_store import Collections
from tests.modules.conftest import build_payment

PAYMENTS = Collections.RENT_PAYMENTS


class TestReadsAndWrites:
    """Basic persistence behaviour."""

    def test_empty_collection(self):
        assert InMemoryRecordStore().get_all(PAYMENTS) == []

    def test_save_and_find(self):
        store = InMemoryRecordStore()
        payment = build_payment()
        store.save(PAYMENTS, payment)
        assert store.find_by_id(PAYMENTS, payment.id) == payment
        assert store.get_by_id(PAYMENTS, payment.id) == payment

    def test_insertion_order(self):
        store = InMemoryRecordStore()
        payments = [build_payment() for _ in range(5)]
        for p in payments:
            store.save(PAYMENTS, p)
        assert [p.id for p in store.get_all(PAYMENTS)] == [p.id for p in payments]

    def test_collections_are_separate(self):
        store = InMemoryRecordStore()
        store.save(PAYMENTS, build_payment())
        assert store.get_all(Collections.RENT_RECEIPTS) == []

    def test_get_by_id_missing(self):
        store = InMemoryRecordStore()
        with pytest.raises(RecordNotFoundError):
            store.get_by_id(PAYMENTS, build_payment().id)

    def test_duplicate_rejected(self):
        store = InMemoryRecordStore()
        payment = build_payment()
        store.save(PAYMENTS, payment)
        with pytest.raises(DuplicateRecordError):
            store.save(PAYMENTS, payment)

    def test_quota(self):
        store = InMemoryRecordStore(max_records=2)
        store.save(PAYMENTS, build_payment())
        store.save(PAYMENTS, build_payment())
        with pytest.raises(QuotaExceededError) as exc_info:
            store.save(PAYMENTS, build_payment())
        assert exc_info.value.limit == 2
        assert len(store.get_all(PAYMENTS)) == 2

    def test_delete(self):
        store = InMemoryRecordStore()
        payment = build_payment()
        store.save(PAYMENTS, payment)
        store.delete(PAYMENTS, payment.id)
        assert store.find_by_id(PAYMENTS, payment.id) is None

    def test_delete_missing(self):
        with pytest.raises(RecordNotFoundError):
            InMemoryRecordStore().delete(PAYMENTS, build_payment().id)

    def test_replace_all_and_clear(self):
        store = InMemoryRecordStore()
        store.save(PAYMENTS, build_payment())
        replacement = [build_payment(), build_payment()]
        store.replace_all(PAYMENTS, replacement)
        assert store.get_all(PAYMENTS) == replacement
        store.clear(PAYMENTS)
        assert store.get_all(PAYMENTS) == []


class TestOptimisticUpdate:
    """update() rejects stale writers."""

    def test_update_bumps_version(self):
        store = InMemoryRecordStore()
        payment = store.save(PAYMENTS, build_payment())
        stored = store.update(
            PAYMENTS, dataclasses.replace(payment, amount=Decimal("16000")),
        )
        assert stored.version == 2
        assert store.get_by_id(PAYMENTS, payment.id).amount == Decimal("16000")

    def test_stale_write_rejected(self):
        store = InMemoryRecordStore()
        original = store.save(PAYMENTS, build_payment())
        store.update(PAYMENTS, dataclasses.replace(original, notes="first writer"))

        with pytest.raises(OptimisticLockError) as exc_info:
            store.update(PAYMENTS, dataclasses.replace(original, notes="second writer"))

        assert exc_info.value.expected_version == 1
        assert exc_info.value.actual_version == 2
        assert store.get_by_id(PAYMENTS, original.id).notes == "first writer"

    def test_update_missing(self):
        with pytest.raises(RecordNotFoundError):
            InMemoryRecordStore().update(PAYMENTS, build_payment())
