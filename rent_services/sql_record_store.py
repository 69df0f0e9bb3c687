"""
SqlRecordStore -- RecordStore backed by a SQLAlchemy session.

Responsibility:
    Persist the four ledger collections in relational tables, one ORM
    model per collection, converting between ORM rows and frozen domain
    records with each model's ``to_dto`` / ``from_dto``.

Architecture position:
    Services -- the only layer that holds database sessions.
    Depends on rent_kernel (RecordStore contract, exceptions) and on the
    module ORM models.

Invariants enforced:
    - ``update`` is a compare-and-set on ``version``: the row is read
      ``FOR UPDATE`` and rejected with OptimisticLockError when its version
      differs from the caller's record.
    - With ``auto_commit=True`` (default) every mutating call is its own
      transaction; a failure rolls back only that call.

Failure modes:
    - RecordNotFoundError on update/delete of a missing id.
    - DuplicateRecordError on save of an existing id or a second receipt
      for the same payment.
    - StorageUnavailableError when the database cannot be reached.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Iterable, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from rent_kernel.exceptions import (
    DuplicateRecordError,
    OptimisticLockError,
    RecordNotFoundError,
    StorageError,
    StorageUnavailableError,
)
from rent_kernel.logging_config import get_logger
from rent_kernel.store.record_store import Collections, R, RecordStore
from rent_modules.deposits.orm import SecurityDepositModel
from rent_modules.ledger.orm import RentPaymentModel
from rent_modules.receipts.orm import RentReceiptModel
from rent_modules.reporting.orm import RentCollectionReportModel

logger = get_logger("services.sql_record_store")

T = TypeVar("T")

# collection -> (ORM model, column giving insertion order)
_COLLECTION_MODELS: dict[str, tuple[type, str]] = {
    Collections.RENT_PAYMENTS: (RentPaymentModel, "created_at"),
    Collections.RENT_RECEIPTS: (RentReceiptModel, "generated_at"),
    Collections.SECURITY_DEPOSITS: (SecurityDepositModel, "created_at"),
    Collections.RENT_REPORTS: (RentCollectionReportModel, "generated_at"),
}


class SqlRecordStore(RecordStore):
    """
    Record store over SQLAlchemy ORM tables.

    Args:
        session: Open SQLAlchemy session.
        auto_commit: Commit after every mutating call.  Pass False when the
            caller owns the transaction boundary.
    """

    def __init__(self, session: Session, auto_commit: bool = True):
        self._session = session
        self._auto_commit = auto_commit

    def _model(self, collection: str) -> tuple[type, str]:
        try:
            return _COLLECTION_MODELS[collection]
        except KeyError:
            raise StorageError(f"No table for collection {collection!r}") from None

    def _run(self, operation: str, collection: str, work: Callable[[], T]) -> T:
        """Run ``work`` as one unit: commit on success, roll back on failure."""
        try:
            result = work()
            if self._auto_commit:
                self._session.commit()
            else:
                self._session.flush()
            return result
        except OperationalError as exc:
            self._session.rollback()
            logger.error(
                "record_store_unavailable",
                extra={"operation": operation, "collection": collection},
                exc_info=True,
            )
            raise StorageUnavailableError(str(exc.orig)) from exc
        except Exception:
            if self._auto_commit:
                self._session.rollback()
            raise

    def _locked_row(self, model: type, record_id: UUID) -> Any:
        return self._session.get(
            model, record_id, with_for_update=True, populate_existing=True,
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_all(self, collection: str) -> list:
        model, order_column = self._model(collection)

        def work() -> list:
            rows = self._session.scalars(
                select(model).order_by(getattr(model, order_column), model.id)
            ).all()
            return [row.to_dto() for row in rows]

        try:
            return work()
        except OperationalError as exc:
            self._session.rollback()
            raise StorageUnavailableError(str(exc.orig)) from exc

    def find_by_id(self, collection: str, record_id: UUID):
        model, _ = self._model(collection)
        try:
            row = self._session.get(model, record_id)
        except OperationalError as exc:
            self._session.rollback()
            raise StorageUnavailableError(str(exc.orig)) from exc
        return row.to_dto() if row is not None else None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def save(self, collection: str, record: R) -> R:
        model, _ = self._model(collection)

        def work() -> R:
            if self._session.get(model, record.id) is not None:
                raise DuplicateRecordError(collection, str(record.id))
            self._session.add(model.from_dto(record))
            try:
                self._session.flush()
            except IntegrityError as exc:
                raise DuplicateRecordError(collection, str(record.id)) from exc
            return record

        return self._run("save", collection, work)

    def update(self, collection: str, record: R) -> R:
        model, _ = self._model(collection)

        def work() -> R:
            row = self._locked_row(model, record.id)
            if row is None:
                raise RecordNotFoundError(collection, str(record.id))
            if row.version != record.version:
                logger.warning(
                    "record_store_version_conflict",
                    extra={
                        "collection": collection,
                        "record_id": str(record.id),
                        "expected_version": record.version,
                        "actual_version": row.version,
                    },
                )
                raise OptimisticLockError(
                    collection,
                    str(record.id),
                    expected_version=record.version,
                    actual_version=row.version,
                )
            row.update_from_dto(record)
            row.version = record.version + 1
            return dataclasses.replace(record, version=record.version + 1)

        return self._run("update", collection, work)

    def delete(self, collection: str, record_id: UUID) -> None:
        model, _ = self._model(collection)

        def work() -> None:
            row = self._session.get(model, record_id)
            if row is None:
                raise RecordNotFoundError(collection, str(record_id))
            self._session.delete(row)

        self._run("delete", collection, work)

    def replace_all(self, collection: str, records: Iterable) -> None:
        model, _ = self._model(collection)
        records = list(records)

        def work() -> None:
            # Row by row so ORM cascades reach child tables
            for row in self._session.scalars(select(model)).all():
                self._session.delete(row)
            self._session.flush()
            self._session.add_all(model.from_dto(r) for r in records)

        self._run("replace_all", collection, work)
        logger.info(
            "record_store_collection_replaced",
            extra={"collection": collection, "count": len(records)},
        )
