"""
RentDataPorter -- export, import and wipe of the ledger collections.

Responsibility:
    Snapshot every ledger collection (payments, receipts, deposits,
    reports) into one ``RentDataExport``, serialize it to JSON, and
    restore collections from such a snapshot.

Architecture position:
    Services -- works against any RecordStore.

Invariants enforced:
    - Import decodes and validates every supplied collection before it
      replaces any of them, so malformed input changes nothing.
    - Only the collections present in the import data are replaced.

Failure modes:
    - ValidationError when import data cannot be decoded.
    - Store errors propagate unchanged.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from decimal import InvalidOperation
from typing import Any, Mapping

from rent_kernel.domain.clock import Clock, SystemClock
from rent_kernel.exceptions import ValidationError
from rent_kernel.logging_config import get_logger
from rent_kernel.store.record_store import Collections, RecordStore
from rent_kernel.utils.serialization import from_primitive, to_primitive
from rent_modules.deposits.models import SecurityDeposit
from rent_modules.ledger.models import RentPayment
from rent_modules.receipts.models import RentReceipt
from rent_modules.reporting.models import RentCollectionReport

logger = get_logger("services.data_transfer")

_RECORD_TYPES: dict[str, type] = {
    Collections.RENT_PAYMENTS: RentPayment,
    Collections.RENT_RECEIPTS: RentReceipt,
    Collections.SECURITY_DEPOSITS: SecurityDeposit,
    Collections.RENT_REPORTS: RentCollectionReport,
}


@dataclass(frozen=True)
class RentDataExport:
    """Point-in-time copy of every ledger collection."""
    exported_at: datetime
    rent_payments: tuple[RentPayment, ...] = ()
    rent_receipts: tuple[RentReceipt, ...] = ()
    security_deposits: tuple[SecurityDeposit, ...] = ()
    rent_reports: tuple[RentCollectionReport, ...] = ()

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(to_primitive(self), indent=indent)


class RentDataPorter:
    """Moves ledger data in and out of a RecordStore."""

    def __init__(self, store: RecordStore, clock: Clock | None = None):
        self._store = store
        self._clock = clock or SystemClock()

    def export_rent_data(self) -> RentDataExport:
        export = RentDataExport(
            exported_at=self._clock.now(),
            **{
                collection: tuple(self._store.get_all(collection))
                for collection in Collections.ALL
            },
        )
        logger.info(
            "rent_data_exported",
            extra={
                collection: len(getattr(export, collection))
                for collection in Collections.ALL
            },
        )
        return export

    def import_rent_data(
        self,
        data: RentDataExport | Mapping[str, Any] | str,
    ) -> dict[str, int]:
        """
        Replace collections with the records in ``data``.

        ``data`` may be a ``RentDataExport`` (every collection is replaced),
        a mapping shaped like its JSON form, or that JSON text (only the
        collections named in it are replaced).

        Returns:
            Number of records written per replaced collection.

        Raises:
            ValidationError: Data is not valid JSON or a record cannot be decoded.
        """
        decoded = self._decode(data)
        for collection, records in decoded.items():
            self._store.replace_all(collection, records)

        counts = {collection: len(records) for collection, records in decoded.items()}
        logger.info("rent_data_imported", extra=counts)
        return counts

    def clear_all_rent_data(self) -> None:
        for collection in Collections.ALL:
            self._store.clear(collection)
        logger.warning("rent_data_cleared", extra={"collections": list(Collections.ALL)})

    def _decode(
        self,
        data: RentDataExport | Mapping[str, Any] | str,
    ) -> dict[str, tuple]:
        if isinstance(data, RentDataExport):
            return {c: getattr(data, c) for c in Collections.ALL}

        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as exc:
                raise ValidationError(f"Import data is not valid JSON: {exc}") from exc
        if not isinstance(data, Mapping):
            raise ValidationError("Import data must be a JSON object")

        decoded: dict[str, tuple] = {}
        for collection, record_type in _RECORD_TYPES.items():
            if collection not in data:
                continue
            try:
                decoded[collection] = from_primitive(
                    tuple[record_type, ...], data[collection] or [],
                )
            except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
                logger.warning(
                    "rent_data_import_rejected",
                    extra={"collection": collection, "error": str(exc)},
                )
                raise ValidationError(
                    f"Cannot import {collection}: {exc}"
                ) from exc
        return decoded
