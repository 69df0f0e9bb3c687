"""
Identifier generation for ledger records.

Record ids are uuid4 values: opaque and unique within a collection.
Receipt numbers are human-facing and follow ``<PREFIX>-<YYYYMMDD>-<NNNNNN>``,
where the suffix is the last six digits of the millisecond timestamp.
"""

import re
from datetime import datetime
from uuid import UUID, uuid4

DEFAULT_RECEIPT_PREFIX = "RCP"

RECEIPT_NUMBER_PATTERN = re.compile(r"^[A-Z]+-\d{8}-\d{6}$")


def new_record_id() -> UUID:
    return uuid4()


def generate_receipt_number(
    now: datetime,
    prefix: str = DEFAULT_RECEIPT_PREFIX,
) -> str:
    """Build a receipt number from the given moment."""
    millis = int(now.timestamp() * 1000)
    suffix = str(millis)[-6:].zfill(6)
    return f"{prefix}-{now:%Y%m%d}-{suffix}"


def is_receipt_number(value: str) -> bool:
    return bool(RECEIPT_NUMBER_PATTERN.match(value))
