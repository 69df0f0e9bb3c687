"""
Typed Exception Hierarchy for the Rent Ledger.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the ledger (API handlers, scheduled sweeps, UI adapters) must be
able to tell a missing payment from a malformed one without parsing message
strings. Every error therefore:
  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes (not just a message string)

Example:
    try:
        ledger.mark_as_paid(payment_id, paid_date=date(2024, 3, 3),
                            payment_method=PaymentMethod.UPI)
    except PaymentNotFoundError as e:
        api_response(code=e.code, payment_id=e.payment_id)
    except InvalidStatusTransitionError as e:
        api_response(code=e.code, current=e.from_status, target=e.to_status)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    RentLedgerError (base)
    |
    +-- RecordNotFoundError
    |   +-- PaymentNotFoundError
    |   +-- ReceiptNotFoundError
    |   +-- DepositNotFoundError
    |   +-- TenantNotFoundError
    |   +-- ReportNotFoundError
    |
    +-- ValidationError
    |   +-- InvalidPaymentError
    |   +-- InvalidStatusTransitionError
    |   +-- ReceiptNotAllowedError
    |   +-- DepositNotHeldError
    |   +-- InvalidDeductionError
    |   +-- DuplicateRecordError
    |
    +-- StorageError
    |   +-- QuotaExceededError
    |   +-- StorageUnavailableError
    |
    +-- ConcurrencyError
        +-- OptimisticLockError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                       | When Raised
-------------|----------------------------|------------------------------------
Not found    | NOT_FOUND                  | Generic record id absent
             | PAYMENT_NOT_FOUND          | Rent payment id absent
             | RECEIPT_NOT_FOUND          | Receipt id absent
             | DEPOSIT_NOT_FOUND          | No deposit for tenant
             | TENANT_NOT_FOUND           | Directory has no such tenant
             | REPORT_NOT_FOUND           | Report id absent from archive
-------------|----------------------------|------------------------------------
Validation   | VALIDATION_ERROR           | Generic malformed input
             | INVALID_PAYMENT            | Missing field, bad amount/fee
             | INVALID_STATUS_TRANSITION  | Transition not in the workflow
             | RECEIPT_NOT_ALLOWED        | Receipt for an unpaid payment
             | DEPOSIT_NOT_HELD           | Refund/deduct a settled deposit
             | INVALID_DEDUCTION          | Non-positive deduction amount
             | DUPLICATE_RECORD           | Save with an id already stored
-------------|----------------------------|------------------------------------
Storage      | QUOTA_EXCEEDED             | Store capacity exhausted
             | STORAGE_UNAVAILABLE        | Backend unreachable
-------------|----------------------------|------------------------------------
Concurrency  | OPTIMISTIC_LOCK_CONFLICT   | Record changed since it was read

===============================================================================
PROPAGATION
===============================================================================

All exceptions are raised synchronously to the caller. The ledger performs
no retry and never substitutes a default for a missing required field.
Batch sweeps stop at the first failure; records already written stay written.
"""


class RentLedgerError(Exception):
    """
    Base exception for all rent ledger errors.

    All subclasses must define a `code` class attribute for
    machine-readable error identification.
    """

    code: str = "RENT_LEDGER_ERROR"


# Not-found exceptions


class RecordNotFoundError(RentLedgerError):
    """A record id is absent from its collection."""

    code: str = "NOT_FOUND"

    def __init__(self, collection: str, record_id: str, message: str | None = None):
        self.collection = collection
        self.record_id = record_id
        super().__init__(message or f"Record {record_id} not found in {collection}")


class PaymentNotFoundError(RecordNotFoundError):
    """Rent payment with given ID was not found."""

    code: str = "PAYMENT_NOT_FOUND"

    def __init__(self, payment_id: str):
        self.payment_id = payment_id
        super().__init__(
            "rent_payments",
            payment_id,
            f'Rent payment with id "{payment_id}" not found',
        )


class ReceiptNotFoundError(RecordNotFoundError):
    """Rent receipt with given ID was not found."""

    code: str = "RECEIPT_NOT_FOUND"

    def __init__(self, receipt_id: str):
        self.receipt_id = receipt_id
        super().__init__(
            "rent_receipts",
            receipt_id,
            f'Rent receipt with id "{receipt_id}" not found',
        )


class DepositNotFoundError(RecordNotFoundError):
    """No security deposit is recorded for the tenant."""

    code: str = "DEPOSIT_NOT_FOUND"

    def __init__(self, tenant_id: str):
        self.tenant_id = tenant_id
        super().__init__(
            "security_deposits",
            tenant_id,
            f"Security deposit not found for tenant {tenant_id}",
        )


class TenantNotFoundError(RecordNotFoundError):
    """Directory has no tenant with the given ID."""

    code: str = "TENANT_NOT_FOUND"

    def __init__(self, tenant_id: str):
        self.tenant_id = tenant_id
        super().__init__(
            "tenants",
            tenant_id,
            f'Tenant with id "{tenant_id}" not found',
        )


class ReportNotFoundError(RecordNotFoundError):
    """Collection report with given ID is not in the archive."""

    code: str = "REPORT_NOT_FOUND"

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(
            "rent_reports",
            report_id,
            f'Collection report with id "{report_id}" not found',
        )


# Validation exceptions


class ValidationError(RentLedgerError):
    """Malformed input to a create or update operation."""

    code: str = "VALIDATION_ERROR"


class InvalidPaymentError(ValidationError):
    """Rent payment fields violate the payment invariants."""

    code: str = "INVALID_PAYMENT"

    def __init__(self, reason: str, field: str | None = None):
        self.reason = reason
        self.field = field
        super().__init__(reason)


class InvalidStatusTransitionError(ValidationError):
    """Requested status change is not a transition of the payment workflow."""

    code: str = "INVALID_STATUS_TRANSITION"

    def __init__(self, payment_id: str, from_status: str, to_status: str):
        self.payment_id = payment_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Payment {payment_id} cannot move from {from_status} to {to_status}"
        )


class ReceiptNotAllowedError(ValidationError):
    """Receipts are only issued for paid payments."""

    code: str = "RECEIPT_NOT_ALLOWED"

    def __init__(self, payment_id: str, status: str):
        self.payment_id = payment_id
        self.status = status
        super().__init__(
            f"Cannot generate receipt for unpaid payment {payment_id} "
            f"(status={status})"
        )


class DepositNotHeldError(ValidationError):
    """Deposit was already refunded or forfeited."""

    code: str = "DEPOSIT_NOT_HELD"

    def __init__(self, tenant_id: str, status: str, action: str):
        self.tenant_id = tenant_id
        self.status = status
        self.action = action
        super().__init__(
            f"Cannot {action} security deposit for tenant {tenant_id}: "
            f"deposit is {status}"
        )


class InvalidDeductionError(ValidationError):
    """Deduction or refund amount is not acceptable."""

    code: str = "INVALID_DEDUCTION"

    def __init__(self, tenant_id: str, reason: str):
        self.tenant_id = tenant_id
        self.reason = reason
        super().__init__(f"Invalid deposit change for tenant {tenant_id}: {reason}")


class DuplicateRecordError(ValidationError):
    """A record with the same id already exists in the collection."""

    code: str = "DUPLICATE_RECORD"

    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"Record {record_id} already exists in {collection}")


# Storage exceptions


class StorageError(RentLedgerError):
    """Base exception for record store failures."""

    code: str = "STORAGE_ERROR"


class QuotaExceededError(StorageError):
    """The record store has no room for another record."""

    code: str = "QUOTA_EXCEEDED"

    def __init__(self, collection: str, limit: int):
        self.collection = collection
        self.limit = limit
        super().__init__(
            f"Storage quota exceeded for {collection} (limit={limit})"
        )


class StorageUnavailableError(StorageError):
    """The record store backend cannot be reached."""

    code: str = "STORAGE_UNAVAILABLE"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Record store unavailable: {reason}")


# Concurrency exceptions


class ConcurrencyError(RentLedgerError):
    """Base exception for concurrent modification problems."""

    code: str = "CONCURRENCY_ERROR"


class OptimisticLockError(ConcurrencyError):
    """Record was modified by another writer since it was read."""

    code: str = "OPTIMISTIC_LOCK_CONFLICT"

    def __init__(
        self,
        collection: str,
        record_id: str,
        expected_version: int,
        actual_version: int,
    ):
        self.collection = collection
        self.record_id = record_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrent modification of {collection}/{record_id}: "
            f"expected version {expected_version}, found {actual_version}"
        )
