"""
Payment Ledger Module.

Owns the lifecycle of ``RentPayment`` obligations: recording, settlement,
the overdue sweep and monthly generation.  The service lives in
``rent_modules.ledger.service``.
"""

from rent_modules.ledger.config import LedgerConfig
from rent_modules.ledger.models import PaymentStatus, RentPayment
from rent_modules.ledger.workflows import RENT_PAYMENT_WORKFLOW

__all__ = [
    "LedgerConfig",
    "PaymentStatus",
    "RENT_PAYMENT_WORKFLOW",
    "RentPayment",
]
