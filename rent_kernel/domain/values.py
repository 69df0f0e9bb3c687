"""
Shared value enums used by the directory, ledger, receipts and reports.
"""

from enum import Enum


class PropertyType(Enum):
    """Kind of property a payment or tenancy refers to."""
    BUILDING = "building"
    FLAT = "flat"
    LAND = "land"


class PaymentMethod(Enum):
    """How rent was (or is expected to be) paid."""
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"
    UPI = "upi"
    CARD = "card"
