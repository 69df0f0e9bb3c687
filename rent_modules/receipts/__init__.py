"""
Receipt Generator Module.

Issues one immutable receipt per paid rent payment.
"""

from rent_modules.receipts.models import RentPeriod, RentReceipt

__all__ = [
    "RentPeriod",
    "RentReceipt",
]
