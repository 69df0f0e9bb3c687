"""
Deposit Tracker Module.

Security deposits held against a tenancy, their deductions and refunds,
plus move-in/move-out orchestration.
"""

from rent_modules.deposits.models import (
    DeductionCategory,
    DepositStatus,
    SecurityDeposit,
    SecurityDepositDeduction,
)
from rent_modules.deposits.workflows import SECURITY_DEPOSIT_WORKFLOW

__all__ = [
    "DeductionCategory",
    "DepositStatus",
    "SECURITY_DEPOSIT_WORKFLOW",
    "SecurityDeposit",
    "SecurityDepositDeduction",
]
