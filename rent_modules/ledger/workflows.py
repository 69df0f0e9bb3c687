"""
Payment Ledger Workflows.

State machine for rent payment status.
"""

from rent_kernel.domain.workflow import Guard, Transition, Workflow
from rent_kernel.logging_config import get_logger

logger = get_logger("modules.ledger.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

PAID_DATE_PRESENT = Guard(
    name="paid_date_present",
    description="Settlement carries the date the money was received",
)

DUE_DATE_PASSED = Guard(
    name="due_date_passed",
    description="Due date is before today",
)


# -----------------------------------------------------------------------------
# Rent Payment Workflow
# -----------------------------------------------------------------------------

RENT_PAYMENT_WORKFLOW = Workflow(
    name="rent_payment",
    description="Rent obligation lifecycle from creation to settlement",
    initial_state="pending",
    states=(
        "pending",
        "overdue",
        "partial",
        "paid",
    ),
    transitions=(
        Transition("pending", "paid", action="settle", guard=PAID_DATE_PRESENT, issues_receipt=True),
        Transition("overdue", "paid", action="settle", guard=PAID_DATE_PRESENT, issues_receipt=True),
        Transition("partial", "paid", action="settle", guard=PAID_DATE_PRESENT, issues_receipt=True),
        Transition("pending", "overdue", action="sweep_overdue", guard=DUE_DATE_PASSED),
        Transition("pending", "partial", action="record_partial"),
        Transition("overdue", "partial", action="record_partial"),
        Transition("partial", "overdue", action="mark_overdue"),
    ),
    terminal_states=("paid",),
)

logger.debug(
    "rent_payment_workflow_registered",
    extra={
        "workflow_name": RENT_PAYMENT_WORKFLOW.name,
        "state_count": len(RENT_PAYMENT_WORKFLOW.states),
        "transition_count": len(RENT_PAYMENT_WORKFLOW.transitions),
        "initial_state": RENT_PAYMENT_WORKFLOW.initial_state,
    },
)
