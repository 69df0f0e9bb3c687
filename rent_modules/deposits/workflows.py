"""Deposit Tracker Workflows.

State machine for security deposit status.
"""

from rent_kernel.domain.workflow import Transition, Workflow
from rent_kernel.logging_config import get_logger

logger = get_logger("modules.deposits.workflows")


SECURITY_DEPOSIT_WORKFLOW = Workflow(
    name="security_deposit",
    description="Deposit held from move-in until refund or forfeiture",
    initial_state="held",
    states=(
        "held",
        "refunded",
        "forfeited",
    ),
    transitions=(
        Transition("held", "refunded", action="refund"),
        Transition("held", "forfeited", action="forfeit"),
    ),
    terminal_states=("refunded", "forfeited"),
)

logger.debug(
    "security_deposit_workflow_registered",
    extra={
        "workflow_name": SECURITY_DEPOSIT_WORKFLOW.name,
        "state_count": len(SECURITY_DEPOSIT_WORKFLOW.states),
        "transition_count": len(SECURITY_DEPOSIT_WORKFLOW.transitions),
    },
)
