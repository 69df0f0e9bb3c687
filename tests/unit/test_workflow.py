"""
Unit tests for workflow value objects and the two record lifecycles.
"""

import pytest

from rent_kernel.domain.workflow import Transition, Workflow
from rent_modules.deposits.workflows import SECURITY_DEPOSIT_WORKFLOW
from rent_modules.ledger.workflows import RENT_PAYMENT_WORKFLOW


class TestWorkflowValidation:
    """Workflow rejects malformed definitions at construction."""

    def test_initial_state_must_be_known(self):
        with pytest.raises(ValueError, match="initial state"):
            Workflow(
                name="bad", description="", initial_state="draft",
                states=("open",), transitions=(),
            )

    def test_transition_states_must_be_known(self):
        with pytest.raises(ValueError, match="unknown state"):
            Workflow(
                name="bad", description="", initial_state="open",
                states=("open",),
                transitions=(Transition("open", "closed", action="close"),),
            )

    def test_terminal_state_cannot_leave(self):
        with pytest.raises(ValueError, match="terminal"):
            Workflow(
                name="bad", description="", initial_state="open",
                states=("open", "closed"),
                transitions=(Transition("closed", "open", action="reopen"),),
                terminal_states=("closed",),
            )


class TestRentPaymentWorkflow:
    """Allowed and forbidden payment status changes."""

    @pytest.mark.parametrize(
        "from_state, to_state",
        [
            ("pending", "paid"),
            ("overdue", "paid"),
            ("partial", "paid"),
            ("pending", "overdue"),
            ("pending", "partial"),
            ("overdue", "partial"),
            ("partial", "overdue"),
        ],
    )
    def test_allowed(self, from_state, to_state):
        assert RENT_PAYMENT_WORKFLOW.allows(from_state, to_state)

    @pytest.mark.parametrize(
        "from_state, to_state",
        [
            ("paid", "pending"),
            ("paid", "overdue"),
            ("paid", "partial"),
            ("overdue", "pending"),
        ],
    )
    def test_forbidden(self, from_state, to_state):
        assert not RENT_PAYMENT_WORKFLOW.allows(from_state, to_state)

    def test_settlement_issues_receipt(self):
        settle = RENT_PAYMENT_WORKFLOW.find_transition("overdue", "paid")
        assert settle.action == "settle"
        assert settle.issues_receipt

    def test_paid_is_terminal(self):
        assert RENT_PAYMENT_WORKFLOW.actions_from("paid") == ()


class TestSecurityDepositWorkflow:
    """A deposit leaves held exactly once."""

    def test_actions_from_held(self):
        assert set(SECURITY_DEPOSIT_WORKFLOW.actions_from("held")) == {"refund", "forfeit"}

    @pytest.mark.parametrize("state", ["refunded", "forfeited"])
    def test_settled_states_are_final(self, state):
        assert SECURITY_DEPOSIT_WORKFLOW.actions_from(state) == ()
        assert not SECURITY_DEPOSIT_WORKFLOW.allows(state, "refunded")
