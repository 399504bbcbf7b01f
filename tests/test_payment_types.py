"""Tests for payment states, receipts and outcome rendering."""

from __future__ import annotations

from decimal import Decimal

from facepay.errors import LedgerError
from facepay.payment import (
    PaymentOutcome,
    PaymentState,
    Receipt,
    TERMINAL_STATES,
    TRANSITIONS,
)


class TestStateMachine:
    def test_terminal_states_have_no_exits(self):
        for state in TERMINAL_STATES:
            assert state.is_terminal
            assert state not in TRANSITIONS

    def test_every_non_terminal_state_can_move(self):
        for state in PaymentState:
            if not state.is_terminal:
                assert TRANSITIONS[state]

    def test_rejection_only_before_transfer(self):
        sources = {s for s, targets in TRANSITIONS.items() if PaymentState.REJECTED in targets}

        assert sources == {PaymentState.RECEIVED, PaymentState.VERIFYING}


class TestReceipt:
    def test_amount_rendered_as_decimal_string(self):
        assert Receipt("tx-1", Decimal("0.12345678")).to_dict() == {"tx_id": "tx-1", "amount": "0.12345678"}

    def test_float_amount_uses_shortest_repr(self):
        assert Receipt("tx-1", 0.1).to_dict()["amount"] == "0.1"


class TestPaymentOutcome:
    def test_partial_keeps_transfer(self):
        outcome = PaymentOutcome(
            request_id="req-1",
            state=PaymentState.PARTIAL,
            transfer_receipt=Receipt("tx-1", Decimal("5")),
            failure=LedgerError("mint_reward failed: boom", "mint_reward"),
        )

        assert not outcome.succeeded
        assert outcome.funds_moved
        assert outcome.to_dict()["transfer_receipt"] == {"tx_id": "tx-1", "amount": "5"}
        assert outcome.to_dict()["reward_receipt"] is None

    def test_rejected_moves_nothing(self):
        outcome = PaymentOutcome(request_id="req-1", state=PaymentState.REJECTED)

        assert not outcome.funds_moved
        assert outcome.to_dict()["history"] == []
