"""
Payment types — intents, states, receipts and outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from facepay.errors import PaymentError
from facepay.face import Photo
from facepay.ledger import Amount, Credential, to_decimal


# ═══════════════════════════════════════════════════════════════════════════════
# Payment State — Request Lifecycle
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentState(Enum):
    """
    State of one payment request.

    Lifecycle:
        RECEIVED → VERIFYING → VERIFIED → TRANSFERRING → TRANSFERRED
                 → REWARDING → COMPLETED
        VERIFYING    → REJECTED        (nothing external mutated)
        TRANSFERRING → TRANSFER_FAILED (no funds moved)
        REWARDING    → PARTIAL         (funds moved, reward missing/unknown)
    """

    RECEIVED = "RECEIVED"
    VERIFYING = "VERIFYING"
    VERIFIED = "VERIFIED"
    TRANSFERRING = "TRANSFERRING"
    TRANSFERRED = "TRANSFERRED"
    REWARDING = "REWARDING"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"
    TRANSFER_FAILED = "TRANSFER_FAILED"
    PARTIAL = "PARTIAL"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({
    PaymentState.COMPLETED,
    PaymentState.REJECTED,
    PaymentState.TRANSFER_FAILED,
    PaymentState.PARTIAL,
})

TRANSITIONS: dict[PaymentState, frozenset[PaymentState]] = {
    PaymentState.RECEIVED: frozenset({PaymentState.VERIFYING, PaymentState.REJECTED}),
    PaymentState.VERIFYING: frozenset({PaymentState.VERIFIED, PaymentState.REJECTED}),
    PaymentState.VERIFIED: frozenset({PaymentState.TRANSFERRING}),
    PaymentState.TRANSFERRING: frozenset({PaymentState.TRANSFERRED, PaymentState.TRANSFER_FAILED}),
    PaymentState.TRANSFERRED: frozenset({PaymentState.REWARDING}),
    PaymentState.REWARDING: frozenset({PaymentState.COMPLETED, PaymentState.PARTIAL}),
}
"""Allowed moves; terminal states have none."""


# ═══════════════════════════════════════════════════════════════════════════════
# Intent
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PaymentIntent:
    """
    One payment attempt.

    request_id must be fresh for every attempt, retries included: nothing
    here deduplicates a resubmitted intent.
    """

    payer_credential: Credential
    payee_address: str
    amount: Amount
    request_id: str
    photo: Photo


# ═══════════════════════════════════════════════════════════════════════════════
# Verification & Receipts
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class MatchedIdentity:
    """A face claim bound to the address the credential controls."""

    identity_key: str
    confidence: float


@dataclass(frozen=True, slots=True)
class Receipt:
    tx_id: str
    amount: Amount

    def to_dict(self) -> dict[str, Any]:
        return {"tx_id": self.tx_id, "amount": str(to_decimal(self.amount))}


# ═══════════════════════════════════════════════════════════════════════════════
# Outcome
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PaymentOutcome:
    """
    Terminal result of one PaymentIntent.

    failure is set for every state but COMPLETED. For PARTIAL it is the
    reward error while transfer_receipt still names the committed transfer.
    """

    request_id: str
    state: PaymentState
    payer_address: str | None = None
    confidence: float | None = None
    transfer_receipt: Receipt | None = None
    reward_receipt: Receipt | None = None
    failure: PaymentError | None = None
    history: tuple[PaymentState, ...] = field(default=())

    @property
    def succeeded(self) -> bool:
        return self.state is PaymentState.COMPLETED

    @property
    def funds_moved(self) -> bool:
        return self.transfer_receipt is not None

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe rendering: no credential, no stack detail."""
        return {
            "request_id": self.request_id,
            "state": self.state.value,
            "payer_address": self.payer_address,
            "confidence": self.confidence,
            "transfer_receipt": self.transfer_receipt.to_dict() if self.transfer_receipt else None,
            "reward_receipt": self.reward_receipt.to_dict() if self.reward_receipt else None,
            "failure": self.failure.to_dict() if self.failure else None,
            "history": [s.value for s in self.history],
        }


__all__ = (
    "PaymentState",
    "TERMINAL_STATES",
    "TRANSITIONS",
    "PaymentIntent",
    "MatchedIdentity",
    "Receipt",
    "PaymentOutcome",
)
