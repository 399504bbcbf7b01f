"""
Payment — face-verified transfer with a loyalty reward.

    from facepay import payment as P

    orchestrator = P.PaymentOrchestrator(resolver, ledger, ledger_timeout=30)
    outcome = await orchestrator.process_payment(P.PaymentIntent(
        payer_credential=Credential(key),
        payee_address=merchant,
        amount=5,
        request_id=str(uuid.uuid4()),
        photo=Photo(jpeg_bytes),
    ))

Lifecycle:

    RECEIVED → VERIFYING → VERIFIED → TRANSFERRING → TRANSFERRED → REWARDING → COMPLETED
                   │                        │                          │
                   ▼                        ▼                          ▼
               REJECTED              TRANSFER_FAILED                PARTIAL
        (nothing mutated)            (no funds moved)     (funds moved, reward missing)
"""

from facepay.payment._types import (
    PaymentState,
    TERMINAL_STATES,
    TRANSITIONS,
    PaymentIntent,
    MatchedIdentity,
    Receipt,
    PaymentOutcome,
)
from facepay.payment._validate import validate_intent
from facepay.payment._matcher import normalize_identity, IdentityMatcher
from facepay.payment._requests import (
    RequestState,
    RequestRecord,
    RequestRegistry,
    MemoryRequestRegistry,
)
from facepay.payment._orchestrator import PaymentOrchestrator, OutcomeHook

__all__ = (
    # Types
    "PaymentState",
    "TERMINAL_STATES",
    "TRANSITIONS",
    "PaymentIntent",
    "MatchedIdentity",
    "Receipt",
    "PaymentOutcome",
    # Validation & matching
    "validate_intent",
    "normalize_identity",
    "IdentityMatcher",
    # Request registry
    "RequestState",
    "RequestRecord",
    "RequestRegistry",
    "MemoryRequestRegistry",
    # Orchestrator
    "PaymentOrchestrator",
    "OutcomeHook",
)
