"""
Payment orchestrator — verify → transfer → reward → settle.

Two independent, non-transactional systems are chained here: the face
service and the ledger. The rules that follow from that:

- Nothing touches the ledger's funds until the face claim and the
  credential name the same identity.
- A transfer failure is clean (TRANSFER_FAILED); the caller may retry
  with a new request id.
- A reward failure after a committed transfer is PARTIAL. The transfer
  is never retried and never reported as if no funds moved.
- Once the transfer has committed, the outcome is always produced, even
  if the caller is cancelled: the reward phase runs shielded and its
  outcome is logged (and recorded, with a registry) on its own.

No step is retried automatically.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

from kungfu import Result, Ok, Error

from facepay.errors import (
    ValidationError,
    UpstreamError,
    CredentialError,
    LedgerError,
    PaymentError,
    VerificationError,
)
from facepay.face import IdentityClaim, FaceIdentityResolver
from facepay.ledger import Amount, Ledger, InvalidCredential
from facepay.lift import guarded
from facepay.logging_config import get_logger
from facepay.payment._types import (
    PaymentState,
    TRANSITIONS,
    PaymentIntent,
    MatchedIdentity,
    Receipt,
    PaymentOutcome,
)
from facepay.payment._validate import validate_intent
from facepay.payment._matcher import IdentityMatcher
from facepay.payment._requests import RequestRegistry

logger = get_logger(__name__)

type OutcomeHook = Callable[[PaymentOutcome], None]


# ═══════════════════════════════════════════════════════════════════════════════
# Payment Run — per-request state tracker
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class _PaymentRun:
    """Mutable progress of one request; frozen into a PaymentOutcome at the end."""

    request_id: str
    state: PaymentState = PaymentState.RECEIVED
    history: list[PaymentState] = field(default_factory=lambda: [PaymentState.RECEIVED])
    payer_address: str | None = None
    confidence: float | None = None
    transfer_receipt: Receipt | None = None
    reward_receipt: Receipt | None = None
    claimed: bool = False

    def advance(self, state: PaymentState) -> None:
        if state not in TRANSITIONS.get(self.state, frozenset()):
            raise RuntimeError(f"illegal payment transition {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)
        logger.debug("Payment %s → %s", self.request_id, state.value)

    def outcome(self, failure: PaymentError | None) -> PaymentOutcome:
        return PaymentOutcome(
            request_id=self.request_id,
            state=self.state,
            payer_address=self.payer_address,
            confidence=self.confidence,
            transfer_receipt=self.transfer_receipt,
            reward_receipt=self.reward_receipt,
            failure=failure,
            history=tuple(self.history),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Orchestrator
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentOrchestrator:
    """
    Drives one PaymentIntent to exactly one terminal PaymentOutcome.

    Args:
        resolver: face service
        ledger: ledger client
        matcher: claim ↔ address binding (default IdentityMatcher())
        requests: optional registry enforcing fresh request ids
        resolver_timeout: per-call timeout for the face service (seconds)
        ledger_timeout: per-call timeout for the ledger (seconds)
        on_outcome: called with every terminal outcome

    Example:
        orchestrator = PaymentOrchestrator(resolver, ledger, ledger_timeout=30)
        outcome = await orchestrator.process_payment(intent)

        match outcome.state:
            case PaymentState.COMPLETED:
                ...
            case PaymentState.PARTIAL:
                reconcile(outcome.transfer_receipt)
    """

    def __init__(
        self,
        resolver: FaceIdentityResolver,
        ledger: Ledger,
        *,
        matcher: IdentityMatcher | None = None,
        requests: RequestRegistry | None = None,
        resolver_timeout: float | None = None,
        ledger_timeout: float | None = None,
        on_outcome: OutcomeHook | None = None,
    ) -> None:
        self._resolver = resolver
        self._ledger = ledger
        self._matcher = matcher if matcher is not None else IdentityMatcher()
        self._requests = requests
        self._resolver_timeout = resolver_timeout
        self._ledger_timeout = ledger_timeout
        self._on_outcome = on_outcome
        self._detached: set[asyncio.Future[PaymentOutcome]] = set()

    async def process_payment(self, intent: PaymentIntent) -> PaymentOutcome:
        run = _PaymentRun(request_id=intent.request_id or "")

        # RECEIVED → VERIFYING
        match validate_intent(intent):
            case Error(e):
                return await self._finish(run, PaymentState.REJECTED, e)
            case Ok(valid):
                # Amount floored to ledger precision from here on
                intent = valid

        if self._requests is not None:
            if not await self._requests.claim(intent.request_id):
                return await self._finish(
                    run,
                    PaymentState.REJECTED,
                    ValidationError(f"request id {intent.request_id} was already used"),
                )
            run.claimed = True

        run.advance(PaymentState.VERIFYING)

        # VERIFYING → VERIFIED | REJECTED
        match await self._verify(run, intent):
            case Error(e):
                return await self._finish(run, PaymentState.REJECTED, e)
            case Ok(matched):
                run.confidence = matched.confidence
                run.advance(PaymentState.VERIFIED)

        # VERIFIED → TRANSFERRING → TRANSFERRED | TRANSFER_FAILED
        run.advance(PaymentState.TRANSFERRING)
        try:
            transferred = await self._transfer(intent)
        except asyncio.CancelledError:
            logger.warning(
                "Payment %s cancelled while transferring; ledger state for this request is unknown",
                run.request_id,
            )
            raise

        match transferred:
            case Error(e):
                return await self._finish(run, PaymentState.TRANSFER_FAILED, e)
            case Ok(receipt):
                run.transfer_receipt = receipt
                run.advance(PaymentState.TRANSFERRED)

        # TRANSFERRED → REWARDING → COMPLETED | PARTIAL
        # Funds have moved: from here on the outcome must survive cancellation.
        settlement = asyncio.ensure_future(self._reward(run, matched.identity_key, intent.amount))
        self._detached.add(settlement)
        settlement.add_done_callback(self._detached.discard)
        try:
            return await asyncio.shield(settlement)
        except asyncio.CancelledError:
            logger.warning(
                "Payment %s: caller cancelled after transfer %s committed; settling in background",
                run.request_id,
                receipt.tx_id,
            )
            settlement.add_done_callback(_report_detached(run.request_id, receipt.tx_id))
            raise

    # ═══════════════════════════════════════════════════════════════════════
    # Steps
    # ═══════════════════════════════════════════════════════════════════════

    async def _verify(
        self,
        run: _PaymentRun,
        intent: PaymentIntent,
    ) -> Result[MatchedIdentity, VerificationError]:
        resolved = await guarded(
            lambda: self._resolver.resolve(intent.photo),
            on_error=lambda e: UpstreamError.from_exception("face recognition", e),
            timeout=self._resolver_timeout,
        )
        match resolved:
            case Error(e):
                return Error(e)
            case Ok(claim) if not isinstance(claim, IdentityClaim):
                return Error(UpstreamError("face service returned a malformed claim"))
            case Ok(claim):
                logger.debug(
                    "Payment %s: face claim recognized=%s confidence=%.1f",
                    run.request_id,
                    claim.recognized,
                    claim.confidence,
                )

        derived = await guarded(
            lambda: self._ledger.derive_address(intent.payer_credential),
            on_error=_derivation_error,
            timeout=self._ledger_timeout,
        )
        match derived:
            case Error(e):
                return Error(e)
            case Ok(address) if not address:
                return Error(CredentialError("credential does not resolve to an address"))
            case Ok(address):
                run.payer_address = address
                return self._matcher.match(claim, address)

    async def _transfer(self, intent: PaymentIntent) -> Result[Receipt, LedgerError]:
        submitted = await guarded(
            lambda: self._ledger.transfer(
                intent.payer_credential,
                intent.payee_address,
                intent.amount,
            ),
            on_error=lambda e: LedgerError.from_exception("transfer", e),
            timeout=self._ledger_timeout,
        )
        match submitted:
            case Error(e):
                return Error(e)
            case Ok(ledger_receipt) if not ledger_receipt.succeeded:
                return Error(LedgerError(
                    f"transfer {ledger_receipt.tx_id} finished with status {ledger_receipt.status}",
                    "transfer",
                ))
            case Ok(ledger_receipt):
                return Ok(Receipt(tx_id=ledger_receipt.tx_id, amount=intent.amount))

    async def _reward(self, run: _PaymentRun, payer: str, amount: Amount) -> PaymentOutcome:
        run.advance(PaymentState.REWARDING)

        # Reward policy: one reward unit per transferred unit, to the payer.
        minted = await guarded(
            lambda: self._ledger.mint_reward(payer, amount),
            on_error=lambda e: LedgerError.from_exception("mint_reward", e),
            timeout=self._ledger_timeout,
        )
        match minted:
            case Error(e):
                return await self._finish(run, PaymentState.PARTIAL, e)
            case Ok(ledger_receipt) if not ledger_receipt.succeeded:
                return await self._finish(
                    run,
                    PaymentState.PARTIAL,
                    LedgerError(
                        f"reward mint {ledger_receipt.tx_id} finished with status {ledger_receipt.status}",
                        "mint_reward",
                    ),
                )
            case Ok(ledger_receipt):
                run.reward_receipt = Receipt(tx_id=ledger_receipt.tx_id, amount=amount)
                return await self._finish(run, PaymentState.COMPLETED)

    # ═══════════════════════════════════════════════════════════════════════
    # Settlement & reporting
    # ═══════════════════════════════════════════════════════════════════════

    async def _finish(
        self,
        run: _PaymentRun,
        state: PaymentState,
        failure: PaymentError | None = None,
    ) -> PaymentOutcome:
        run.advance(state)
        outcome = run.outcome(failure)
        _log_outcome(outcome)

        if run.claimed and self._requests is not None:
            requests = self._requests
            recorded = await guarded(lambda: requests.settle(outcome), on_error=lambda e: e)
            match recorded:
                case Error(e):
                    logger.error(
                        "Payment %s: could not record outcome %s",
                        outcome.request_id,
                        outcome.state.value,
                        exc_info=e,
                    )

        if self._on_outcome is not None:
            try:
                self._on_outcome(outcome)
            except Exception:
                logger.exception("Payment %s: outcome hook failed", outcome.request_id)

        return outcome


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def _derivation_error(exc: Exception) -> VerificationError:
    if isinstance(exc, InvalidCredential):
        return CredentialError("credential is malformed or unusable", exc)
    return UpstreamError.from_exception("address derivation", exc)


def _log_outcome(outcome: PaymentOutcome) -> None:
    match outcome.state:
        case PaymentState.COMPLETED:
            logger.info(
                "Payment %s completed: transfer %s, reward %s",
                outcome.request_id,
                outcome.transfer_receipt.tx_id if outcome.transfer_receipt else None,
                outcome.reward_receipt.tx_id if outcome.reward_receipt else None,
            )
        case PaymentState.PARTIAL:
            logger.error(
                "Payment %s PARTIAL: transfer %s committed but reward failed (%s); reconcile the reward",
                outcome.request_id,
                outcome.transfer_receipt.tx_id if outcome.transfer_receipt else None,
                outcome.failure.message if outcome.failure else "unknown",
            )
        case _:
            logger.warning(
                "Payment %s %s: %s",
                outcome.request_id,
                outcome.state.value,
                outcome.failure.message if outcome.failure else "unknown",
            )


def _report_detached(
    request_id: str,
    transfer_tx: str,
) -> Callable[[asyncio.Future[PaymentOutcome]], None]:
    def report(task: asyncio.Future[PaymentOutcome]) -> None:
        if task.cancelled():
            logger.error(
                "Payment %s: settlement cancelled after transfer %s; reward state unknown",
                request_id,
                transfer_tx,
            )
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Payment %s: settlement crashed after transfer %s",
                request_id,
                transfer_tx,
                exc_info=exc,
            )
            return
        logger.info(
            "Payment %s settled without its caller: %s",
            request_id,
            task.result().state.value,
        )

    return report


__all__ = ("PaymentOrchestrator", "OutcomeHook")
