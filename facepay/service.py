"""
FacePayService — the operations an outer layer (HTTP, CLI) calls.

Built once per process with its collaborators injected; no module-level
state. Tests build a fresh instance each.
"""

from __future__ import annotations

from kungfu import Result

from facepay.config import Settings
from facepay.enrollment import (
    EnrolledIdentity,
    EnrollmentRegistrar,
    EnrollmentStore,
    MemoryEnrollmentStore,
)
from facepay.errors import EnrollmentError, UpstreamError, LedgerError
from facepay.face import Photo, IdentityClaim, FaceIdentityResolver, LuxandResolver
from facepay.ledger import Ledger, TransactionRecord
from facepay.lift import guarded
from facepay.logging_config import get_logger
from facepay.payment import (
    PaymentIntent,
    PaymentOutcome,
    PaymentOrchestrator,
    RequestRegistry,
    OutcomeHook,
)
from facepay.status import ServiceStatus, ServiceStatusRegistry

logger = get_logger(__name__)


class FacePayService:
    """
    enroll / is_enrolled / list_enrolled / clear_all / process_payment /
    get_status, plus recognize and get_transaction pass-throughs.
    """

    def __init__(
        self,
        *,
        registrar: EnrollmentRegistrar,
        orchestrator: PaymentOrchestrator,
        resolver: FaceIdentityResolver,
        ledger: Ledger,
        status: ServiceStatusRegistry,
        settings: Settings,
    ) -> None:
        self._registrar = registrar
        self._orchestrator = orchestrator
        self._resolver = resolver
        self._ledger = ledger
        self._status = status
        self._settings = settings

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        ledger: Ledger,
        resolver: FaceIdentityResolver | None = None,
        store: EnrollmentStore | None = None,
        requests: RequestRegistry | None = None,
        on_outcome: OutcomeHook | None = None,
    ) -> FacePayService:
        """
        Wire the service from settings.

        Without an explicit resolver, a LuxandResolver is built from
        face_api_url / face_api_token (ValueError if no token).
        ledger_client_ready in the status comes from the injected ledger's
        can_mint, not from settings.
        """
        if resolver is None:
            if not settings.face_api_token:
                raise ValueError("FACEPAY_FACE_API_TOKEN is required when no resolver is given")
            resolver = LuxandResolver(
                settings.face_api_token,
                base_url=settings.face_api_url,
                timeout=settings.face_timeout,
                min_confidence=settings.face_min_confidence,
            )

        registrar = EnrollmentRegistrar(
            store if store is not None else MemoryEnrollmentStore(),
            resolver,
            timeout=settings.face_timeout,
        )
        orchestrator = PaymentOrchestrator(
            resolver,
            ledger,
            requests=requests,
            resolver_timeout=settings.face_timeout,
            ledger_timeout=settings.ledger_timeout,
            on_outcome=on_outcome,
        )
        status = ServiceStatusRegistry.from_settings(settings, ledger_client_ready=ledger.can_mint)
        if not status.is_ready():
            logger.warning("FacePay service is not ready: %s", status.get_status().to_dict())

        logger.info(
            "FacePay service built on %s (reward contract: %s, admin: %s)",
            settings.ledger_network,
            "yes" if settings.reward_contract else "no",
            "yes" if settings.admin_credential else "no",
        )
        return cls(
            registrar=registrar,
            orchestrator=orchestrator,
            resolver=resolver,
            ledger=ledger,
            status=status,
            settings=settings,
        )

    # ═══════════════════════════════════════════════════════════════════════
    # Enrollment
    # ═══════════════════════════════════════════════════════════════════════

    async def enroll(self, identity_key: str, photo: Photo) -> Result[EnrolledIdentity, EnrollmentError]:
        return await self._registrar.enroll(identity_key, photo)

    async def is_enrolled(self, identity_key: str) -> bool:
        return await self._registrar.is_enrolled(identity_key)

    async def list_enrolled(self) -> frozenset[str]:
        return await self._registrar.list_enrolled()

    async def clear_all(self) -> int:
        return await self._registrar.clear_all()

    # ═══════════════════════════════════════════════════════════════════════
    # Payments
    # ═══════════════════════════════════════════════════════════════════════

    async def process_payment(self, intent: PaymentIntent) -> PaymentOutcome:
        return await self._orchestrator.process_payment(intent)

    def get_status(self) -> ServiceStatus:
        return self._status.get_status()

    # ═══════════════════════════════════════════════════════════════════════
    # Pass-throughs
    # ═══════════════════════════════════════════════════════════════════════

    async def recognize(self, photo: Photo) -> Result[IdentityClaim, UpstreamError]:
        """Face lookup without any ledger involvement."""
        return await guarded(
            lambda: self._resolver.resolve(photo),
            on_error=lambda e: UpstreamError.from_exception("face recognition", e),
            timeout=self._settings.face_timeout,
        )

    async def get_transaction(self, tx_id: str) -> Result[TransactionRecord, LedgerError]:
        return await guarded(
            lambda: self._ledger.get_transaction(tx_id),
            on_error=lambda e: LedgerError.from_exception("get_transaction", e),
            timeout=self._settings.ledger_timeout,
        )


__all__ = ("FacePayService",)
