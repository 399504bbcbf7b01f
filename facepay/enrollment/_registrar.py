"""
Enrollment registrar — one face enrollment per identity.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, UTC

from kungfu import Result, Ok, Error

from facepay.errors import (
    ValidationError,
    UpstreamError,
    AlreadyEnrolled,
    StoreError,
    EnrollmentError,
    describe,
)
from facepay.enrollment._types import EnrolledIdentity
from facepay.enrollment._store import EnrollmentStore
from facepay.face import Photo, FaceIdentityResolver
from facepay.lift import guarded
from facepay.logging_config import get_logger

logger = get_logger(__name__)


class EnrollmentRegistrar:
    """
    enroll / is_enrolled / list_enrolled / clear_all over an EnrollmentStore.

    There is no re-enrollment path: a key that is stored, or whose
    enrollment is still in flight, answers AlreadyEnrolled.
    """

    def __init__(
        self,
        store: EnrollmentStore,
        resolver: FaceIdentityResolver,
        *,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._timeout = timeout
        self._in_flight: set[str] = set()
        self._in_flight_lock = asyncio.Lock()

    # ═══════════════════════════════════════════════════════════════════════
    # Writes
    # ═══════════════════════════════════════════════════════════════════════

    async def enroll(
        self,
        identity_key: str,
        photo: Photo,
    ) -> Result[EnrolledIdentity, EnrollmentError]:
        """
        Register photo with the face service under identity_key and store it.

        Errors:
            ValidationError: empty key or photo
            AlreadyEnrolled: key stored or being enrolled concurrently
            UpstreamError: face service failed, timed out or sent no template ref
            StoreError: storage backend failed
        """
        key = identity_key.strip() if identity_key else ""
        if not key:
            return Error(ValidationError("identity key is required"))
        if not photo.data:
            return Error(ValidationError("photo is required"))

        if not await self._reserve(key):
            return Error(AlreadyEnrolled(key))
        try:
            return await self._enroll_reserved(key, photo)
        finally:
            await self._release(key)

    async def clear_all(self) -> int:
        """Drop every enrollment. For tests and resets."""
        removed = await self._store.clear()
        logger.warning("Cleared %d face enrollments", removed)
        return removed

    # ═══════════════════════════════════════════════════════════════════════
    # Reads
    # ═══════════════════════════════════════════════════════════════════════

    async def is_enrolled(self, identity_key: str) -> bool:
        return await self._store.get(identity_key.strip()) is not None

    async def list_enrolled(self) -> frozenset[str]:
        return await self._store.keys()

    async def get(self, identity_key: str) -> EnrolledIdentity | None:
        return await self._store.get(identity_key.strip())

    # ═══════════════════════════════════════════════════════════════════════
    # Internals
    # ═══════════════════════════════════════════════════════════════════════

    async def _enroll_reserved(
        self,
        key: str,
        photo: Photo,
    ) -> Result[EnrolledIdentity, EnrollmentError]:
        existing = await guarded(
            lambda: self._store.get(key),
            on_error=lambda e: StoreError(f"enrollment lookup failed: {describe(e)}", e),
        )
        match existing:
            case Error(e):
                return Error(e)
            case Ok(found) if found is not None:
                return Error(AlreadyEnrolled(key))

        template = await guarded(
            lambda: self._resolver.enroll_template(key, photo),
            on_error=lambda e: UpstreamError.from_exception("face enrollment", e),
            timeout=self._timeout,
        )
        match template:
            case Error(e):
                logger.error("Face enrollment for %s failed: %s", key, e.message)
                return Error(e)
            case Ok(ref) if not ref or not isinstance(ref, str):
                logger.error("Face service returned no template reference for %s", key)
                return Error(UpstreamError("face service returned no template reference"))
            case Ok(ref):
                record = EnrolledIdentity(
                    identity_key=key,
                    external_template_ref=ref,
                    enrolled_at=datetime.now(UTC),
                )

        added = await guarded(
            lambda: self._store.add_if_absent(record),
            on_error=lambda e: StoreError(f"enrollment write failed: {describe(e)}", e),
        )
        match added:
            case Error(e):
                return Error(e)
            case Ok(False):
                return Error(AlreadyEnrolled(key))
            case Ok(_):
                logger.info("Enrolled %s (template %s)", key, record.external_template_ref)
                return Ok(record)

    async def _reserve(self, key: str) -> bool:
        async with self._in_flight_lock:
            if key in self._in_flight:
                return False
            self._in_flight.add(key)
            return True

    async def _release(self, key: str) -> None:
        async with self._in_flight_lock:
            self._in_flight.discard(key)


__all__ = ("EnrollmentRegistrar",)
