"""
Request registry — fresh request ids and outcome lookup.

Note: This is not deduplication. A reused request id is refused, never
answered from cache; a caller that lost its connection looks the outcome
up with get() instead of resubmitting.
"""

from __future__ import annotations

import asyncio
import heapq
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from enum import Enum, auto
from typing import Protocol

from facepay.payment._types import PaymentOutcome


class RequestState(Enum):
    """
    Lifecycle:
        IN_FLIGHT → SETTLED
                  → (expired)
    """

    IN_FLIGHT = auto()
    SETTLED = auto()


@dataclass(frozen=True, slots=True)
class RequestRecord:
    request_id: str
    state: RequestState
    outcome: PaymentOutcome | None
    created_at: datetime
    expires_at: datetime | None

    @property
    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return datetime.now(UTC) > self.expires_at


class RequestRegistry(Protocol):
    """Registry protocol. claim() must be atomic."""

    async def claim(self, request_id: str) -> bool:
        """Mark request_id in flight. False if it was seen before."""
        ...

    async def settle(self, outcome: PaymentOutcome) -> None:
        """Attach the terminal outcome to its request id."""
        ...

    async def get(self, request_id: str) -> RequestRecord | None:
        """Record for request_id, or None (unknown or expired)."""
        ...


class MemoryRequestRegistry:
    """
    In-memory request registry.

    ttl: how long a request id stays reserved after its last update.
    Expired records are evicted on every claim() and settle(), oldest
    first. With ttl=None nothing expires: every request id and its
    outcome are kept for the process lifetime, so size memory for it or
    pass a ttl.
    """

    def __init__(self, ttl: timedelta | None = None) -> None:
        self._ttl = ttl
        self._records: dict[str, RequestRecord] = {}
        self._expiry: list[tuple[datetime, str]] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._records)

    async def claim(self, request_id: str) -> bool:
        async with self._lock:
            now = datetime.now(UTC)
            self._evict_expired(now)

            if request_id in self._records:
                return False

            self._put(RequestRecord(
                request_id=request_id,
                state=RequestState.IN_FLIGHT,
                outcome=None,
                created_at=now,
                expires_at=now + self._ttl if self._ttl else None,
            ))
            return True

    async def settle(self, outcome: PaymentOutcome) -> None:
        async with self._lock:
            now = datetime.now(UTC)
            self._evict_expired(now)

            existing = self._records.get(outcome.request_id)
            self._put(RequestRecord(
                request_id=outcome.request_id,
                state=RequestState.SETTLED,
                outcome=outcome,
                created_at=existing.created_at if existing else now,
                expires_at=now + self._ttl if self._ttl else None,
            ))

    async def get(self, request_id: str) -> RequestRecord | None:
        async with self._lock:
            record = self._records.get(request_id)
            if record is None:
                return None
            if record.is_expired:
                del self._records[request_id]
                return None
            return record

    # ═══════════════════════════════════════════════════════════════════════
    # Internals
    # ═══════════════════════════════════════════════════════════════════════

    def _put(self, record: RequestRecord) -> None:
        self._records[record.request_id] = record
        if record.expires_at is not None:
            heapq.heappush(self._expiry, (record.expires_at, record.request_id))

    def _evict_expired(self, now: datetime) -> None:
        while self._expiry and self._expiry[0][0] < now:
            expires_at, request_id = heapq.heappop(self._expiry)
            record = self._records.get(request_id)
            # A settled record re-enters the heap with a later expiry
            if record is not None and record.expires_at == expires_at:
                del self._records[request_id]


__all__ = (
    "RequestState",
    "RequestRecord",
    "RequestRegistry",
    "MemoryRequestRegistry",
)
