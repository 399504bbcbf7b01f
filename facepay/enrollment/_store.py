"""
Enrollment store — identity key → EnrolledIdentity.

The store is a total function: every key maps to exactly one record or
to nothing. add_if_absent is the only write that creates records and is
atomic, so a record, once stored, is never overwritten.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from facepay.enrollment._types import EnrolledIdentity


# ═══════════════════════════════════════════════════════════════════════════════
# Store Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class EnrollmentStore(Protocol):
    """
    Enrollment storage protocol.

    Implement this for custom backends. Methods raise on backend failure;
    the registrar turns that into StoreError where it returns Results.
    """

    async def get(self, identity_key: str) -> EnrolledIdentity | None:
        """Record for identity_key, or None."""
        ...

    async def add_if_absent(self, record: EnrolledIdentity) -> bool:
        """
        Atomically insert record.

        Returns True if stored, False if the key already exists (the
        existing record is left untouched).
        """
        ...

    async def keys(self) -> frozenset[str]:
        """All enrolled identity keys."""
        ...

    async def clear(self) -> int:
        """Remove every record. Returns how many were removed."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Store
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryEnrollmentStore:
    """
    In-process enrollment store.

    Note: Single instance only, nothing survives a restart.
    One lock covers reads and writes, so a reader never sees a record
    that is half-written or concurrently cleared.
    """

    def __init__(self) -> None:
        self._records: dict[str, EnrolledIdentity] = {}
        self._lock = asyncio.Lock()

    async def get(self, identity_key: str) -> EnrolledIdentity | None:
        async with self._lock:
            return self._records.get(identity_key)

    async def add_if_absent(self, record: EnrolledIdentity) -> bool:
        async with self._lock:
            if record.identity_key in self._records:
                return False
            self._records[record.identity_key] = record
            return True

    async def keys(self) -> frozenset[str]:
        async with self._lock:
            return frozenset(self._records)

    async def clear(self) -> int:
        async with self._lock:
            removed = len(self._records)
            self._records.clear()
            return removed


__all__ = ("EnrollmentStore", "MemoryEnrollmentStore")
