"""
Error taxonomy — typed, tagged failures.

Errors are values: they travel inside kungfu `Error(...)` and are told
apart by `kind`, never by message text. `message` is the human-readable
reason shown to callers; `cause` keeps the originating exception for
logs and is never rendered.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar


# ═══════════════════════════════════════════════════════════════════════════════
# Error Kind
# ═══════════════════════════════════════════════════════════════════════════════


class ErrorKind(Enum):
    """Machine-readable failure kinds."""

    VALIDATION = auto()  # Bad input, no external effect
    UPSTREAM = auto()  # Face service unreachable / malformed response
    CREDENTIAL = auto()  # Malformed or unusable credential
    NOT_RECOGNIZED = auto()  # No enrolled face matched the photo
    IDENTITY_MISMATCH = auto()  # Face and credential name different identities
    LEDGER = auto()  # Transfer / mint / query failure, timeouts included
    ALREADY_ENROLLED = auto()  # identity key already has a template
    STORE = auto()  # Enrollment storage backend failure


class _Tagged:
    """Shared rendering for all error values."""

    __slots__ = ()

    kind: ClassVar[ErrorKind]

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.name, "message": self.message}  # type: ignore[attr-defined]


def describe(exc: BaseException) -> str:
    """Short, stack-free description of a collaborator exception."""
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return "timed out"
    text = str(exc).strip()
    return text or type(exc).__name__


# ═══════════════════════════════════════════════════════════════════════════════
# Error Values
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ValidationError(_Tagged):
    message: str

    kind: ClassVar[ErrorKind] = ErrorKind.VALIDATION


@dataclass(frozen=True, slots=True)
class UpstreamError(_Tagged):
    message: str
    cause: BaseException | None = field(default=None, repr=False, compare=False)

    kind: ClassVar[ErrorKind] = ErrorKind.UPSTREAM

    @classmethod
    def from_exception(cls, what: str, exc: BaseException) -> UpstreamError:
        return cls(f"{what} failed: {describe(exc)}", exc)


@dataclass(frozen=True, slots=True)
class CredentialError(_Tagged):
    message: str
    cause: BaseException | None = field(default=None, repr=False, compare=False)

    kind: ClassVar[ErrorKind] = ErrorKind.CREDENTIAL


@dataclass(frozen=True, slots=True)
class NotRecognized(_Tagged):
    message: str = "customer not recognized, enroll a face first"

    kind: ClassVar[ErrorKind] = ErrorKind.NOT_RECOGNIZED


@dataclass(frozen=True, slots=True)
class IdentityMismatch(_Tagged):
    message: str = "recognized face does not match the supplied credential"

    kind: ClassVar[ErrorKind] = ErrorKind.IDENTITY_MISMATCH


@dataclass(frozen=True, slots=True)
class LedgerError(_Tagged):
    """
    Ledger operation failure.

    operation: which ledger call failed ("transfer", "mint_reward", ...).
    """

    message: str
    operation: str
    cause: BaseException | None = field(default=None, repr=False, compare=False)

    kind: ClassVar[ErrorKind] = ErrorKind.LEDGER

    @classmethod
    def from_exception(cls, operation: str, exc: BaseException) -> LedgerError:
        return cls(f"{operation} failed: {describe(exc)}", operation, exc)

    def to_dict(self) -> dict[str, str]:
        return {
            "kind": self.kind.name,
            "message": self.message,
            "operation": self.operation,
        }


@dataclass(frozen=True, slots=True)
class AlreadyEnrolled(_Tagged):
    identity_key: str

    kind: ClassVar[ErrorKind] = ErrorKind.ALREADY_ENROLLED

    @property
    def message(self) -> str:
        return f"identity {self.identity_key} is already enrolled"


@dataclass(frozen=True, slots=True)
class StoreError(_Tagged):
    """Enrollment storage failure."""

    message: str
    cause: BaseException | None = field(default=None, repr=False, compare=False)

    kind: ClassVar[ErrorKind] = ErrorKind.STORE


# ═══════════════════════════════════════════════════════════════════════════════
# Unions
# ═══════════════════════════════════════════════════════════════════════════════

type MismatchError = NotRecognized | IdentityMismatch
"""Failures of binding a face claim to a credential."""

type VerificationError = ValidationError | UpstreamError | CredentialError | MismatchError
"""Anything that ends a payment in REJECTED."""

type PaymentError = VerificationError | LedgerError
"""Any failure a payment outcome can carry."""

type EnrollmentError = ValidationError | AlreadyEnrolled | UpstreamError | StoreError
"""Failures of enroll()."""


__all__ = (
    "ErrorKind",
    "describe",
    "ValidationError",
    "UpstreamError",
    "CredentialError",
    "NotRecognized",
    "IdentityMismatch",
    "LedgerError",
    "AlreadyEnrolled",
    "StoreError",
    "MismatchError",
    "VerificationError",
    "PaymentError",
    "EnrollmentError",
)
