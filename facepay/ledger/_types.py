"""
Ledger types — credentials, receipts, transaction records, amounts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_FLOOR
from enum import Enum

# ═══════════════════════════════════════════════════════════════════════════════
# Amounts — fixed-point, 8 decimals
# ═══════════════════════════════════════════════════════════════════════════════

DECIMALS = 8
BASE_UNITS_PER_COIN = 10**DECIMALS

type Amount = int | float | Decimal
"""Amount in whole ledger units (1 unit == 10**8 base units)."""


def to_decimal(amount: Amount) -> Decimal:
    """Exact Decimal for an amount; floats go through their shortest repr."""
    if isinstance(amount, bool):
        raise TypeError("amount must be a number, not bool")
    if isinstance(amount, float):
        return Decimal(repr(amount))
    if isinstance(amount, (int, Decimal)):
        return Decimal(amount)
    raise TypeError(f"amount must be a number, got {type(amount).__name__}")


def to_base_units(amount: Amount) -> int:
    """Whole units → base units, rounding down."""
    value = to_decimal(amount)
    if not value.is_finite():
        raise ValueError("amount must be finite")
    return int((value * BASE_UNITS_PER_COIN).to_integral_value(rounding=ROUND_FLOOR))


def from_base_units(base_units: int) -> Decimal:
    return Decimal(base_units) / BASE_UNITS_PER_COIN


# ═══════════════════════════════════════════════════════════════════════════════
# Credential — secret key material
# ═══════════════════════════════════════════════════════════════════════════════


class Credential:
    """
    Secret proving control over a ledger address.

    Supplied per request, never persisted or logged: repr/str are redacted
    and the secret is only reachable through reveal().
    """

    __slots__ = ("_secret",)

    def __init__(self, secret: str) -> None:
        self._secret = secret

    def reveal(self) -> str:
        return self._secret

    def __bool__(self) -> bool:
        return bool(self._secret and self._secret.strip())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Credential):
            return NotImplemented
        return self._secret == other._secret

    def __hash__(self) -> int:
        return hash(self._secret)

    def __repr__(self) -> str:
        return "Credential(<redacted>)"

    __str__ = __repr__


# ═══════════════════════════════════════════════════════════════════════════════
# Receipts & Records
# ═══════════════════════════════════════════════════════════════════════════════

SUCCESS = "success"


@dataclass(frozen=True, slots=True)
class LedgerReceipt:
    """What the ledger answers for a submitted transaction."""

    tx_id: str
    status: str = SUCCESS

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCESS


class TxKind(Enum):
    TRANSFER = "transfer"
    MINT = "mint"


@dataclass(frozen=True, slots=True)
class TransactionRecord:
    """A committed ledger transaction. amount is in whole units."""

    tx_id: str
    kind: TxKind
    sender: str | None
    recipient: str
    amount: Decimal
    status: str
    created_at: datetime


# ═══════════════════════════════════════════════════════════════════════════════
# Collaborator exceptions
# ═══════════════════════════════════════════════════════════════════════════════


class LedgerClientError(Exception):
    """Ledger refused or failed an operation."""


class InvalidCredential(LedgerClientError):
    """Credential is malformed or cannot control an address."""


class TransactionNotFound(LedgerClientError):
    """No transaction with the given id."""


__all__ = (
    "DECIMALS",
    "BASE_UNITS_PER_COIN",
    "Amount",
    "to_decimal",
    "to_base_units",
    "from_base_units",
    "Credential",
    "SUCCESS",
    "LedgerReceipt",
    "TxKind",
    "TransactionRecord",
    "LedgerClientError",
    "InvalidCredential",
    "TransactionNotFound",
)
