"""
MemoryLedger — in-process ledger for development and tests.

Note: Single process only. Balances and history vanish with it.
"""

from __future__ import annotations

import asyncio
import hashlib
import uuid
from datetime import datetime, UTC

from facepay.ledger._types import (
    SUCCESS,
    Amount,
    Credential,
    LedgerReceipt,
    TxKind,
    TransactionRecord,
    LedgerClientError,
    InvalidCredential,
    TransactionNotFound,
    to_base_units,
    from_base_units,
)
from facepay.logging_config import get_logger

logger = get_logger(__name__)

KEY_BYTES = 32


def address_for(secret: str) -> str:
    """Address derived from a hex private key: 0x + sha3-256(key)."""
    raw = secret.strip()
    if raw.lower().startswith("0x"):
        raw = raw[2:]
    try:
        key = bytes.fromhex(raw)
    except ValueError:
        raise InvalidCredential("credential is not valid hex") from None
    if len(key) != KEY_BYTES:
        raise InvalidCredential(f"credential must be {KEY_BYTES} bytes")
    return "0x" + hashlib.sha3_256(key).hexdigest()


class MemoryLedger:
    """
    Ledger kept in a dict.

    Minting requires both a reward contract and an admin credential, the
    same preconditions a real deployment has.

    Example:
        ledger = MemoryLedger(reward_contract="0xfeed", admin_credential=admin_key)
        ledger.fund(address_for(customer_key), 10)
        receipt = await ledger.transfer(Credential(customer_key), merchant, 5)
    """

    def __init__(
        self,
        *,
        network: str = "devnet",
        reward_contract: str | None = None,
        admin_credential: str | None = None,
    ) -> None:
        self.network = network
        self.reward_contract = reward_contract
        self._admin_address = address_for(admin_credential) if admin_credential else None
        self._balances: dict[str, int] = {}
        self._rewards: dict[str, int] = {}
        self._transactions: dict[str, TransactionRecord] = {}
        self._lock = asyncio.Lock()

    # ═══════════════════════════════════════════════════════════════════════
    # Seeding & inspection
    # ═══════════════════════════════════════════════════════════════════════

    def fund(self, address: str, amount: Amount) -> None:
        """Faucet: credit amount to address."""
        key = _normalize(address)
        self._balances[key] = self._balances.get(key, 0) + to_base_units(amount)

    def balance(self, address: str) -> int:
        """Balance in base units."""
        return self._balances.get(_normalize(address), 0)

    def reward_balance(self, address: str) -> int:
        """Reward token balance in base units."""
        return self._rewards.get(_normalize(address), 0)

    @property
    def can_mint(self) -> bool:
        return bool(self.reward_contract) and self._admin_address is not None

    @property
    def transaction_count(self) -> int:
        return len(self._transactions)

    # ═══════════════════════════════════════════════════════════════════════
    # Ledger
    # ═══════════════════════════════════════════════════════════════════════

    async def derive_address(self, credential: Credential) -> str:
        return address_for(credential.reveal())

    async def transfer(
        self,
        credential: Credential,
        to_address: str,
        amount: Amount,
    ) -> LedgerReceipt:
        sender = address_for(credential.reveal())
        recipient = _normalize(to_address)
        units = _positive_units(amount)

        async with self._lock:
            available = self._balances.get(sender, 0)
            if available < units:
                raise LedgerClientError(
                    f"insufficient balance: have {from_base_units(available)}, need {from_base_units(units)}"
                )
            self._balances[sender] = available - units
            self._balances[recipient] = self._balances.get(recipient, 0) + units
            record = self._record(TxKind.TRANSFER, sender, recipient, units)

        logger.debug("Transfer %s: %s -> %s (%s)", record.tx_id, sender, recipient, record.amount)
        return LedgerReceipt(tx_id=record.tx_id, status=record.status)

    async def mint_reward(self, to_address: str, amount: Amount) -> LedgerReceipt:
        if not self.reward_contract:
            raise LedgerClientError("reward contract not configured")
        if self._admin_address is None:
            raise LedgerClientError("admin credential not configured")

        recipient = _normalize(to_address)
        units = _positive_units(amount)

        async with self._lock:
            self._rewards[recipient] = self._rewards.get(recipient, 0) + units
            record = self._record(TxKind.MINT, self._admin_address, recipient, units)

        logger.debug("Mint %s: %s reward to %s", record.tx_id, record.amount, recipient)
        return LedgerReceipt(tx_id=record.tx_id, status=record.status)

    async def get_transaction(self, tx_id: str) -> TransactionRecord:
        record = self._transactions.get(tx_id)
        if record is None:
            raise TransactionNotFound(f"transaction {tx_id} not found")
        return record

    # ═══════════════════════════════════════════════════════════════════════
    # Internals
    # ═══════════════════════════════════════════════════════════════════════

    def _record(self, kind: TxKind, sender: str | None, recipient: str, units: int) -> TransactionRecord:
        record = TransactionRecord(
            tx_id=f"0x{uuid.uuid4().hex}",
            kind=kind,
            sender=sender,
            recipient=recipient,
            amount=from_base_units(units),
            status=SUCCESS,
            created_at=datetime.now(UTC),
        )
        self._transactions[record.tx_id] = record
        return record


def _normalize(address: str) -> str:
    return address.strip().lower()


def _positive_units(amount: Amount) -> int:
    units = to_base_units(amount)
    if units <= 0:
        raise LedgerClientError("invalid amount")
    return units


__all__ = ("address_for", "MemoryLedger")
