"""
Ledger — the ledger contract the core consumes.
"""

from __future__ import annotations

from typing import Protocol

from facepay.ledger._types import Amount, Credential, LedgerReceipt, TransactionRecord


class Ledger(Protocol):
    """
    Ledger contract.

    Implementations raise on failure: InvalidCredential for unusable key
    material, anything else for refused or failed operations. The core
    lifts those into CredentialError / LedgerError.

    Amounts are whole ledger units; implementations convert to their own
    base units.
    """

    @property
    def can_mint(self) -> bool:
        """Whether mint_reward has what it needs (reward contract, admin key)."""
        ...

    async def derive_address(self, credential: Credential) -> str:
        """Address controlled by credential."""
        ...

    async def transfer(
        self,
        credential: Credential,
        to_address: str,
        amount: Amount,
    ) -> LedgerReceipt:
        """Move amount from credential's address to to_address."""
        ...

    async def mint_reward(self, to_address: str, amount: Amount) -> LedgerReceipt:
        """Issue amount of reward token to to_address."""
        ...

    async def get_transaction(self, tx_id: str) -> TransactionRecord:
        """Look up a committed transaction."""
        ...


__all__ = ("Ledger",)
