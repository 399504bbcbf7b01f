"""
Ledger — value transfer and reward minting.

    from facepay import ledger as LG

    ledger = LG.MemoryLedger(reward_contract="0xfeed", admin_credential=admin_key)
    receipt = await ledger.transfer(LG.Credential(key), merchant, 5)
"""

from facepay.ledger._types import (
    DECIMALS,
    BASE_UNITS_PER_COIN,
    Amount,
    to_decimal,
    to_base_units,
    from_base_units,
    Credential,
    SUCCESS,
    LedgerReceipt,
    TxKind,
    TransactionRecord,
    LedgerClientError,
    InvalidCredential,
    TransactionNotFound,
)
from facepay.ledger._ledger import Ledger
from facepay.ledger._memory import address_for, MemoryLedger

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
    "Ledger",
    "address_for",
    "MemoryLedger",
)
