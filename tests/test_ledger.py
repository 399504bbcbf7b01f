"""Tests for ledger amounts, credentials and the in-memory ledger."""

from __future__ import annotations

import hashlib
from decimal import Decimal

import pytest

from facepay.ledger import (
    BASE_UNITS_PER_COIN,
    Credential,
    InvalidCredential,
    LedgerClientError,
    MemoryLedger,
    TransactionNotFound,
    TxKind,
    address_for,
    from_base_units,
    to_base_units,
    to_decimal,
)

from tests._support import ADMIN_KEY, CUSTOMER_KEY, MERCHANT, REWARD_CONTRACT, run


class TestAmounts:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (1, 100_000_000),
            (0.1, 10_000_000),
            (Decimal("2.5"), 250_000_000),
            (0.123456789, 12_345_678),
            (0.000000001, 0),
        ],
    )
    def test_to_base_units_floors(self, amount, expected):
        assert to_base_units(amount) == expected

    def test_from_base_units(self):
        assert from_base_units(150_000_000) == Decimal("1.5")

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), Decimal("-Infinity")])
    def test_non_finite_rejected(self, amount):
        with pytest.raises(ValueError):
            to_base_units(amount)

    @pytest.mark.parametrize("amount", [True, "1", None])
    def test_non_numbers_rejected(self, amount):
        with pytest.raises(TypeError):
            to_decimal(amount)


class TestCredential:
    def test_repr_is_redacted(self):
        credential = Credential(CUSTOMER_KEY)

        assert CUSTOMER_KEY not in repr(credential)
        assert CUSTOMER_KEY not in str(credential)
        assert credential.reveal() == CUSTOMER_KEY

    @pytest.mark.parametrize("secret", ["", "   "])
    def test_blank_is_falsy(self, secret):
        assert not Credential(secret)

    def test_equality(self):
        assert Credential("ab") == Credential("ab")
        assert Credential("ab") != Credential("cd")


class TestAddressFor:
    def test_sha3_of_key_bytes(self):
        expected = "0x" + hashlib.sha3_256(bytes.fromhex(CUSTOMER_KEY)).hexdigest()

        assert address_for(CUSTOMER_KEY) == expected
        assert address_for("0x" + CUSTOMER_KEY) == expected

    @pytest.mark.parametrize("secret", ["not-hex", "abcd", "11" * 31])
    def test_invalid_key(self, secret):
        with pytest.raises(InvalidCredential):
            address_for(secret)


class TestMemoryLedger:
    @pytest.fixture
    def ledger(self):
        ledger = MemoryLedger(reward_contract=REWARD_CONTRACT, admin_credential=ADMIN_KEY)
        ledger.fund(address_for(CUSTOMER_KEY), 10)
        return ledger

    def test_transfer_moves_funds_and_records(self, ledger):
        customer = address_for(CUSTOMER_KEY)

        async def scenario():
            receipt = await ledger.transfer(Credential(CUSTOMER_KEY), MERCHANT, 3)
            return receipt, await ledger.get_transaction(receipt.tx_id)

        receipt, record = run(scenario())

        assert receipt.succeeded
        assert record.kind is TxKind.TRANSFER
        assert record.sender == customer
        assert record.recipient == MERCHANT
        assert record.amount == Decimal(3)
        assert ledger.balance(customer) == 7 * BASE_UNITS_PER_COIN
        assert ledger.balance(MERCHANT.upper()) == 3 * BASE_UNITS_PER_COIN

    def test_insufficient_balance(self, ledger):
        with pytest.raises(LedgerClientError, match="insufficient balance"):
            run(ledger.transfer(Credential(CUSTOMER_KEY), MERCHANT, 11))

        assert ledger.transaction_count == 0

    def test_mint_reward(self, ledger):
        customer = address_for(CUSTOMER_KEY)

        async def scenario():
            receipt = await ledger.mint_reward(customer, 5)
            return await ledger.get_transaction(receipt.tx_id)

        record = run(scenario())

        assert record.kind is TxKind.MINT
        assert record.sender == address_for(ADMIN_KEY)
        assert ledger.reward_balance(customer) == 5 * BASE_UNITS_PER_COIN

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"admin_credential": ADMIN_KEY}, "reward contract not configured"),
            ({"reward_contract": REWARD_CONTRACT}, "admin credential not configured"),
        ],
    )
    def test_mint_requires_configuration(self, kwargs, message):
        ledger = MemoryLedger(**kwargs)

        with pytest.raises(LedgerClientError, match=message):
            run(ledger.mint_reward(MERCHANT, 1))

    def test_unknown_transaction(self, ledger):
        with pytest.raises(TransactionNotFound):
            run(ledger.get_transaction("0xmissing"))

    def test_derive_address(self, ledger):
        assert run(ledger.derive_address(Credential(CUSTOMER_KEY))) == address_for(CUSTOMER_KEY)

    @pytest.mark.parametrize(
        "kwargs, expected",
        [
            ({"reward_contract": REWARD_CONTRACT, "admin_credential": ADMIN_KEY}, True),
            ({"admin_credential": ADMIN_KEY}, False),
            ({"reward_contract": REWARD_CONTRACT}, False),
            ({}, False),
        ],
    )
    def test_can_mint(self, kwargs, expected):
        assert MemoryLedger(**kwargs).can_mint is expected
