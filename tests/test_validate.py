"""Tests for payment intent validation."""

from __future__ import annotations

from decimal import Decimal

import pytest

from facepay.errors import ErrorKind
from facepay.face import Photo
from facepay.ledger import Credential
from facepay.payment import PaymentIntent, validate_intent

from tests._support import CUSTOMER_KEY, MERCHANT, unwrap_error, unwrap_ok


def _intent(**overrides):
    fields = {
        "payer_credential": Credential(CUSTOMER_KEY),
        "payee_address": MERCHANT,
        "amount": 5,
        "request_id": "req-1",
        "photo": Photo(b"jpeg"),
    }
    fields.update(overrides)
    return PaymentIntent(**fields)


class TestValidateIntent:
    def test_valid(self):
        intent = _intent()

        valid = unwrap_ok(validate_intent(intent))

        assert valid.amount == Decimal("5")
        assert valid.payer_credential is intent.payer_credential
        assert valid.payee_address == intent.payee_address
        assert valid.request_id == intent.request_id
        assert valid.photo is intent.photo

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (0.123456789, "0.12345678"),
            (Decimal("0.123456789"), "0.12345678"),
            (Decimal("1.000000019"), "1.00000001"),
            (0.00000001, "0.00000001"),
        ],
    )
    def test_amount_floored_to_ledger_precision(self, amount, expected):
        valid = unwrap_ok(validate_intent(_intent(amount=amount)))

        assert valid.amount == Decimal(expected)
        assert str(valid.amount) == expected

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"amount": 0}, "amount must be greater than zero"),
            ({"amount": -3}, "amount must be greater than zero"),
            ({"amount": float("nan")}, "amount must be a finite number"),
            ({"amount": float("-inf")}, "amount must be a finite number"),
            ({"amount": 1e-9}, "amount is smaller than one ledger base unit"),
            ({"amount": True}, "amount must be a number, not bool"),
            ({"payer_credential": Credential("")}, "credential is required"),
            ({"payer_credential": CUSTOMER_KEY}, "credential is required"),
            ({"photo": Photo(b"")}, "photo is required"),
            ({"payee_address": "  "}, "payee address is required"),
            ({"request_id": ""}, "request id is required"),
        ],
    )
    def test_invalid(self, overrides, message):
        error = unwrap_error(validate_intent(_intent(**overrides)))

        assert error.kind is ErrorKind.VALIDATION
        assert error.message == message
