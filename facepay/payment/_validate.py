"""
Intent validation — runs before any external call.
"""

from __future__ import annotations

from dataclasses import replace

from kungfu import Result, Ok, Error

from facepay.errors import ValidationError
from facepay.ledger import to_decimal, to_base_units, from_base_units, Credential
from facepay.payment._types import PaymentIntent


def validate_intent(intent: PaymentIntent) -> Result[PaymentIntent, ValidationError]:
    """
    Check the intent's shape.

    amount must be a finite number > 0 that is at least one ledger base
    unit; zero, negatives, NaN and infinities are rejected here.

    The returned intent carries the amount floored to ledger precision,
    which is what the ledger moves and what receipts report.
    """
    try:
        amount = to_decimal(intent.amount)
    except TypeError as e:
        return Error(ValidationError(str(e)))

    if not amount.is_finite():
        return Error(ValidationError("amount must be a finite number"))
    if amount <= 0:
        return Error(ValidationError("amount must be greater than zero"))
    units = to_base_units(amount)
    if units < 1:
        return Error(ValidationError("amount is smaller than one ledger base unit"))

    if not isinstance(intent.payer_credential, Credential) or not intent.payer_credential:
        return Error(ValidationError("credential is required"))
    if intent.photo is None or not intent.photo.data:
        return Error(ValidationError("photo is required"))
    if not intent.payee_address or not intent.payee_address.strip():
        return Error(ValidationError("payee address is required"))
    if not intent.request_id or not intent.request_id.strip():
        return Error(ValidationError("request id is required"))

    return Ok(replace(intent, amount=from_base_units(units)))


__all__ = ("validate_intent",)
