"""Shared fixtures."""

from __future__ import annotations

import pytest

from facepay.face import Photo
from facepay.ledger import address_for

from tests._support import (
    CUSTOMER_KEY,
    ADMIN_KEY,
    REWARD_CONTRACT,
    ScriptedLedger,
    ScriptedResolver,
    claim_for,
)


@pytest.fixture
def customer_address() -> str:
    return address_for(CUSTOMER_KEY)


@pytest.fixture
def photo() -> Photo:
    return Photo(b"\xff\xd8\xff\xe0fake-jpeg")


@pytest.fixture
def ledger(customer_address: str) -> ScriptedLedger:
    ledger = ScriptedLedger(reward_contract=REWARD_CONTRACT, admin_credential=ADMIN_KEY)
    ledger.fund(customer_address, 10)
    return ledger


@pytest.fixture
def resolver(customer_address: str) -> ScriptedResolver:
    return ScriptedResolver(claim_for(customer_address))
