"""
Face pay — enroll, pay, get rewarded.

facepay.service
facepay.payment
facepay.enrollment
"""

import uuid

from kungfu import Ok, Error

from facepay import FacePayService, Settings
from facepay.face import Photo
from facepay.ledger import Credential, MemoryLedger, address_for, from_base_units
from facepay.logging_config import setup_logging
from facepay.payment import PaymentIntent, PaymentState
from examples._infra import (
    ALICE_KEY,
    BOB_KEY,
    ADMIN_KEY,
    SHOP,
    REWARD_CONTRACT,
    DemoFaceService,
    banner,
    run,
)


def intent(key: str, photo: Photo, amount: float) -> PaymentIntent:
    return PaymentIntent(
        payer_credential=Credential(key),
        payee_address=SHOP,
        amount=amount,
        request_id=str(uuid.uuid4()),
        photo=photo,
    )


async def main() -> None:
    setup_logging("WARNING")

    alice = address_for(ALICE_KEY)
    alice_face = Photo(b"alice-selfie")
    stranger_face = Photo(b"stranger-selfie")

    ledger = MemoryLedger(reward_contract=REWARD_CONTRACT, admin_credential=ADMIN_KEY)
    ledger.fund(alice, 20)
    ledger.fund(address_for(BOB_KEY), 20)

    service = FacePayService.build(
        Settings(admin_credential=ADMIN_KEY, reward_contract=REWARD_CONTRACT),
        ledger=ledger,
        resolver=DemoFaceService(),
    )
    print(f"Status: {service.get_status().to_dict()}")

    banner("Enroll Alice")
    match await service.enroll(alice, alice_face):
        case Ok(record):
            print(f"  ✓ {record.identity_key[:10]}… template {record.external_template_ref}")
        case Error(e):
            print(f"  ✗ {e.kind.name}: {e.message}")

    match await service.enroll(alice, alice_face):
        case Error(e):
            print(f"  ✗ again: {e.kind.name}")

    banner("Alice pays 5 with her face")
    outcome = await service.process_payment(intent(ALICE_KEY, alice_face, 5))
    print(f"  {outcome.state.value}: {' → '.join(s.value for s in outcome.history)}")
    print(f"  shop balance:   {from_base_units(ledger.balance(SHOP))}")
    print(f"  alice rewards:  {from_base_units(ledger.reward_balance(alice))}")

    banner("Bob pays with Alice's face")
    outcome = await service.process_payment(intent(BOB_KEY, alice_face, 5))
    print(f"  {outcome.state.value}: {outcome.failure.message if outcome.failure else ''}")

    banner("Unknown face")
    outcome = await service.process_payment(intent(ALICE_KEY, stranger_face, 5))
    print(f"  {outcome.state.value}: {outcome.failure.message if outcome.failure else ''}")

    banner("Reward contract missing → PARTIAL")
    unrewarded = MemoryLedger(admin_credential=ADMIN_KEY)
    unrewarded.fund(alice, 3)
    partial = FacePayService.build(
        Settings(admin_credential=ADMIN_KEY),
        ledger=unrewarded,
        resolver=DemoFaceService({alice_face.data: alice}),
    )
    print(f"  ready: {partial.get_status().ready}")
    outcome = await partial.process_payment(intent(ALICE_KEY, alice_face, 1))
    if outcome.state is PaymentState.PARTIAL and outcome.transfer_receipt:
        print(f"  {outcome.state.value}: transfer {outcome.transfer_receipt.tx_id} needs a reward")
        print(f"  reason: {outcome.failure.message if outcome.failure else 'unknown'}")


if __name__ == "__main__":
    run(main)
