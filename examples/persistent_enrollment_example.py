"""
Persistent enrollment — SQLite-backed face registry.

Run: uv run python -m examples.persistent_enrollment_example
"""

from combinators import batch, lift as L
from kungfu import Ok, Error

from facepay import FacePayService, Settings
from facepay.enrollment import SQLAlchemyEnrollmentStore, create_enrollment_database
from facepay.face import Photo
from facepay.ledger import MemoryLedger, address_for
from examples._infra import ALICE_KEY, ADMIN_KEY, REWARD_CONTRACT, DemoFaceService, banner, run


async def main() -> None:
    banner("Persistent Enrollment")

    session_factory, engine = await create_enrollment_database("sqlite+aiosqlite:///:memory:")
    face_service = DemoFaceService()
    service = FacePayService.build(
        Settings(admin_credential=ADMIN_KEY, reward_contract=REWARD_CONTRACT),
        ledger=MemoryLedger(reward_contract=REWARD_CONTRACT, admin_credential=ADMIN_KEY),
        resolver=face_service,
        store=SQLAlchemyEnrollmentStore(session_factory),
    )
    alice = address_for(ALICE_KEY)
    selfie = Photo(b"alice-selfie")

    try:
        # 1. First enrollment
        print("1. Enroll:")
        match await service.enroll(alice, selfie):
            case Ok(record):
                print(f"   Template: {record.external_template_ref}")
            case Error(e):
                print(f"   Error: {e.kind.name}")

        # 2. Same identity again
        print("2. Enroll again:")
        match await service.enroll(alice, selfie):
            case Ok(record):
                print(f"   Template: {record.external_template_ref}")
            case Error(e):
                print(f"   Error: {e.kind.name} ({e.message})")

        # 3. Concurrent (5 enrollments of one new identity via combinators.batch)
        print("3. Concurrent (5 requests):")
        bob = "0x" + "b0" * 32
        before = len(face_service.faces)
        await batch(
            range(5),
            handler=lambda i: L.catching_async(
                lambda: service.enroll(bob, Photo(f"bob-selfie-{i}".encode())),
                on_error=str,
            ),
            concurrency=5,
        )
        print(f"   Templates created: {len(face_service.faces) - before} (only 1!)\n")

        print(f"Enrolled: {sorted(await service.list_enrolled())}")
        print(f"Cleared: {await service.clear_all()}")

    finally:
        await engine.dispose()


if __name__ == "__main__":
    run(main)
