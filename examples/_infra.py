"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field

from facepay.face import Photo, IdentityClaim


# Keys (hex, 32 bytes)
ALICE_KEY = "a1" * 32
BOB_KEY = "b0" * 32
ADMIN_KEY = "ad" * 32
SHOP = "0x" + "5b" * 32
REWARD_CONTRACT = "0x" + "fe" * 32


# Fake face service: a photo's bytes name the face in it
@dataclass(slots=True)
class DemoFaceService:
    faces: dict[bytes, str] = field(default_factory=dict)

    async def resolve(self, photo: Photo) -> IdentityClaim:
        await asyncio.sleep(0.01)
        key = self.faces.get(photo.data)
        if key is None:
            return IdentityClaim.unrecognized()
        return IdentityClaim(recognized=True, claimed_identity_key=key, confidence=96.0)

    async def enroll_template(self, identity_key: str, photo: Photo) -> str:
        await asyncio.sleep(0.01)
        self.faces[photo.data] = identity_key
        return f"tpl-{len(self.faces)}"


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
