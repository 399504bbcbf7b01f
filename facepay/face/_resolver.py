"""
FaceIdentityResolver — the face service contract the core consumes.
"""

from __future__ import annotations

from typing import Protocol

from facepay.face._types import Photo, IdentityClaim


class FaceServiceError(Exception):
    """Face service unreachable, refused the call, or answered garbage."""


class FaceIdentityResolver(Protocol):
    """
    Face service contract.

    Implementations raise on failure (FaceServiceError or anything else);
    the core lifts those into UpstreamError. Matching thresholds are the
    implementation's business.

    Example — fixed answers for tests:

        class StaticResolver:
            def __init__(self, claim: IdentityClaim) -> None:
                self.claim = claim

            async def resolve(self, photo: Photo) -> IdentityClaim:
                return self.claim

            async def enroll_template(self, identity_key: str, photo: Photo) -> str:
                return f"tpl-{identity_key}"
    """

    async def resolve(self, photo: Photo) -> IdentityClaim:
        """Best-match identity for the face in photo."""
        ...

    async def enroll_template(self, identity_key: str, photo: Photo) -> str:
        """Register photo under identity_key, return the service's template reference."""
        ...


__all__ = ("FaceServiceError", "FaceIdentityResolver")
