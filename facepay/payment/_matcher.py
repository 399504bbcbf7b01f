"""
Identity matcher — binds a face claim to a credential.

A face alone does not authorize spending and a credential alone does not
prove presence. The claim must name the address the credential controls;
this equality is the only gate in front of the transfer.
"""

from __future__ import annotations

from kungfu import Result, Ok, Error

from facepay.errors import NotRecognized, IdentityMismatch, MismatchError
from facepay.face import IdentityClaim
from facepay.payment._types import MatchedIdentity


def normalize_identity(value: str) -> str:
    """Addresses reach us in mixed case; compare them casefolded."""
    return value.strip().casefold()


class IdentityMatcher:
    """Exact, case-insensitive claim ↔ address check. No thresholds."""

    def match(
        self,
        claim: IdentityClaim,
        derived_address: str,
    ) -> Result[MatchedIdentity, MismatchError]:
        if not claim.recognized or not claim.claimed_identity_key:
            return Error(NotRecognized())

        if normalize_identity(claim.claimed_identity_key) != normalize_identity(derived_address):
            return Error(IdentityMismatch())

        return Ok(MatchedIdentity(identity_key=derived_address, confidence=claim.confidence))


__all__ = ("normalize_identity", "IdentityMatcher")
