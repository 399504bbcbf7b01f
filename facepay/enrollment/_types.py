"""
Enrollment types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class EnrolledIdentity:
    """
    A customer whose face is registered with the face service.

    Never mutated; removed only by a bulk clear.
    """

    identity_key: str
    external_template_ref: str
    enrolled_at: datetime


__all__ = ("EnrolledIdentity",)
