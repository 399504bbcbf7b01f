"""
Face types — photos and identity claims.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, UTC


DEFAULT_MIME_TYPE = "image/jpeg"


@dataclass(frozen=True, slots=True)
class Photo:
    """Uploaded image bytes plus their content type."""

    data: bytes = field(repr=False)
    mime_type: str = DEFAULT_MIME_TYPE

    @property
    def size(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Photo(mime_type={self.mime_type!r}, size={self.size})"


@dataclass(frozen=True, slots=True)
class IdentityClaim:
    """
    Face service's best guess for who is in a photo.

    Produced fresh per recognition call and never persisted.
    confidence is on a 0..100 scale; thresholding belongs to the resolver.
    """

    recognized: bool
    claimed_identity_key: str | None
    confidence: float
    external_template_ref: str | None = None
    resolved_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"confidence must be within 0..100, got {self.confidence}")

    @classmethod
    def unrecognized(cls) -> IdentityClaim:
        return cls(recognized=False, claimed_identity_key=None, confidence=0.0)


__all__ = ("DEFAULT_MIME_TYPE", "Photo", "IdentityClaim")
