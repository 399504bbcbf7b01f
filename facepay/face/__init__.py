"""
Face — identity claims from photos.

    from facepay import face as F

    resolver = F.LuxandResolver(token, timeout=15.0)
    claim = await resolver.resolve(F.Photo(jpeg_bytes))
"""

from facepay.face._types import DEFAULT_MIME_TYPE, Photo, IdentityClaim
from facepay.face._resolver import FaceServiceError, FaceIdentityResolver
from facepay.face._luxand import DEFAULT_BASE_URL, LuxandResolver

__all__ = (
    "DEFAULT_MIME_TYPE",
    "Photo",
    "IdentityClaim",
    "FaceServiceError",
    "FaceIdentityResolver",
    "DEFAULT_BASE_URL",
    "LuxandResolver",
)
