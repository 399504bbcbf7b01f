"""
Luxand cloud adapter for FaceIdentityResolver.

Persons are registered with the identity key as their name, so a search
hit's `name` is the claimed identity key. requests is blocking; calls run
in a worker thread with a socket timeout.
"""

from __future__ import annotations

import asyncio
import math
from typing import Any

import requests

from facepay.face._types import Photo, IdentityClaim
from facepay.face._resolver import FaceServiceError
from facepay.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.luxand.cloud"


class LuxandResolver:
    """
    Face identity resolver backed by the Luxand cloud API.

    min_confidence: hits scoring below this (0..100) count as unrecognized.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        min_confidence: float = 0.0,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ValueError("Luxand API token is required")
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._min_confidence = min_confidence
        self._session = session if session is not None else requests.Session()

    def __repr__(self) -> str:
        return f"LuxandResolver(base_url={self._base_url!r})"

    # ═══════════════════════════════════════════════════════════════════════
    # FaceIdentityResolver
    # ═══════════════════════════════════════════════════════════════════════

    async def resolve(self, photo: Photo) -> IdentityClaim:
        payload = await asyncio.to_thread(self._search, photo)
        return self._to_claim(payload)

    async def enroll_template(self, identity_key: str, photo: Photo) -> str:
        payload = await asyncio.to_thread(self._create_person, identity_key, photo)
        template_ref = payload.get("uuid") if isinstance(payload, dict) else None
        if not template_ref:
            raise FaceServiceError("Luxand did not return a person uuid")
        logger.info("Registered face template %s for %s", template_ref, identity_key)
        return str(template_ref)

    # ═══════════════════════════════════════════════════════════════════════
    # HTTP
    # ═══════════════════════════════════════════════════════════════════════

    def _search(self, photo: Photo) -> Any:
        return self._post(
            "/photo/search/v2",
            data={"collections": ""},
            files={"photo": ("recognition.jpg", photo.data, photo.mime_type)},
        )

    def _create_person(self, identity_key: str, photo: Photo) -> Any:
        return self._post(
            "/v2/person",
            data={"name": identity_key, "store": "1", "collections": "", "unique": "0"},
            files={"photos": ("enrollment.jpg", photo.data, photo.mime_type)},
        )

    def _post(self, path: str, data: dict[str, str], files: dict[str, Any]) -> Any:
        try:
            response = self._session.post(
                f"{self._base_url}{path}",
                headers={"token": self._token},
                data=data,
                files=files,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise FaceServiceError(f"Luxand request failed: {e}") from e

        if not response.ok:
            raise FaceServiceError(
                f"Luxand returned {response.status_code}: {_error_message(response)}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise FaceServiceError("Luxand returned a non-JSON body") from e

    # ═══════════════════════════════════════════════════════════════════════
    # Parsing
    # ═══════════════════════════════════════════════════════════════════════

    def _to_claim(self, payload: Any) -> IdentityClaim:
        if not isinstance(payload, list):
            raise FaceServiceError("Luxand search returned an unexpected payload")
        if not payload:
            return IdentityClaim.unrecognized()

        best = payload[0]
        if not isinstance(best, dict):
            raise FaceServiceError("Luxand search hit is malformed")

        confidence = _to_percent(best.get("probability"))
        name = best.get("name") or None
        if name is None or confidence < self._min_confidence:
            return IdentityClaim(
                recognized=False,
                claimed_identity_key=None,
                confidence=confidence,
                external_template_ref=best.get("uuid"),
            )

        return IdentityClaim(
            recognized=True,
            claimed_identity_key=str(name),
            confidence=confidence,
            external_template_ref=best.get("uuid"),
        )


def _to_percent(probability: Any) -> float:
    """Luxand probability (0..1) as a clamped 0..100 confidence."""
    try:
        value = float(probability)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value):
        return 0.0
    return min(max(value * 100.0, 0.0), 100.0)


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason or "no details"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason or "no details"


__all__ = ("DEFAULT_BASE_URL", "LuxandResolver")
