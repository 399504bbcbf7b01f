"""Tests for the Luxand face service adapter."""

from __future__ import annotations

from unittest.mock import Mock

import pytest
import requests

from facepay.face import FaceServiceError, LuxandResolver, Photo

from tests._support import run


def _response(payload=None, *, status_code=200, reason="OK"):
    response = Mock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.reason = reason
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def resolver(session):
    return LuxandResolver("secret-token", base_url="https://faces.test/", timeout=7.0, session=session)


@pytest.fixture
def photo():
    return Photo(b"jpeg-bytes", "image/png")


class TestResolve:
    def test_first_hit_becomes_claim(self, resolver, session, photo):
        session.post.return_value = _response([
            {"name": "0xABC", "probability": 0.93, "uuid": "person-1"},
            {"name": "0xDEF", "probability": 0.41, "uuid": "person-2"},
        ])

        claim = run(resolver.resolve(photo))

        assert claim.recognized
        assert claim.claimed_identity_key == "0xABC"
        assert claim.confidence == pytest.approx(93.0)
        assert claim.external_template_ref == "person-1"

    def test_posts_photo_with_token(self, resolver, session, photo):
        session.post.return_value = _response([])

        run(resolver.resolve(photo))

        args, kwargs = session.post.call_args
        assert args[0] == "https://faces.test/photo/search/v2"
        assert kwargs["headers"] == {"token": "secret-token"}
        assert kwargs["data"] == {"collections": ""}
        assert kwargs["files"]["photo"][1:] == (b"jpeg-bytes", "image/png")
        assert kwargs["timeout"] == 7.0

    def test_no_hits_is_unrecognized(self, resolver, session, photo):
        session.post.return_value = _response([])

        claim = run(resolver.resolve(photo))

        assert not claim.recognized
        assert claim.claimed_identity_key is None
        assert claim.confidence == 0.0

    def test_below_min_confidence_is_unrecognized(self, session, photo):
        resolver = LuxandResolver("secret-token", min_confidence=80.0, session=session)
        session.post.return_value = _response([{"name": "0xABC", "probability": 0.5, "uuid": "p"}])

        claim = run(resolver.resolve(photo))

        assert not claim.recognized
        assert claim.confidence == pytest.approx(50.0)

    @pytest.mark.parametrize(
        "probability, expected",
        [
            (0.87, 87.0),
            (1.0, 100.0),
            (1.5, 100.0),
            (87, 100.0),
            (-0.2, 0.0),
            ("0.5", 50.0),
            ("bogus", 0.0),
            (float("nan"), 0.0),
        ],
    )
    def test_probability_scaling(self, resolver, session, photo, probability, expected):
        session.post.return_value = _response([{"name": "0xABC", "probability": probability}])

        assert run(resolver.resolve(photo)).confidence == pytest.approx(expected)

    def test_unexpected_payload(self, resolver, session, photo):
        session.post.return_value = _response({"status": "failure"})

        with pytest.raises(FaceServiceError, match="unexpected payload"):
            run(resolver.resolve(photo))


class TestEnrollTemplate:
    def test_creates_person(self, resolver, session, photo):
        session.post.return_value = _response({"status": "success", "uuid": "person-9"})

        ref = run(resolver.enroll_template("0xABC", photo))

        args, kwargs = session.post.call_args
        assert ref == "person-9"
        assert args[0] == "https://faces.test/v2/person"
        assert kwargs["data"] == {"name": "0xABC", "store": "1", "collections": "", "unique": "0"}
        assert "photos" in kwargs["files"]

    def test_missing_uuid(self, resolver, session, photo):
        session.post.return_value = _response({"status": "success"})

        with pytest.raises(FaceServiceError, match="uuid"):
            run(resolver.enroll_template("0xABC", photo))


class TestFailures:
    def test_http_error_uses_service_message(self, resolver, session, photo):
        session.post.return_value = _response({"message": "invalid token"}, status_code=401, reason="Unauthorized")

        with pytest.raises(FaceServiceError, match="401: invalid token"):
            run(resolver.resolve(photo))

    def test_http_error_without_json(self, resolver, session, photo):
        session.post.return_value = _response(ValueError("no json"), status_code=502, reason="Bad Gateway")

        with pytest.raises(FaceServiceError, match="502: Bad Gateway"):
            run(resolver.resolve(photo))

    def test_connection_error(self, resolver, session, photo):
        session.post.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(FaceServiceError, match="connection refused"):
            run(resolver.resolve(photo))

    def test_non_json_body(self, resolver, session, photo):
        session.post.return_value = _response(ValueError("no json"))

        with pytest.raises(FaceServiceError, match="non-JSON"):
            run(resolver.resolve(photo))

    def test_token_required(self):
        with pytest.raises(ValueError):
            LuxandResolver("")

    def test_repr_hides_token(self, resolver):
        assert "secret-token" not in repr(resolver)
