from __future__ import annotations

import base64
import hashlib
import hmac
import json

import pytest

from orderdesk.auth.session_token import SessionTokenCodec
from orderdesk.errors import Unauthorized

SECRET = "unit-test-secret"
T0 = 1_700_000_000


class FakeClock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _signed(payload_text: str, secret: str = SECRET) -> str:
    """Build a correctly signed token around an arbitrary payload."""

    encoded = _b64(payload_text.encode("utf-8"))
    sig = hmac.new(secret.encode(), encoded.encode(), hashlib.sha256).digest()
    return f"{encoded}.{_b64(sig)}"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture
def codec(clock: FakeClock) -> SessionTokenCodec:
    return SessionTokenCodec(SECRET, ttl_seconds=3600, clock=clock)


def test_issue_then_verify(codec: SessionTokenCodec) -> None:
    token = codec.issue("user-1")

    payload = codec.verify(token)

    assert payload.principal_id == "user-1"
    assert payload.issued_at == T0
    assert payload.expires_at == T0 + 3600


def test_token_shape_is_two_unpadded_urlsafe_segments(codec: SessionTokenCodec) -> None:
    token = codec.issue("user-1")

    encoded, signature = token.split(".")
    assert "=" not in token
    assert "+" not in token and "/" not in token
    decoded = json.loads(base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4)))
    assert decoded == {"userId": "user-1", "iat": T0, "exp": T0 + 3600}
    assert token == _signed(json.dumps(decoded, sort_keys=True, separators=(",", ":")))
    assert len(signature) == 43


def test_expired_at_exact_expiry(codec: SessionTokenCodec, clock: FakeClock) -> None:
    token = codec.issue("user-1")

    clock.now = T0 + 3599
    assert codec.verify(token).principal_id == "user-1"

    clock.now = T0 + 3600
    with pytest.raises(Unauthorized, match="Auth token is expired"):
        codec.verify(token)


@pytest.mark.parametrize("token", ["", "abc", "a.b.c", ".sig", "payload."])
def test_malformed_token(codec: SessionTokenCodec, token: str) -> None:
    with pytest.raises(Unauthorized, match="Invalid auth token format"):
        codec.verify(token)


def test_tampered_payload_is_rejected(codec: SessionTokenCodec) -> None:
    _, signature = codec.issue("user-1").split(".")
    forged = _b64(json.dumps({"userId": "admin", "iat": T0, "exp": T0 + 3600}).encode())

    with pytest.raises(Unauthorized, match="Invalid auth token signature"):
        codec.verify(f"{forged}.{signature}")


def test_tampered_signature_is_rejected(codec: SessionTokenCodec) -> None:
    encoded, signature = codec.issue("user-1").split(".")
    flipped = ("A" if signature[0] != "A" else "B") + signature[1:]

    with pytest.raises(Unauthorized, match="Invalid auth token signature"):
        codec.verify(f"{encoded}.{flipped}")


def test_token_from_other_secret_is_rejected(clock: FakeClock) -> None:
    other = SessionTokenCodec("another-secret", ttl_seconds=3600, clock=clock)
    codec = SessionTokenCodec(SECRET, ttl_seconds=3600, clock=clock)

    with pytest.raises(Unauthorized, match="Invalid auth token signature"):
        codec.verify(other.issue("user-1"))


def test_non_ascii_signature_is_rejected(codec: SessionTokenCodec) -> None:
    encoded, _ = codec.issue("user-1").split(".")

    with pytest.raises(Unauthorized, match="Invalid auth token signature"):
        codec.verify(f"{encoded}.sïgnature")


@pytest.mark.parametrize(
    "payload_text",
    [
        "not json",
        "[1, 2, 3]",
        '{"iat": 1, "exp": 9999999999}',
        '{"userId": "", "iat": 1, "exp": 9999999999}',
        '{"userId": 7, "iat": 1, "exp": 9999999999}',
        '{"userId": "u", "iat": true, "exp": 9999999999}',
        '{"userId": "u", "iat": "1", "exp": 9999999999}',
        '{"userId": "u", "iat": 1, "exp": Infinity}',
        '{"userId": "u", "iat": 1}',
    ],
)
def test_signed_but_invalid_payload(codec: SessionTokenCodec, payload_text: str) -> None:
    with pytest.raises(Unauthorized, match="Invalid auth token payload"):
        codec.verify(_signed(payload_text))


def test_signed_non_utf8_payload(codec: SessionTokenCodec) -> None:
    encoded = _b64(b"\xff\xfe\xfd")
    sig = hmac.new(SECRET.encode(), encoded.encode(), hashlib.sha256).digest()

    with pytest.raises(Unauthorized, match="Invalid auth token payload"):
        codec.verify(f"{encoded}.{_b64(sig)}")


def test_empty_secret_is_refused() -> None:
    with pytest.raises(ValueError):
        SessionTokenCodec("", ttl_seconds=60)


def test_non_positive_ttl_is_refused() -> None:
    with pytest.raises(ValueError):
        SessionTokenCodec(SECRET, ttl_seconds=0)
