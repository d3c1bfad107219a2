"""TokenService: issuance, expiry, signature and algorithm checks."""

import base64
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from todoapp.auth.jwt import (
    ExpiredTokenError,
    InvalidTokenError,
    MalformedTokenError,
    TokenError,
    TokenService,
)

SECRET = "unit-test-secret"


def _flip_signature_bit(token: str) -> str:
    header, payload, signature = token.split(".")
    raw = bytearray(base64.urlsafe_b64decode(signature + "=" * (-len(signature) % 4)))
    raw[len(raw) // 2] ^= 0x01
    tampered = base64.urlsafe_b64encode(bytes(raw)).rstrip(b"=").decode()
    return ".".join([header, payload, tampered])


def test_issue_and_verify_roundtrip():
    svc = TokenService(secret=SECRET)
    token = svc.issue(42)
    assert svc.verify(token) == 42


def test_payload_carries_sub_iat_exp():
    svc = TokenService(secret=SECRET, ttl=timedelta(minutes=5))
    payload = jwt.decode(svc.issue(7), SECRET, algorithms=["HS256"])
    assert payload["sub"] == "7"
    assert payload["exp"] - payload["iat"] == 300


def test_expired_token_rejected():
    now = datetime.now(timezone.utc)
    issuer = TokenService(secret=SECRET, ttl=timedelta(hours=1), clock=lambda: now - timedelta(hours=2))
    token = issuer.issue(1)

    with pytest.raises(ExpiredTokenError):
        TokenService(secret=SECRET).verify(token)


def test_token_valid_until_expiry():
    issued = datetime(2020, 1, 1, tzinfo=timezone.utc)
    clock = {"now": issued}
    svc = TokenService(secret=SECRET, ttl=timedelta(hours=1), clock=lambda: clock["now"])
    token = svc.issue(3)

    clock["now"] = issued + timedelta(minutes=59)
    assert svc.verify(token) == 3

    clock["now"] = issued + timedelta(hours=1)
    with pytest.raises(ExpiredTokenError):
        svc.verify(token)


def test_single_bit_signature_change_rejected():
    svc = TokenService(secret=SECRET)
    token = svc.issue(1)
    with pytest.raises(InvalidTokenError):
        svc.verify(_flip_signature_bit(token))


def test_other_key_rejected():
    token = TokenService(secret="someone-else").issue(1)
    with pytest.raises(InvalidTokenError):
        TokenService(secret=SECRET).verify(token)


def test_unsigned_token_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "1", "iat": now, "exp": now + timedelta(hours=1)},
        None,
        algorithm="none",
    )
    with pytest.raises(InvalidTokenError):
        TokenService(secret=SECRET).verify(token)


def test_different_algorithm_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "1", "iat": now, "exp": now + timedelta(hours=1)},
        SECRET,
        algorithm="HS512",
    )
    with pytest.raises(InvalidTokenError):
        TokenService(secret=SECRET).verify(token)


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "not-a-token-at-all"])
def test_garbage_is_malformed(garbage):
    with pytest.raises(MalformedTokenError):
        TokenService(secret=SECRET).verify(garbage)


def test_missing_claims_is_malformed():
    token = jwt.encode({"sub": "1"}, SECRET, algorithm="HS256")
    with pytest.raises(MalformedTokenError):
        TokenService(secret=SECRET).verify(token)


def test_non_integer_subject_is_malformed():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "alice", "iat": now, "exp": now + timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(MalformedTokenError):
        TokenService(secret=SECRET).verify(token)


def test_integer_subject_claim_is_malformed():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": 1, "iat": now, "exp": now + timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(MalformedTokenError):
        TokenService(secret=SECRET).verify(token)


def test_all_failures_share_a_base_class():
    for cls in (InvalidTokenError, ExpiredTokenError, MalformedTokenError):
        assert issubclass(cls, TokenError)


def test_empty_secret_refused():
    with pytest.raises(ValueError):
        TokenService(secret="")
