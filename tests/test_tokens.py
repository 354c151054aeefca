"""Tests for session and reset token issuance."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from services.tokens import RESET_TOKEN, SESSION_TOKEN, TokenIssuer

SECRET = "unit-test-secret-that-is-long-enough"


def _issuer(now: datetime | None = None) -> TokenIssuer:
    if now is None:
        return TokenIssuer(SECRET)
    return TokenIssuer(SECRET, clock=lambda: now)


@pytest.mark.parametrize("user_id", ["65f1c0ffee", "0", "a" * 32, "user with spaces"])
def test_session_token_round_trip(user_id):
    issuer = _issuer()

    token = issuer.issue_session_token(user_id)

    assert issuer.verify(token) == user_id


def test_session_token_lifetime_is_one_day():
    now = datetime.now(UTC)
    token = _issuer(now).issue_session_token("u1")

    claims = jwt.decode(token, SECRET, algorithms=["HS256"])

    assert claims["exp"] - claims["iat"] == int(timedelta(days=1).total_seconds())
    assert claims["type"] == SESSION_TOKEN


def test_reset_token_lifetime_is_one_hour():
    token = _issuer(datetime.now(UTC)).issue_reset_token("u1")

    claims = jwt.decode(token, SECRET, algorithms=["HS256"])

    assert claims["exp"] - claims["iat"] == 3600
    assert claims["type"] == RESET_TOKEN


def test_expired_session_token_is_invalid():
    issued_two_days_ago = _issuer(datetime.now(UTC) - timedelta(days=2))
    token = issued_two_days_ago.issue_session_token("u1")

    assert _issuer().verify(token) is None


def test_tampered_token_is_invalid():
    issuer = _issuer()
    token = issuer.issue_session_token("u1")
    header, payload, signature = token.split(".")
    flipped = signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")

    assert issuer.verify(f"{header}.{payload}.{flipped}") is None


def test_token_signed_with_other_secret_is_invalid():
    token = TokenIssuer("another-secret-that-is-also-long").issue_session_token("u1")

    assert _issuer().verify(token) is None


@pytest.mark.parametrize("token", ["", None, "garbage", "a.b.c"])
def test_malformed_token_is_invalid(token):
    assert _issuer().verify(token) is None


def test_token_types_are_not_interchangeable():
    issuer = _issuer()

    assert issuer.verify(issuer.issue_reset_token("u1")) is None
    assert issuer.verify(issuer.issue_session_token("u1"), token_type=RESET_TOKEN) is None
    assert issuer.verify(issuer.issue_reset_token("u1"), token_type=RESET_TOKEN) == "u1"


def test_reset_token_carries_request_id():
    issuer = _issuer()

    claims = issuer.decode(issuer.issue_reset_token("u1", request_id="abc123"), RESET_TOKEN)

    assert claims["sub"] == "u1"
    assert claims["rid"] == "abc123"
    assert "rid" not in issuer.decode(issuer.issue_reset_token("u1"), RESET_TOKEN)
    assert issuer.decode(issuer.issue_session_token("u1"), RESET_TOKEN) is None


def test_issuance_is_deterministic_apart_from_token_id():
    now = datetime(2026, 1, 1, tzinfo=UTC)
    first = jwt.decode(
        _issuer(now).issue_session_token("u1"), SECRET, algorithms=["HS256"],
        options={"verify_exp": False},
    )
    second = jwt.decode(
        _issuer(now).issue_session_token("u1"), SECRET, algorithms=["HS256"],
        options={"verify_exp": False},
    )

    assert first.pop("jti") != second.pop("jti")
    assert first == second


def test_secret_is_required():
    with pytest.raises(ValueError):
        TokenIssuer("")
