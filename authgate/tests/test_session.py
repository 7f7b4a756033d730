"""
Tests for session JWT issuance and verification.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from authgate.auth.session import SESSION_TTL, SessionIssuer
from authgate.errors import InvalidSession
from authgate.tests.helpers import TEST_SESSION_SECRET


@pytest.fixture
def issuer(settings):
    return SessionIssuer(settings)


def test_issued_token_decodes_to_user_and_thirty_days(issuer):
    session = issuer.issue("user-123")

    claims = jwt.decode(
        session.token,
        TEST_SESSION_SECRET,
        algorithms=["HS256"],
        issuer="authgate",
    )

    assert claims["sub"] == "user-123"
    assert claims["exp"] - claims["iat"] == 30 * 24 * 60 * 60
    assert session.subject == "user-123"
    assert session.expires_at - session.issued_at == SESSION_TTL == timedelta(days=30)


def test_issued_at_is_now(issuer):
    before = datetime.now(timezone.utc) - timedelta(seconds=1)
    session = issuer.issue("user-123")
    after = datetime.now(timezone.utc) + timedelta(seconds=1)

    assert before <= session.issued_at <= after


def test_verify_round_trip(issuer):
    token = issuer.issue("user-123").token

    assert issuer.verify(token)["sub"] == "user-123"


def test_tampered_token_is_rejected(issuer):
    token = issuer.issue("user-123").token
    forged = jwt.encode(
        {"sub": "admin", "iat": 0, "exp": 9999999999, "iss": "authgate"},
        "a-different-secret-that-is-long-enough",
        algorithm="HS256",
    )

    with pytest.raises(InvalidSession):
        issuer.verify(token[:-2] + ("A" if token[-2] != "A" else "B") + token[-1])
    with pytest.raises(InvalidSession):
        issuer.verify(forged)


def test_expired_token_is_rejected(issuer):
    now = datetime.now(timezone.utc)
    expired = jwt.encode(
        {"sub": "user-123", "iat": now - timedelta(days=31), "exp": now - timedelta(days=1), "iss": "authgate"},
        TEST_SESSION_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidSession):
        issuer.verify(expired)


def test_foreign_issuer_is_rejected(issuer):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "user-123", "iat": now, "exp": now + timedelta(days=1), "iss": "someone-else"},
        TEST_SESSION_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidSession):
        issuer.verify(token)


def test_empty_token_is_rejected(issuer):
    with pytest.raises(InvalidSession):
        issuer.verify("")
