"""
Tests for identity resolution and header helpers.
"""

import pytest

from authgate.auth.utils import extract_token_from_header, resolve_identity
from authgate.errors import InvalidSession, MalformedIdentity


def test_resolves_full_payload():
    identity = resolve_identity({"sub": "u1", "email": "a@x.com", "name": "A", "picture": "p"})

    assert identity.provider_subject_id == "u1"
    assert identity.email == "a@x.com"
    assert identity.display_name == "A"
    assert identity.avatar_url == "p"


def test_email_is_normalized():
    identity = resolve_identity({"sub": "u1", "email": "  Alice@Example.COM "})

    assert identity.email == "alice@example.com"


def test_optional_fields_default_to_none():
    identity = resolve_identity({"sub": "u1", "email": "a@x.com", "name": "", "picture": None})

    assert identity.display_name is None
    assert identity.avatar_url is None


def test_extra_claims_are_ignored():
    identity = resolve_identity({"sub": "u1", "email": "a@x.com", "aud": "x", "iss": "accounts.google.com"})

    assert identity.provider_subject_id == "u1"


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "a@x.com"},
        {"sub": "u1"},
        {"sub": "", "email": "a@x.com"},
        {"sub": "u1", "email": "   "},
        {"sub": None, "email": None},
        {},
    ],
)
def test_missing_sub_or_email_is_malformed(payload):
    with pytest.raises(MalformedIdentity):
        resolve_identity(payload)


@pytest.mark.parametrize("email", ["not-an-email", "dev@corp.local", "a@b@c.com", "user@localhost"])
def test_invalid_email_is_malformed(email):
    with pytest.raises(MalformedIdentity):
        resolve_identity({"sub": "u1", "email": email})


def test_extract_bearer_token():
    assert extract_token_from_header("Bearer abc.def.ghi") == "abc.def.ghi"
    assert extract_token_from_header("bearer abc") == "abc"


@pytest.mark.parametrize("header", [None, "", "abc", "Basic abc", "Bearer", "Bearer a b"])
def test_bad_authorization_header(header):
    with pytest.raises(InvalidSession):
        extract_token_from_header(header)
