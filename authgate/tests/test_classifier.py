"""
Tests for credential classification (access token vs. ID token).
"""

import pytest

from authgate.auth.classifier import ACCESS_TOKEN_PREFIX, CredentialKind, classify_credential
from authgate.tests.helpers import create_mock_id_token


@pytest.mark.parametrize(
    "raw",
    [
        "ya29.a0AfH6SMBx",
        "ya29.",
        ACCESS_TOKEN_PREFIX + "x" * 200,
    ],
)
def test_access_token_prefix_selects_access_token_path(raw):
    assert classify_credential(raw) is CredentialKind.ACCESS_TOKEN


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "ya29",
        "YA29.upper-case-is-not-the-prefix",
        " ya29.leading-space",
        "eyJhbGciOiJSUzI1NiJ9.e30.sig",
        "1//refresh-token-shaped",
        "not a token at all",
    ],
)
def test_everything_else_selects_id_token_path(raw):
    assert classify_credential(raw) is CredentialKind.ID_TOKEN


def test_real_id_token_is_classified_as_id_token():
    assert classify_credential(create_mock_id_token()) is CredentialKind.ID_TOKEN


def test_classification_is_deterministic():
    raw = "ya29.same-input"
    assert {classify_credential(raw) for _ in range(5)} == {CredentialKind.ACCESS_TOKEN}
