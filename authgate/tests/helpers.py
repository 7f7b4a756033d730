"""
Test doubles for Google: RSA-signed ID tokens, a JWKS document, and a
fake user-info/JWKS server for httpx.MockTransport.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx
import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm


TEST_CLIENT_ID = "test-client-id.apps.googleusercontent.com"
TEST_SESSION_SECRET = "test-session-secret-0123456789abcdef0123"
TEST_KID = "test-key-id-2024"
USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
JWKS_URL = "https://www.googleapis.com/oauth2/v3/certs"


def generate_test_key():
    """Generate an RSA private key for signing test ID tokens"""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def private_pem(private_key) -> str:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


TEST_PRIVATE_KEY = generate_test_key()
OTHER_PRIVATE_KEY = generate_test_key()


def create_mock_id_token(
    email: Optional[str] = "a@x.com",
    sub: Optional[str] = "google-sub-123",
    name: str = "Test User",
    picture: str = "https://lh3.googleusercontent.com/a/photo",
    audience: str = TEST_CLIENT_ID,
    issuer: str = "https://accounts.google.com",
    kid: str = TEST_KID,
    exp_delta_minutes: int = 60,
    private_key=None,
) -> str:
    """
    Create a Google-style ID token signed with a test private key.
    """
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "iss": issuer,
        "aud": audience,
        "iat": now - timedelta(minutes=1),
        "exp": now + timedelta(minutes=exp_delta_minutes),
        "name": name,
        "picture": picture,
        "email_verified": True,
    }
    if sub is not None:
        payload["sub"] = sub
    if email is not None:
        payload["email"] = email

    return jwt.encode(
        payload,
        private_pem(private_key or TEST_PRIVATE_KEY),
        algorithm="RS256",
        headers={"kid": kid},
    )


def create_mock_jwks(kid: str = TEST_KID, private_key=None) -> Dict[str, Any]:
    """Create a JWKS document holding the public half of the test key"""
    key = RSAAlgorithm.to_jwk((private_key or TEST_PRIVATE_KEY).public_key(), as_dict=True)
    key.update({"kid": kid, "use": "sig", "alg": "RS256"})
    return {"keys": [key]}


class FakeGoogle:
    """
    Stand-in for Google's user-info and JWKS endpoints.

    Set `userinfo`/`userinfo_status` to shape user-info answers and
    `transport_error` to make every request fail at the transport level.
    """

    def __init__(self):
        self.userinfo: Any = {
            "sub": "u1",
            "email": "a@x.com",
            "name": "A",
            "picture": "p",
        }
        self.userinfo_status = 200
        self.jwks: Any = create_mock_jwks()
        self.jwks_status = 200
        self.transport_error: Optional[type] = None
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.transport_error is not None:
            raise self.transport_error("simulated transport failure", request=request)

        if str(request.url) == USERINFO_URL:
            if isinstance(self.userinfo, (dict, list)):
                return httpx.Response(self.userinfo_status, json=self.userinfo)
            return httpx.Response(self.userinfo_status, text=str(self.userinfo))

        if str(request.url) == JWKS_URL:
            return httpx.Response(self.jwks_status, json=self.jwks)

        return httpx.Response(404, json={"error": "not_found"})

    def calls_to(self, url: str) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]


