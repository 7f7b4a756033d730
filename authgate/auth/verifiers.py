"""
Google credential verifiers.

Two independent paths, chosen by :func:`authgate.auth.classifier.classify_credential`:

- AccessTokenVerifier: redeems an OAuth access token at Google's user-info
  endpoint. Access tokens do not self-certify, so the network answer is the
  verification.
- IdTokenVerifier: checks an ID token's RS256 signature against Google's
  published keys, then its audience, issuer and expiry.

Both return a plain claims dict; turning it into a VerifiedIdentity is the
resolver's job.
"""

from typing import Any, Dict, Optional

import httpx
from jose import jwk, jwt
from jose.exceptions import ExpiredSignatureError, JOSEError, JWTClaimsError, JWTError

from authgate.auth.jwks import KeySource, find_signing_key
from authgate.errors import ConfigurationError, InvalidCredential, ProviderUnavailable


GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")

# clock skew tolerance for exp/iat, in seconds
ID_TOKEN_LEEWAY = 10

# =============================================================================
# Access tokens
# =============================================================================

class AccessTokenVerifier:
    """Verify a Google access token with one call to the user-info endpoint."""

    def __init__(self, http_client: httpx.AsyncClient, userinfo_url: str, timeout: float = 10.0):
        self._client = http_client
        self._userinfo_url = userinfo_url
        self._timeout = timeout

    async def verify(self, access_token: str) -> Dict[str, Any]:
        """
        Exchange an access token for the user's Google profile.

        No retry is attempted.

        Returns:
            Dict with sub, email, name and picture

        Raises:
            ProviderUnavailable: On transport errors, timeouts or a 5xx answer
            InvalidCredential: If Google reports an error, the body is not a
                JSON object, or the profile has no email
        """
        try:
            response = await self._client.get(
                self._userinfo_url,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise ProviderUnavailable(f"user-info request failed: {type(e).__name__}") from e

        if response.status_code >= 500:
            raise ProviderUnavailable(f"user-info endpoint returned {response.status_code}")

        try:
            user_info = response.json()
        except ValueError as e:
            raise InvalidCredential("user-info response is not JSON") from e

        if not isinstance(user_info, dict):
            raise InvalidCredential("user-info response is not an object")

        if user_info.get("error") or response.is_error:
            raise InvalidCredential(f"user-info endpoint rejected token (status {response.status_code})")

        if not user_info.get("email"):
            raise InvalidCredential("user-info response has no email")

        return {
            "sub": user_info.get("sub"),
            "email": user_info.get("email"),
            "name": user_info.get("name"),
            "picture": user_info.get("picture"),
        }

# =============================================================================
# ID tokens
# =============================================================================

class IdTokenVerifier:
    """Verify a Google ID token against the keys from a KeySource."""

    def __init__(self, key_source: KeySource, audience: str):
        self._key_source = key_source
        self._audience = audience

    async def _signing_key(self, kid: str) -> Dict[str, Any]:
        keys = await self._key_source.current_keys()
        signing_key = find_signing_key(kid, keys)
        if signing_key is None:
            # keys may have rotated since the last fetch
            keys = await self._key_source.current_keys(force_refresh=True)
            signing_key = find_signing_key(kid, keys)

        if signing_key is None:
            raise InvalidCredential("no Google signing key matches the token 'kid'")
        return signing_key

    async def verify(self, id_token: str, expected_audience: Optional[str] = None) -> Dict[str, Any]:
        """
        Verify and decode a Google ID token.

        Checks, in order: header shape, signing key, signature, aud, exp,
        iat, then issuer.

        Returns:
            Dictionary of verified token claims

        Raises:
            InvalidCredential: If the token is malformed, signed with an
                unknown key, expired, or meant for another audience/issuer
            ProviderUnavailable: If Google's keys cannot be retrieved
            ConfigurationError: If no audience is configured
        """
        audience = (expected_audience or self._audience or "").strip()
        if not audience:
            raise ConfigurationError("GOOGLE_CLIENT_ID is not configured")

        try:
            header = jwt.get_unverified_header(id_token)
        except JWTError as e:
            raise InvalidCredential("malformed ID token header") from e

        if header.get("alg") != "RS256":
            raise InvalidCredential(f"unexpected alg: {header.get('alg')}")

        kid = header.get("kid")
        if not kid:
            raise InvalidCredential("token header missing 'kid'")

        signing_key = await self._signing_key(kid)

        try:
            public_key = jwk.construct(signing_key, algorithm="RS256")
        except JOSEError as e:
            raise ProviderUnavailable("Google published an unusable signing key") from e

        try:
            claims = jwt.decode(
                id_token,
                public_key.to_pem().decode("utf-8"),
                algorithms=["RS256"],
                audience=audience,
                options={
                    "verify_signature": True,
                    "verify_aud": True,
                    "verify_iat": True,
                    "verify_exp": True,
                    "verify_nbf": True,
                    "verify_at_hash": False,
                    "require_exp": True,
                    "require_aud": True,
                    "leeway": ID_TOKEN_LEEWAY,
                },
            )
        except ExpiredSignatureError as e:
            raise InvalidCredential("ID token has expired") from e
        except JWTClaimsError as e:
            raise InvalidCredential(f"invalid ID token claims: {e}") from e
        except JWTError as e:
            raise InvalidCredential(f"ID token verification failed: {e}") from e

        if claims.get("iss") not in GOOGLE_ISSUERS:
            raise InvalidCredential("ID token was not issued by Google")

        return claims
