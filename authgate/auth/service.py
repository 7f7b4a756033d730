"""
Google sign-in orchestration.

One request runs one linear pipeline:

    classify -> verify (access token | ID token) -> resolve -> find_or_create -> issue

Every stage raises an :class:`authgate.errors.AuthError` subclass on failure;
the HTTP layer maps those to responses. The only suspension points are the
Google call (user-info or key fetch) and the user store.
"""

from dataclasses import dataclass
from typing import Optional

from authgate.auth.classifier import CredentialKind, classify_credential
from authgate.auth.session import SessionIssuer
from authgate.auth.utils import resolve_identity
from authgate.auth.verifiers import AccessTokenVerifier, IdTokenVerifier
from authgate.db.user_store import UserStore
from authgate.errors import BadRequest
from authgate.models import SessionToken, UserRecord


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful sign-in."""
    user: UserRecord
    session: SessionToken
    created: bool
    credential_kind: CredentialKind

class GoogleAuthenticator:
    """Turn a raw Google credential into a local user and a session token."""

    def __init__(
        self,
        access_token_verifier: AccessTokenVerifier,
        id_token_verifier: IdTokenVerifier,
        user_store: UserStore,
        session_issuer: SessionIssuer,
    ):
        self.access_token_verifier = access_token_verifier
        self.id_token_verifier = id_token_verifier
        self.user_store = user_store
        self.session_issuer = session_issuer

    async def authenticate(self, raw_token: Optional[str]) -> AuthResult:
        """
        Run the full sign-in pipeline for one credential.

        Raises:
            BadRequest: If the token is absent or blank (nothing else runs)
            InvalidCredential, ProviderUnavailable: From verification
            MalformedIdentity: If the verified payload lacks sub/email
            StorageFailure: From the user store
        """
        if raw_token is None or not raw_token.strip():
            raise BadRequest("token field missing or empty")

        raw_token = raw_token.strip()
        kind = classify_credential(raw_token)

        if kind is CredentialKind.ACCESS_TOKEN:
            payload = await self.access_token_verifier.verify(raw_token)
        else:
            payload = await self.id_token_verifier.verify(raw_token)

        identity = resolve_identity(payload)
        user, created = await self.user_store.find_or_create(identity)
        session = self.session_issuer.issue(user.id)

        return AuthResult(user=user, session=session, created=created, credential_kind=kind)
