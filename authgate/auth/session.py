"""
JWT Session Management Module
==============================

Creation and verification of the application's own session JWTs.

A session token is stateless: nothing is stored server side. It carries the
local user id as 'sub', 'iat', 'exp' (always 30 days after 'iat') and the
configured issuer. There is no refresh; signing in again is the only way to
renew.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from authgate.config import Settings
from authgate.errors import InvalidSession
from authgate.models import SessionToken


logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(days=30)


class SessionIssuer:
    """
    Mint and check session JWTs.

    The signing secret, algorithm and issuer are copied from Settings once,
    at construction.
    """

    def __init__(self, settings: Settings):
        self._secret = settings.SESSION_JWT_SECRET
        self._algorithm = settings.SESSION_JWT_ALGORITHM
        self._issuer = settings.SESSION_JWT_ISSUER

    # =========================================================================
    # Token Creation
    # =========================================================================

    def issue(self, user_id: str) -> SessionToken:
        """
        Create a session JWT for a local user.

        Args:
            user_id: Local user id, becomes the 'sub' claim

        Returns:
            SessionToken with the encoded JWT and its time bounds
        """
        # JWT timestamps are whole seconds
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)
        expires_at = issued_at + SESSION_TTL

        token = jwt.encode(
            {
                "sub": user_id,
                "iat": issued_at,
                "exp": expires_at,
                "iss": self._issuer,
            },
            self._secret,
            algorithm=self._algorithm,
        )

        logger.debug(
            "Created session JWT",
            extra={"user_id": user_id, "expires_at": expires_at.isoformat()},
        )

        return SessionToken(
            token=token,
            subject=user_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    # =========================================================================
    # Token Verification
    # =========================================================================

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a session JWT.

        Returns:
            Dictionary containing the decoded claims

        Raises:
            InvalidSession: If the token is empty, tampered with, expired,
                or from another issuer
        """
        if not token:
            raise InvalidSession("no session token provided")

        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": ["exp", "iat", "sub", "iss"]},
            )
        except ExpiredSignatureError as e:
            raise InvalidSession("session token has expired") from e
        except InvalidTokenError as e:
            raise InvalidSession(f"invalid session token: {e}") from e
