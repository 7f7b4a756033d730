from typing import Any, Dict, Optional

from fastapi import Header, Request

from authgate.auth.service import GoogleAuthenticator
from authgate.auth.utils import extract_token_from_header
from authgate.errors import ConfigurationError


def get_authenticator(request: Request) -> GoogleAuthenticator:
    """
    Dependency returning the authenticator built at startup.
    """
    authenticator = getattr(request.app.state, "authenticator", None)
    if authenticator is None:
        # lifespan did not run or failed to wire the pipeline
        raise ConfigurationError("authenticator not initialized")
    return authenticator


def get_session_claims(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Dict[str, Any]:
    """
    Dependency that verifies the session JWT from the Authorization header.

    Raises InvalidSession, which the application turns into a 401.
    """
    token = extract_token_from_header(authorization)
    return get_authenticator(request).session_issuer.verify(token)
