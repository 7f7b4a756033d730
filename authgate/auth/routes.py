"""
Authentication routes for Google sign-in.

Endpoints:
    POST /auth/google   - Exchange a Google access token or ID token for a session JWT
    GET  /auth/me       - Profile of the user behind a session JWT
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from authgate.auth.service import GoogleAuthenticator
from authgate.dependencies import get_authenticator, get_session_claims
from authgate.errors import AuthError, InternalError, InvalidSession
from authgate.models import GoogleAuthRequest, GoogleAuthResponse, MessageResponse, UserProfile


logger = logging.getLogger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

auth_router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
)


def _error_response(error: AuthError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"message": error.message})


def _log_failure(error: AuthError, exc_info: bool = False) -> None:
    level = logging.ERROR if error.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "Google login failed",
        extra={
            "event": "google_auth.failed",
            "error_kind": error.kind,
            "reason": error.detail,
            "status_code": error.status_code,
        },
        exc_info=exc_info,
    )


# =============================================================================
# Google Sign-in Endpoint
# =============================================================================

@auth_router.post(
    "/google",
    response_model=GoogleAuthResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": MessageResponse},
        status.HTTP_401_UNAUTHORIZED: {"model": MessageResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": MessageResponse},
    },
)
async def google_auth(
    body: Optional[GoogleAuthRequest] = None,
    authenticator: GoogleAuthenticator = Depends(get_authenticator),
):
    """
    Sign in with a Google credential.

    Accepts either kind of Google credential in the `token` field:
    an OAuth access token (popup/implicit flow) or an ID token
    (One-Tap, native SDKs). The first successful sign-in for an email
    creates the local user; later sign-ins return it unchanged.

    Returns:
        200 with the user and a session JWT, or 400/401/500 with a fixed message
    """
    raw_token = body.token if body is not None else None

    try:
        result = await authenticator.authenticate(raw_token)
        user = result.user
        response = GoogleAuthResponse(
            id=user.id,
            email=user.email,
            name=user.display_name,
            picture=user.avatar_url,
            token=result.session.token,
            message="Google login successful",
        )
    except AuthError as e:
        _log_failure(e)
        return _error_response(e)
    except Exception as e:
        error = InternalError(f"unexpected {type(e).__name__}")
        _log_failure(error, exc_info=True)
        return _error_response(error)

    logger.info(
        "New Google user registered" if result.created else "Google user logged in",
        extra={
            "event": "google_auth.registered" if result.created else "google_auth.login",
            "user_id": user.id,
            "email": user.email,
            "credential_kind": result.credential_kind.value,
        },
    )

    return response


# =============================================================================
# Profile Endpoint
# =============================================================================

@auth_router.get(
    "/me",
    response_model=UserProfile,
    responses={status.HTTP_401_UNAUTHORIZED: {"model": MessageResponse}},
)
async def me(
    claims: Dict[str, Any] = Depends(get_session_claims),
    authenticator: GoogleAuthenticator = Depends(get_authenticator),
):
    """
    Return the profile of the signed-in user.

    Requires `Authorization: Bearer <session token>`.
    """
    user = await authenticator.user_store.get_by_id(claims["sub"])
    if user is None:
        raise InvalidSession("session subject no longer exists")
    return UserProfile.from_record(user)
