"""
Authentication utilities shared by the sign-in pipeline.

This module handles:
- Resolving a verified Google payload into a VerifiedIdentity
- Email normalization
- Bearer token extraction from Authorization headers
"""

from typing import Any, Mapping, Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from authgate.errors import InvalidSession, MalformedIdentity
from authgate.models import VerifiedIdentity


_email_adapter = TypeAdapter(EmailStr)


def normalize_email(email: str) -> str:
    """Lower-case and strip an email so it can serve as the identity key."""
    return email.strip().lower()


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def resolve_identity(payload: Mapping[str, Any]) -> VerifiedIdentity:
    """
    Build the canonical identity from either verifier's output.

    Args:
        payload: Claims with at least 'sub' and 'email'; 'name' and
                 'picture' are optional

    Returns:
        VerifiedIdentity

    Raises:
        MalformedIdentity: If 'sub' or 'email' is missing or blank, or the
            email is not a valid address on a public domain
    """
    subject = _optional_str(payload.get("sub"))
    email = _optional_str(payload.get("email"))

    missing = [name for name, value in (("sub", subject), ("email", email)) if not value]
    if missing:
        raise MalformedIdentity(f"verified payload missing: {', '.join(missing)}")

    email = normalize_email(email)
    try:
        _email_adapter.validate_python(email)
    except ValidationError as e:
        raise MalformedIdentity("verified payload email is not a valid address") from e

    return VerifiedIdentity(
        provider_subject_id=subject,
        email=email,
        display_name=_optional_str(payload.get("name")),
        avatar_url=_optional_str(payload.get("picture")),
    )


def extract_token_from_header(authorization: Optional[str]) -> str:
    """
    Extract Bearer token from Authorization header.

    Raises:
        InvalidSession: If the header is missing or not 'Bearer <token>'
    """
    if not authorization:
        raise InvalidSession("missing Authorization header")

    parts = authorization.split()

    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise InvalidSession("Authorization header is not 'Bearer <token>'")

    return parts[1]
