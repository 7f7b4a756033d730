"""
Data Models Module

This module defines Pydantic models for request/response validation
and the value objects passed between the stages of the sign-in pipeline.

Models are organized by functional area:
- Identity models (verified Google identity, local user record, session token)
- API models (sign-in request/response, profile, errors, health)
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Identity Models
# ============================================================================

class VerifiedIdentity(BaseModel):
    """Canonical identity produced from a verified Google payload."""

    model_config = ConfigDict(frozen=True)

    provider_subject_id: str = Field(..., min_length=1, description="Google 'sub' claim")
    email: str = Field(..., min_length=1, description="Normalized email address")
    display_name: Optional[str] = Field(None, description="Google profile name")
    avatar_url: Optional[str] = Field(None, description="Google profile picture URL")


class UserRecord(BaseModel):
    """Local user record; email is the sole identity key."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    email: str
    display_name: Optional[str] = None
    password_hash: Optional[str] = None
    provider_subject_id: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime


class SessionToken(BaseModel):
    """Signed session credential issued to a resolved user."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="Encoded session JWT")
    subject: str = Field(..., description="Local user id ('sub' claim)")
    issued_at: datetime
    expires_at: datetime


# ============================================================================
# API Models
# ============================================================================

class GoogleAuthRequest(BaseModel):
    """Request body for POST /auth/google."""
    token: Optional[str] = Field(None, description="Google access token or ID token")


class GoogleAuthResponse(BaseModel):
    """Successful sign-in payload."""
    id: str = Field(..., description="Local user id")
    email: str = Field(..., description="User email address")
    name: Optional[str] = Field(None, description="User display name")
    picture: Optional[str] = Field(None, description="Avatar URL")
    token: str = Field(..., description="Session JWT")
    message: str = Field(default="Google login successful")


class UserProfile(BaseModel):
    """Profile of the user behind a session token."""
    id: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserProfile":
        return cls(id=user.id, email=user.email, name=user.display_name, picture=user.avatar_url)


class MessageResponse(BaseModel):
    """Error body; the message is fixed per failure class."""
    message: str


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
