"""
ORM models.

users.email carries the unique constraint that makes find-or-create safe
under concurrent sign-ins; the application never locks.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import TIMESTAMP, Column, String, UniqueConstraint, func

from .session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(320), nullable=False)
    display_name = Column(String(255))

    # set only for direct registration
    password_hash = Column(String(255), nullable=True)
    # Google 'sub'; set only when the row was created by Google sign-in
    provider_subject_id = Column(String(255), nullable=True)
    avatar_url = Column(String(2048))

    created_at = Column(
        TIMESTAMP(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
    )
