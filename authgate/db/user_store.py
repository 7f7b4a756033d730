"""
User store: idempotent find-or-create of local users keyed by email.

Rules:
  1. Email is the only identity key. One row per email, whichever path
     (Google sign-in or direct registration) created it first.
  2. An existing row is returned as is. A later Google sign-in never
     overwrites its name or avatar and never backfills provider_subject_id
     onto a password-registered row.
  3. Concurrent first sign-ins for one email are settled by the unique
     constraint: the loser of the insert race reads the winner's row.
"""

import logging
import uuid
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from authgate.auth.utils import normalize_email
from authgate.errors import EmailAlreadyRegistered, StorageFailure
from authgate.models import UserRecord, VerifiedIdentity

from .models import User
from .session import Base


logger = logging.getLogger(__name__)


class UserStore:
    """Persistence of UserRecords on an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @staticmethod
    async def create_schema(engine: AsyncEngine) -> None:
        """Create the users table if it does not exist yet."""
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def _find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_or_create(self, identity: VerifiedIdentity) -> Tuple[UserRecord, bool]:
        """
        Return the user for identity.email, creating it on first sight.

        Returns:
            (record, created) where created is True only for the call that
            inserted the row

        Raises:
            StorageFailure: For any database error other than losing the
                creation race
        """
        email = normalize_email(identity.email)

        try:
            async with self._session_factory() as db:
                existing = await self._find_by_email(db, email)
                if existing is not None:
                    return UserRecord.model_validate(existing), False

                user = User(
                    id=str(uuid.uuid4()),
                    email=email,
                    display_name=identity.display_name,
                    password_hash=None,
                    provider_subject_id=identity.provider_subject_id,
                    avatar_url=identity.avatar_url,
                )
                db.add(user)
                try:
                    await db.commit()
                except IntegrityError:
                    # someone else created this email between our read and insert
                    await db.rollback()
                    winner = await self._find_by_email(db, email)
                    if winner is None:
                        raise StorageFailure("unique conflict on email but no row found")
                    logger.info("Lost user creation race; using existing record", extra={"user_id": winner.id})
                    return UserRecord.model_validate(winner), False

                return UserRecord.model_validate(user), True
        except SQLAlchemyError as e:
            raise StorageFailure(f"user store error: {type(e).__name__}") from e

    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        """Load a user by id, or None if it does not exist."""
        try:
            async with self._session_factory() as db:
                user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            raise StorageFailure(f"user store error: {type(e).__name__}") from e

        if user is None:
            return None
        return UserRecord.model_validate(user)

    async def register(self, email: str, display_name: Optional[str], password_hash: str) -> UserRecord:
        """
        Insert a password-registered user.

        Called by the external email/password registration flow, not by
        Google sign-in; hashing is done by that caller.

        Raises:
            EmailAlreadyRegistered: If a row for this email already exists
            StorageFailure: For any other database error
        """
        email = normalize_email(email)
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            display_name=display_name,
            password_hash=password_hash,
            provider_subject_id=None,
        )

        try:
            async with self._session_factory() as db:
                db.add(user)
                try:
                    await db.commit()
                except IntegrityError as e:
                    await db.rollback()
                    raise EmailAlreadyRegistered(email) from e
        except SQLAlchemyError as e:
            raise StorageFailure(f"user store error: {type(e).__name__}") from e

        return UserRecord.model_validate(user)
