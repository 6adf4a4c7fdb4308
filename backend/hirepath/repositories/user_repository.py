"""Account directory backed by the users table.

Used by hiring to keep email unique across the whole user population.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hirepath.models.enums import UserRole
from hirepath.models.user import User

logger = logging.getLogger(__name__)


def normalize_email(email: str | None) -> str:
    """Trim and lowercase an email address ("" for None)."""
    return (email or "").strip().lower()


class UserRepository:
    """Stateless repository for User table operations.

    All methods are static. Pass an AsyncSession for every call so the
    caller controls transaction boundaries.
    """

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
        """Fetch a user by primary key."""
        return await db.get(User, user_id)

    @staticmethod
    async def find_by_email(db: AsyncSession, email: str) -> User | None:
        """Fetch a user by email address (case-insensitive).

        Args:
            db: Async database session.
            email: Email address to look up.

        Returns:
            User if found, None otherwise.
        """
        stmt = select(User).where(User.email == normalize_email(email))
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        name: str | None = None,
        role: UserRole = UserRole.CANDIDATE,
    ) -> User:
        """Create a new active user.

        Raises:
            sqlalchemy.exc.IntegrityError: If email already exists.
        """
        user = User(email=normalize_email(email), name=name, role=role, is_active=True)
        db.add(user)
        await db.flush()
        await db.refresh(user)
        return user

    @staticmethod
    async def update_account(
        db: AsyncSession,
        user: User,
        *,
        role: UserRole,
        active: bool,
        email: str | None = None,
    ) -> bool:
        """Update role/activation and, when given, the account email.

        The email change runs in a SAVEPOINT. If it hits the unique
        constraint, it is rolled back and only role and activation are
        applied.

        Args:
            db: Async database session.
            user: Account to update.
            role: New role.
            active: New activation flag.
            email: New email, or None to leave unchanged.

        Returns:
            True if the email was synchronized (or unchanged), False if the
            email update was dropped because of a uniqueness conflict.
        """
        email_synced = True
        user_id = user.id
        new_email = normalize_email(email) if email is not None else None
        if new_email and new_email != user.email:
            try:
                async with db.begin_nested():
                    user.email = new_email
                    user.role = role
                    user.is_active = active
            except IntegrityError:
                email_synced = False
                logger.warning(
                    "Email sync for account %s hit a uniqueness conflict; "
                    "updating role and activation only",
                    user_id,
                )
                await db.refresh(user)

        user.role = role
        user.is_active = active
        await db.flush()
        await db.refresh(user)
        return email_synced
