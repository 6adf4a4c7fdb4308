"""User account model.

Accounts are shared with the authentication subsystem; this service only
reads them by email and updates role, email and activation on hire.
"""

import uuid

from sqlalchemy import Boolean, Enum, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from hirepath.models.base import Base, TimestampMixin
from hirepath.models.enums import UserRole


class User(Base, TimestampMixin):
    """Account record. Email is unique across the whole user population."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", native_enum=False, length=20),
        default=UserRole.CANDIDATE,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=text("true"),
        nullable=False,
    )

    __mapper_args__ = {"eager_defaults": True}

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email} ({self.role.value})>"
