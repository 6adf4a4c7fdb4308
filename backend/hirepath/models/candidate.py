"""Candidate profile, onboarding task and status audit models.

A candidate owns its onboarding tasks; tasks are deleted with the
candidate and have no lifecycle of their own.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from hirepath.models.base import Base, TimestampMixin
from hirepath.models.enums import CandidateStatus, OnboardingTaskType

_STATUS_ENUM = Enum(
    CandidateStatus, name="candidate_status", native_enum=False, length=32
)


class CandidateProfile(Base, TimestampMixin):
    """A person moving through the hiring pipeline.

    ``schedule_completed`` is owned by the weekly-availability subsystem
    and is only read here.
    """

    __tablename__ = "candidate_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        unique=True,
        nullable=True,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[CandidateStatus] = mapped_column(
        _STATUS_ENUM,
        default=CandidateStatus.NEW,
        nullable=False,
    )
    forty_hour_course_completed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=text("false"),
        nullable=False,
    )
    schedule_completed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=text("false"),
        nullable=False,
    )

    __table_args__ = (Index("idx_candidate_status", "status"),)
    __mapper_args__ = {"eager_defaults": True}

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<CandidateProfile {self.id} {self.full_name} ({self.status.value})>"


class OnboardingTask(Base, TimestampMixin):
    """One unit of required post-hire work."""

    __tablename__ = "onboarding_tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("candidate_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    task_type: Mapped[OnboardingTaskType] = mapped_column(
        Enum(OnboardingTaskType, name="onboarding_task_type", native_enum=False, length=40),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    document_download_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False)
    is_completed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=text("false"),
        nullable=False,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    # Opaque proof of completion (signature text, data URL, storage key)
    upload_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_onboarding_task_candidate", "candidate_id", "sort_order"),
    )
    __mapper_args__ = {"eager_defaults": True}

    def __repr__(self) -> str:
        return f"<OnboardingTask {self.sort_order} {self.task_type.value} {self.title!r}>"


class StatusAuditEntry(Base):
    """Immutable record of a candidate status change."""

    __tablename__ = "candidate_status_audits"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("candidate_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    previous_status: Mapped[CandidateStatus] = mapped_column(
        _STATUS_ENUM,
        nullable=False,
    )
    new_status: Mapped[CandidateStatus] = mapped_column(
        _STATUS_ENUM,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_status_audit_candidate", "candidate_id", "created_at"),
    )
    __mapper_args__ = {"eager_defaults": True}
