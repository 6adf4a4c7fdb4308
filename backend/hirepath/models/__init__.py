"""SQLAlchemy ORM models for Hirepath.

All models are exported from this module for convenient imports:
    from hirepath.models import CandidateProfile, OnboardingTask, ...

- user.py: User (accounts)
- candidate.py: CandidateProfile, OnboardingTask, StatusAuditEntry
- enums.py: CandidateStatus, OnboardingTaskType, UserRole
"""

from hirepath.models.base import Base, TimestampMixin
from hirepath.models.candidate import (
    CandidateProfile,
    OnboardingTask,
    StatusAuditEntry,
)
from hirepath.models.enums import CandidateStatus, OnboardingTaskType, UserRole
from hirepath.models.user import User

__all__ = [
    "Base",
    "CandidateProfile",
    "CandidateStatus",
    "OnboardingTask",
    "OnboardingTaskType",
    "StatusAuditEntry",
    "TimestampMixin",
    "User",
    "UserRole",
]
