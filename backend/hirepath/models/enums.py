"""Closed enumerations shared by models, services and API schemas.

Values are stored as strings in non-native enum columns.
"""

from enum import Enum


class CandidateStatus(str, Enum):
    """Hiring pipeline stage of a candidate."""

    NEW = "NEW"
    REACH_OUT = "REACH_OUT"
    TO_INTERVIEW = "TO_INTERVIEW"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    INTERVIEW_COMPLETED = "INTERVIEW_COMPLETED"
    HIRED = "HIRED"
    REJECTED = "REJECTED"


class OnboardingTaskType(str, Enum):
    """Kind of onboarding task; determines how it is completed."""

    DOWNLOAD_DOC = "DOWNLOAD_DOC"
    FORTY_HOUR_COURSE_CERTIFICATE = "FORTY_HOUR_COURSE_CERTIFICATE"
    SIGNATURE = "SIGNATURE"


class UserRole(str, Enum):
    """Role of a user account."""

    CANDIDATE = "CANDIDATE"
    RBT = "RBT"
    ADMIN = "ADMIN"
