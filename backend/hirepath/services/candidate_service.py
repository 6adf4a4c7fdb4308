"""Candidate intake and profile edits.

Intake creates the candidate in NEW and, when an email is given, a
CANDIDATE account for it. Emails are unique across all accounts.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from hirepath.core.errors import ConflictError, NotFoundError
from hirepath.models.candidate import CandidateProfile
from hirepath.models.enums import UserRole
from hirepath.repositories.candidate_repository import CandidateRepository
from hirepath.repositories.user_repository import UserRepository, normalize_email

logger = logging.getLogger(__name__)


def _email_in_use(email: str) -> ConflictError:
    return ConflictError(
        "EMAIL_IN_USE",
        f"An account with the email '{email}' already exists.",
    )


async def create_candidate(
    db: AsyncSession,
    *,
    first_name: str,
    last_name: str,
    email: str | None = None,
    phone: str | None = None,
    forty_hour_course_completed: bool = False,
) -> CandidateProfile:
    """Register a new candidate in status NEW.

    Args:
        db: Database session.
        first_name: Given name.
        last_name: Family name.
        email: Contact email; creates and links a CANDIDATE account.
        phone: Contact phone.
        forty_hour_course_completed: Intake answer for the 40-hour course.

    Returns:
        The created candidate.

    Raises:
        ConflictError: Email already belongs to an account.
    """
    normalized = normalize_email(email) or None
    user_id: uuid.UUID | None = None
    if normalized:
        if await UserRepository.find_by_email(db, normalized) is not None:
            raise _email_in_use(normalized)
        user = await UserRepository.create(
            db,
            email=normalized,
            name=f"{first_name} {last_name}".strip(),
            role=UserRole.CANDIDATE,
        )
        user_id = user.id

    candidate = await CandidateRepository.create(
        db,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=normalized,
        phone=phone,
        forty_hour_course_completed=forty_hour_course_completed,
        user_id=user_id,
    )
    logger.info("Created candidate %s", candidate.id)
    return candidate


async def get_candidate(db: AsyncSession, candidate_id: uuid.UUID) -> CandidateProfile:
    """Fetch a candidate or raise NotFoundError."""
    candidate = await CandidateRepository.get_by_id(db, candidate_id)
    if candidate is None:
        raise NotFoundError("Candidate", str(candidate_id))
    return candidate


async def update_candidate(
    db: AsyncSession,
    candidate_id: uuid.UUID,
    changes: dict[str, object],
) -> CandidateProfile:
    """Apply profile edits.

    Changing ``email`` checks uniqueness against accounts other than the
    candidate's own; the account itself is synchronized on hire. Changing
    ``forty_hour_course_completed`` on a hired candidate makes the task
    set drift until the next reconciliation.

    Raises:
        NotFoundError: Candidate does not exist.
        ConflictError: New email belongs to another account.
    """
    candidate = await get_candidate(db, candidate_id)

    if "email" in changes:
        raw_email = changes["email"]
        normalized = normalize_email(raw_email if isinstance(raw_email, str) else None) or None
        if normalized:
            owner = await UserRepository.find_by_email(db, normalized)
            if owner is not None and owner.id != candidate.user_id:
                raise _email_in_use(normalized)
        changes = {**changes, "email": normalized}

    return await CandidateRepository.update(db, candidate, **changes)
