"""Repository for candidate profile persistence.

Persistence boundary for candidate profile and status. Candidates are
never hard-deleted here.
"""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hirepath.models.candidate import CandidateProfile
from hirepath.models.enums import CandidateStatus

# Fields that may be updated via CandidateRepository.update().
# status is excluded: it changes only through stage transitions.
_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "phone",
        "forty_hour_course_completed",
        "user_id",
    }
)


class CandidateRepository:
    """Stateless repository for CandidateProfile operations.

    All methods are static. Pass an AsyncSession for every call so the
    caller controls transaction boundaries.
    """

    @staticmethod
    async def get_by_id(
        db: AsyncSession, candidate_id: uuid.UUID
    ) -> CandidateProfile | None:
        """Fetch a candidate by primary key."""
        return await db.get(CandidateProfile, candidate_id)

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        first_name: str,
        last_name: str,
        email: str | None = None,
        phone: str | None = None,
        forty_hour_course_completed: bool = False,
        user_id: uuid.UUID | None = None,
    ) -> CandidateProfile:
        """Create a candidate in status NEW.

        Args:
            db: Async database session.
            first_name: Given name.
            last_name: Family name.
            email: Contact email (already normalized by the caller).
            phone: Contact phone.
            forty_hour_course_completed: Intake answer for the 40-hour course.
            user_id: Linked account, if any.

        Returns:
            Created CandidateProfile with database-generated fields populated.
        """
        candidate = CandidateProfile(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            forty_hour_course_completed=forty_hour_course_completed,
            user_id=user_id,
            status=CandidateStatus.NEW,
        )
        db.add(candidate)
        await db.flush()
        await db.refresh(candidate)
        return candidate

    @staticmethod
    async def update(
        db: AsyncSession,
        candidate: CandidateProfile,
        **kwargs: object,
    ) -> CandidateProfile:
        """Update profile fields.

        Args:
            db: Async database session.
            candidate: Candidate to modify.
            **kwargs: Field values; only _UPDATABLE_FIELDS are accepted.

        Returns:
            The updated candidate.

        Raises:
            ValueError: If an unknown or protected field is given.
        """
        unknown = set(kwargs) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")
        for field, value in kwargs.items():
            setattr(candidate, field, value)
        await db.flush()
        await db.refresh(candidate)
        return candidate

    @staticmethod
    async def set_status(
        db: AsyncSession,
        candidate: CandidateProfile,
        status: CandidateStatus,
    ) -> CandidateProfile:
        """Persist a new status (last write wins, no concurrency token)."""
        candidate.status = status
        await db.flush()
        await db.refresh(candidate)
        return candidate

    @staticmethod
    async def list_filtered(
        db: AsyncSession,
        *,
        status: CandidateStatus | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[CandidateProfile], int]:
        """List candidates, newest first.

        Args:
            db: Async database session.
            status: Optional status filter.
            offset: Rows to skip.
            limit: Maximum rows to return.

        Returns:
            Tuple of (page of candidates, total matching count).
        """
        stmt = select(CandidateProfile)
        count_stmt = select(func.count()).select_from(CandidateProfile)
        if status is not None:
            stmt = stmt.where(CandidateProfile.status == status)
            count_stmt = count_stmt.where(CandidateProfile.status == status)

        total = (await db.execute(count_stmt)).scalar_one()
        result = await db.execute(
            stmt.order_by(CandidateProfile.created_at.desc(), CandidateProfile.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def list_ids_by_status(
        db: AsyncSession, status: CandidateStatus
    ) -> list[uuid.UUID]:
        """Return the IDs of every candidate in the given status."""
        result = await db.execute(
            select(CandidateProfile.id).where(CandidateProfile.status == status)
        )
        return list(result.scalars().all())
