"""Repository for the candidate status audit log."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hirepath.models.candidate import StatusAuditEntry
from hirepath.models.enums import CandidateStatus


class StatusAuditRepository:
    """Stateless repository for StatusAuditEntry operations.

    Entries are append-only.
    """

    @staticmethod
    async def record(
        db: AsyncSession,
        *,
        candidate_id: uuid.UUID,
        previous_status: CandidateStatus,
        new_status: CandidateStatus,
        notes: str | None = None,
        created_by: str | None = None,
    ) -> StatusAuditEntry:
        """Append an audit entry for a status change."""
        entry = StatusAuditEntry(
            candidate_id=candidate_id,
            previous_status=previous_status,
            new_status=new_status,
            notes=notes,
            created_by=created_by,
        )
        db.add(entry)
        await db.flush()
        return entry

    @staticmethod
    async def list_for_candidate(
        db: AsyncSession, candidate_id: uuid.UUID
    ) -> list[StatusAuditEntry]:
        """Return a candidate's audit entries, newest first."""
        result = await db.execute(
            select(StatusAuditEntry)
            .where(StatusAuditEntry.candidate_id == candidate_id)
            .order_by(StatusAuditEntry.created_at.desc(), StatusAuditEntry.id)
        )
        return list(result.scalars().all())
