"""Repository for onboarding task records.

Persistence boundary for the tasks belonging to a candidate. Bulk
creation writes each task independently inside its own SAVEPOINT so one
failed insert does not undo the others.
"""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hirepath.models.candidate import OnboardingTask
from hirepath.services.onboarding_task_spec import TaskDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkCreateResult:
    """Outcome of an independent-writes bulk insert."""

    created: int
    failed: int


class OnboardingTaskRepository:
    """Stateless repository for OnboardingTask operations."""

    @staticmethod
    async def list_for_candidate(
        db: AsyncSession, candidate_id: uuid.UUID
    ) -> list[OnboardingTask]:
        """Return a candidate's tasks ordered by sort_order."""
        result = await db.execute(
            select(OnboardingTask)
            .where(OnboardingTask.candidate_id == candidate_id)
            .order_by(OnboardingTask.sort_order, OnboardingTask.created_at)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_for_candidate(
        db: AsyncSession, candidate_id: uuid.UUID, task_id: uuid.UUID
    ) -> OnboardingTask | None:
        """Fetch one task, scoped to its owning candidate."""
        result = await db.execute(
            select(OnboardingTask).where(
                OnboardingTask.id == task_id,
                OnboardingTask.candidate_id == candidate_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_many(
        db: AsyncSession,
        candidate_id: uuid.UUID,
        descriptors: Sequence[TaskDescriptor],
    ) -> BulkCreateResult:
        """Insert one task per descriptor as independent writes.

        A failed insert is logged and skipped; successful inserts are kept.

        Args:
            db: Async database session.
            candidate_id: Owning candidate.
            descriptors: Canonical task descriptors to materialize.

        Returns:
            BulkCreateResult with created and failed counts.
        """
        created = 0
        failed = 0
        for descriptor in descriptors:
            try:
                async with db.begin_nested():
                    db.add(
                        OnboardingTask(
                            candidate_id=candidate_id,
                            task_type=descriptor.task_type,
                            title=descriptor.title,
                            description=descriptor.description,
                            document_download_url=descriptor.document_download_url,
                            sort_order=descriptor.sort_order,
                        )
                    )
            except SQLAlchemyError:
                failed += 1
                logger.warning(
                    "Failed to create onboarding task %s for candidate %s",
                    descriptor.sort_order,
                    candidate_id,
                    exc_info=True,
                )
            else:
                created += 1
        return BulkCreateResult(created=created, failed=failed)

    @staticmethod
    async def delete_for_candidate(db: AsyncSession, candidate_id: uuid.UUID) -> int:
        """Delete every task owned by a candidate.

        Returns:
            Number of rows deleted.
        """
        async with db.begin_nested():
            result = await db.execute(
                delete(OnboardingTask)
                .where(OnboardingTask.candidate_id == candidate_id)
                .execution_options(synchronize_session="fetch")
            )
        return result.rowcount or 0

    @staticmethod
    async def mark_completed(
        db: AsyncSession,
        task: OnboardingTask,
        *,
        upload_url: str | None = None,
    ) -> OnboardingTask:
        """Mark a task completed, optionally storing its proof payload."""
        task.is_completed = True
        task.completed_at = datetime.now(UTC)
        if upload_url is not None:
            task.upload_url = upload_url
        await db.flush()
        await db.refresh(task)
        return task
