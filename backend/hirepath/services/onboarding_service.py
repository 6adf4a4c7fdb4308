"""Candidate onboarding: self-healing reads, dashboard gate, task completion.

Every read of a candidate's tasks first runs reconciliation, so drift is
repaired on the next access without an explicit repair call.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from hirepath.core.errors import InvalidStateError, NotFoundError, ValidationError
from hirepath.models.candidate import CandidateProfile, OnboardingTask
from hirepath.models.enums import CandidateStatus, OnboardingTaskType
from hirepath.repositories.onboarding_task_repository import (
    OnboardingTaskRepository,
)
from hirepath.services import task_reconciler
from hirepath.services.candidate_service import get_candidate
from hirepath.services.gate_resolver import GateState, all_tasks_completed, resolve_gate
from hirepath.services.task_reconciler import ReconcileResult

logger = logging.getLogger(__name__)

_UPLOAD_TASK_TYPES: frozenset[OnboardingTaskType] = frozenset(
    {
        OnboardingTaskType.DOWNLOAD_DOC,
        OnboardingTaskType.FORTY_HOUR_COURSE_CERTIFICATE,
    }
)


# =============================================================================
# Schedule status
# =============================================================================


class ScheduleStatusProvider(Protocol):
    """Read-only view of the weekly-availability subsystem."""

    async def is_schedule_completed(
        self, db: AsyncSession, candidate: CandidateProfile
    ) -> bool: ...


class ProfileScheduleStatusProvider:
    """Reads the flag the availability subsystem writes on the profile."""

    async def is_schedule_completed(
        self, db: AsyncSession, candidate: CandidateProfile
    ) -> bool:
        return candidate.schedule_completed


# =============================================================================
# Result Dataclasses
# =============================================================================


@dataclass(frozen=True)
class OnboardingTasksView:
    """A candidate's tasks after reconciliation."""

    candidate: CandidateProfile
    tasks: list[OnboardingTask]
    reconciliation: ReconcileResult

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self.tasks if task.is_completed)


@dataclass(frozen=True)
class DashboardView:
    """Routing decision for a hired candidate."""

    candidate: CandidateProfile
    tasks: list[OnboardingTask]
    all_tasks_completed: bool
    schedule_completed: bool
    gate: GateState
    reconciliation: ReconcileResult


# =============================================================================
# Reads
# =============================================================================


async def get_onboarding_tasks(
    db: AsyncSession, candidate_id: uuid.UUID
) -> OnboardingTasksView:
    """Reconcile, then return a candidate's tasks in order.

    Raises:
        NotFoundError: Candidate does not exist.
    """
    candidate = await get_candidate(db, candidate_id)
    reconciliation = await task_reconciler.reconcile(db, candidate_id)
    tasks = await OnboardingTaskRepository.list_for_candidate(db, candidate_id)
    return OnboardingTasksView(
        candidate=candidate, tasks=tasks, reconciliation=reconciliation
    )


async def get_dashboard(
    db: AsyncSession,
    candidate_id: uuid.UUID,
    *,
    schedule_provider: ScheduleStatusProvider | None = None,
) -> DashboardView:
    """Resolve which surface a hired candidate should see.

    Args:
        db: Database session.
        candidate_id: Candidate viewing the dashboard.
        schedule_provider: Source of the schedule-completed flag.

    Returns:
        DashboardView with the resolved gate.

    Raises:
        NotFoundError: Candidate does not exist.
        InvalidStateError: Candidate is not hired.
    """
    view = await get_onboarding_tasks(db, candidate_id)
    if view.candidate.status != CandidateStatus.HIRED:
        raise InvalidStateError("The onboarding dashboard is only available to hired candidates.")

    provider = schedule_provider or ProfileScheduleStatusProvider()
    schedule_completed = await provider.is_schedule_completed(db, view.candidate)
    tasks_done = all_tasks_completed(view.tasks)

    return DashboardView(
        candidate=view.candidate,
        tasks=view.tasks,
        all_tasks_completed=tasks_done,
        schedule_completed=schedule_completed,
        gate=resolve_gate(tasks_done, schedule_completed),
        reconciliation=view.reconciliation,
    )


# =============================================================================
# Task completion
# =============================================================================


async def _get_task(
    db: AsyncSession, candidate_id: uuid.UUID, task_id: uuid.UUID
) -> OnboardingTask:
    await get_candidate(db, candidate_id)
    task = await OnboardingTaskRepository.get_for_candidate(db, candidate_id, task_id)
    if task is None:
        raise NotFoundError("OnboardingTask", str(task_id))
    return task


async def complete_task(
    db: AsyncSession, candidate_id: uuid.UUID, task_id: uuid.UUID
) -> OnboardingTask:
    """Mark a task complete on the candidate's behalf (admin override)."""
    task = await _get_task(db, candidate_id, task_id)
    return await OnboardingTaskRepository.mark_completed(db, task)


async def sign_task(
    db: AsyncSession, candidate_id: uuid.UUID, task_id: uuid.UUID, signature: str
) -> OnboardingTask:
    """Complete a signature task with the candidate's typed signature.

    Raises:
        NotFoundError: Candidate or task does not exist.
        InvalidStateError: Task is not a signature task.
        ValidationError: Signature is blank.
    """
    task = await _get_task(db, candidate_id, task_id)
    if task.task_type != OnboardingTaskType.SIGNATURE:
        raise InvalidStateError("Only signature tasks can be signed.")
    if not signature.strip():
        raise ValidationError("Signature is required.")
    return await OnboardingTaskRepository.mark_completed(
        db, task, upload_url=signature.strip()
    )


async def submit_task_upload(
    db: AsyncSession, candidate_id: uuid.UUID, task_id: uuid.UUID, upload_url: str
) -> OnboardingTask:
    """Complete a document or certificate task with its proof payload.

    ``upload_url`` is opaque here; the file-handling collaborator owns
    its format.

    Raises:
        NotFoundError: Candidate or task does not exist.
        InvalidStateError: Task is a signature task.
        ValidationError: Payload is blank.
    """
    task = await _get_task(db, candidate_id, task_id)
    if task.task_type not in _UPLOAD_TASK_TYPES:
        raise InvalidStateError("Signature tasks are completed by signing, not uploading.")
    if not upload_url.strip():
        raise ValidationError("An upload reference is required.")
    task = await OnboardingTaskRepository.mark_completed(db, task, upload_url=upload_url)
    logger.info("Candidate %s completed task %s by upload", candidate_id, task_id)
    return task


async def rebuild_tasks(db: AsyncSession, candidate_id: uuid.UUID) -> ReconcileResult:
    """Replace a hired candidate's task set with a fresh canonical set.

    Raises:
        NotFoundError: Candidate does not exist.
        InvalidStateError: Candidate is not hired.
    """
    candidate = await get_candidate(db, candidate_id)
    if candidate.status != CandidateStatus.HIRED:
        raise InvalidStateError("Onboarding tasks exist only for hired candidates.")
    return await task_reconciler.reconcile(db, candidate_id, force=True)
