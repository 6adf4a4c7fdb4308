"""Onboarding task reconciliation.

Compares a candidate's persisted tasks with the canonical set from
``onboarding_task_spec`` and converges them:

- not HIRED            -> no-op
- no tasks             -> create the full canonical set
- wrong count, or the
  course task required
  but missing          -> delete every task and recreate the canonical set
- otherwise            -> no-op (zero writes)

Replacement is a full replace, not a diff: completion progress on a
drifted set is discarded.

Write failures are never raised. Each insert is an independent write; a
partial set is left in place and the next pass detects it by count.
Reconciliation runs inline on every hire and every dashboard read.
"""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hirepath.core.errors import NotFoundError
from hirepath.models.enums import CandidateStatus, OnboardingTaskType
from hirepath.repositories.candidate_repository import CandidateRepository
from hirepath.repositories.onboarding_task_repository import (
    OnboardingTaskRepository,
)
from hirepath.services.onboarding_task_spec import (
    CONDITIONAL_TASK_TYPE,
    canonical_tasks,
    expected_task_count,
    requires_course_task,
)

logger = logging.getLogger(__name__)
audit_logger = structlog.get_logger()


# =============================================================================
# Plan
# =============================================================================


class ReconcileAction(Enum):
    """What a reconciliation pass must do."""

    NONE = "none"
    CREATE = "create"
    REPLACE = "replace"


def plan_reconciliation(
    status: CandidateStatus,
    forty_hour_course_completed: bool,
    existing_task_types: Iterable[OnboardingTaskType],
    *,
    force: bool = False,
) -> ReconcileAction:
    """Decide how to converge a task set. Pure function.

    Args:
        status: Candidate status.
        forty_hour_course_completed: Candidate's course flag.
        existing_task_types: Task types of the persisted records.
        force: Replace even a canonical set (admin rebuild).

    Returns:
        The action to take.
    """
    if status != CandidateStatus.HIRED:
        return ReconcileAction.NONE

    existing = list(existing_task_types)
    if not existing:
        return ReconcileAction.CREATE
    if force:
        return ReconcileAction.REPLACE

    course_required = requires_course_task(forty_hour_course_completed)
    has_course_task = CONDITIONAL_TASK_TYPE in existing
    if len(existing) != expected_task_count(forty_hour_course_completed) or (
        course_required and not has_course_task
    ):
        return ReconcileAction.REPLACE
    return ReconcileAction.NONE


# =============================================================================
# Result Dataclasses
# =============================================================================


@dataclass(frozen=True)
class ReconcileResult:
    """Summary of one reconciliation pass.

    Attributes:
        created: Tasks inserted.
        deleted: Tasks removed.
        failed: Inserts that failed (left for the next pass).
        error: Message when the pass aborted on a write failure.
    """

    created: int = 0
    deleted: int = 0
    failed: int = 0
    error: str | None = None

    @property
    def no_op(self) -> bool:
        """True when the pass performed no writes."""
        return self.created == 0 and self.deleted == 0 and self.failed == 0 and (
            self.error is None
        )

    @property
    def succeeded(self) -> bool:
        """True when every attempted write succeeded."""
        return self.failed == 0 and self.error is None


@dataclass(frozen=True)
class RepairSummary:
    """Outcome of reconciling every hired candidate."""

    repaired: int
    total: int
    failed: int


# =============================================================================
# Public API
# =============================================================================


async def reconcile(
    db: AsyncSession,
    candidate_id: uuid.UUID,
    *,
    force: bool = False,
) -> ReconcileResult:
    """Converge a candidate's onboarding tasks to the canonical set.

    Idempotent: a canonical set produces zero writes.

    Args:
        db: Database session.
        candidate_id: Candidate to reconcile.
        force: Replace the task set even if it already looks canonical.

    Returns:
        ReconcileResult describing the writes performed.

    Raises:
        NotFoundError: Candidate does not exist.
    """
    candidate = await CandidateRepository.get_by_id(db, candidate_id)
    if candidate is None:
        raise NotFoundError("Candidate", str(candidate_id))

    # SAVEPOINT keeps a failed load from aborting the caller's transaction.
    try:
        async with db.begin_nested():
            existing = await OnboardingTaskRepository.list_for_candidate(
                db, candidate_id
            )
    except SQLAlchemyError:
        logger.warning(
            "Could not load onboarding tasks for candidate %s",
            candidate_id,
            exc_info=True,
        )
        return ReconcileResult(error="Failed to load onboarding tasks")

    action = plan_reconciliation(
        candidate.status,
        candidate.forty_hour_course_completed,
        (task.task_type for task in existing),
        force=force,
    )
    if action is ReconcileAction.NONE:
        return ReconcileResult()

    deleted = 0
    if action is ReconcileAction.REPLACE:
        try:
            deleted = await OnboardingTaskRepository.delete_for_candidate(
                db, candidate_id
            )
        except SQLAlchemyError:
            logger.warning(
                "Could not delete drifted onboarding tasks for candidate %s",
                candidate_id,
                exc_info=True,
            )
            return ReconcileResult(error="Failed to delete drifted onboarding tasks")

    descriptors = canonical_tasks(candidate.forty_hour_course_completed)
    outcome = await OnboardingTaskRepository.create_many(db, candidate_id, descriptors)

    result = ReconcileResult(
        created=outcome.created,
        deleted=deleted,
        failed=outcome.failed,
    )
    audit_logger.info(
        "onboarding_tasks_reconciled",
        candidate_id=str(candidate_id),
        action=action.value,
        created=result.created,
        deleted=result.deleted,
        failed=result.failed,
    )
    return result


async def reconcile_all_hired(db: AsyncSession) -> RepairSummary:
    """Reconcile every HIRED candidate.

    Args:
        db: Database session.

    Returns:
        RepairSummary with how many candidates needed writes.
    """
    candidate_ids = await CandidateRepository.list_ids_by_status(
        db, CandidateStatus.HIRED
    )
    repaired = 0
    failed = 0
    for candidate_id in candidate_ids:
        result = await reconcile(db, candidate_id)
        if not result.no_op:
            repaired += 1
        if not result.succeeded:
            failed += 1

    return RepairSummary(repaired=repaired, total=len(candidate_ids), failed=failed)
