"""Tests for onboarding task reconciliation.

Tests verify:
1. The pure plan for every status / task-set shape
2. Idempotence: a canonical set produces zero writes
3. Drift (wrong count, missing course task) triggers a full replace
4. Partial insert failures are reported, not raised, and healed later
"""

import uuid
from collections.abc import Sequence
from unittest.mock import patch

import pytest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hirepath.core.errors import NotFoundError
from hirepath.models.candidate import OnboardingTask
from hirepath.models.enums import CandidateStatus, OnboardingTaskType
from hirepath.repositories.onboarding_task_repository import (
    BulkCreateResult,
    OnboardingTaskRepository,
)
from hirepath.services import task_reconciler
from hirepath.services.onboarding_task_spec import TaskDescriptor, canonical_tasks
from hirepath.services.task_reconciler import (
    ReconcileAction,
    ReconcileResult,
    plan_reconciliation,
)

_DOC = OnboardingTaskType.DOWNLOAD_DOC
_COURSE = OnboardingTaskType.FORTY_HOUR_COURSE_CERTIFICATE
_SIGN = OnboardingTaskType.SIGNATURE
_MISSING_UUID = uuid.UUID("99999999-9999-9999-9999-999999999999")


def _types(completed: bool) -> list[OnboardingTaskType]:
    return [t.task_type for t in canonical_tasks(completed)]


# =============================================================================
# Plan (pure)
# =============================================================================


class TestPlanReconciliation:
    """Tests for plan_reconciliation()."""

    @pytest.mark.parametrize(
        "status", [s for s in CandidateStatus if s != CandidateStatus.HIRED]
    )
    def test_no_action_when_not_hired(self, status: CandidateStatus) -> None:
        """Only hired candidates get tasks."""
        assert plan_reconciliation(status, False, []) == ReconcileAction.NONE

    def test_create_when_hired_with_no_tasks(self) -> None:
        """Empty set is materialized."""
        assert plan_reconciliation(CandidateStatus.HIRED, False, []) == ReconcileAction.CREATE

    @pytest.mark.parametrize("completed", [False, True])
    def test_no_action_when_set_is_canonical(self, completed: bool) -> None:
        """Canonical sets are left alone."""
        action = plan_reconciliation(CandidateStatus.HIRED, completed, _types(completed))
        assert action == ReconcileAction.NONE

    def test_replace_when_count_is_short(self) -> None:
        """A partially created set is replaced."""
        action = plan_reconciliation(CandidateStatus.HIRED, False, [_DOC, _DOC, _DOC])
        assert action == ReconcileAction.REPLACE

    def test_replace_when_course_flag_flipped_to_completed(self) -> None:
        """Seven tasks for a course-completed candidate is drift."""
        action = plan_reconciliation(CandidateStatus.HIRED, True, _types(False))
        assert action == ReconcileAction.REPLACE

    def test_replace_when_course_task_required_but_missing(self) -> None:
        """Right count without the course task is still drift."""
        existing = [_DOC] * 6 + [_SIGN]
        action = plan_reconciliation(CandidateStatus.HIRED, False, existing)
        assert action == ReconcileAction.REPLACE

    def test_replace_when_forced_on_canonical_set(self) -> None:
        """Admin rebuild replaces even a canonical set."""
        action = plan_reconciliation(
            CandidateStatus.HIRED, False, _types(False), force=True
        )
        assert action == ReconcileAction.REPLACE

    def test_force_on_empty_set_creates(self) -> None:
        """Nothing to delete, so a forced pass on an empty set creates."""
        action = plan_reconciliation(CandidateStatus.HIRED, False, [], force=True)
        assert action == ReconcileAction.CREATE

    def test_accepts_generator_of_types(self) -> None:
        """existing_task_types may be a one-shot iterable."""
        action = plan_reconciliation(
            CandidateStatus.HIRED, False, (t for t in _types(False))
        )
        assert action == ReconcileAction.NONE


class TestReconcileResult:
    """Tests for ReconcileResult flags."""

    def test_empty_result_is_no_op_and_succeeded(self) -> None:
        """Default result reports no writes."""
        result = ReconcileResult()
        assert result.no_op is True
        assert result.succeeded is True

    def test_failed_inserts_are_not_success(self) -> None:
        """Any failed insert marks the pass unsuccessful."""
        result = ReconcileResult(created=3, failed=4)
        assert result.no_op is False
        assert result.succeeded is False

    def test_error_is_not_success(self) -> None:
        """An aborted pass is unsuccessful."""
        assert ReconcileResult(error="boom").succeeded is False


# =============================================================================
# Reconcile (database)
# =============================================================================


class TestReconcile:
    """Tests for reconcile() against the database."""

    async def test_raises_not_found_for_unknown_candidate(
        self, db_session: AsyncSession
    ) -> None:
        """Unknown candidate id is a NotFoundError."""
        with pytest.raises(NotFoundError):
            await task_reconciler.reconcile(db_session, _MISSING_UUID)

    async def test_no_tasks_for_non_hired_candidate(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """Reconciling a NEW candidate writes nothing."""
        candidate = await make_candidate(status=CandidateStatus.NEW)

        result = await task_reconciler.reconcile(db_session, candidate.id)

        assert result.no_op
        tasks = await OnboardingTaskRepository.list_for_candidate(db_session, candidate.id)
        assert tasks == []

    async def test_creates_full_set_for_hired_candidate(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """Seven tasks in canonical order for a candidate without the course."""
        candidate = await make_candidate(status=CandidateStatus.HIRED)

        result = await task_reconciler.reconcile(db_session, candidate.id)

        assert result == ReconcileResult(created=7)
        tasks = await OnboardingTaskRepository.list_for_candidate(db_session, candidate.id)
        assert [t.sort_order for t in tasks] == list(range(1, 8))
        assert [t.title for t in tasks] == [d.title for d in canonical_tasks(False)]
        assert not any(t.is_completed for t in tasks)

    async def test_creates_six_tasks_when_course_completed(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """Course-completed candidates get no certificate task."""
        candidate = await make_candidate(
            status=CandidateStatus.HIRED, forty_hour_course_completed=True
        )

        result = await task_reconciler.reconcile(db_session, candidate.id)

        assert result.created == 6
        tasks = await OnboardingTaskRepository.list_for_candidate(db_session, candidate.id)
        assert _COURSE not in {t.task_type for t in tasks}

    async def test_second_pass_is_no_op_and_keeps_completion(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """Reconciling a canonical set leaves completion state untouched."""
        candidate = await make_candidate(status=CandidateStatus.HIRED)
        await task_reconciler.reconcile(db_session, candidate.id)
        tasks = await OnboardingTaskRepository.list_for_candidate(db_session, candidate.id)
        await OnboardingTaskRepository.mark_completed(db_session, tasks[0])
        original_ids = [t.id for t in tasks]

        result = await task_reconciler.reconcile(db_session, candidate.id)

        assert result.no_op
        after = await OnboardingTaskRepository.list_for_candidate(db_session, candidate.id)
        assert [t.id for t in after] == original_ids
        assert after[0].is_completed is True
        assert after[0].completed_at is not None

    async def test_replaces_set_when_course_flag_changes(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """Flipping the course flag after hire is repaired on the next pass."""
        candidate = await make_candidate(status=CandidateStatus.HIRED)
        await task_reconciler.reconcile(db_session, candidate.id)
        candidate.forty_hour_course_completed = True
        await db_session.flush()

        result = await task_reconciler.reconcile(db_session, candidate.id)

        assert result.deleted == 7
        assert result.created == 6
        second = await task_reconciler.reconcile(db_session, candidate.id)
        assert second.no_op

    async def test_replace_discards_completion_progress(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """A drifted set is fully replaced, completed tasks included."""
        candidate = await make_candidate(status=CandidateStatus.HIRED)
        await task_reconciler.reconcile(db_session, candidate.id)
        tasks = await OnboardingTaskRepository.list_for_candidate(db_session, candidate.id)
        await OnboardingTaskRepository.mark_completed(db_session, tasks[0])
        await db_session.delete(tasks[-1])
        await db_session.flush()

        result = await task_reconciler.reconcile(db_session, candidate.id)

        assert result.deleted == 6
        assert result.created == 7
        after = await OnboardingTaskRepository.list_for_candidate(db_session, candidate.id)
        assert not any(t.is_completed for t in after)

    async def test_forced_pass_rebuilds_canonical_set(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """force=True replaces a canonical set with fresh records."""
        candidate = await make_candidate(status=CandidateStatus.HIRED)
        await task_reconciler.reconcile(db_session, candidate.id)
        before = {
            t.id
            for t in await OnboardingTaskRepository.list_for_candidate(
                db_session, candidate.id
            )
        }

        result = await task_reconciler.reconcile(db_session, candidate.id, force=True)

        assert (result.deleted, result.created) == (7, 7)
        after = {
            t.id
            for t in await OnboardingTaskRepository.list_for_candidate(
                db_session, candidate.id
            )
        }
        assert before.isdisjoint(after)


# =============================================================================
# Partial failure
# =============================================================================


class TestPartialFailure:
    """Independent task writes survive individual insert failures."""

    async def test_create_many_keeps_successful_inserts(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """A failing insert is counted and the rest are kept."""
        candidate = await make_candidate(status=CandidateStatus.HIRED)
        descriptors = canonical_tasks(False)

        def flaky_task(**kwargs):
            if kwargs["sort_order"] > 3:
                raise SQLAlchemyError("simulated insert failure")
            return OnboardingTask(**kwargs)

        with patch(
            "hirepath.repositories.onboarding_task_repository.OnboardingTask",
            side_effect=flaky_task,
        ):
            outcome = await OnboardingTaskRepository.create_many(
                db_session, candidate.id, descriptors
            )

        assert outcome == BulkCreateResult(created=3, failed=4)
        tasks = await OnboardingTaskRepository.list_for_candidate(db_session, candidate.id)
        assert [t.sort_order for t in tasks] == [1, 2, 3]

    async def test_partial_set_is_healed_by_next_pass(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """3 of 7 created, next pass replaces with the full set."""
        candidate = await make_candidate(status=CandidateStatus.HIRED)
        real_create_many = OnboardingTaskRepository.create_many

        async def create_first_three(
            db: AsyncSession, candidate_id, descriptors: Sequence[TaskDescriptor]
        ) -> BulkCreateResult:
            result = await real_create_many(db, candidate_id, descriptors[:3])
            return BulkCreateResult(
                created=result.created, failed=len(descriptors) - 3
            )

        with patch.object(
            OnboardingTaskRepository, "create_many", side_effect=create_first_three
        ):
            first = await task_reconciler.reconcile(db_session, candidate.id)

        assert (first.created, first.failed) == (3, 4)
        assert first.succeeded is False

        second = await task_reconciler.reconcile(db_session, candidate.id)

        assert (second.deleted, second.created, second.failed) == (3, 7, 0)
        tasks = await OnboardingTaskRepository.list_for_candidate(db_session, candidate.id)
        assert len(tasks) == 7

    async def test_delete_failure_is_reported_not_raised(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """A failed delete aborts the pass with an error result."""
        candidate = await make_candidate(status=CandidateStatus.HIRED)
        await task_reconciler.reconcile(db_session, candidate.id)

        with patch.object(
            OnboardingTaskRepository,
            "delete_for_candidate",
            side_effect=SQLAlchemyError("simulated delete failure"),
        ):
            result = await task_reconciler.reconcile(
                db_session, candidate.id, force=True
            )

        assert result.error is not None
        assert result.created == 0
        tasks = await OnboardingTaskRepository.list_for_candidate(db_session, candidate.id)
        assert len(tasks) == 7

    async def test_load_failure_leaves_caller_transaction_usable(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """A failed task query is rolled back to its savepoint only."""
        candidate = await make_candidate(status=CandidateStatus.HIRED)

        async def failing_load(db: AsyncSession, _candidate_id) -> list:
            await db.execute(text("SELECT * FROM no_such_table"))
            return []

        with patch.object(
            OnboardingTaskRepository, "list_for_candidate", side_effect=failing_load
        ):
            result = await task_reconciler.reconcile(db_session, candidate.id)

        assert result.error == "Failed to load onboarding tasks"
        candidate.first_name = "Updated"
        await db_session.flush()
        await db_session.refresh(candidate)
        assert candidate.first_name == "Updated"
        second = await task_reconciler.reconcile(db_session, candidate.id)
        assert second.created == 7


# =============================================================================
# Repair all
# =============================================================================


class TestReconcileAllHired:
    """Tests for reconcile_all_hired()."""

    async def test_repairs_only_hired_candidates_needing_work(
        self, db_session: AsyncSession, make_candidate
    ) -> None:
        """Counts candidates that needed writes among all hired."""
        healthy = await make_candidate(
            email="healthy@example.com", status=CandidateStatus.HIRED
        )
        await task_reconciler.reconcile(db_session, healthy.id)
        broken = await make_candidate(
            email="broken@example.com", status=CandidateStatus.HIRED
        )
        await make_candidate(email="new@example.com", status=CandidateStatus.NEW)

        summary = await task_reconciler.reconcile_all_hired(db_session)

        assert (summary.repaired, summary.total, summary.failed) == (1, 2, 0)
        tasks = await OnboardingTaskRepository.list_for_candidate(db_session, broken.id)
        assert len(tasks) == 7
