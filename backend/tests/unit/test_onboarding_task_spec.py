"""Tests for the canonical onboarding task catalog.

Tests verify:
1. Task counts with and without the 40-hour course
2. Dense sort order and a single trailing signature task
3. Determinism (same flag, same list)
"""

from dataclasses import FrozenInstanceError

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hirepath.models.enums import OnboardingTaskType
from hirepath.services.onboarding_task_spec import (
    CONDITIONAL_TASK_TYPE,
    canonical_tasks,
    expected_task_count,
    requires_course_task,
)

# =============================================================================
# Catalog shape
# =============================================================================


class TestCanonicalTasks:
    """Tests for canonical_tasks()."""

    def test_returns_seven_tasks_when_course_not_completed(self) -> None:
        """Document reviews, course certificate and signature."""
        tasks = canonical_tasks(False)
        assert len(tasks) == 7

    def test_returns_six_tasks_when_course_completed(self) -> None:
        """Course certificate task is dropped once the course is done."""
        tasks = canonical_tasks(True)
        assert len(tasks) == 6

    def test_includes_course_task_only_when_not_completed(self) -> None:
        """Conditional task appears exactly when the course is outstanding."""
        without_course = [t.task_type for t in canonical_tasks(False)]
        with_course = [t.task_type for t in canonical_tasks(True)]
        assert without_course.count(CONDITIONAL_TASK_TYPE) == 1
        assert CONDITIONAL_TASK_TYPE not in with_course

    def test_starts_with_five_document_reviews(self) -> None:
        """First five tasks are downloadable documents with links."""
        tasks = canonical_tasks(False)[:5]
        assert all(t.task_type == OnboardingTaskType.DOWNLOAD_DOC for t in tasks)
        assert all(t.document_download_url for t in tasks)

    def test_course_task_precedes_signature(self) -> None:
        """Course certificate is the sixth task when present."""
        tasks = canonical_tasks(False)
        assert tasks[5].task_type == OnboardingTaskType.FORTY_HOUR_COURSE_CERTIFICATE
        assert tasks[5].sort_order == 6

    def test_signature_task_has_no_download_url(self) -> None:
        """Signature confirmation links to nothing."""
        signature = canonical_tasks(True)[-1]
        assert signature.task_type == OnboardingTaskType.SIGNATURE
        assert signature.document_download_url is None

    def test_descriptors_are_immutable(self) -> None:
        """Catalog entries cannot be mutated by callers."""
        task = canonical_tasks(False)[0]
        with pytest.raises(FrozenInstanceError):
            task.title = "changed"  # type: ignore[misc]


class TestExpectedTaskCount:
    """Tests for expected_task_count() and requires_course_task()."""

    def test_counts_match_catalog(self) -> None:
        """Expected counts are 7 and 6."""
        assert expected_task_count(False) == 7
        assert expected_task_count(True) == 6

    def test_course_required_when_not_completed(self) -> None:
        """Course task is required only without the certificate."""
        assert requires_course_task(False) is True
        assert requires_course_task(True) is False


# =============================================================================
# Properties
# =============================================================================


class TestCatalogProperties:
    """Property checks over both values of the course flag."""

    @given(st.booleans())
    def test_sort_order_is_dense_from_one(self, completed: bool) -> None:
        """sort_order runs 1..N with no gaps."""
        tasks = canonical_tasks(completed)
        assert [t.sort_order for t in tasks] == list(range(1, len(tasks) + 1))

    @given(st.booleans())
    def test_exactly_one_signature_task_and_it_is_last(self, completed: bool) -> None:
        """Signature confirmation closes every task set."""
        tasks = canonical_tasks(completed)
        signatures = [t for t in tasks if t.task_type == OnboardingTaskType.SIGNATURE]
        assert len(signatures) == 1
        assert tasks[-1] == signatures[0]

    @given(st.booleans())
    def test_is_deterministic(self, completed: bool) -> None:
        """Same input produces an equal list."""
        assert canonical_tasks(completed) == canonical_tasks(completed)

    @given(st.booleans())
    def test_length_matches_expected_count(self, completed: bool) -> None:
        """expected_task_count agrees with the catalog."""
        assert len(canonical_tasks(completed)) == expected_task_count(completed)
