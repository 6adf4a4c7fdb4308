"""Routing gate for hired candidates.

Tasks come before scheduling purely through precedence here; the
schedule flag may be set out of order but is ignored until every task
is complete.
"""

from collections.abc import Iterable
from enum import Enum

from hirepath.models.candidate import OnboardingTask


class GateState(str, Enum):
    """UI surface a hired candidate is routed to."""

    ONBOARDING = "ONBOARDING"
    SCHEDULE_SETUP = "SCHEDULE_SETUP"
    MAIN_DASHBOARD = "MAIN_DASHBOARD"


def resolve_gate(all_tasks_completed: bool, schedule_completed: bool) -> GateState:
    """Pick the surface from the two completion flags."""
    if not all_tasks_completed:
        return GateState.ONBOARDING
    if not schedule_completed:
        return GateState.SCHEDULE_SETUP
    return GateState.MAIN_DASHBOARD


def all_tasks_completed(tasks: Iterable[OnboardingTask]) -> bool:
    """True when there is at least one task and every task is completed.

    An empty set counts as incomplete so a candidate whose tasks are still
    being repaired stays on the onboarding surface.
    """
    task_list = list(tasks)
    return bool(task_list) and all(task.is_completed for task in task_list)
