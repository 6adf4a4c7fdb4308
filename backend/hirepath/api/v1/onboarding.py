"""Onboarding API router.

Every read reconciles the candidate's task set first, so a hire whose
task creation partially failed is repaired the next time tasks are
viewed.
"""

import uuid

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from hirepath.api.deps import DbSession
from hirepath.api.v1.serializers import (
    candidate_to_dict,
    reconcile_result_to_dict,
    task_to_dict,
)
from hirepath.core.responses import DataResponse
from hirepath.services import onboarding_service, task_reconciler

router = APIRouter()


class SignTaskRequest(BaseModel):
    """Request body for signing a SIGNATURE task."""

    model_config = ConfigDict(extra="forbid")

    signature: str = Field(..., min_length=1, max_length=255)


class UploadTaskRequest(BaseModel):
    """Request body for completing a document or certificate task."""

    model_config = ConfigDict(extra="forbid")

    upload_url: str = Field(..., min_length=1, max_length=2048)


# =============================================================================
# Per-candidate task endpoints
# =============================================================================


@router.get("/candidates/{candidate_id}/onboarding/tasks")
async def list_onboarding_tasks(
    candidate_id: uuid.UUID, db: DbSession
) -> DataResponse[dict]:
    """List a candidate's onboarding tasks in display order."""
    view = await onboarding_service.get_onboarding_tasks(db, candidate_id)
    return DataResponse(
        data={
            "tasks": [task_to_dict(t) for t in view.tasks],
            "completed_count": view.completed_count,
            "total_count": len(view.tasks),
            "reconciliation": reconcile_result_to_dict(view.reconciliation),
        }
    )


@router.get("/candidates/{candidate_id}/dashboard")
async def get_dashboard(candidate_id: uuid.UUID, db: DbSession) -> DataResponse[dict]:
    """Resolve which surface a hired candidate sees next."""
    view = await onboarding_service.get_dashboard(db, candidate_id)
    return DataResponse(
        data={
            "candidate": candidate_to_dict(view.candidate),
            "gate": view.gate.value,
            "all_tasks_completed": view.all_tasks_completed,
            "schedule_completed": view.schedule_completed,
            "tasks": [task_to_dict(t) for t in view.tasks],
        }
    )


@router.post("/candidates/{candidate_id}/onboarding/rebuild")
async def rebuild_onboarding_tasks(
    candidate_id: uuid.UUID, db: DbSession
) -> DataResponse[dict]:
    """Replace a hired candidate's tasks with a fresh canonical set.

    Completion state is lost; prefer the self-healing reads.
    """
    result = await onboarding_service.rebuild_tasks(db, candidate_id)
    return DataResponse(data=reconcile_result_to_dict(result))


@router.post("/candidates/{candidate_id}/onboarding/tasks/{task_id}/complete")
async def complete_onboarding_task(
    candidate_id: uuid.UUID, task_id: uuid.UUID, db: DbSession
) -> DataResponse[dict]:
    """Mark a task complete."""
    task = await onboarding_service.complete_task(db, candidate_id, task_id)
    return DataResponse(data=task_to_dict(task))


@router.post("/candidates/{candidate_id}/onboarding/tasks/{task_id}/sign")
async def sign_onboarding_task(
    candidate_id: uuid.UUID,
    task_id: uuid.UUID,
    request: SignTaskRequest,
    db: DbSession,
) -> DataResponse[dict]:
    """Sign a SIGNATURE task."""
    task = await onboarding_service.sign_task(db, candidate_id, task_id, request.signature)
    return DataResponse(data=task_to_dict(task))


@router.post("/candidates/{candidate_id}/onboarding/tasks/{task_id}/upload")
async def upload_onboarding_task(
    candidate_id: uuid.UUID,
    task_id: uuid.UUID,
    request: UploadTaskRequest,
    db: DbSession,
) -> DataResponse[dict]:
    """Attach proof of completion to a document or certificate task."""
    task = await onboarding_service.submit_task_upload(
        db, candidate_id, task_id, request.upload_url
    )
    return DataResponse(data=task_to_dict(task))


# =============================================================================
# Bulk repair
# =============================================================================


@router.post("/onboarding/repair")
async def repair_onboarding_tasks(db: DbSession) -> DataResponse[dict]:
    """Reconcile every hired candidate's tasks."""
    summary = await task_reconciler.reconcile_all_hired(db)
    return DataResponse(
        data={
            "repaired": summary.repaired,
            "total": summary.total,
            "failed": summary.failed,
        }
    )
