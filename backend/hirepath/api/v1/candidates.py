"""Candidates API router (Admin Status API).

Intake, profile edits, pipeline transitions and status history.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from hirepath.api.deps import CurrentNotifier, DbSession
from hirepath.api.v1.serializers import (
    audit_entry_to_dict,
    candidate_to_dict,
    transition_to_dict,
)
from hirepath.core.pagination import PaginationParams, pagination_params
from hirepath.core.responses import DataResponse, ListResponse, PaginationMeta
from hirepath.models.enums import CandidateStatus
from hirepath.repositories.candidate_repository import CandidateRepository
from hirepath.repositories.status_audit_repository import StatusAuditRepository
from hirepath.services import candidate_service, stage_transition

_MAX_NAME_LENGTH = 100

router = APIRouter()


# =============================================================================
# Request Schemas
# =============================================================================


class CreateCandidateRequest(BaseModel):
    """Request body for candidate intake."""

    model_config = ConfigDict(extra="forbid")

    first_name: str = Field(..., min_length=1, max_length=_MAX_NAME_LENGTH)
    last_name: str = Field(..., min_length=1, max_length=_MAX_NAME_LENGTH)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    forty_hour_course_completed: bool = False


class UpdateCandidateRequest(BaseModel):
    """Request body for partially updating a candidate.

    All fields optional; only provided fields are updated.
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str | None = Field(default=None, min_length=1, max_length=_MAX_NAME_LENGTH)
    last_name: str | None = Field(default=None, min_length=1, max_length=_MAX_NAME_LENGTH)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    forty_hour_course_completed: bool | None = None

    @field_validator("first_name", "last_name", "forty_hour_course_completed")
    @classmethod
    def reject_explicit_null(cls, v: object) -> object:
        """Names and the course flag may be omitted but never cleared."""
        if v is None:
            msg = "Field cannot be null"
            raise ValueError(msg)
        return v


class UpdateStatusRequest(BaseModel):
    """Request body for an admin status change."""

    model_config = ConfigDict(extra="forbid")

    status: CandidateStatus
    actor: str | None = Field(default=None, max_length=255)


class TransitionRequest(BaseModel):
    """Optional body for hire/reject actions."""

    model_config = ConfigDict(extra="forbid")

    actor: str | None = Field(default=None, max_length=255)


# =============================================================================
# Candidate CRUD
# =============================================================================


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_candidate(
    request: CreateCandidateRequest,
    db: DbSession,
) -> DataResponse[dict]:
    """Register a new candidate in status NEW."""
    candidate = await candidate_service.create_candidate(
        db,
        first_name=request.first_name,
        last_name=request.last_name,
        email=str(request.email) if request.email else None,
        phone=request.phone,
        forty_hour_course_completed=request.forty_hour_course_completed,
    )
    return DataResponse(data=candidate_to_dict(candidate))


@router.get("")
async def list_candidates(
    db: DbSession,
    status_filter: CandidateStatus | None = Query(default=None, alias="status"),
    pagination: PaginationParams = Depends(pagination_params),
) -> ListResponse[dict]:
    """List candidates, optionally filtered by status."""
    candidates, total = await CandidateRepository.list_filtered(
        db,
        status=status_filter,
        offset=pagination.offset,
        limit=pagination.limit,
    )
    return ListResponse(
        data=[candidate_to_dict(c) for c in candidates],
        meta=PaginationMeta(
            total=total, page=pagination.page, per_page=pagination.per_page
        ),
    )


@router.get("/{candidate_id}")
async def get_candidate(candidate_id: uuid.UUID, db: DbSession) -> DataResponse[dict]:
    """Get a candidate with the admin actions available in its status."""
    candidate = await candidate_service.get_candidate(db, candidate_id)
    return DataResponse(data=candidate_to_dict(candidate))


@router.patch("/{candidate_id}")
async def update_candidate(
    candidate_id: uuid.UUID,
    request: UpdateCandidateRequest,
    db: DbSession,
) -> DataResponse[dict]:
    """Edit profile fields. Status is changed through the status endpoints."""
    changes = request.model_dump(exclude_unset=True)
    if "email" in changes and changes["email"] is not None:
        changes["email"] = str(changes["email"])
    candidate = await candidate_service.update_candidate(db, candidate_id, changes)
    return DataResponse(data=candidate_to_dict(candidate))


# =============================================================================
# Pipeline transitions
# =============================================================================


@router.patch("/{candidate_id}/status")
async def update_status(
    candidate_id: uuid.UUID,
    request: UpdateStatusRequest,
    db: DbSession,
    notifier: CurrentNotifier,
) -> DataResponse[dict]:
    """Set an arbitrary pipeline status. HIRED runs the full hire flow."""
    result = await stage_transition.update_status(
        db, candidate_id, request.status, notifier=notifier, actor=request.actor
    )
    return DataResponse(data=transition_to_dict(result))


@router.post("/{candidate_id}/hire")
async def hire_candidate(
    candidate_id: uuid.UUID,
    db: DbSession,
    notifier: CurrentNotifier,
    request: TransitionRequest | None = None,
) -> DataResponse[dict]:
    """Hire a candidate and materialize onboarding tasks.

    Responds 200 even when task creation or the offer email failed; the
    result reports both, and tasks are repaired on the next read.
    """
    result = await stage_transition.hire(
        db,
        candidate_id,
        notifier=notifier,
        actor=request.actor if request else None,
    )
    return DataResponse(data=transition_to_dict(result))


@router.post("/{candidate_id}/reject")
async def reject_candidate(
    candidate_id: uuid.UUID,
    db: DbSession,
    notifier: CurrentNotifier,
    request: TransitionRequest | None = None,
) -> DataResponse[dict]:
    """Reject a candidate and send the rejection email."""
    result = await stage_transition.reject(
        db,
        candidate_id,
        notifier=notifier,
        actor=request.actor if request else None,
    )
    return DataResponse(data=transition_to_dict(result))


@router.post("/{candidate_id}/reach-out")
async def send_reach_out(
    candidate_id: uuid.UUID,
    db: DbSession,
    notifier: CurrentNotifier,
) -> DataResponse[dict]:
    """Send the reach-out email."""
    outcome = await stage_transition.send_reach_out(db, candidate_id, notifier=notifier)
    return DataResponse(data={"notification": outcome.value})


@router.get("/{candidate_id}/status-history")
async def get_status_history(
    candidate_id: uuid.UUID, db: DbSession
) -> DataResponse[list[dict]]:
    """List status changes, newest first."""
    await candidate_service.get_candidate(db, candidate_id)
    entries = await StatusAuditRepository.list_for_candidate(db, candidate_id)
    return DataResponse(data=[audit_entry_to_dict(e) for e in entries])
