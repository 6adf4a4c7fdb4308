"""Model to API response dict conversion shared by v1 routers."""

from hirepath.models.candidate import CandidateProfile, OnboardingTask, StatusAuditEntry
from hirepath.services.stage_transition import TransitionResult, get_available_actions
from hirepath.services.task_reconciler import ReconcileResult


def candidate_to_dict(candidate: CandidateProfile) -> dict:
    """Convert a CandidateProfile to its API representation."""
    return {
        "id": str(candidate.id),
        "user_id": str(candidate.user_id) if candidate.user_id else None,
        "first_name": candidate.first_name,
        "last_name": candidate.last_name,
        "email": candidate.email,
        "phone": candidate.phone,
        "status": candidate.status.value,
        "forty_hour_course_completed": candidate.forty_hour_course_completed,
        "schedule_completed": candidate.schedule_completed,
        "available_actions": [a.value for a in get_available_actions(candidate.status)],
        "created_at": candidate.created_at.isoformat(),
        "updated_at": candidate.updated_at.isoformat(),
    }


def task_to_dict(task: OnboardingTask) -> dict:
    """Convert an OnboardingTask to its API representation."""
    return {
        "id": str(task.id),
        "candidate_id": str(task.candidate_id),
        "task_type": task.task_type.value,
        "title": task.title,
        "description": task.description,
        "document_download_url": task.document_download_url,
        "sort_order": task.sort_order,
        "is_completed": task.is_completed,
        "completed_at": task.completed_at.isoformat() if task.completed_at else None,
        "has_upload": task.upload_url is not None,
    }


def audit_entry_to_dict(entry: StatusAuditEntry) -> dict:
    """Convert a StatusAuditEntry to its API representation."""
    return {
        "id": str(entry.id),
        "previous_status": entry.previous_status.value,
        "new_status": entry.new_status.value,
        "notes": entry.notes,
        "created_by": entry.created_by,
        "created_at": entry.created_at.isoformat(),
    }


def reconcile_result_to_dict(result: ReconcileResult) -> dict:
    """Convert a ReconcileResult to its API representation."""
    return {
        "created": result.created,
        "deleted": result.deleted,
        "failed": result.failed,
        "no_op": result.no_op,
        "error": result.error,
    }


def transition_to_dict(result: TransitionResult) -> dict:
    """Convert a TransitionResult to its API representation."""
    return {
        "candidate_id": str(result.candidate_id),
        "previous_status": result.previous_status.value,
        "status": result.status.value,
        "notification": result.notification.value,
        "reconciliation": (
            reconcile_result_to_dict(result.reconciliation)
            if result.reconciliation is not None
            else None
        ),
        "account_email_synced": result.account_email_synced,
    }
