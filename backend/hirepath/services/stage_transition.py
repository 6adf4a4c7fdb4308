"""Candidate pipeline transitions.

Stages: NEW, REACH_OUT, TO_INTERVIEW, INTERVIEW_SCHEDULED,
INTERVIEW_COMPLETED, HIRED, REJECTED.

Status updates are permissive (any stage to any stage); which actions an
admin is offered is derived from the current stage by
``get_available_actions``. A target of HIRED always goes through ``hire``
so the email and account checks cannot be skipped.

Failure policy:
- ValidationError / ConflictError / PersistenceError are raised and leave
  the status unchanged.
- Task reconciliation and notification failures are reported in the
  result and never undo the transition.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hirepath.core.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from hirepath.models.candidate import CandidateProfile
from hirepath.models.enums import CandidateStatus, UserRole
from hirepath.notifications import Notifier, get_notifier
from hirepath.repositories.candidate_repository import CandidateRepository
from hirepath.repositories.status_audit_repository import StatusAuditRepository
from hirepath.repositories.user_repository import UserRepository, normalize_email
from hirepath.services import task_reconciler
from hirepath.services.task_reconciler import ReconcileResult

logger = logging.getLogger(__name__)

TERMINAL_STATUSES: frozenset[CandidateStatus] = frozenset(
    {CandidateStatus.HIRED, CandidateStatus.REJECTED}
)


# =============================================================================
# Enums & Result Dataclasses
# =============================================================================


class NotificationOutcome(str, Enum):
    """Result of a best-effort notification side effect."""

    SENT = "SENT"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class CandidateAction(str, Enum):
    """Admin actions offered for a candidate."""

    SEND_REACH_OUT = "SEND_REACH_OUT"
    SCHEDULE_INTERVIEW = "SCHEDULE_INTERVIEW"
    HIRE = "HIRE"
    REJECT = "REJECT"


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a status transition.

    The transition itself succeeded whenever a result is returned;
    ``reconciliation`` and ``notification`` report the secondary effects.

    Attributes:
        candidate_id: Candidate that was transitioned.
        previous_status: Status before the call.
        status: Status after the call.
        notification: Outcome of the candidate email.
        reconciliation: Task reconciliation summary (hire only).
        account_email_synced: False when the account email could not be
            synchronized and only role/activation were updated (hire only).
    """

    candidate_id: uuid.UUID
    previous_status: CandidateStatus
    status: CandidateStatus
    notification: NotificationOutcome = NotificationOutcome.SKIPPED
    reconciliation: ReconcileResult | None = None
    account_email_synced: bool = True

    @property
    def side_effects_succeeded(self) -> bool:
        """True when no secondary effect reported a failure."""
        reconciled = self.reconciliation is None or self.reconciliation.succeeded
        return reconciled and self.notification != NotificationOutcome.FAILED


# =============================================================================
# Affordances
# =============================================================================


def get_available_actions(status: CandidateStatus) -> list[CandidateAction]:
    """Admin actions to offer for a candidate in the given status.

    Args:
        status: Current candidate status.

    Returns:
        Actions in display order.
    """
    actions: list[CandidateAction] = []
    if status in (CandidateStatus.NEW, CandidateStatus.REACH_OUT):
        actions.append(CandidateAction.SEND_REACH_OUT)
    if status in (CandidateStatus.REACH_OUT, CandidateStatus.TO_INTERVIEW):
        actions.append(CandidateAction.SCHEDULE_INTERVIEW)
    if status == CandidateStatus.INTERVIEW_COMPLETED:
        actions.append(CandidateAction.HIRE)
    if status not in TERMINAL_STATUSES:
        actions.append(CandidateAction.REJECT)
    return actions


# =============================================================================
# Helpers
# =============================================================================


async def _get_candidate(db: AsyncSession, candidate_id: uuid.UUID) -> CandidateProfile:
    candidate = await CandidateRepository.get_by_id(db, candidate_id)
    if candidate is None:
        raise NotFoundError("Candidate", str(candidate_id))
    return candidate


async def _notify(send, candidate: CandidateProfile, template: str) -> NotificationOutcome:
    """Run a notifier call, turning any failure into FAILED."""
    try:
        sent = await send(candidate)
    except Exception:
        logger.warning(
            "%s email for candidate %s raised", template, candidate.id, exc_info=True
        )
        return NotificationOutcome.FAILED
    if not sent:
        logger.warning("%s email for candidate %s was not sent", template, candidate.id)
        return NotificationOutcome.FAILED
    return NotificationOutcome.SENT


async def _sync_hired_account(
    db: AsyncSession, candidate: CandidateProfile, email: str
) -> bool:
    """Link or update the candidate's account to the RBT role and email.

    Returns:
        False when the email could not be synchronized and only role and
        activation were updated.
    """
    user = None
    if candidate.user_id is not None:
        user = await UserRepository.get_by_id(db, candidate.user_id)

    if user is None:
        user = await UserRepository.create(
            db, email=email, name=candidate.full_name, role=UserRole.RBT
        )
        candidate.user_id = user.id
        await db.flush()
        return True

    return await UserRepository.update_account(
        db, user, role=UserRole.RBT, active=True, email=email
    )


async def _apply_status(
    db: AsyncSession,
    candidate: CandidateProfile,
    new_status: CandidateStatus,
    *,
    actor: str | None,
    notes: str | None = None,
) -> CandidateStatus:
    """Persist a status change and its audit entry.

    Returns:
        The previous status.

    Raises:
        PersistenceError: The candidate could not be saved.
    """
    previous = candidate.status
    try:
        await CandidateRepository.set_status(db, candidate, new_status)
        if previous != new_status:
            await StatusAuditRepository.record(
                db,
                candidate_id=candidate.id,
                previous_status=previous,
                new_status=new_status,
                notes=notes
                or f"Status changed from {previous.value} to {new_status.value}",
                created_by=actor,
            )
    except SQLAlchemyError as exc:
        logger.exception("Failed to save status for candidate %s", candidate.id)
        raise PersistenceError("Failed to update candidate status") from exc
    return previous


# =============================================================================
# Public API
# =============================================================================


async def hire(
    db: AsyncSession,
    candidate_id: uuid.UUID,
    *,
    notifier: Notifier | None = None,
    actor: str | None = None,
) -> TransitionResult:
    """Hire a candidate.

    Steps: validate email, check ownership, sync account, set HIRED,
    reconcile onboarding tasks, send the offer email. A repeated hire
    re-syncs the account and reconciles but does not resend the offer.

    Args:
        db: Database session.
        candidate_id: Candidate to hire.
        notifier: Notifier override (defaults to the process notifier).
        actor: Who performed the action, for the audit log.

    Returns:
        TransitionResult with reconciliation and notification outcomes.

    Raises:
        NotFoundError: Candidate does not exist.
        ValidationError: Candidate has no email.
        ConflictError: Email belongs to another account.
        PersistenceError: Account or candidate could not be saved.
    """
    candidate = await _get_candidate(db, candidate_id)

    email = normalize_email(candidate.email)
    if not email:
        raise ValidationError(
            "Candidate must have an email address before they can be hired.",
            details=[{"field": "email", "error": "missing"}],
        )

    owner = await UserRepository.find_by_email(db, email)
    if owner is not None and owner.id != candidate.user_id:
        raise ConflictError(
            "EMAIL_IN_USE",
            f"The email '{email}' is already in use by another account.",
        )

    already_hired = candidate.status == CandidateStatus.HIRED

    try:
        email_synced = await _sync_hired_account(db, candidate, email)
    except SQLAlchemyError as exc:
        logger.exception("Failed to update account for candidate %s", candidate_id)
        raise PersistenceError("Failed to update the candidate's account") from exc

    previous = await _apply_status(
        db, candidate, CandidateStatus.HIRED, actor=actor, notes="Candidate hired"
    )

    try:
        reconciliation = await task_reconciler.reconcile(db, candidate_id)
    except SQLAlchemyError:
        logger.warning(
            "Onboarding task reconciliation failed after hiring %s",
            candidate_id,
            exc_info=True,
        )
        reconciliation = ReconcileResult(error="Onboarding task reconciliation failed")

    if already_hired:
        notification = NotificationOutcome.SKIPPED
    else:
        notifier = notifier or get_notifier()
        notification = await _notify(notifier.send_offer_email, candidate, "Offer")

    logger.info(
        "Hired candidate %s (tasks created=%d deleted=%d, offer=%s)",
        candidate_id,
        reconciliation.created,
        reconciliation.deleted,
        notification.value,
    )
    return TransitionResult(
        candidate_id=candidate_id,
        previous_status=previous,
        status=CandidateStatus.HIRED,
        notification=notification,
        reconciliation=reconciliation,
        account_email_synced=email_synced,
    )


async def reject(
    db: AsyncSession,
    candidate_id: uuid.UUID,
    *,
    notifier: Notifier | None = None,
    actor: str | None = None,
) -> TransitionResult:
    """Reject a candidate and send the rejection email.

    A linked account is moved back to the CANDIDATE role and deactivated.
    Rejecting an already-rejected candidate does not resend the email.

    Raises:
        NotFoundError: Candidate does not exist.
        PersistenceError: Candidate could not be saved.
    """
    candidate = await _get_candidate(db, candidate_id)
    already_rejected = candidate.status == CandidateStatus.REJECTED

    previous = await _apply_status(
        db,
        candidate,
        CandidateStatus.REJECTED,
        actor=actor,
        notes=f"Candidate rejected. Status changed from {candidate.status.value} to REJECTED",
    )

    if candidate.user_id is not None:
        user = await UserRepository.get_by_id(db, candidate.user_id)
        if user is not None and user.role != UserRole.CANDIDATE:
            try:
                await UserRepository.update_account(
                    db, user, role=UserRole.CANDIDATE, active=False
                )
            except SQLAlchemyError as exc:
                logger.exception("Failed to deactivate account for candidate %s", candidate_id)
                raise PersistenceError("Failed to update the candidate's account") from exc

    if already_rejected or not candidate.email:
        notification = NotificationOutcome.SKIPPED
    else:
        notifier = notifier or get_notifier()
        notification = await _notify(notifier.send_rejection_email, candidate, "Rejection")

    return TransitionResult(
        candidate_id=candidate_id,
        previous_status=previous,
        status=CandidateStatus.REJECTED,
        notification=notification,
    )


async def update_status(
    db: AsyncSession,
    candidate_id: uuid.UUID,
    new_status: CandidateStatus,
    *,
    notifier: Notifier | None = None,
    actor: str | None = None,
) -> TransitionResult:
    """Set an arbitrary pipeline status (last write wins).

    HIRED is delegated to ``hire``. Every other target, backward moves
    included, is applied directly without notifications.

    Raises:
        NotFoundError: Candidate does not exist.
        ValidationError / ConflictError: Propagated from ``hire``.
        PersistenceError: Candidate could not be saved.
    """
    if new_status == CandidateStatus.HIRED:
        return await hire(db, candidate_id, notifier=notifier, actor=actor)

    candidate = await _get_candidate(db, candidate_id)
    previous = await _apply_status(db, candidate, new_status, actor=actor)
    return TransitionResult(
        candidate_id=candidate_id,
        previous_status=previous,
        status=new_status,
    )


async def send_reach_out(
    db: AsyncSession,
    candidate_id: uuid.UUID,
    *,
    notifier: Notifier | None = None,
) -> NotificationOutcome:
    """Send the reach-out email to a candidate.

    Raises:
        NotFoundError: Candidate does not exist.
        ValidationError: Candidate has no email.
    """
    candidate = await _get_candidate(db, candidate_id)
    if not normalize_email(candidate.email):
        raise ValidationError("Candidate has no email address to contact.")
    notifier = notifier or get_notifier()
    return await _notify(notifier.send_reach_out_email, candidate, "Reach-out")
