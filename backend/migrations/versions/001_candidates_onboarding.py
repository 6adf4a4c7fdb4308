"""Create accounts, candidate profiles, onboarding tasks and status audit log.

Revision ID: 001_candidates_onboarding
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001_candidates_onboarding"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_CANDIDATE_STATUSES = (
    "'NEW', 'REACH_OUT', 'TO_INTERVIEW', 'INTERVIEW_SCHEDULED', "
    "'INTERVIEW_COMPLETED', 'HIRED', 'REJECTED'"
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    # Accounts - shared with the auth subsystem, email unique
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('CANDIDATE', 'RBT', 'ADMIN')",
            name="ck_users_role",
        ),
    )
    op.create_index("idx_user_email", "users", ["email"], unique=True)

    op.create_table(
        "candidate_profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
            unique=True,
        ),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column(
            "forty_hour_course_completed",
            sa.Boolean(),
            nullable=False,
            server_default="false",
        ),
        sa.Column(
            "schedule_completed", sa.Boolean(), nullable=False, server_default="false"
        ),
        *_timestamps(),
        sa.CheckConstraint(
            f"status IN ({_CANDIDATE_STATUSES})",
            name="ck_candidate_profiles_status",
        ),
    )
    op.create_index("idx_candidate_status", "candidate_profiles", ["status"])

    # Tasks are owned by the candidate and deleted with it
    op.create_table(
        "onboarding_tasks",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "candidate_id",
            sa.Uuid(),
            sa.ForeignKey("candidate_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("task_type", sa.String(40), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("document_download_url", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("upload_url", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "task_type IN ('DOWNLOAD_DOC', 'FORTY_HOUR_COURSE_CERTIFICATE', 'SIGNATURE')",
            name="ck_onboarding_tasks_task_type",
        ),
    )
    op.create_index(
        "idx_onboarding_task_candidate",
        "onboarding_tasks",
        ["candidate_id", "sort_order"],
    )

    op.create_table(
        "candidate_status_audits",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "candidate_id",
            sa.Uuid(),
            sa.ForeignKey("candidate_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("previous_status", sa.String(32), nullable=False),
        sa.Column("new_status", sa.String(32), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_status_audit_candidate",
        "candidate_status_audits",
        ["candidate_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("idx_status_audit_candidate")
    op.drop_table("candidate_status_audits")
    op.drop_index("idx_onboarding_task_candidate")
    op.drop_table("onboarding_tasks")
    op.drop_index("idx_candidate_status")
    op.drop_table("candidate_profiles")
    op.drop_index("idx_user_email")
    op.drop_table("users")
