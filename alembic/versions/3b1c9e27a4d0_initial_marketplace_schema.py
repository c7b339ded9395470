"""initial marketplace schema

Revision ID: 3b1c9e27a4d0
Revises:
Create Date: 2026-10-17 10:12:44.318201

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1c9e27a4d0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


profile_role = sa.Enum("worker", "company", "admin", name="profile_role")
shift_status = sa.Enum("published", "full", "completed", "cancelled", name="shift_status")
application_status = sa.Enum("pending", "accepted", "rejected", "waitlist", "cancelled", name="application_status")
timesheet_status = sa.Enum("pending", "approved", "disputed", "paid", name="timesheet_status")
payment_status = sa.Enum("pending", "paid", "cancelled", name="payment_status")
relation_type = sa.Enum("favorite", "blacklist", name="relation_type")


def upgrade():
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("role", profile_role, nullable=False),
        sa.Column("display_name", sa.String(length=120), nullable=False),
        sa.Column("company_name", sa.String(length=200), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("banned_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "shifts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=80), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("break_minutes", sa.Integer(), nullable=False),
        sa.Column("is_break_paid", sa.Boolean(), nullable=False),
        sa.Column("vacancies_total", sa.Integer(), nullable=False),
        sa.Column("vacancies_taken", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("status", shift_status, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("vacancies_taken <= vacancies_total", name="ck_shift_vacancies"),
        sa.CheckConstraint("vacancies_taken >= 0", name="ck_shift_vacancies_taken_nonneg"),
    )
    op.create_index("ix_shifts_company_id", "shifts", ["company_id"])
    op.create_index("ix_shifts_status_start", "shifts", ["status", "start_time"])
    op.create_index("ix_shifts_company_start", "shifts", ["company_id", "start_time"])

    op.create_table(
        "shift_applications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("shift_id", sa.Integer(), sa.ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("worker_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("company_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", application_status, nullable=False),
        sa.Column("applied_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_shift_applications_shift_id", "shift_applications", ["shift_id"])
    op.create_index("ix_shift_applications_worker_id", "shift_applications", ["worker_id"])
    op.create_index("ix_shift_applications_company_id", "shift_applications", ["company_id"])
    op.create_index("ix_applications_worker_status", "shift_applications", ["worker_id", "status"])

    op.create_table(
        "timesheets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("shift_id", sa.Integer(), sa.ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("worker_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("company_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("clock_in_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("clock_out_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("manager_approved_start", sa.DateTime(timezone=True), nullable=True),
        sa.Column("manager_approved_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_no_show", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("status", timesheet_status, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("shift_id", "worker_id", name="uq_timesheet_shift_worker"),
    )
    op.create_index("ix_timesheets_shift_id", "timesheets", ["shift_id"])
    op.create_index("ix_timesheets_worker_id", "timesheets", ["worker_id"])
    op.create_index("ix_timesheets_company_id", "timesheets", ["company_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("application_id", sa.Integer(), sa.ForeignKey("shift_applications.id", ondelete="CASCADE"), nullable=False),
        sa.Column("timesheet_id", sa.Integer(), sa.ForeignKey("timesheets.id", ondelete="SET NULL"), nullable=True),
        sa.Column("company_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("worker_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("hours_worked", sa.Numeric(8, 2), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", payment_status, nullable=False),
        sa.Column("shift_title_snapshot", sa.String(length=200), nullable=False),
        sa.Column("worker_name_snapshot", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_payments_application_id", "payments", ["application_id"], unique=True)
    op.create_index("ix_payments_company_id", "payments", ["company_id"])
    op.create_index("ix_payments_worker_id", "payments", ["worker_id"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("shift_id", sa.Integer(), sa.ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("reviewer_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("reviewee_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("shift_id", "reviewer_id", "reviewee_id", name="uq_review_once"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),
    )
    op.create_index("ix_reviews_shift_id", "reviews", ["shift_id"])
    op.create_index("ix_reviews_reviewer_id", "reviews", ["reviewer_id"])
    op.create_index("ix_reviews_reviewee_id", "reviews", ["reviewee_id"])

    op.create_table(
        "worker_relations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("worker_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("relation_type", relation_type, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("company_id", "worker_id", name="uq_worker_relation_pair"),
    )
    op.create_index("ix_worker_relations_company_id", "worker_relations", ["company_id"])
    op.create_index("ix_worker_relations_worker_id", "worker_relations", ["worker_id"])


def downgrade():
    op.drop_table("worker_relations")
    op.drop_table("reviews")
    op.drop_table("payments")
    op.drop_table("timesheets")
    op.drop_table("shift_applications")
    op.drop_table("shifts")
    op.drop_table("profiles")
    for enum in (relation_type, payment_status, timesheet_status, application_status, shift_status, profile_role):
        enum.drop(op.get_bind(), checkfirst=True)
