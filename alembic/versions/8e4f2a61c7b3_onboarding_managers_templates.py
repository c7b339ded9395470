"""onboarding details, managers and shift templates

Revision ID: 8e4f2a61c7b3
Revises: 3b1c9e27a4d0
Create Date: 2026-10-17 14:03:27.904416

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8e4f2a61c7b3'
down_revision: Union[str, None] = '3b1c9e27a4d0'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


tax_card_type = sa.Enum("hovedkort", "bikort", "frikort", name="tax_card_type")


def upgrade():
    op.create_table(
        "worker_details",
        sa.Column("profile_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("phone_number", sa.String(length=32), nullable=False),
        sa.Column("cpr_masked", sa.String(length=11), nullable=False),
        sa.Column("tax_card_type", tax_card_type, nullable=False),
        sa.Column("bank_reg_number", sa.String(length=4), nullable=False),
        sa.Column("bank_account_number", sa.String(length=10), nullable=False),
        sa.Column("su_limit_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("shirt_size", sa.String(length=8), nullable=True),
        sa.Column("shoe_size", sa.String(length=8), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "company_details",
        sa.Column("profile_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("cvr_number", sa.String(length=8), nullable=False, unique=True),
        sa.Column("ean_number", sa.String(length=13), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "managers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("phone_number", sa.String(length=32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_managers_company", "managers", ["company_id"])

    op.create_table(
        "shift_templates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("manager_id", sa.Integer(), sa.ForeignKey("managers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("template_name", sa.String(length=120), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=80), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("vacancies_total", sa.Integer(), nullable=False),
        sa.Column("break_minutes", sa.Integer(), nullable=False),
        sa.Column("is_break_paid", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_shift_templates_company_active", "shift_templates", ["company_id", "is_active"])


def downgrade():
    op.drop_index("ix_shift_templates_company_active", table_name="shift_templates")
    op.drop_table("shift_templates")
    op.drop_index("ix_managers_company", table_name="managers")
    op.drop_table("managers")
    op.drop_table("company_details")
    op.drop_table("worker_details")
    tax_card_type.drop(op.get_bind(), checkfirst=True)
