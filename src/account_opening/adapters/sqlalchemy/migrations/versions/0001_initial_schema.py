"""initial submission schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-11-03 09:00:00
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _submission_pk(table: str) -> list[sa.SchemaItem]:
    return [
        sa.Column("submission_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["submission_id"],
            ["submission.id"],
            name=op.f(f"fk_{table}_submission_id_submission"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("submission_id", name=op.f(f"pk_{table}")),
    ]


def _submission_child(table: str) -> list[sa.SchemaItem]:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("submission_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["submission_id"],
            ["submission.id"],
            name=op.f(f"fk_{table}_submission_id_submission"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f(f"pk_{table}")),
    ]


def upgrade() -> None:
    op.create_table(
        "branch",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_branch")),
        sa.UniqueConstraint("name", name=op.f("uq_branch_name")),
    )
    op.create_table(
        "staff_account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=80), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("branch_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(
            ["branch_id"], ["branch.id"], name=op.f("fk_staff_account_branch_id_branch")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_staff_account")),
        sa.UniqueConstraint("username", name=op.f("uq_staff_account_username")),
    )
    op.create_table(
        "submission",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("branch_id", sa.Integer(), nullable=False),
        sa.Column("reference_code", sa.String(length=40), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by_role", sa.String(length=20), nullable=True),
        sa.Column("approved_by", sa.String(length=120), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_by", sa.String(length=120), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("original_approved_by", sa.String(length=120), nullable=True),
        sa.Column("original_approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("edit_count", sa.Integer(), nullable=False),
        sa.Column("last_edited_by", sa.String(length=120), nullable=True),
        sa.Column("last_edited_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["branch_id"], ["branch.id"], name=op.f("fk_submission_branch_id_branch")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_submission")),
    )
    op.create_index(op.f("ix_submission_branch_id"), "submission", ["branch_id"])
    op.create_index(op.f("ix_submission_reference_code"), "submission", ["reference_code"])
    op.create_index(op.f("ix_submission_status"), "submission", ["status"])
    op.create_index(op.f("ix_submission_created_at"), "submission", ["created_at"])

    op.create_table(
        "personal_profile",
        *_submission_pk("personal_profile"),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("alias", sa.String(length=200), nullable=True),
        sa.Column("identity_type", sa.String(length=40), nullable=True),
        sa.Column("identity_number", sa.String(length=40), nullable=False),
        sa.Column("identity_valid_until", sa.Date(), nullable=True),
        sa.Column("birth_place", sa.String(length=120), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=False),
        sa.Column("identity_address", sa.Text(), nullable=True),
        sa.Column("street_address", sa.Text(), nullable=True),
        sa.Column("province", sa.String(length=120), nullable=True),
        sa.Column("city", sa.String(length=120), nullable=True),
        sa.Column("district", sa.String(length=120), nullable=True),
        sa.Column("sub_district", sa.String(length=120), nullable=True),
        sa.Column("postal_code", sa.String(length=10), nullable=True),
        sa.Column("domicile_address", sa.Text(), nullable=True),
        sa.Column("home_status", sa.String(length=60), nullable=True),
        sa.Column("email", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=40), nullable=False),
        sa.Column("citizenship", sa.String(length=60), nullable=True),
        sa.Column("gender", sa.String(length=20), nullable=True),
        sa.Column("marital_status", sa.String(length=40), nullable=True),
        sa.Column("religion", sa.String(length=40), nullable=True),
        sa.Column("education", sa.String(length=60), nullable=True),
        sa.Column("mother_name", sa.String(length=200), nullable=True),
        sa.Column("tax_id", sa.String(length=40), nullable=True),
        sa.Column("account_for_self", sa.Boolean(), nullable=False),
        sa.Column("customer_type", sa.String(length=20), nullable=False),
        sa.Column("legacy_account_number", sa.String(length=40), nullable=True),
    )
    op.create_index(
        "ix_personal_profile_identity_number", "personal_profile", ["identity_number"]
    )

    op.create_table(
        "employment_profile",
        *_submission_pk("employment_profile"),
        sa.Column("occupation", sa.String(length=120), nullable=True),
        sa.Column("employer_name", sa.String(length=200), nullable=True),
        sa.Column("employer_address", sa.Text(), nullable=True),
        sa.Column("employer_phone", sa.String(length=40), nullable=True),
        sa.Column("position", sa.String(length=120), nullable=True),
        sa.Column("business_field", sa.String(length=120), nullable=True),
        sa.Column("income_bracket", sa.String(length=60), nullable=True),
        sa.Column("fund_source", sa.String(length=120), nullable=True),
        sa.Column("monthly_transaction_volume", sa.Numeric(15, 2), nullable=True),
    )
    op.create_table(
        "account_config",
        *_submission_pk("account_config"),
        sa.Column("product_type", sa.String(length=60), nullable=True),
        sa.Column("card_type", sa.String(length=60), nullable=True),
        sa.Column("has_card", sa.Boolean(), nullable=False),
        sa.Column("opening_deposit", sa.Numeric(15, 2), nullable=True),
        sa.Column("account_purpose", sa.String(length=200), nullable=True),
    )
    op.create_table(
        "emergency_contact",
        *_submission_pk("emergency_contact"),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("relationship", sa.String(length=60), nullable=True),
    )
    op.create_table(
        "beneficial_owner",
        *_submission_pk("beneficial_owner"),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("birth_place", sa.String(length=120), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(length=20), nullable=True),
        sa.Column("citizenship", sa.String(length=60), nullable=True),
        sa.Column("marital_status", sa.String(length=40), nullable=True),
        sa.Column("identity_type", sa.String(length=40), nullable=True),
        sa.Column("identity_number", sa.String(length=40), nullable=True),
        sa.Column("fund_source", sa.String(length=120), nullable=True),
        sa.Column("relationship", sa.String(length=60), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("occupation", sa.String(length=120), nullable=True),
        sa.Column("annual_income", sa.String(length=60), nullable=True),
    )
    op.create_table(
        "other_bank_holding",
        *_submission_child("other_bank_holding"),
        sa.Column("bank_name", sa.String(length=120), nullable=False),
        sa.Column("account_type", sa.String(length=60), nullable=False),
        sa.Column("account_number", sa.String(length=60), nullable=False),
    )
    op.create_index(
        op.f("ix_other_bank_holding_submission_id"), "other_bank_holding", ["submission_id"]
    )
    op.create_table(
        "other_occupation",
        *_submission_child("other_occupation"),
        sa.Column("description", sa.String(length=200), nullable=False),
    )
    op.create_index(
        op.f("ix_other_occupation_submission_id"), "other_occupation", ["submission_id"]
    )

    op.create_table(
        "audit_entry",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("submission_id", sa.Integer(), nullable=False),
        sa.Column("field", sa.String(length=80), nullable=False),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("actor", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["submission_id"],
            ["submission.id"],
            name=op.f("fk_audit_entry_submission_id_submission"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_audit_entry")),
    )
    op.create_index(op.f("ix_audit_entry_submission_id"), "audit_entry", ["submission_id"])

    op.create_table(
        "activity_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("action", sa.String(length=40), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("actor_id", sa.Integer(), nullable=True),
        sa.Column("actor_label", sa.String(length=120), nullable=True),
        sa.Column("branch_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_activity_log")),
    )
    op.create_index(op.f("ix_activity_log_created_at"), "activity_log", ["created_at"])

    op.create_table(
        "import_progress",
        sa.Column("key", sa.String(length=120), nullable=False),
        sa.Column("progress", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_import_progress")),
    )
    op.create_index(op.f("ix_import_progress_expires_at"), "import_progress", ["expires_at"])


def downgrade() -> None:
    op.drop_table("import_progress")
    op.drop_table("activity_log")
    op.drop_table("audit_entry")
    op.drop_table("other_occupation")
    op.drop_table("other_bank_holding")
    op.drop_table("beneficial_owner")
    op.drop_table("emergency_contact")
    op.drop_table("account_config")
    op.drop_table("employment_profile")
    op.drop_table("personal_profile")
    op.drop_table("submission")
    op.drop_table("staff_account")
    op.drop_table("branch")
