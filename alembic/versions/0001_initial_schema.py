"""initial schema: users, notifications, teacher profiles, bank access log

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 10:00:00.000000

Creates:
1. users with the user_role enum and activation token columns
2. notifications
3. teacher_profiles holding encrypted bank details
4. bank_details_access_log with the bank_access_type enum
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create the initial tables."""
    user_role_enum = postgresql.ENUM(
        "student", "teacher", "admin", name="user_role", create_type=False
    )
    user_role_enum.create(op.get_bind(), checkfirst=True)

    access_type_enum = postgresql.ENUM("view", "export", name="bank_access_type", create_type=False)
    access_type_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_timestamps(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("role", user_role_enum, nullable=False, server_default="student"),
        sa.Column("is_account_active", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("activation_token", sa.String(length=64), nullable=True),
        sa.Column("activation_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_resend_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(
        op.f("ix_users_activation_token"), "users", ["activation_token"], unique=True
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_timestamps(),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("redirect_link", sa.String(length=500), nullable=False, server_default="/"),
        sa.Column("read", sa.Boolean(), nullable=False, server_default="false"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_notifications_user_id"), "notifications", ["user_id"])

    op.create_table(
        "teacher_profiles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_timestamps(),
        sa.Column("teacher_id", sa.Integer(), nullable=False),
        sa.Column("iban_encrypted", sa.Text(), nullable=True),
        sa.Column("bic_encrypted", sa.Text(), nullable=True),
        sa.Column("account_holder", sa.String(length=200), nullable=True),
        sa.Column("bank_details_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("bank_details_updated_by", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["bank_details_updated_by"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index(
        op.f("ix_teacher_profiles_teacher_id"), "teacher_profiles", ["teacher_id"], unique=True
    )

    op.create_table(
        "bank_details_access_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("teacher_id", sa.Integer(), nullable=False),
        sa.Column("accessed_by", sa.Integer(), nullable=False),
        sa.Column("access_type", access_type_enum, nullable=False),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column(
            "accessed_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["accessed_by"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(
        op.f("ix_bank_details_access_log_teacher_id"), "bank_details_access_log", ["teacher_id"]
    )


def downgrade() -> None:
    """Drop the initial tables."""
    op.drop_index(
        op.f("ix_bank_details_access_log_teacher_id"), table_name="bank_details_access_log"
    )
    op.drop_table("bank_details_access_log")

    op.drop_index(op.f("ix_teacher_profiles_teacher_id"), table_name="teacher_profiles")
    op.drop_table("teacher_profiles")

    op.drop_index(op.f("ix_notifications_user_id"), table_name="notifications")
    op.drop_table("notifications")

    op.drop_index(op.f("ix_users_activation_token"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS bank_access_type")
    op.execute("DROP TYPE IF EXISTS user_role")
