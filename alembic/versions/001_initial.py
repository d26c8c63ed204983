"""Initial users table with embedded learning paths and progress sets.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("preferred_learning_style", sa.String(16), nullable=False, server_default="visual"),
        sa.Column("pace_of_learning", sa.String(16), nullable=False, server_default="moderate"),
        sa.Column("current_skill_level", sa.String(16), nullable=False, server_default="beginner"),
        sa.Column("career_path", sa.String(255), nullable=True),
        sa.Column("desired_skill", sa.String(255), nullable=True),
        sa.Column("primary_language", sa.String(64), nullable=True),
        sa.Column("short_term_goals", sa.Text(), nullable=True),
        sa.Column("long_term_goals", sa.Text(), nullable=True),
        sa.Column("main_path", sa.JSON(none_as_null=True), nullable=True),
        sa.Column("specific_paths", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("completed_step_ids", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("saved_resource_ids", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
