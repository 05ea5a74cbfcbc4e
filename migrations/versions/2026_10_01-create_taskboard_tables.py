"""Create taskboard tables: app_users, task_items, user_permissions

Revision ID: create_taskboard_tables
Revises:
Create Date: 2026-10-01 00:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "create_taskboard_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "app_users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("external_id", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="User"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_app_users_external_id", "app_users", ["external_id"], unique=True)
    op.create_index("ix_app_users_email", "app_users", ["email"], unique=True)

    # Tasks: deleting a user who still owns tasks is refused
    op.create_table(
        "task_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="Open"),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["owner_id"], ["app_users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_task_items_status", "task_items", ["status"], unique=False)
    op.create_index("ix_task_items_owner_id", "task_items", ["owner_id"], unique=False)
    op.create_index("ix_task_items_created_at", "task_items", ["created_at"], unique=False)
    op.create_index("idx_task_items_owner_status", "task_items", ["owner_id", "status"], unique=False)

    # Permission records go away with their user or task
    op.create_table(
        "user_permissions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.Column("task_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["app_users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["task_id"], ["task_items.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_permissions_user_id", "user_permissions", ["user_id"], unique=False)
    op.create_index("ix_user_permissions_task_id", "user_permissions", ["task_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_user_permissions_task_id", table_name="user_permissions")
    op.drop_index("ix_user_permissions_user_id", table_name="user_permissions")
    op.drop_table("user_permissions")

    op.drop_index("idx_task_items_owner_status", table_name="task_items")
    op.drop_index("ix_task_items_created_at", table_name="task_items")
    op.drop_index("ix_task_items_owner_id", table_name="task_items")
    op.drop_index("ix_task_items_status", table_name="task_items")
    op.drop_table("task_items")

    op.drop_index("ix_app_users_email", table_name="app_users")
    op.drop_index("ix_app_users_external_id", table_name="app_users")
    op.drop_table("app_users")
