"""Initial schema - catalog, roles, assignments, overrides, audit log.

Revision ID: 001
Revises:
Create Date: 2026-09-28

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _now() -> sa.TextClause:
    return sa.text("now()")


def upgrade() -> None:
    op.create_table(
        "application_module",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_application_module_code", "application_module", ["code"], unique=True)

    op.create_table(
        "permission_type",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("code", sa.String(10), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_permission_type_code", "permission_type", ["code"], unique=True)

    op.create_table(
        "permission",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("module_id", sa.BigInteger(), sa.ForeignKey("application_module.id"), nullable=False),
        sa.Column("permission_type_id", sa.BigInteger(), sa.ForeignKey("permission_type.id"), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index(
        "ix_permission_module_type", "permission", ["module_id", "permission_type_id"], unique=True
    )

    # Read-only mirror of the identity subsystem
    op.create_table(
        "app_user",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_system_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_app_user_username", "app_user", ["username"], unique=True)

    op.create_table(
        "role",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("is_system_role", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("scope_department_id", sa.BigInteger(), nullable=True),
        sa.Column("scope_company_id", sa.BigInteger(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.Column("modified_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.Column("modified_by", sa.BigInteger(), nullable=True),
    )
    op.create_index("ix_role_code", "role", ["code"], unique=True)

    op.create_table(
        "role_permission",
        sa.Column("role_id", sa.BigInteger(), sa.ForeignKey("role.id"), primary_key=True),
        sa.Column("permission_id", sa.BigInteger(), sa.ForeignKey("permission.id"), primary_key=True),
        sa.Column("granted_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.Column("granted_by", sa.BigInteger(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table(
        "user_role",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), sa.ForeignKey("app_user.id"), nullable=False),
        sa.Column("role_id", sa.BigInteger(), sa.ForeignKey("role.id"), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.Column("assigned_by", sa.BigInteger(), nullable=True),
        sa.Column("expiry_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_user_role_user_role", "user_role", ["user_id", "role_id"], unique=True)
    op.create_index("ix_user_role_role", "user_role", ["role_id"])

    op.create_table(
        "user_permission_override",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), sa.ForeignKey("app_user.id"), nullable=False),
        sa.Column("permission_id", sa.BigInteger(), sa.ForeignKey("permission.id"), nullable=False),
        sa.Column("is_granted", sa.Boolean(), nullable=False),
        sa.Column("reason", sa.String(500), nullable=False),
        sa.Column("expiry_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.Column("created_by", sa.BigInteger(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index(
        "ix_user_permission_override_active_pair",
        "user_permission_override",
        ["user_id", "permission_id"],
        unique=True,
        postgresql_where=sa.text("active"),
    )

    op.create_table(
        "permission_audit_log",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("target_type", sa.String(20), nullable=False),
        sa.Column("target_id", sa.BigInteger(), nullable=False),
        sa.Column("old_value", postgresql.JSONB(), nullable=True),
        sa.Column("new_value", postgresql.JSONB(), nullable=True),
        sa.Column("reason", sa.String(500), nullable=True),
        sa.Column("action_by", sa.BigInteger(), nullable=True),
        sa.Column("action_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
    )
    op.create_index("ix_permission_audit_log_action_at", "permission_audit_log", ["action_at"])
    op.create_index(
        "ix_permission_audit_log_user_action_at", "permission_audit_log", ["user_id", "action_at"]
    )

    op.execute("""
        INSERT INTO permission_type (code, name) VALUES
        ('C', 'Create'), ('R', 'Read'), ('U', 'Update'),
        ('D', 'Delete'), ('A', 'Approve'), ('M', 'Manage')
    """)
    op.execute("""
        INSERT INTO application_module (code, name, display_order)
        VALUES ('USER_MANAGEMENT', 'User Management', 0)
    """)
    op.execute("""
        INSERT INTO permission (module_id, permission_type_id)
        SELECT m.id, t.id
        FROM application_module m CROSS JOIN permission_type t
        WHERE m.code = 'USER_MANAGEMENT'
    """)


def downgrade() -> None:
    op.drop_table("permission_audit_log")
    op.drop_table("user_permission_override")
    op.drop_table("user_role")
    op.drop_table("role_permission")
    op.drop_table("role")
    op.drop_table("app_user")
    op.drop_table("permission")
    op.drop_table("permission_type")
    op.drop_table("application_module")
