"""initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('admin', 'manager', 'technician', 'portal')",
            name="chk_user_role",
        ),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "teams",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "team_members",
        sa.Column("team_id", sa.Uuid(), sa.ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_team_members_user_id", "team_members", ["user_id"])

    op.create_table(
        "work_centers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(50), nullable=False, unique=True),
        sa.Column("default_team_id", sa.Uuid(), sa.ForeignKey("teams.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_work_centers_code", "work_centers", ["code"])
    op.create_index("ix_work_centers_default_team_id", "work_centers", ["default_team_id"])

    op.create_table(
        "equipment",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("serial_number", sa.String(100), nullable=False, unique=True),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("employee_owner_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("maintenance_team_id", sa.Uuid(), sa.ForeignKey("teams.id"), nullable=True),
        sa.Column("default_technician_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("work_center_id", sa.Uuid(), sa.ForeignKey("work_centers.id"), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("status IN ('active', 'scrapped')", name="chk_equipment_status"),
    )
    op.create_index("ix_equipment_serial_number", "equipment", ["serial_number"])
    op.create_index("ix_equipment_department", "equipment", ["department"])
    op.create_index("ix_equipment_status", "equipment", ["status"])
    op.create_index("ix_equipment_employee_owner_id", "equipment", ["employee_owner_id"])
    op.create_index("ix_equipment_maintenance_team_id", "equipment", ["maintenance_team_id"])
    op.create_index("ix_equipment_work_center_id", "equipment", ["work_center_id"])

    op.create_table(
        "maintenance_requests",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("subject", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("category", sa.String(20), nullable=False, server_default="equipment"),
        sa.Column("state", sa.String(20), nullable=False, server_default="new"),
        sa.Column("equipment_id", sa.Uuid(), sa.ForeignKey("equipment.id"), nullable=True),
        sa.Column("work_center_id", sa.Uuid(), sa.ForeignKey("work_centers.id"), nullable=True),
        sa.Column("team_id", sa.Uuid(), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("assigned_technician_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("scheduled_date", sa.Date(), nullable=True),
        sa.Column("duration_hours", sa.Float(), nullable=True),
        sa.Column("created_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("type IN ('corrective', 'preventive')", name="chk_request_type"),
        sa.CheckConstraint("category IN ('equipment', 'work_center')", name="chk_request_category"),
        sa.CheckConstraint(
            "state IN ('new', 'in_progress', 'repaired', 'scrap')",
            name="chk_request_state",
        ),
        sa.CheckConstraint(
            "(category = 'equipment' AND equipment_id IS NOT NULL AND work_center_id IS NULL) "
            "OR (category = 'work_center' AND work_center_id IS NOT NULL AND equipment_id IS NULL)",
            name="chk_request_target",
        ),
        sa.CheckConstraint(
            "type <> 'preventive' OR scheduled_date IS NOT NULL",
            name="chk_request_preventive_scheduled",
        ),
        sa.CheckConstraint(
            "duration_hours IS NULL OR duration_hours > 0",
            name="chk_request_duration_positive",
        ),
    )
    for column in (
        "type",
        "category",
        "state",
        "equipment_id",
        "work_center_id",
        "team_id",
        "assigned_technician_id",
        "scheduled_date",
        "created_by",
        "created_at",
    ):
        op.create_index(f"ix_maintenance_requests_{column}", "maintenance_requests", [column])
    op.create_index("idx_requests_team_state", "maintenance_requests", ["team_id", "state"])


def downgrade() -> None:
    op.drop_table("maintenance_requests")
    op.drop_table("equipment")
    op.drop_table("work_centers")
    op.drop_table("team_members")
    op.drop_table("teams")
    op.drop_table("users")
