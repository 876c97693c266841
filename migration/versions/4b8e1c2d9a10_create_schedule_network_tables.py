"""create schedules, schedule_tasks and task_dependencies

Revision ID: 4b8e1c2d9a10
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4b8e1c2d9a10"
down_revision = None
branch_labels = None
depends_on = None


_TASK_STATUS = sa.Enum(
    "NOT_STARTED", "IN_PROGRESS", "COMPLETED", "ON_HOLD", "CANCELLED", name="taskstatus"
)
_SCHEDULING_MODE = sa.Enum("MANUAL", "AUTO", name="schedulingmode")
_DEPENDENCY_TYPE = sa.Enum(
    "FINISH_TO_START", "START_TO_START", "FINISH_TO_FINISH", "START_TO_FINISH",
    name="dependencytype",
)


def _version_column() -> sa.Column:
    return sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1"))


def upgrade() -> None:
    op.create_table(
        "schedules",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("schedule_start_date", sa.Date(), nullable=True),
        sa.Column("schedule_end_date", sa.Date(), nullable=True),
        _version_column(),
    )

    op.create_table(
        "schedule_tasks",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "schedule_id",
            sa.String(),
            sa.ForeignKey("schedules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("duration_days", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column(
            "parent_task_id",
            sa.String(),
            sa.ForeignKey("schedule_tasks.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("wbs_code", sa.String(), nullable=False, server_default=""),
        sa.Column("level", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("scheduling_mode", _SCHEDULING_MODE, nullable=False, server_default="MANUAL"),
        sa.Column("is_milestone", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", _TASK_STATUS, nullable=False, server_default="NOT_STARTED"),
        sa.Column("progress", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("early_start", sa.Date(), nullable=True),
        sa.Column("early_finish", sa.Date(), nullable=True),
        sa.Column("late_start", sa.Date(), nullable=True),
        sa.Column("late_finish", sa.Date(), nullable=True),
        sa.Column("total_float", sa.Integer(), nullable=True),
        sa.Column("free_float", sa.Integer(), nullable=True),
        sa.Column("is_critical_path", sa.Boolean(), nullable=True),
        sa.Column("baseline_start_date", sa.Date(), nullable=True),
        sa.Column("baseline_end_date", sa.Date(), nullable=True),
        sa.Column("baseline_duration", sa.Integer(), nullable=True),
        _version_column(),
    )
    op.create_index("idx_schedule_tasks_schedule_id", "schedule_tasks", ["schedule_id"])
    op.create_index("idx_schedule_tasks_parent", "schedule_tasks", ["parent_task_id"])

    op.create_table(
        "task_dependencies",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "predecessor_task_id",
            sa.String(),
            sa.ForeignKey("schedule_tasks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "successor_task_id",
            sa.String(),
            sa.ForeignKey("schedule_tasks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "dependency_type", _DEPENDENCY_TYPE, nullable=False, server_default="FINISH_TO_START"
        ),
        sa.Column("lag_days", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.UniqueConstraint("predecessor_task_id", "successor_task_id", name="uq_dep_pred_succ"),
    )
    op.create_index("idx_dep_predecessor", "task_dependencies", ["predecessor_task_id"])
    op.create_index("idx_dep_successor", "task_dependencies", ["successor_task_id"])


def downgrade() -> None:
    op.drop_index("idx_dep_successor", table_name="task_dependencies")
    op.drop_index("idx_dep_predecessor", table_name="task_dependencies")
    op.drop_table("task_dependencies")
    op.drop_index("idx_schedule_tasks_parent", table_name="schedule_tasks")
    op.drop_index("idx_schedule_tasks_schedule_id", table_name="schedule_tasks")
    op.drop_table("schedule_tasks")
    op.drop_table("schedules")
