"""add archive flag to schedules

Revision ID: 9c3a7e5f2b61
Revises: 4b8e1c2d9a10
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "9c3a7e5f2b61"
down_revision = "4b8e1c2d9a10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    with op.batch_alter_table("schedules") as batch:
        batch.add_column(
            sa.Column(
                "is_archived",
                sa.Boolean(),
                nullable=False,
                server_default=sa.false(),
            )
        )
    op.create_index("idx_schedules_is_archived", "schedules", ["is_archived"])


def downgrade() -> None:
    op.drop_index("idx_schedules_is_archived", table_name="schedules")
    with op.batch_alter_table("schedules") as batch:
        batch.drop_column("is_archived")
