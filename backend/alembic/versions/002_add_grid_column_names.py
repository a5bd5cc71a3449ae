"""Add custom column names to rotation_grid_settings and external-group fields to practice_schedule

Revision ID: 002_grid_column_names
Revises: 001_initial
"""

from alembic import op
import sqlalchemy as sa


revision = "002_grid_column_names"
down_revision = "001_initial"
branch_labels = None
depends_on = None


def upgrade():
    # "level|schedule_group" -> header text
    op.add_column("rotation_grid_settings", sa.Column("column_names", sa.JSON(), nullable=True))

    op.add_column("practice_schedule", sa.Column("group_label", sa.String(), nullable=True))
    op.add_column(
        "practice_schedule",
        sa.Column("is_external_group", sa.Boolean(), nullable=False, server_default=sa.false()),
    )


def downgrade():
    with op.batch_alter_table("practice_schedule") as batch_op:
        batch_op.drop_column("is_external_group")
        batch_op.drop_column("group_label")
    with op.batch_alter_table("rotation_grid_settings") as batch_op:
        batch_op.drop_column("column_names")
