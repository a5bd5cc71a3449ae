"""Initial migration: create hub, coach, practice_schedule, rotation_event, rotation_block, rotation_grid_settings tables

Revision ID: 001_initial
Revises:
Create Date: 2025-01-06 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "hub",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "coach",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("hub_id", sa.Integer(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["hub_id"], ["hub.id"]),
    )
    op.create_index("ix_coach_hub_id", "coach", ["hub_id"])

    # group_label / is_external_group arrive in a later release, see db_schema_patch
    op.create_table(
        "practice_schedule",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("hub_id", sa.Integer(), nullable=False),
        sa.Column("level", sa.String(), nullable=False),
        sa.Column("schedule_group", sa.String(), nullable=False, server_default="A"),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["hub_id"], ["hub.id"]),
    )
    op.create_index("ix_practice_schedule_hub_id", "practice_schedule", ["hub_id"])

    op.create_table(
        "rotation_event",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("hub_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("color", sa.String(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["hub_id"], ["hub.id"]),
        sa.UniqueConstraint("hub_id", "name", name="uq_hub_rotation_event"),
    )
    op.create_index("ix_rotation_event_hub_id", "rotation_event", ["hub_id"])

    op.create_table(
        "rotation_block",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("hub_id", sa.Integer(), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("level", sa.String(), nullable=False),
        sa.Column("schedule_group", sa.String(), nullable=False),
        sa.Column("rotation_event_id", sa.Integer(), nullable=True),
        sa.Column("event_name", sa.String(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("color", sa.String(), nullable=False),
        sa.Column("coach_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["hub_id"], ["hub.id"]),
        sa.ForeignKeyConstraint(["rotation_event_id"], ["rotation_event.id"]),
        sa.ForeignKeyConstraint(["coach_id"], ["coach.id"]),
    )
    op.create_index("ix_rotation_block_hub_id", "rotation_block", ["hub_id"])

    op.create_table(
        "rotation_grid_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("hub_id", sa.Integer(), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("column_order", sa.JSON(), nullable=True),
        sa.Column("combined_indices", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["hub_id"], ["hub.id"]),
        sa.UniqueConstraint("hub_id", "day_of_week", name="uq_grid_settings_hub_day"),
    )
    op.create_index("ix_rotation_grid_settings_hub_id", "rotation_grid_settings", ["hub_id"])


def downgrade() -> None:
    op.drop_index("ix_rotation_grid_settings_hub_id", table_name="rotation_grid_settings")
    op.drop_table("rotation_grid_settings")
    op.drop_index("ix_rotation_block_hub_id", table_name="rotation_block")
    op.drop_table("rotation_block")
    op.drop_index("ix_rotation_event_hub_id", table_name="rotation_event")
    op.drop_table("rotation_event")
    op.drop_index("ix_practice_schedule_hub_id", table_name="practice_schedule")
    op.drop_table("practice_schedule")
    op.drop_index("ix_coach_hub_id", table_name="coach")
    op.drop_table("coach")
    op.drop_table("hub")
