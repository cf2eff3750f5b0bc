"""scenario baseline: topics, scenarios, user_scenarios

Revision ID: 3a9c1e5d7b20
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "3a9c1e5d7b20"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "topics",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=80), nullable=False),
        sa.Column("reading_time", sa.String(length=40), nullable=True),
        sa.Column("content", JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_topics_id", "topics", ["id"], unique=False)
    op.create_index("ix_topics_category", "topics", ["category"], unique=False)

    op.create_table(
        "scenarios",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=80), nullable=False),
        sa.Column("difficulty", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("details", JSON, nullable=False),
        sa.Column("impacts", JSON, nullable=False),
        sa.Column("popularity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("related_topic_ids", JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("difficulty BETWEEN 1 AND 3", name="ck_scenarios_difficulty"),
        sa.CheckConstraint("popularity >= 0", name="ck_scenarios_popularity"),
    )
    op.create_index("ix_scenarios_id", "scenarios", ["id"], unique=False)
    op.create_index("ix_scenarios_category", "scenarios", ["category"], unique=False)

    op.create_table(
        "user_scenarios",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("scenario_id", sa.Integer(), sa.ForeignKey("scenarios.id", ondelete="CASCADE"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_favorite", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("custom_parameters", JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "scenario_id", name="uq_user_scenarios_user_scenario"),
    )
    op.create_index("ix_user_scenarios_id", "user_scenarios", ["id"], unique=False)
    op.create_index("ix_user_scenarios_user_id", "user_scenarios", ["user_id"], unique=False)
    op.create_index("ix_user_scenarios_scenario_id", "user_scenarios", ["scenario_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_user_scenarios_scenario_id", table_name="user_scenarios")
    op.drop_index("ix_user_scenarios_user_id", table_name="user_scenarios")
    op.drop_index("ix_user_scenarios_id", table_name="user_scenarios")
    op.drop_table("user_scenarios")
    op.drop_index("ix_scenarios_category", table_name="scenarios")
    op.drop_index("ix_scenarios_id", table_name="scenarios")
    op.drop_table("scenarios")
    op.drop_index("ix_topics_category", table_name="topics")
    op.drop_index("ix_topics_id", table_name="topics")
    op.drop_table("topics")
