"""Initial schema - evaluations, team_members, responses.

Revision ID: 001
Revises:
Create Date: 2026-10-18

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
        "evaluations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("creator_email", sa.String(64), nullable=False),
        sa.Column("creator_token", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("activated_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index("ix_evaluations_creator_email", "evaluations", ["creator_email"])

    op.create_table(
        "team_members",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("evaluation_id", sa.String(36), sa.ForeignKey("evaluations.id"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("email_hash", sa.String(64), nullable=False),
        sa.Column("access_code", sa.String(64), nullable=False),
        sa.Column("completed_evaluations", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_evaluations", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("last_access_date", sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index("ix_team_members_evaluation_id", "team_members", ["evaluation_id"])
    op.create_index("ix_team_members_email_hash", "team_members", ["email_hash"])
    # Codes log in across all evaluations, so they are unique table-wide
    op.create_index("ix_team_members_access_code", "team_members", ["access_code"], unique=True)

    op.create_table(
        "responses",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("evaluation_id", sa.String(36), sa.ForeignKey("evaluations.id"), nullable=False),
        sa.Column("evaluator_id", sa.String(36), sa.ForeignKey("team_members.id"), nullable=False),
        sa.Column("evaluated_id", sa.String(36), sa.ForeignKey("team_members.id"), nullable=False),
        sa.Column("question_1", sa.Integer(), nullable=False),
        sa.Column("question_2", sa.Integer(), nullable=False),
        sa.Column("question_3", sa.Integer(), nullable=False),
        sa.Column("question_4", sa.Integer(), nullable=False),
        sa.Column("positive_comments", sa.Text(), nullable=False, server_default=""),
        sa.Column("improvement_comments", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        # One response per ordered pair; the insert itself is the duplicate check
        sa.UniqueConstraint(
            "evaluation_id",
            "evaluator_id",
            "evaluated_id",
            name="uq_responses_evaluation_pair",
        ),
    )
    op.create_index("ix_responses_evaluation_id", "responses", ["evaluation_id"])


def downgrade() -> None:
    op.drop_index("ix_responses_evaluation_id", table_name="responses")
    op.drop_table("responses")
    op.drop_index("ix_team_members_access_code", table_name="team_members")
    op.drop_index("ix_team_members_email_hash", table_name="team_members")
    op.drop_index("ix_team_members_evaluation_id", table_name="team_members")
    op.drop_table("team_members")
    op.drop_index("ix_evaluations_creator_email", table_name="evaluations")
    op.drop_table("evaluations")
