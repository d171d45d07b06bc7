"""add daily_reports table

Revision ID: 8e4b2d7c9a10
Revises: 1c2d3e4f5a6b
Create Date: 2026-10-19 09:21:05.613942
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "8e4b2d7c9a10"
down_revision: Union[str, Sequence[str], None] = "1c2d3e4f5a6b"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "daily_reports",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("report_type", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("photos", sa.JSON(), nullable=False),
        sa.Column("road_progress", sa.JSON(), nullable=False),
        sa.Column("submitted_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["submitted_by"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_daily_reports_id", "daily_reports", ["id"], unique=False)
    op.create_index("ix_daily_reports_submitted_by", "daily_reports", ["submitted_by"], unique=False)
    op.create_index("ix_daily_reports_project_created", "daily_reports", ["project_id", "created_at"], unique=False)

    with op.batch_alter_table("stock_outs") as batch_op:
        batch_op.add_column(sa.Column("daily_report_id", sa.Integer(), nullable=True))
        batch_op.create_foreign_key(
            "fk_stock_outs_daily_report_id", "daily_reports", ["daily_report_id"], ["id"], ondelete="CASCADE"
        )
        batch_op.create_index("ix_stock_outs_daily_report_id", ["daily_report_id"], unique=False)


def downgrade() -> None:
    with op.batch_alter_table("stock_outs") as batch_op:
        batch_op.drop_index("ix_stock_outs_daily_report_id")
        batch_op.drop_constraint("fk_stock_outs_daily_report_id", type_="foreignkey")
        batch_op.drop_column("daily_report_id")

    op.drop_index("ix_daily_reports_project_created", table_name="daily_reports")
    op.drop_index("ix_daily_reports_submitted_by", table_name="daily_reports")
    op.drop_index("ix_daily_reports_id", table_name="daily_reports")
    op.drop_table("daily_reports")
