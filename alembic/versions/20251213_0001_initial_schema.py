"""Initial Bladewatch schema

Revision ID: 0001
Revises:
Create Date: 2025-12-13

Creates the inspection tables:
- turbines: Turbine registry
- inspections: One row per turbine per calendar date
- findings: Defects recorded during an inspection
- repair_plans: One materialized plan per inspection
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # ==========================================================================
    # turbines table
    # ==========================================================================
    op.create_table(
        "turbines",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("manufacturer", sa.String(255), nullable=True),
        sa.Column("mw_rating", sa.Float(), nullable=True),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # ==========================================================================
    # inspections table
    # ==========================================================================
    op.create_table(
        "inspections",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("turbine_id", sa.String(36), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("inspector_name", sa.String(255), nullable=True),
        sa.Column("data_source", sa.String(20), nullable=False),
        sa.Column("raw_package_url", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["turbine_id"], ["turbines.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("turbine_id", "date", name="uq_inspections_turbine_date"),
    )
    op.create_index("ix_inspections_turbine_id", "inspections", ["turbine_id"])

    # ==========================================================================
    # findings table
    # ==========================================================================
    op.create_table(
        "findings",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("inspection_id", sa.String(36), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("severity", sa.Integer(), nullable=False),
        sa.Column("estimated_cost", sa.Float(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["inspection_id"], ["inspections.id"], ondelete="CASCADE"),
        sa.CheckConstraint("estimated_cost >= 0", name="ck_findings_cost_non_negative"),
    )
    op.create_index("ix_findings_inspection_id", "findings", ["inspection_id"])

    # ==========================================================================
    # repair_plans table
    # ==========================================================================
    op.create_table(
        "repair_plans",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("inspection_id", sa.String(36), nullable=False),
        sa.Column("priority", sa.String(10), nullable=False),
        sa.Column("total_estimated_cost", sa.Float(), nullable=False, server_default="0"),
        sa.Column("snapshot", postgresql.JSONB(), nullable=False, server_default="[]"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["inspection_id"], ["inspections.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("inspection_id", name="uq_repair_plans_inspection"),
    )


def downgrade() -> None:
    op.drop_table("repair_plans")
    op.drop_index("ix_findings_inspection_id", table_name="findings")
    op.drop_table("findings")
    op.drop_index("ix_inspections_turbine_id", table_name="inspections")
    op.drop_table("inspections")
    op.drop_table("turbines")
