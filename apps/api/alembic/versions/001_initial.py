"""Initial schema: buildings, architect credits, compositions, individual architects.

Revision ID: 001
Revises:
Create Date: 2026-10-19

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
        "buildings_table_2",
        sa.Column("building_id", sa.BigInteger(), primary_key=True),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("titleEn", sa.Text(), nullable=True),
        sa.Column("buildingTypes", sa.Text(), nullable=True),
        sa.Column("buildingTypesEn", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("locationEn_from_datasheetChunkEn", sa.Text(), nullable=True),
        sa.Column("completionYears", sa.String(64), nullable=True),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("history", sa.Text(), nullable=True),
        sa.Column("technical_info", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_buildings_table_2_slug", "buildings_table_2", ["slug"], unique=True)

    op.create_table(
        "individual_architects",
        sa.Column("individual_architect_id", sa.BigInteger(), primary_key=True),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("name_ja", sa.Text(), nullable=True),
        sa.Column("name_en", sa.Text(), nullable=True),
        sa.Column("birth_year", sa.String(16), nullable=True),
        sa.Column("death_year", sa.String(16), nullable=True),
        sa.Column("biography", sa.Text(), nullable=True),
        sa.Column("awards", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_individual_architects_slug", "individual_architects", ["slug"], unique=True)

    op.create_table(
        "building_architects",
        sa.Column(
            "building_id",
            sa.BigInteger(),
            sa.ForeignKey("buildings_table_2.building_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("architect_id", sa.BigInteger(), primary_key=True),
    )
    op.create_index("ix_building_architects_architect_id", "building_architects", ["architect_id"])

    op.create_table(
        "architect_compositions",
        sa.Column("architect_id", sa.BigInteger(), primary_key=True),
        sa.Column(
            "individual_architect_id",
            sa.BigInteger(),
            sa.ForeignKey("individual_architects.individual_architect_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index(
        "ix_architect_compositions_architect_order",
        "architect_compositions",
        ["architect_id", "order_index"],
    )
    op.create_index(
        "ix_architect_compositions_individual",
        "architect_compositions",
        ["individual_architect_id"],
    )


def downgrade() -> None:
    op.drop_table("architect_compositions")
    op.drop_table("building_architects")
    op.drop_table("individual_architects")
    op.drop_table("buildings_table_2")
