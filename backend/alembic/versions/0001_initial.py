"""initial outlook schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00

Constraint names match careers.models.base.NAMING_CONVENTION so a database
built with create_all() can be stamped at this revision.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CREDENTIALS = ("Certificate", "Degree", "Diploma")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "unit_groups",
        sa.Column("noc", sa.String(length=16), nullable=False),
        sa.Column("occupation", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("noc", name="pk_unit_groups"),
    )

    op.create_table(
        "economic_regions",
        sa.Column("economic_region_code", sa.String(length=16), nullable=False),
        sa.Column("economic_region_name", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("economic_region_code", name="pk_economic_regions"),
    )

    op.create_table(
        "program_areas",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_program_areas"),
        sa.UniqueConstraint("title", name="uq_program_areas_title"),
    )

    op.create_table(
        "sections",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("noc", sa.String(length=16), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("items", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_sections"),
        sa.ForeignKeyConstraint(
            ["noc"], ["unit_groups.noc"], name="fk_sections_noc_unit_groups", ondelete="CASCADE"
        ),
        sa.UniqueConstraint("noc", "title", name="uq_sections_noc_title"),
    )
    op.create_index("ix_sections_noc", "sections", ["noc"], unique=False)

    op.create_table(
        "programs",
        sa.Column("nid", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("duration", sa.String(), nullable=True),
        sa.Column("keywords", sa.JSON(), nullable=True),
        sa.Column("noc", sa.JSON(), nullable=False),
        sa.Column("known_noc_groups", sa.JSON(), nullable=False),
        sa.Column("credential", sa.Enum(*CREDENTIALS, name="credential", create_constraint=False), nullable=False),
        sa.Column("program_area_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("nid", name="pk_programs"),
        sa.ForeignKeyConstraint(
            ["program_area_id"], ["program_areas.id"],
            name="fk_programs_program_area_id_program_areas", ondelete="RESTRICT",
        ),
        sa.CheckConstraint(
            "credential IN ('Certificate', 'Degree', 'Diploma')", name="ck_programs_credential"
        ),
    )
    op.create_index("ix_programs_program_area_id", "programs", ["program_area_id"], unique=False)

    op.create_table(
        "outlooks",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("noc", sa.String(length=16), nullable=False),
        sa.Column("economic_region_code", sa.String(length=16), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("outlook", sa.String(), nullable=False),
        sa.Column("trends", sa.Text(), nullable=False),
        sa.Column("trends_hash", sa.String(length=64), nullable=False),
        sa.Column("release_date", sa.DateTime(), nullable=False),
        sa.Column("province", sa.String(length=8), nullable=False),
        sa.Column("lang", sa.String(length=8), server_default="EN", nullable=False),
        sa.Column("program_nid", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_outlooks"),
        sa.ForeignKeyConstraint(
            ["noc"], ["unit_groups.noc"], name="fk_outlooks_noc_unit_groups", ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["economic_region_code"], ["economic_regions.economic_region_code"],
            name="fk_outlooks_economic_region_code_economic_regions", ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["program_nid"], ["programs.nid"], name="fk_outlooks_program_nid_programs", ondelete="RESTRICT"
        ),
        sa.UniqueConstraint(
            "noc", "economic_region_code", "lang", "release_date",
            "province", "title", "trends_hash", "outlook",
            name="uq_outlooks_identity",
        ),
    )
    op.create_index("ix_outlooks_noc", "outlooks", ["noc"], unique=False)
    op.create_index("ix_outlooks_economic_region_code", "outlooks", ["economic_region_code"], unique=False)
    op.create_index("ix_outlooks_release_date", "outlooks", ["release_date"], unique=False)
    op.create_index("ix_outlooks_province", "outlooks", ["province"], unique=False)
    op.create_index("ix_outlooks_program_nid", "outlooks", ["program_nid"], unique=False)


def downgrade() -> None:
    op.drop_table("outlooks")
    op.drop_table("programs")
    op.drop_table("sections")
    op.drop_table("program_areas")
    op.drop_table("economic_regions")
    op.drop_table("unit_groups")
    sa.Enum(name="credential").drop(op.get_bind(), checkfirst=True)
