"""initial schema

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("display_name", sa.String(length=120), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("role in ('admin', 'editor')", name="ck_users_role"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "countries",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("code", sa.String(length=8), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("flag", sa.String(length=16), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index("ix_countries_code", "countries", ["code"], unique=True)
    op.create_index("ix_countries_active", "countries", ["active"], unique=False)

    op.create_table(
        "country_subjects",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("country_code", sa.String(length=8), nullable=False),
        sa.Column("subjects_json", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("subject_aliases_json", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("either_or_groups_json", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("country_code"),
    )
    op.create_index("ix_country_subjects_country_code", "country_subjects", ["country_code"], unique=True)

    op.create_table(
        "careers",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=True),
        sa.Column("min_grades_json", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("country_baselines_json", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("qualification_levels_json", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("sources_json", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("verification_status", sa.String(length=20), nullable=True),
        sa.Column("last_verified", sa.Date(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "verification_status is null or verification_status in ('verified', 'needs-review', 'estimated')",
            name="ck_careers_verification_status",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_careers_name", "careers", ["name"], unique=True)
    op.create_index("ix_careers_active", "careers", ["active"], unique=False)
    op.create_index("ix_careers_category", "careers", ["category"], unique=False)

    op.create_table(
        "career_feedback",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("career_name", sa.String(length=255), nullable=False),
        sa.Column("country_code", sa.String(length=8), nullable=False),
        sa.Column("feedback_type", sa.String(length=20), nullable=False),
        sa.Column("user_comment", sa.Text(), nullable=True),
        sa.Column("actual_requirement", sa.Text(), nullable=True),
        sa.Column("university", sa.String(length=255), nullable=True),
        sa.Column("year_applied", sa.Integer(), nullable=True),
        sa.Column("was_accepted", sa.Boolean(), nullable=True),
        sa.Column("reviewed", sa.Boolean(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("feedback_type in ('correct', 'incorrect', 'outdated')", name="ck_career_feedback_type"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_career_feedback_career_name", "career_feedback", ["career_name"], unique=False)
    op.create_index("ix_career_feedback_reviewed", "career_feedback", ["reviewed"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("action", sa.String(length=120), nullable=False),
        sa.Column("details_json", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_index("ix_career_feedback_reviewed", table_name="career_feedback")
    op.drop_index("ix_career_feedback_career_name", table_name="career_feedback")
    op.drop_table("career_feedback")
    op.drop_index("ix_careers_category", table_name="careers")
    op.drop_index("ix_careers_active", table_name="careers")
    op.drop_index("ix_careers_name", table_name="careers")
    op.drop_table("careers")
    op.drop_index("ix_country_subjects_country_code", table_name="country_subjects")
    op.drop_table("country_subjects")
    op.drop_index("ix_countries_active", table_name="countries")
    op.drop_index("ix_countries_code", table_name="countries")
    op.drop_table("countries")
    op.drop_table("users")
