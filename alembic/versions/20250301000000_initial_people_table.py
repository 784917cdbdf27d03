"""Initial people table: person records with optional login columns.

Revision ID: 20250301000000
Revises:
Create Date: 2025-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20250301000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "people",
        sa.Column("record_id", sa.String(length=32), nullable=False),
        sa.Column("record_type", sa.String(length=32), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("preferred_name", sa.String(length=255), nullable=True),
        sa.Column("gender", sa.String(length=32), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=64), nullable=True),
        sa.Column("city", sa.String(length=255), nullable=True),
        sa.Column("country", sa.String(length=255), nullable=True),
        sa.Column("occupation", sa.String(length=255), nullable=True),
        sa.Column("influencer_category", sa.String(length=255), nullable=True),
        sa.Column("primary_platform", sa.String(length=255), nullable=True),
        sa.Column("followers_count", sa.Integer(), nullable=True),
        sa.Column("total_followers_count", sa.Integer(), nullable=True),
        sa.Column("engagement_rate", sa.Numeric(precision=10, scale=4), nullable=True),
        sa.Column("engagement_rate_tier", sa.String(length=32), nullable=True),
        sa.Column("interests", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("secondary_platform", sa.String(length=255), nullable=True),
        sa.Column("secondary_followers_count", sa.Integer(), nullable=True),
        sa.Column("average_monthly_reach", sa.Integer(), nullable=True),
        sa.Column("collaboration_status", sa.String(length=64), nullable=True),
        sa.Column("languages", sa.String(length=255), nullable=True),
        sa.Column("portfolio_url", sa.String(length=2048), nullable=True),
        sa.Column("last_contact_date", sa.Date(), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="user"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("record_id", name=op.f("pk_people")),
    )
    op.create_index(op.f("ix_people_record_type"), "people", ["record_type"], unique=False)
    op.create_index(op.f("ix_people_email"), "people", ["email"], unique=False)
    op.create_index(
        "uq_people_account_email",
        "people",
        [sa.text("lower(email)")],
        unique=True,
        postgresql_where=sa.text("password_hash IS NOT NULL"),
        sqlite_where=sa.text("password_hash IS NOT NULL"),
    )


def downgrade() -> None:
    op.drop_index("uq_people_account_email", table_name="people")
    op.drop_index(op.f("ix_people_email"), table_name="people")
    op.drop_index(op.f("ix_people_record_type"), table_name="people")
    op.drop_table("people")
