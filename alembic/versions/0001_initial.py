"""roasters, roasts and ai usage

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "roasters",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("homepage", sa.String(length=500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_roasters")),
        sa.UniqueConstraint("slug", name=op.f("uq_roasters_slug")),
    )
    op.create_index(op.f("ix_roasters_created_at"), "roasters", ["created_at"])

    op.create_table(
        "roasts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("roaster_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("origin", sa.String(length=100), nullable=True),
        sa.Column("region", sa.String(length=100), nullable=True),
        sa.Column("producer", sa.String(length=200), nullable=True),
        sa.Column("process", sa.String(length=100), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["roaster_id"],
            ["roasters.id"],
            name=op.f("fk_roasts_roaster_id_roasters"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_roasts")),
        sa.UniqueConstraint("slug", name=op.f("uq_roasts_slug")),
    )
    op.create_index(op.f("ix_roasts_created_at"), "roasts", ["created_at"])
    op.create_index(op.f("ix_roasts_roaster_id"), "roasts", ["roaster_id"])

    op.create_table(
        "ai_usage",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("model", sa.String(length=200), nullable=False),
        sa.Column("endpoint", sa.String(length=100), nullable=False),
        sa.Column("prompt_tokens", sa.Integer(), nullable=False),
        sa.Column("completion_tokens", sa.Integer(), nullable=False),
        sa.Column("total_tokens", sa.Integer(), nullable=False),
        sa.Column("cost", sa.Float(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_ai_usage")),
    )


def downgrade() -> None:
    op.drop_table("ai_usage")
    op.drop_index(op.f("ix_roasts_roaster_id"), table_name="roasts")
    op.drop_index(op.f("ix_roasts_created_at"), table_name="roasts")
    op.drop_table("roasts")
    op.drop_index(op.f("ix_roasters_created_at"), table_name="roasters")
    op.drop_table("roasters")
