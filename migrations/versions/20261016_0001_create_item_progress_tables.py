"""Create item progress and practice totals tables."""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261016_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "item_progress",
        sa.Column("key", sa.String(length=255), primary_key=True, nullable=False),
        sa.Column("times_seen", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("times_correct", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("last_practiced_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("next_due", sa.DateTime(timezone=True), nullable=False),
        sa.Column("easiness_factor", sa.Float(), server_default=sa.text("2.5"), nullable=False),
        sa.Column(
            "consecutive_correct_streak",
            sa.Integer(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        sa.Column("is_mastered", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("mastered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("recent_incorrect_streak", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("confused_with", sa.JSON(), nullable=False),
        sa.Column("easing_level", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            server_onupdate=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_item_progress_next_due", "item_progress", ["next_due"])

    op.create_table(
        "practice_totals",
        sa.Column("id", sa.String(length=32), primary_key=True, nullable=False),
        sa.Column("total_seen", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_correct", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("last_practiced_at", sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("practice_totals")
    op.drop_index("ix_item_progress_next_due", table_name="item_progress")
    op.drop_table("item_progress")
