"""Add recipient-addressed notification events."""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "20261018_0003"
down_revision: str | None = "20261018_0002"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

TIMESTAMP_DEFAULT = sa.text("CURRENT_TIMESTAMP")
LIVE_FOLLOW_REQUEST_PREDICATE = sa.text("type = 'follow_request'")


def upgrade() -> None:
    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("recipient_id", sa.String(length=36), nullable=False),
        sa.Column("sender_id", sa.String(length=36), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("post_id", sa.String(length=64), nullable=True),
        sa.Column(
            "seen",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=TIMESTAMP_DEFAULT,
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["recipient_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ux_notifications_live_follow_request",
        "notifications",
        ["recipient_id", "sender_id"],
        unique=True,
        sqlite_where=LIVE_FOLLOW_REQUEST_PREDICATE,
        postgresql_where=LIVE_FOLLOW_REQUEST_PREDICATE,
    )
    op.create_index(
        "ix_notifications_recipient_created_at",
        "notifications",
        ["recipient_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_notifications_recipient_sender_type",
        "notifications",
        ["recipient_id", "sender_id", "type"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_notifications_recipient_sender_type", table_name="notifications")
    op.drop_index("ix_notifications_recipient_created_at", table_name="notifications")
    op.drop_index("ux_notifications_live_follow_request", table_name="notifications")
    op.drop_table("notifications")
