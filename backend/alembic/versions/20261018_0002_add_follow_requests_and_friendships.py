"""Add follow requests and directed friendship edges."""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "20261018_0002"
down_revision: str | None = "20261018_0001"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

TIMESTAMP_DEFAULT = sa.text("CURRENT_TIMESTAMP")
PENDING_STATUS_PREDICATE = sa.text("status = 'pending'")


def upgrade() -> None:
    op.create_table(
        "follow_requests",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("requester_id", sa.String(length=36), nullable=False),
        sa.Column("target_id", sa.String(length=36), nullable=False),
        sa.Column(
            "status",
            sa.String(length=16),
            nullable=False,
            server_default="pending",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=TIMESTAMP_DEFAULT,
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["requester_id"],
            ["users.id"],
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["target_id"],
            ["users.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # Only one pending request per ordered pair; closes the send race.
    op.create_index(
        "ux_follow_requests_pending_pair",
        "follow_requests",
        ["requester_id", "target_id"],
        unique=True,
        sqlite_where=PENDING_STATUS_PREDICATE,
        postgresql_where=PENDING_STATUS_PREDICATE,
    )
    op.create_index(
        "ix_follow_requests_target_created_at",
        "follow_requests",
        ["target_id", "created_at"],
        unique=False,
    )

    op.create_table(
        "friendships",
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("friend_id", sa.String(length=36), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=TIMESTAMP_DEFAULT,
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["friend_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "friend_id"),
    )
    op.create_index(
        "ix_friendships_friend_id_created_at",
        "friendships",
        ["friend_id", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_friendships_friend_id_created_at", table_name="friendships")
    op.drop_table("friendships")
    op.drop_index(
        "ix_follow_requests_target_created_at",
        table_name="follow_requests",
    )
    op.drop_index("ux_follow_requests_pending_pair", table_name="follow_requests")
    op.drop_table("follow_requests")
