"""Initial play ledger schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

USER_TYPES = ("ADMIN", "ARTIST", "LISTENER", "GUEST")


def upgrade() -> None:
    op.create_table(
        "user_account",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column(
            "user_type",
            sa.Enum(*USER_TYPES, name="usertype", native_enum=False),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_user_account")),
    )
    op.create_index("ix_user_account_created_at", "user_account", ["created_at"])

    op.create_table(
        "track",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("artist_id", sa.Uuid(), nullable=False),
        sa.Column("artist_name", sa.String(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("play_count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_track")),
    )
    op.create_index("ix_track_artist_id", "track", ["artist_id"])
    op.create_index("ix_track_play_count", "track", ["play_count"])
    op.create_index("ix_track_created_at", "track", ["created_at"])

    op.create_table(
        "play_event",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("track_id", sa.Uuid(), nullable=False),
        sa.Column("listener_id", sa.Uuid(), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_play_event")),
    )
    op.create_index(
        "ix_play_event_listener_track_time",
        "play_event",
        ["listener_id", "track_id", "occurred_at"],
    )
    op.create_index("ix_play_event_track_time", "play_event", ["track_id", "occurred_at"])

    op.create_table(
        "dedup_claim",
        sa.Column("listener_id", sa.Uuid(), nullable=False),
        sa.Column("track_id", sa.Uuid(), nullable=False),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("listener_id", "track_id", name=op.f("pk_dedup_claim")),
    )

    platform_counter = op.create_table(
        "platform_counter",
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("name", name=op.f("pk_platform_counter")),
    )
    op.bulk_insert(platform_counter, [{"name": "total_plays", "value": 0}])


def downgrade() -> None:
    op.drop_table("platform_counter")
    op.drop_table("dedup_claim")
    op.drop_index("ix_play_event_track_time", table_name="play_event")
    op.drop_index("ix_play_event_listener_track_time", table_name="play_event")
    op.drop_table("play_event")
    op.drop_index("ix_track_created_at", table_name="track")
    op.drop_index("ix_track_play_count", table_name="track")
    op.drop_index("ix_track_artist_id", table_name="track")
    op.drop_table("track")
    op.drop_index("ix_user_account_created_at", table_name="user_account")
    op.drop_table("user_account")
