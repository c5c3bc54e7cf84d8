"""Initial schema: user, song, schedule, vote, system_settings tables

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("role", sa.Enum("USER", "ADMIN", "SUPER_ADMIN", name="userrole"), nullable=False),
        sa.Column("auth_token", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_username", "user", ["username"], unique=True)
    op.create_index("ix_user_auth_token", "user", ["auth_token"], unique=True)

    op.create_table(
        "song",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("artist", sa.String(), nullable=False),
        sa.Column("requester_id", sa.Integer(), nullable=False),
        sa.Column("semester", sa.String(), nullable=True),
        sa.Column("played", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["requester_id"], ["user.id"]),
    )
    op.create_index("ix_song_requester_id", "song", ["requester_id"])
    op.create_index("ix_song_semester", "song", ["semester"])

    op.create_table(
        "schedule",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("song_id", sa.Integer(), nullable=False),
        sa.Column("play_date", sa.Date(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["song_id"], ["song.id"]),
    )
    op.create_index("ix_schedule_song_id", "schedule", ["song_id"])

    # No ON DELETE CASCADE: withdrawal removes votes explicitly before the song
    op.create_table(
        "vote",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("song_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["song_id"], ["song.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.UniqueConstraint("song_id", "user_id", name="uq_vote_song_user"),
    )
    op.create_index("ix_vote_song_id", "vote", ["song_id"])
    op.create_index("ix_vote_user_id", "vote", ["user_id"])

    op.create_table(
        "system_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("daily_submission_limit", sa.Integer(), nullable=True),
        sa.Column("weekly_submission_limit", sa.Integer(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("system_settings")
    op.drop_index("ix_vote_user_id", table_name="vote")
    op.drop_index("ix_vote_song_id", table_name="vote")
    op.drop_table("vote")
    op.drop_index("ix_schedule_song_id", table_name="schedule")
    op.drop_table("schedule")
    op.drop_index("ix_song_semester", table_name="song")
    op.drop_index("ix_song_requester_id", table_name="song")
    op.drop_table("song")
    op.drop_index("ix_user_auth_token", table_name="user")
    op.drop_index("ix_user_username", table_name="user")
    op.drop_table("user")
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
