"""Baseline schema — users, rosters, daily logs, availability, parties.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-19

Captures the full legionctl schema. Databases created by ``legionctl init``
are stamped at this revision without running it; empty databases get it
applied by ``legionctl upgrade``.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None

_int_array = sa.JSON().with_variant(postgresql.ARRAY(sa.Integer), "postgresql")


def _enum(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name, create_constraint=True)


def upgrade() -> None:
    # users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("discord_id", sa.Text, nullable=False),
        sa.Column("username", sa.Text, nullable=False),
        sa.Column("avatar_url", sa.Text),
        sa.Column(
            "visibility",
            _enum("visibility", "public", "legion", "friends", "private"),
            nullable=False,
            server_default="legion",
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("discord_id", name="uq_users_discord_id"),
    )

    # friend_groups / friend_group_members
    op.create_table(
        "friend_groups",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("owner_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
    )
    op.create_index("ix_friend_groups_owner_id", "friend_groups", ["owner_id"])
    op.create_table(
        "friend_group_members",
        sa.Column("group_id", sa.Uuid, sa.ForeignKey("friend_groups.id"), nullable=False),
        sa.Column("user_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.PrimaryKeyConstraint("group_id", "user_id", name="pk_friend_group_members"),
    )

    # characters
    op.create_table(
        "characters",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column(
            "class",
            _enum(
                "class",
                "gladiator",
                "templar",
                "ranger",
                "assassin",
                "spiritmaster",
                "sorcerer",
                "cleric",
                "chanter",
                "gunner",
                "aethertech",
                "songweaver",
            ),
            nullable=False,
        ),
        sa.Column(
            "gear_tier",
            _enum("gear_tier", "early", "mid", "end"),
            nullable=False,
            server_default="mid",
        ),
        sa.Column("clearing_score", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_characters_user_id", "characters", ["user_id"])

    # quest_definitions (seeded reference data)
    op.create_table(
        "quest_definitions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("zone", sa.Text, nullable=False, server_default="Tiamaranta"),
        sa.Column(
            "tier", _enum("quest_tier", "lesser", "medium", "greater", "major"), nullable=False
        ),
        sa.Column(
            "faction",
            _enum("quest_faction", "elyos", "asmodian", "both"),
            nullable=False,
            server_default="both",
        ),
    )

    # daily_quest_logs
    op.create_table(
        "daily_quest_logs",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("character_id", sa.Uuid, sa.ForeignKey("characters.id"), nullable=False),
        sa.Column("date", sa.Text, nullable=False),
        sa.Column("quest_ids", _int_array, nullable=False),
        sa.Column("is_completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text),
    )
    op.create_index(
        "ix_daily_quest_logs_character_date", "daily_quest_logs", ["character_id", "date"]
    )

    # availability_slots
    op.create_table(
        "availability_slots",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_recurring", sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_availability_slots_user_id", "availability_slots", ["user_id"])

    # parties / party_members / party_invites
    op.create_table(
        "parties",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("created_by", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("shared_quest_ids", _int_array, nullable=False),
        sa.Column("scheduled_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("scheduled_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("estimated_clear_time", sa.Integer),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column("disbanded_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_parties_disbanded_at", "parties", ["disbanded_at"])
    op.create_table(
        "party_members",
        sa.Column("party_id", sa.Uuid, sa.ForeignKey("parties.id"), nullable=False),
        sa.Column("user_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("character_id", sa.Uuid, sa.ForeignKey("characters.id"), nullable=False),
        sa.Column(
            "joined_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("party_id", "user_id", name="pk_party_members"),
    )
    op.create_table(
        "party_invites",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("party_id", sa.Uuid, sa.ForeignKey("parties.id"), nullable=False),
        sa.Column("sender_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("recipient_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "status",
            _enum("invite_status", "pending", "accepted", "declined"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column(
            "sent_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("responded_at", sa.DateTime(timezone=True)),
    )
    op.create_index(
        "ix_party_invites_recipient_status", "party_invites", ["recipient_id", "status"]
    )


def downgrade() -> None:
    op.drop_table("party_invites")
    op.drop_table("party_members")
    op.drop_table("parties")
    op.drop_table("availability_slots")
    op.drop_table("daily_quest_logs")
    op.drop_table("quest_definitions")
    op.drop_table("characters")
    op.drop_table("friend_group_members")
    op.drop_table("friend_groups")
    op.drop_table("users")
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for name in (
            "invite_status",
            "quest_faction",
            "quest_tier",
            "gear_tier",
            "class",
            "visibility",
        ):
            sa.Enum(name=name).drop(bind, checkfirst=True)
