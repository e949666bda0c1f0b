"""create progression tables

Revision ID: 4b8e1d2c7a90
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM

from alembic import op

# revision identifiers, used by Alembic.
revision: str | None = "4b8e1d2c7a90"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None

id_type = sa.BigInteger().with_variant(sa.Integer(), "sqlite")

tournament_status_enum = ENUM("scheduled", "completed", name="tournament_status", create_type=False)
stage_kind_enum = ENUM("league", "groups", "knockout", name="stage_kind", create_type=False)
match_status_enum = ENUM("scheduled", "finished", name="match_status", create_type=False)
match_outcome_enum = ENUM("W", "L", name="match_outcome", create_type=False)
enum_types = (tournament_status_enum, stage_kind_enum, match_status_enum, match_outcome_enum)


def upgrade() -> None:
    for enum_type in enum_types:
        enum_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "tournaments",
        sa.Column("id", id_type, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), server_default="", nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("status", tournament_status_enum, server_default="scheduled", nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tournaments_id"), "tournaments", ["id"], unique=False)
    op.create_index(op.f("ix_tournaments_status"), "tournaments", ["status"], unique=False)

    op.create_table(
        "tournament_stages",
        sa.Column("id", id_type, autoincrement=True, nullable=False),
        sa.Column("tournament_id", id_type, nullable=False),
        sa.Column("name", sa.String(), server_default="", nullable=False),
        sa.Column("kind", stage_kind_enum, nullable=False),
        sa.Column("ordering", sa.Integer(), nullable=False),
        sa.Column("config", sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tournament_stages_id"), "tournament_stages", ["id"], unique=False)
    op.create_index(
        op.f("ix_tournament_stages_tournament_id"),
        "tournament_stages",
        ["tournament_id"],
        unique=False,
    )

    op.create_table(
        "tournament_groups",
        sa.Column("id", id_type, autoincrement=True, nullable=False),
        sa.Column("stage_id", id_type, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("ordering", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["stage_id"], ["tournament_stages.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tournament_groups_id"), "tournament_groups", ["id"], unique=False)
    op.create_index(
        op.f("ix_tournament_groups_stage_id"), "tournament_groups", ["stage_id"], unique=False
    )

    op.create_table(
        "tournament_teams",
        sa.Column("id", id_type, autoincrement=True, nullable=False),
        sa.Column("tournament_id", id_type, nullable=False),
        sa.Column("team_id", id_type, nullable=False),
        sa.Column("stage_id", id_type, nullable=True),
        sa.Column("group_id", id_type, nullable=True),
        sa.Column("seed", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"]),
        sa.ForeignKeyConstraint(["stage_id"], ["tournament_stages.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["group_id"], ["tournament_groups.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tournament_teams_id"), "tournament_teams", ["id"], unique=False)
    op.create_index(
        op.f("ix_tournament_teams_tournament_id"),
        "tournament_teams",
        ["tournament_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_tournament_teams_team_id"), "tournament_teams", ["team_id"], unique=False
    )
    op.create_index(
        op.f("ix_tournament_teams_stage_id"), "tournament_teams", ["stage_id"], unique=False
    )

    op.create_table(
        "matches",
        sa.Column("id", id_type, autoincrement=True, nullable=False),
        sa.Column("tournament_id", id_type, nullable=False),
        sa.Column("stage_id", id_type, nullable=False),
        sa.Column("group_id", id_type, nullable=True),
        sa.Column("matchday", sa.Integer(), nullable=True),
        sa.Column("round", sa.Integer(), nullable=True),
        sa.Column("bracket_pos", sa.Integer(), nullable=True),
        sa.Column("team_a_id", id_type, nullable=True),
        sa.Column("team_b_id", id_type, nullable=True),
        sa.Column("team_a_score", sa.Integer(), nullable=True),
        sa.Column("team_b_score", sa.Integer(), nullable=True),
        sa.Column("winner_team_id", id_type, nullable=True),
        sa.Column("status", match_status_enum, server_default="scheduled", nullable=False),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("home_source_match_id", id_type, nullable=True),
        sa.Column("home_source_outcome", match_outcome_enum, nullable=True),
        sa.Column("away_source_match_id", id_type, nullable=True),
        sa.Column("away_source_outcome", match_outcome_enum, nullable=True),
        sa.Column("home_source_round", sa.Integer(), nullable=True),
        sa.Column("home_source_bracket_pos", sa.Integer(), nullable=True),
        sa.Column("away_source_round", sa.Integer(), nullable=True),
        sa.Column("away_source_bracket_pos", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"]),
        sa.ForeignKeyConstraint(["stage_id"], ["tournament_stages.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["group_id"], ["tournament_groups.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["home_source_match_id"], ["matches.id"]),
        sa.ForeignKeyConstraint(["away_source_match_id"], ["matches.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_matches_id"), "matches", ["id"], unique=False)
    op.create_index(op.f("ix_matches_tournament_id"), "matches", ["tournament_id"], unique=False)
    op.create_index(op.f("ix_matches_stage_id"), "matches", ["stage_id"], unique=False)
    op.create_index(op.f("ix_matches_group_id"), "matches", ["group_id"], unique=False)
    op.create_index(op.f("ix_matches_status"), "matches", ["status"], unique=False)

    op.create_table(
        "stage_slots",
        sa.Column("stage_id", id_type, nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("slot_id", sa.Integer(), nullable=False),
        sa.Column("team_id", id_type, nullable=True),
        sa.Column("source", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(["stage_id"], ["tournament_stages.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("stage_id", "group_id", "slot_id"),
    )

    op.create_table(
        "intake_mappings",
        sa.Column("id", id_type, autoincrement=True, nullable=False),
        sa.Column("target_stage_id", id_type, nullable=False),
        sa.Column("group_idx", sa.Integer(), nullable=False),
        sa.Column("slot_idx", sa.Integer(), nullable=False),
        sa.Column("from_stage_id", id_type, nullable=False),
        sa.Column("round", sa.Integer(), nullable=False),
        sa.Column("bracket_pos", sa.Integer(), nullable=False),
        sa.Column("outcome", match_outcome_enum, nullable=False),
        sa.ForeignKeyConstraint(["target_stage_id"], ["tournament_stages.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["from_stage_id"], ["tournament_stages.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("from_stage_id", "round", "bracket_pos", "outcome"),
    )
    op.create_index(op.f("ix_intake_mappings_id"), "intake_mappings", ["id"], unique=False)
    op.create_index(
        op.f("ix_intake_mappings_target_stage_id"),
        "intake_mappings",
        ["target_stage_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_intake_mappings_from_stage_id"), "intake_mappings", ["from_stage_id"], unique=False
    )

    op.create_table(
        "stage_standings",
        sa.Column("id", id_type, autoincrement=True, nullable=False),
        sa.Column("stage_id", id_type, nullable=False),
        sa.Column("group_id", id_type, nullable=False),
        sa.Column("team_id", id_type, nullable=False),
        sa.Column("played", sa.Integer(), server_default="0", nullable=False),
        sa.Column("won", sa.Integer(), server_default="0", nullable=False),
        sa.Column("drawn", sa.Integer(), server_default="0", nullable=False),
        sa.Column("lost", sa.Integer(), server_default="0", nullable=False),
        sa.Column("gf", sa.Integer(), server_default="0", nullable=False),
        sa.Column("ga", sa.Integer(), server_default="0", nullable=False),
        sa.Column("gd", sa.Integer(), server_default="0", nullable=False),
        sa.Column("points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("rank", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["stage_id"], ["tournament_stages.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("stage_id", "group_id", "team_id"),
    )
    op.create_index(op.f("ix_stage_standings_id"), "stage_standings", ["id"], unique=False)
    op.create_index(
        op.f("ix_stage_standings_stage_id"), "stage_standings", ["stage_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_stage_standings_stage_id"), table_name="stage_standings")
    op.drop_index(op.f("ix_stage_standings_id"), table_name="stage_standings")
    op.drop_table("stage_standings")

    op.drop_index(op.f("ix_intake_mappings_from_stage_id"), table_name="intake_mappings")
    op.drop_index(op.f("ix_intake_mappings_target_stage_id"), table_name="intake_mappings")
    op.drop_index(op.f("ix_intake_mappings_id"), table_name="intake_mappings")
    op.drop_table("intake_mappings")

    op.drop_table("stage_slots")

    op.drop_index(op.f("ix_matches_status"), table_name="matches")
    op.drop_index(op.f("ix_matches_group_id"), table_name="matches")
    op.drop_index(op.f("ix_matches_stage_id"), table_name="matches")
    op.drop_index(op.f("ix_matches_tournament_id"), table_name="matches")
    op.drop_index(op.f("ix_matches_id"), table_name="matches")
    op.drop_table("matches")

    op.drop_index(op.f("ix_tournament_teams_stage_id"), table_name="tournament_teams")
    op.drop_index(op.f("ix_tournament_teams_team_id"), table_name="tournament_teams")
    op.drop_index(op.f("ix_tournament_teams_tournament_id"), table_name="tournament_teams")
    op.drop_index(op.f("ix_tournament_teams_id"), table_name="tournament_teams")
    op.drop_table("tournament_teams")

    op.drop_index(op.f("ix_tournament_groups_stage_id"), table_name="tournament_groups")
    op.drop_index(op.f("ix_tournament_groups_id"), table_name="tournament_groups")
    op.drop_table("tournament_groups")

    op.drop_index(op.f("ix_tournament_stages_tournament_id"), table_name="tournament_stages")
    op.drop_index(op.f("ix_tournament_stages_id"), table_name="tournament_stages")
    op.drop_table("tournament_stages")

    op.drop_index(op.f("ix_tournaments_status"), table_name="tournaments")
    op.drop_index(op.f("ix_tournaments_id"), table_name="tournaments")
    op.drop_table("tournaments")

    for enum_type in reversed(enum_types):
        enum_type.drop(op.get_bind(), checkfirst=True)
