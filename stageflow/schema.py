from sqlalchemy import Column, ForeignKey, Integer, String, Table, UniqueConstraint, func
from sqlalchemy.orm import declarative_base  # type: ignore[attr-defined]
from sqlalchemy.sql.sqltypes import JSON, BigInteger, DateTime, Enum

Base = declarative_base()
metadata = Base.metadata
DateTimeTZ = DateTime(timezone=True)

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
Id = BigInteger().with_variant(Integer(), "sqlite")
MatchOutcome = Enum("W", "L", name="match_outcome")

tournaments = Table(
    "tournaments",
    metadata,
    Column("id", Id, primary_key=True, index=True, autoincrement=True),
    Column("name", String, nullable=False, server_default=""),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column(
        "status",
        Enum(
            "scheduled",
            "completed",
            name="tournament_status",
        ),
        nullable=False,
        server_default="scheduled",
        index=True,
    ),
)

tournament_stages = Table(
    "tournament_stages",
    metadata,
    Column("id", Id, primary_key=True, index=True, autoincrement=True),
    Column("tournament_id", Id, ForeignKey("tournaments.id"), index=True, nullable=False),
    Column("name", String, nullable=False, server_default=""),
    Column(
        "kind",
        Enum(
            "league",
            "groups",
            "knockout",
            name="stage_kind",
        ),
        nullable=False,
    ),
    Column("ordering", Integer, nullable=False),
    Column("config", JSON, nullable=True),
)

tournament_groups = Table(
    "tournament_groups",
    metadata,
    Column("id", Id, primary_key=True, index=True, autoincrement=True),
    Column(
        "stage_id",
        Id,
        ForeignKey("tournament_stages.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("name", String, nullable=False),
    Column("ordering", Integer, nullable=True),
)

tournament_teams = Table(
    "tournament_teams",
    metadata,
    Column("id", Id, primary_key=True, index=True, autoincrement=True),
    Column("tournament_id", Id, ForeignKey("tournaments.id"), index=True, nullable=False),
    Column("team_id", Id, index=True, nullable=False),
    Column(
        "stage_id",
        Id,
        ForeignKey("tournament_stages.id", ondelete="CASCADE"),
        index=True,
        nullable=True,
    ),
    Column(
        "group_id",
        Id,
        ForeignKey("tournament_groups.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("seed", Integer, nullable=True),
)

matches = Table(
    "matches",
    metadata,
    Column("id", Id, primary_key=True, index=True, autoincrement=True),
    Column("tournament_id", Id, ForeignKey("tournaments.id"), index=True, nullable=False),
    Column(
        "stage_id",
        Id,
        ForeignKey("tournament_stages.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column(
        "group_id",
        Id,
        ForeignKey("tournament_groups.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    ),
    Column("matchday", Integer, nullable=True),
    Column("round", Integer, nullable=True),
    Column("bracket_pos", Integer, nullable=True),
    Column("team_a_id", Id, nullable=True),
    Column("team_b_id", Id, nullable=True),
    Column("team_a_score", Integer, nullable=True),
    Column("team_b_score", Integer, nullable=True),
    Column("winner_team_id", Id, nullable=True),
    Column(
        "status",
        Enum(
            "scheduled",
            "finished",
            name="match_status",
        ),
        nullable=False,
        server_default="scheduled",
        index=True,
    ),
    Column("finished_at", DateTimeTZ, nullable=True),
    Column("home_source_match_id", Id, ForeignKey("matches.id"), nullable=True),
    Column("home_source_outcome", MatchOutcome, nullable=True),
    Column("away_source_match_id", Id, ForeignKey("matches.id"), nullable=True),
    Column("away_source_outcome", MatchOutcome, nullable=True),
    Column("home_source_round", Integer, nullable=True),
    Column("home_source_bracket_pos", Integer, nullable=True),
    Column("away_source_round", Integer, nullable=True),
    Column("away_source_bracket_pos", Integer, nullable=True),
)

stage_slots = Table(
    "stage_slots",
    metadata,
    Column(
        "stage_id",
        Id,
        ForeignKey("tournament_stages.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    # 0-based group index within the stage, not a tournament_groups FK.
    Column("group_id", Integer, primary_key=True),
    Column("slot_id", Integer, primary_key=True),
    Column("team_id", Id, nullable=True),
    Column("source", String, nullable=True),
)

intake_mappings = Table(
    "intake_mappings",
    metadata,
    Column("id", Id, primary_key=True, index=True, autoincrement=True),
    Column(
        "target_stage_id",
        Id,
        ForeignKey("tournament_stages.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("group_idx", Integer, nullable=False),
    Column("slot_idx", Integer, nullable=False),
    Column(
        "from_stage_id",
        Id,
        ForeignKey("tournament_stages.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("round", Integer, nullable=False),
    Column("bracket_pos", Integer, nullable=False),
    Column("outcome", MatchOutcome, nullable=False),
    UniqueConstraint("from_stage_id", "round", "bracket_pos", "outcome"),
)

stage_standings = Table(
    "stage_standings",
    metadata,
    Column("id", Id, primary_key=True, index=True, autoincrement=True),
    Column(
        "stage_id",
        Id,
        ForeignKey("tournament_stages.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    # tournament_groups FK for groups stages, 0 for league stages.
    Column("group_id", Id, nullable=False),
    Column("team_id", Id, nullable=False),
    Column("played", Integer, nullable=False, server_default="0"),
    Column("won", Integer, nullable=False, server_default="0"),
    Column("drawn", Integer, nullable=False, server_default="0"),
    Column("lost", Integer, nullable=False, server_default="0"),
    Column("gf", Integer, nullable=False, server_default="0"),
    Column("ga", Integer, nullable=False, server_default="0"),
    Column("gd", Integer, nullable=False, server_default="0"),
    Column("points", Integer, nullable=False, server_default="0"),
    Column("rank", Integer, nullable=False),
    UniqueConstraint("stage_id", "group_id", "team_id"),
)
