from sqlalchemy import Column, ForeignKey, Integer, String, Table, UniqueConstraint, func
from sqlalchemy.orm import declarative_base  # type: ignore[attr-defined]
from sqlalchemy.sql.sqltypes import BigInteger, DateTime, Enum, Text

Base = declarative_base()
metadata = Base.metadata
DateTimeTZ = DateTime(timezone=True)
# SQLite only autoincrements INTEGER PRIMARY KEY columns.
IdType = BigInteger().with_variant(Integer(), "sqlite")

teams = Table(
    "teams",
    metadata,
    Column("id", IdType, primary_key=True, index=True, autoincrement=True),
    Column("name", String, nullable=False, index=True),
    Column("slug", String, nullable=False, unique=True),
    Column("team_code", String(12), nullable=False, unique=True),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

team_members = Table(
    "team_members",
    metadata,
    Column("id", IdType, primary_key=True, index=True, autoincrement=True),
    Column("team_id", IdType, ForeignKey("teams.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("user_id", IdType, index=True, nullable=False),
    Column(
        "role",
        Enum("CAPTAIN", "MEMBER", name="team_role"),
        nullable=False,
        server_default="MEMBER",
    ),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    UniqueConstraint("team_id", "user_id"),
)

tournaments = Table(
    "tournaments",
    metadata,
    Column("id", IdType, primary_key=True, index=True, autoincrement=True),
    Column("title", String, nullable=False, index=True),
    Column("slug", String, nullable=False, unique=True),
    Column(
        "format",
        Enum("SINGLE_ELIMINATION", name="tournament_format"),
        nullable=False,
        server_default="SINGLE_ELIMINATION",
    ),
    Column(
        "status",
        Enum("DRAFT", "ACTIVE", "FINISHED", name="tournament_status"),
        nullable=False,
        server_default="DRAFT",
        index=True,
    ),
    Column("start_date", DateTimeTZ, nullable=False),
    Column("end_date", DateTimeTZ, nullable=True),
    Column("headliner", String, nullable=True),
    Column("champion_team_id", IdType, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("seeded_at", DateTimeTZ, nullable=True),
    Column("finished_at", DateTimeTZ, nullable=True),
)

tournament_participants = Table(
    "tournament_participants",
    metadata,
    Column("id", IdType, primary_key=True, index=True, autoincrement=True),
    Column(
        "tournament_id",
        IdType,
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("team_id", IdType, ForeignKey("teams.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("joined_at", DateTimeTZ, nullable=False, server_default=func.now()),
    UniqueConstraint("tournament_id", "team_id"),
)

matches = Table(
    "matches",
    metadata,
    Column("id", IdType, primary_key=True, index=True, autoincrement=True),
    Column(
        "tournament_id",
        IdType,
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("round", Integer, nullable=False),
    Column("position", Integer, nullable=False),
    Column("home_team_id", IdType, ForeignKey("teams.id"), nullable=False),
    Column("away_team_id", IdType, ForeignKey("teams.id"), nullable=True),
    Column("winner_team_id", IdType, ForeignKey("teams.id"), nullable=True),
    Column("home_score", Integer, nullable=True),
    Column("away_score", Integer, nullable=True),
    Column(
        "status",
        Enum("SCHEDULED", "LIVE", "COMPLETED", "CANCELED", name="match_status"),
        nullable=False,
        server_default="SCHEDULED",
    ),
    Column("scheduled_at", DateTimeTZ, nullable=True),
    Column("completed_at", DateTimeTZ, nullable=True),
    UniqueConstraint("tournament_id", "round", "position"),
)

tournament_settings = Table(
    "tournament_settings",
    metadata,
    Column("id", IdType, primary_key=True, index=True, autoincrement=True),
    Column(
        "tournament_id",
        IdType,
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("team_limit", Integer, nullable=False, server_default="16"),
    Column("match_best_of", Integer, nullable=False, server_default="1"),
    Column("final_best_of", Integer, nullable=False, server_default="1"),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
)

tournament_join_requests = Table(
    "tournament_join_requests",
    metadata,
    Column("id", IdType, primary_key=True, index=True, autoincrement=True),
    Column(
        "tournament_id",
        IdType,
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("team_id", IdType, ForeignKey("teams.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("requested_by_user_id", IdType, nullable=False),
    Column(
        "status",
        Enum("PENDING", "APPROVED", "REJECTED", name="join_request_status"),
        nullable=False,
        server_default="PENDING",
    ),
    Column("requested_at", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("reviewed_at", DateTimeTZ, nullable=True),
    Column("reviewed_by_user_id", IdType, nullable=True),
    Column("review_note", Text, nullable=True),
    UniqueConstraint("tournament_id", "team_id"),
)
