from enum import auto

from heliclockter import datetime_utc
from pydantic import BaseModel, Field

from campus_bracket.models.db.shared import BaseModelORM
from campus_bracket.utils.id_types import MatchId, TeamId, TournamentId
from campus_bracket.utils.types import EnumAutoStr


class MatchStatus(EnumAutoStr):
    SCHEDULED = auto()
    LIVE = auto()
    COMPLETED = auto()
    CANCELED = auto()


class MatchPairing(BaseModel):
    """Expected occupants of one bracket slot, derived from an ordered team list."""

    position: int
    home_team_id: TeamId
    away_team_id: TeamId | None

    @property
    def is_bye(self) -> bool:
        return self.away_team_id is None


class MatchInsertable(BaseModelORM):
    tournament_id: TournamentId
    round: int
    position: int
    home_team_id: TeamId
    away_team_id: TeamId | None = None
    winner_team_id: TeamId | None = None
    home_score: int | None = None
    away_score: int | None = None
    status: MatchStatus = MatchStatus.SCHEDULED
    scheduled_at: datetime_utc | None = None
    completed_at: datetime_utc | None = None


class Match(MatchInsertable):
    id: MatchId

    @property
    def is_bye(self) -> bool:
        return self.away_team_id is None

    @property
    def is_resolved(self) -> bool:
        return self.winner_team_id is not None

    def get_pairing(self) -> MatchPairing:
        return MatchPairing(
            position=self.position,
            home_team_id=self.home_team_id,
            away_team_id=self.away_team_id,
        )


class MatchResultBody(BaseModel):
    winner_team_id: TeamId = Field(gt=0)
    home_score: int | None = Field(default=None, ge=0, le=99)
    away_score: int | None = Field(default=None, ge=0, le=99)
