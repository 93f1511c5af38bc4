from typing import Literal

from pydantic import BaseModel, Field

from campus_bracket.models.db.shared import BaseModelORM

MatchBestOf = Literal[1, 3]
FinalBestOf = Literal[1, 3, 5]

MIN_TEAM_LIMIT = 2
MAX_TEAM_LIMIT = 64


class TournamentSettings(BaseModelORM):
    team_limit: int = Field(default=16, ge=MIN_TEAM_LIMIT)
    match_best_of: MatchBestOf = 1
    final_best_of: FinalBestOf = 1


DEFAULT_TOURNAMENT_SETTINGS = TournamentSettings(team_limit=16, match_best_of=1, final_best_of=1)


class TournamentSettingsBody(BaseModel):
    team_limit: int = Field(default=16, ge=MIN_TEAM_LIMIT, le=MAX_TEAM_LIMIT)
    match_best_of: MatchBestOf = 1
    final_best_of: FinalBestOf = 1
