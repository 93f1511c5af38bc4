from typing import Literal

from pydantic import BaseModel

from campus_bracket.models.db.join_request import JoinRequest, JoinRequestStatus
from campus_bracket.models.db.match import Match, MatchPairing
from campus_bracket.models.db.participant import Participant
from campus_bracket.models.db.settings import TournamentSettings
from campus_bracket.models.db.tournament import Tournament
from campus_bracket.utils.id_types import JoinRequestId, TeamId, TournamentId


class AdvanceResult(BaseModel):
    finished: bool
    generated_round: int | None = None
    champion_team_id: TeamId | None = None


class SeedResult(BaseModel):
    tournament: Tournament
    seeded_team_ids: list[TeamId]
    round_one_matches: list[Match]
    settings: TournamentSettings
    generated_round: int | None = None


class MatchResolution(BaseModel):
    match: Match
    tournament: Tournament | None
    generated_round: int | None


class JoinResult(BaseModel):
    tournament_id: TournamentId
    team_id: TeamId
    status: JoinRequestStatus
    join_request: JoinRequest | None
    participant: Participant | None
    settings: TournamentSettings


class ApprovalResult(BaseModel):
    request_id: JoinRequestId
    tournament_id: TournamentId
    team_id: TeamId
    status: JoinRequestStatus
    participant: Participant
    settings: TournamentSettings


class RemovalResult(BaseModel):
    tournament_id: TournamentId
    team_id: TeamId
    status: Literal["REMOVED"] = "REMOVED"


class TournamentWithSettings(BaseModel):
    tournament: Tournament
    settings: TournamentSettings


class BracketRound(BaseModel):
    round: int
    matches: list[Match]


class BracketView(BaseModel):
    tournament: Tournament
    settings: TournamentSettings
    rounds: list[BracketRound]
    champion_team_id: TeamId | None
    is_consistent: bool


class ReplayedMatch(MatchPairing):
    round: int
    winner_team_id: TeamId | None = None


class BracketReplay(BaseModel):
    """Bracket rebuilt from round-one order and the recorded winners."""

    rounds: list[list[ReplayedMatch]]
    champion_team_id: TeamId | None
