from typing import Generic, TypeVar

from pydantic import BaseModel

from campus_bracket.models.db.bracket import (
    ApprovalResult,
    BracketView,
    JoinResult,
    MatchResolution,
    RemovalResult,
    SeedResult,
    TournamentWithSettings,
)
from campus_bracket.models.db.join_request import JoinRequest
from campus_bracket.models.db.team import Team, TeamRoster


DataT = TypeVar("DataT")


class DataResponse(BaseModel, Generic[DataT]):
    data: DataT


class TournamentResponse(DataResponse[TournamentWithSettings]):
    pass


class BracketResponse(DataResponse[BracketView]):
    pass


class SeedResponse(DataResponse[SeedResult]):
    pass


class MatchResolutionResponse(DataResponse[MatchResolution]):
    pass


class JoinResponse(DataResponse[JoinResult]):
    pass


class ApprovalResponse(DataResponse[ApprovalResult]):
    pass


class RemovalResponse(DataResponse[RemovalResult]):
    pass


class JoinRequestsResponse(DataResponse[list[JoinRequest]]):
    pass


class TeamResponse(DataResponse[Team]):
    pass


class TeamRosterResponse(DataResponse[TeamRoster]):
    pass
