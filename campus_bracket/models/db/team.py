from enum import auto
from typing import Annotated

from heliclockter import datetime_utc
from pydantic import BaseModel, StringConstraints

from campus_bracket.models.db.shared import BaseModelORM
from campus_bracket.utils.id_types import TeamId, TeamMemberId, UserId
from campus_bracket.utils.types import EnumAutoStr


class TeamRole(EnumAutoStr):
    CAPTAIN = auto()
    MEMBER = auto()


class TeamInsertable(BaseModelORM):
    name: str
    slug: str
    team_code: str
    created: datetime_utc


class Team(TeamInsertable):
    id: TeamId


class TeamMemberInsertable(BaseModelORM):
    team_id: TeamId
    user_id: UserId
    role: TeamRole
    created: datetime_utc


class TeamMember(TeamMemberInsertable):
    id: TeamMemberId


class TeamRoster(BaseModelORM):
    team_id: TeamId
    captain_user_id: UserId | None
    member_count: int


class TeamBody(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=40)]


class TeamJoinBody(BaseModel):
    code: Annotated[
        str,
        StringConstraints(strip_whitespace=True, to_upper=True, pattern=r"^[A-Za-z0-9]{6}$"),
    ]
