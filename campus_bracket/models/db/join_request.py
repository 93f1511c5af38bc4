from enum import auto

from heliclockter import datetime_utc
from pydantic import BaseModel, Field

from campus_bracket.models.db.shared import BaseModelORM
from campus_bracket.utils.id_types import JoinRequestId, TeamId, TournamentId, UserId
from campus_bracket.utils.types import EnumAutoStr


class JoinRequestStatus(EnumAutoStr):
    PENDING = auto()
    APPROVED = auto()
    REJECTED = auto()


class JoinRequestInsertable(BaseModelORM):
    tournament_id: TournamentId
    team_id: TeamId
    requested_by_user_id: UserId
    status: JoinRequestStatus = JoinRequestStatus.PENDING
    requested_at: datetime_utc


class JoinRequest(JoinRequestInsertable):
    id: JoinRequestId
    reviewed_at: datetime_utc | None = None
    reviewed_by_user_id: UserId | None = None
    review_note: str | None = None


class JoinRequestBody(BaseModel):
    team_id: TeamId = Field(gt=0)
