from heliclockter import datetime_utc

from campus_bracket.models.db.shared import BaseModelORM
from campus_bracket.utils.id_types import ParticipantId, TeamId, TournamentId


class ParticipantInsertable(BaseModelORM):
    tournament_id: TournamentId
    team_id: TeamId
    joined_at: datetime_utc


class Participant(ParticipantInsertable):
    id: ParticipantId
