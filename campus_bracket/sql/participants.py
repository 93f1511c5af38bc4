from heliclockter import datetime_utc

from campus_bracket.database import database
from campus_bracket.models.db.participant import Participant, ParticipantInsertable
from campus_bracket.schema import tournament_participants
from campus_bracket.utils.db import fetch_all_parsed, fetch_one_parsed
from campus_bracket.utils.id_types import ParticipantId, TeamId, TournamentId


async def sql_get_participant(
    tournament_id: TournamentId, team_id: TeamId
) -> Participant | None:
    query = """
        SELECT *
        FROM tournament_participants
        WHERE tournament_id = :tournament_id
        AND team_id = :team_id
        """
    return await fetch_one_parsed(
        database,
        Participant,
        query,
        values={"tournament_id": tournament_id, "team_id": team_id},
    )


async def sql_get_participants(tournament_id: TournamentId) -> list[Participant]:
    """Participants in the order they were approved, earliest first."""
    query = """
        SELECT *
        FROM tournament_participants
        WHERE tournament_id = :tournament_id
        ORDER BY joined_at ASC, id ASC
        """
    return await fetch_all_parsed(
        database, Participant, query, values={"tournament_id": tournament_id}
    )


async def sql_count_participants(tournament_id: TournamentId) -> int:
    query = """
        SELECT COUNT(*)
        FROM tournament_participants
        WHERE tournament_id = :tournament_id
        """
    result = await database.fetch_val(query=query, values={"tournament_id": tournament_id})
    return int(result)


async def sql_create_participant(
    tournament_id: TournamentId, team_id: TeamId, joined_at: datetime_utc
) -> Participant:
    participant = ParticipantInsertable(
        tournament_id=tournament_id, team_id=team_id, joined_at=joined_at
    )
    new_id = await database.execute(
        query=tournament_participants.insert(), values=participant.model_dump()
    )
    return Participant(id=ParticipantId(new_id), **participant.model_dump())


async def sql_delete_participant(tournament_id: TournamentId, team_id: TeamId) -> None:
    query = """
        DELETE FROM tournament_participants
        WHERE tournament_id = :tournament_id
        AND team_id = :team_id
        """
    await database.execute(
        query=query, values={"tournament_id": tournament_id, "team_id": team_id}
    )
