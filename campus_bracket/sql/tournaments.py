from typing import Any

from heliclockter import datetime_utc

from campus_bracket.database import database
from campus_bracket.models.db.tournament import (
    Tournament,
    TournamentInsertable,
    TournamentStatus,
)
from campus_bracket.schema import tournaments
from campus_bracket.utils.db import fetch_one_parsed
from campus_bracket.utils.id_types import TeamId, TournamentId


async def sql_get_tournament(tournament_id: TournamentId) -> Tournament | None:
    query = """
        SELECT *
        FROM tournaments
        WHERE id = :tournament_id
        """
    return await fetch_one_parsed(
        database, Tournament, query, values={"tournament_id": tournament_id}
    )


async def sql_tournament_slug_taken(slug: str) -> bool:
    query = "SELECT 1 FROM tournaments WHERE slug = :slug LIMIT 1"
    return await database.fetch_val(query=query, values={"slug": slug}) is not None


async def sql_create_tournament(tournament: TournamentInsertable) -> TournamentId:
    new_id = await database.execute(query=tournaments.insert(), values=tournament.model_dump())
    return TournamentId(new_id)


async def sql_update_tournament_details(
    tournament_id: TournamentId, values: dict[str, Any]
) -> None:
    if len(values) < 1:
        return

    await database.execute(
        query=tournaments.update().where(tournaments.c.id == tournament_id), values=values
    )


async def sql_mark_tournament_active(tournament_id: TournamentId, seeded_at: datetime_utc) -> None:
    query = """
        UPDATE tournaments
        SET status = :status, seeded_at = :seeded_at
        WHERE id = :tournament_id
        """
    await database.execute(
        query=query,
        values={
            "tournament_id": tournament_id,
            "status": TournamentStatus.ACTIVE.value,
            "seeded_at": seeded_at,
        },
    )


async def sql_mark_tournament_finished(
    tournament_id: TournamentId, champion_team_id: TeamId, finished_at: datetime_utc
) -> None:
    query = """
        UPDATE tournaments
        SET
            status = :status,
            champion_team_id = :champion_team_id,
            finished_at = :finished_at,
            end_date = :finished_at
        WHERE id = :tournament_id
        """
    await database.execute(
        query=query,
        values={
            "tournament_id": tournament_id,
            "status": TournamentStatus.FINISHED.value,
            "champion_team_id": champion_team_id,
            "finished_at": finished_at,
        },
    )
