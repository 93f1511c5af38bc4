from heliclockter import datetime_utc

from campus_bracket.database import database
from campus_bracket.models.db.match import Match, MatchInsertable, MatchStatus
from campus_bracket.schema import matches
from campus_bracket.utils.db import fetch_all_parsed, fetch_one_parsed
from campus_bracket.utils.id_types import MatchId, TeamId, TournamentId


async def sql_get_match(match_id: MatchId) -> Match | None:
    query = """
        SELECT *
        FROM matches
        WHERE id = :match_id
        """
    return await fetch_one_parsed(database, Match, query, values={"match_id": match_id})


async def sql_get_matches_in_round(tournament_id: TournamentId, round_: int) -> list[Match]:
    query = """
        SELECT *
        FROM matches
        WHERE tournament_id = :tournament_id
        AND round = :round
        ORDER BY position ASC
        """
    return await fetch_all_parsed(
        database, Match, query, values={"tournament_id": tournament_id, "round": round_}
    )


async def sql_get_matches(tournament_id: TournamentId) -> list[Match]:
    query = """
        SELECT *
        FROM matches
        WHERE tournament_id = :tournament_id
        ORDER BY round ASC, position ASC
        """
    return await fetch_all_parsed(database, Match, query, values={"tournament_id": tournament_id})


async def sql_count_matches(tournament_id: TournamentId, round_: int | None = None) -> int:
    round_filter = "AND round = :round" if round_ is not None else ""
    query = f"""
        SELECT COUNT(*)
        FROM matches
        WHERE tournament_id = :tournament_id
        {round_filter}
        """
    values: dict[str, int] = {"tournament_id": tournament_id}
    if round_ is not None:
        values["round"] = round_

    result = await database.fetch_val(query=query, values=values)
    return int(result)


async def sql_create_match(match: MatchInsertable) -> Match:
    new_id = await database.execute(query=matches.insert(), values=match.model_dump())
    return Match(id=MatchId(new_id), **match.model_dump())


async def sql_set_match_result(
    match_id: MatchId,
    winner_team_id: TeamId,
    home_score: int | None,
    away_score: int | None,
    completed_at: datetime_utc,
) -> None:
    query = """
        UPDATE matches
        SET
            winner_team_id = :winner_team_id,
            home_score = :home_score,
            away_score = :away_score,
            status = :status,
            completed_at = :completed_at
        WHERE id = :match_id
        """
    await database.execute(
        query=query,
        values={
            "match_id": match_id,
            "winner_team_id": winner_team_id,
            "home_score": home_score,
            "away_score": away_score,
            "status": MatchStatus.COMPLETED.value,
            "completed_at": completed_at,
        },
    )
