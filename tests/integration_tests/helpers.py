from heliclockter import datetime_utc, timedelta

from campus_bracket.logic.teams import create_team, get_team_roster
from campus_bracket.logic.tournaments import (
    approve_join_request,
    create_tournament,
    request_join,
)
from campus_bracket.models.db.match import Match
from campus_bracket.models.db.team import Team, TeamBody
from campus_bracket.models.db.tournament import Tournament, TournamentCreateBody
from campus_bracket.sql.matches import sql_get_matches_in_round
from campus_bracket.utils.id_types import TournamentId, UserId
from campus_bracket.utils.types import assert_some

ADMIN_USER_ID = UserId(1)


def captain_of(index: int) -> UserId:
    return UserId(100 + index)


async def create_teams(*names: str) -> list[Team]:
    return [
        await create_team(captain_of(index), TeamBody(name=name))
        for index, name in enumerate(names)
    ]


async def create_draft_tournament(
    *,
    title: str = "Campus Cup",
    team_limit: int = 16,
    match_best_of: int = 1,
    final_best_of: int = 1,
) -> Tournament:
    result = await create_tournament(
        TournamentCreateBody.model_validate(
            {
                "title": title,
                "start_date": datetime_utc.now() + timedelta(days=7),
                "team_limit": team_limit,
                "match_best_of": match_best_of,
                "final_best_of": final_best_of,
            }
        )
    )
    return result.tournament


async def admit_teams(tournament_id: TournamentId, teams: list[Team]) -> None:
    """Let every team ask to join, then approve them in the given order."""
    for team in teams:
        roster = await get_team_roster(team.id)
        captain_user_id = assert_some(roster.captain_user_id)
        join_result = await request_join(captain_user_id, tournament_id, team.id)
        join_request = assert_some(join_result.join_request)
        await approve_join_request(ADMIN_USER_ID, tournament_id, join_request.id)


async def get_round(tournament_id: TournamentId, round_: int) -> list[Match]:
    return await sql_get_matches_in_round(tournament_id, round_)
