from campus_bracket.database import database
from campus_bracket.models.db.team import (
    Team,
    TeamInsertable,
    TeamMember,
    TeamMemberInsertable,
    TeamRole,
    TeamRoster,
)
from campus_bracket.schema import team_members, teams
from campus_bracket.utils.db import fetch_one_parsed
from campus_bracket.utils.id_types import TeamId, TeamMemberId, UserId


async def sql_get_team(team_id: TeamId) -> Team | None:
    query = "SELECT * FROM teams WHERE id = :team_id"
    return await fetch_one_parsed(database, Team, query, values={"team_id": team_id})


async def sql_get_team_roster(team_id: TeamId) -> TeamRoster | None:
    """Captain and head count of a team, `None` if the team does not exist."""
    query = """
        SELECT
            t.id AS team_id,
            (
                SELECT tm.user_id
                FROM team_members tm
                WHERE tm.team_id = t.id
                AND tm.role = :captain_role
                ORDER BY tm.id ASC
                LIMIT 1
            ) AS captain_user_id,
            (
                SELECT COUNT(*)
                FROM team_members tm
                WHERE tm.team_id = t.id
            ) AS member_count
        FROM teams t
        WHERE t.id = :team_id
        """
    return await fetch_one_parsed(
        database,
        TeamRoster,
        query,
        values={"team_id": team_id, "captain_role": TeamRole.CAPTAIN.value},
    )


async def sql_team_slug_taken(slug: str) -> bool:
    query = "SELECT 1 FROM teams WHERE slug = :slug LIMIT 1"
    return await database.fetch_val(query=query, values={"slug": slug}) is not None


async def sql_team_code_taken(team_code: str) -> bool:
    query = "SELECT 1 FROM teams WHERE team_code = :team_code LIMIT 1"
    return await database.fetch_val(query=query, values={"team_code": team_code}) is not None


async def sql_create_team(team: TeamInsertable) -> Team:
    new_id = await database.execute(query=teams.insert(), values=team.model_dump())
    return Team(id=TeamId(new_id), **team.model_dump())


async def sql_add_team_member(member: TeamMemberInsertable) -> TeamMember:
    new_id = await database.execute(query=team_members.insert(), values=member.model_dump())
    return TeamMember(id=TeamMemberId(new_id), **member.model_dump())


async def sql_update_team_code(team_id: TeamId, team_code: str) -> None:
    query = "UPDATE teams SET team_code = :team_code WHERE id = :team_id"
    await database.execute(query=query, values={"team_id": team_id, "team_code": team_code})



async def sql_get_team_by_code(team_code: str) -> Team | None:
    query = "SELECT * FROM teams WHERE team_code = :team_code"
    return await fetch_one_parsed(database, Team, query, values={"team_code": team_code})


async def sql_user_has_team(user_id: UserId) -> bool:
    query = "SELECT 1 FROM team_members WHERE user_id = :user_id LIMIT 1"
    return await database.fetch_val(query=query, values={"user_id": user_id}) is not None
