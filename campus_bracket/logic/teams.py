from heliclockter import datetime_utc

from campus_bracket.models.db.team import (
    Team,
    TeamBody,
    TeamInsertable,
    TeamJoinBody,
    TeamMemberInsertable,
    TeamRole,
    TeamRoster,
)
from campus_bracket.sql.teams import (
    sql_add_team_member,
    sql_create_team,
    sql_get_team,
    sql_get_team_by_code,
    sql_get_team_roster,
    sql_team_code_taken,
    sql_team_slug_taken,
    sql_update_team_code,
    sql_user_has_team,
)
from campus_bracket.sql.transactions import run_serializable
from campus_bracket.utils.errors import Conflict, NotFound, PermissionDenied
from campus_bracket.utils.id_types import TeamId, UserId
from campus_bracket.utils.slugs import (
    TEAM_CODE_ALPHABET,
    TEAM_CODE_LENGTH,
    unique_code,
    unique_slug,
)
from campus_bracket.utils.types import assert_some

TEAM_SLUG_MAX_LENGTH = 40
TEAM_SLUG_SUFFIX_LENGTH = 4
MAX_TEAM_MEMBERS = 5


async def get_team_roster_or_404(team_id: TeamId) -> TeamRoster:
    roster = await sql_get_team_roster(team_id)
    if roster is None:
        raise NotFound("Team not found.")
    return roster


async def create_team(user_id: UserId, body: TeamBody) -> Team:
    """Create a team with a fresh slug and invite code, the creator becomes its captain."""

    async def operation() -> Team:
        now = datetime_utc.now()
        slug = await unique_slug(
            body.name,
            sql_team_slug_taken,
            fallback="team",
            max_length=TEAM_SLUG_MAX_LENGTH,
            suffix_length=TEAM_SLUG_SUFFIX_LENGTH,
        )
        team_code = await unique_code(TEAM_CODE_ALPHABET, TEAM_CODE_LENGTH, sql_team_code_taken)
        team = await sql_create_team(
            TeamInsertable(name=body.name, slug=slug, team_code=team_code, created=now)
        )
        await sql_add_team_member(
            TeamMemberInsertable(
                team_id=team.id, user_id=user_id, role=TeamRole.CAPTAIN, created=now
            )
        )
        return team

    return await run_serializable(operation, fallback_message="Unable to create team.")


async def regenerate_team_code(user_id: UserId, team_id: TeamId) -> Team:
    async def operation() -> Team:
        roster = await get_team_roster_or_404(team_id)
        if roster.captain_user_id != user_id:
            raise PermissionDenied("Only the team captain can regenerate the invite code.")

        team_code = await unique_code(TEAM_CODE_ALPHABET, TEAM_CODE_LENGTH, sql_team_code_taken)
        await sql_update_team_code(team_id, team_code)
        return assert_some(await sql_get_team(team_id))

    return await run_serializable(operation, fallback_message="Unable to regenerate team code.")


async def join_team_by_code(user_id: UserId, body: TeamJoinBody) -> TeamRoster:
    """Redeem a team invite code, a user can belong to one team only."""

    async def operation() -> TeamRoster:
        if await sql_user_has_team(user_id):
            raise Conflict("You already belong to a team.")

        team = await sql_get_team_by_code(body.code)
        if team is None:
            raise NotFound("Invalid team code.")

        roster = await get_team_roster_or_404(team.id)
        if roster.member_count >= MAX_TEAM_MEMBERS:
            raise Conflict(f"Team is full. Maximum size is {MAX_TEAM_MEMBERS} members.")

        await sql_add_team_member(
            TeamMemberInsertable(
                team_id=team.id, user_id=user_id, role=TeamRole.MEMBER, created=datetime_utc.now()
            )
        )
        return await get_team_roster_or_404(team.id)

    return await run_serializable(operation, fallback_message="Unable to join team.")


async def get_team_roster(team_id: TeamId) -> TeamRoster:
    return await run_serializable(
        lambda: get_team_roster_or_404(team_id), fallback_message="Unable to load team."
    )
