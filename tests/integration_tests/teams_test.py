import pytest
from starlette.exceptions import HTTPException

from campus_bracket.logic.teams import (
    MAX_TEAM_MEMBERS,
    create_team,
    get_team_roster,
    join_team_by_code,
    regenerate_team_code,
)
from campus_bracket.models.db.team import TeamBody, TeamJoinBody
from campus_bracket.utils.id_types import TeamId, UserId


@pytest.mark.asyncio(loop_scope="session")
async def test_create_team_makes_creator_captain() -> None:
    team = await create_team(UserId(5), TeamBody(name="  Night Owls "))

    assert team.name == "Night Owls"
    assert team.slug == "night-owls"
    assert len(team.team_code) == 6
    assert team.team_code == team.team_code.upper()

    roster = await get_team_roster(team.id)
    assert roster.captain_user_id == UserId(5)
    assert roster.member_count == 1


@pytest.mark.asyncio(loop_scope="session")
async def test_team_slugs_are_unique() -> None:
    first = await create_team(UserId(5), TeamBody(name="Night Owls"))
    second = await create_team(UserId(6), TeamBody(name="Night Owls"))

    assert first.slug == "night-owls"
    assert second.slug.startswith("night-owls-")
    assert first.team_code != second.team_code


@pytest.mark.asyncio(loop_scope="session")
async def test_only_captain_regenerates_code() -> None:
    team = await create_team(UserId(5), TeamBody(name="Larks"))

    with pytest.raises(HTTPException) as exc_info:
        await regenerate_team_code(UserId(6), team.id)
    assert exc_info.value.status_code == 403

    updated = await regenerate_team_code(UserId(5), team.id)
    assert updated.id == team.id
    assert len(updated.team_code) == 6


@pytest.mark.asyncio(loop_scope="session")
async def test_unknown_team_roster_is_not_found() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_team_roster(TeamId(31_337))

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio(loop_scope="session")
async def test_join_team_by_code() -> None:
    team = await create_team(UserId(5), TeamBody(name="Herons"))

    roster = await join_team_by_code(
        UserId(6), TeamJoinBody(code=f"  {team.team_code.lower()} ")
    )

    assert roster.team_id == team.id
    assert roster.captain_user_id == UserId(5)
    assert roster.member_count == 2

    with pytest.raises(HTTPException) as exc_info:
        await join_team_by_code(UserId(6), TeamJoinBody(code=team.team_code))
    assert (exc_info.value.status_code, exc_info.value.detail) == (
        409,
        "You already belong to a team.",
    )


@pytest.mark.asyncio(loop_scope="session")
async def test_unknown_team_code_is_not_found() -> None:
    await create_team(UserId(5), TeamBody(name="Herons"))

    with pytest.raises(HTTPException) as exc_info:
        await join_team_by_code(UserId(6), TeamJoinBody(code="ZZZZZ9"))

    assert (exc_info.value.status_code, exc_info.value.detail) == (404, "Invalid team code.")


@pytest.mark.asyncio(loop_scope="session")
async def test_full_team_cannot_be_joined() -> None:
    team = await create_team(UserId(5), TeamBody(name="Herons"))
    for user_id in range(6, 5 + MAX_TEAM_MEMBERS):
        await join_team_by_code(UserId(user_id), TeamJoinBody(code=team.team_code))

    with pytest.raises(HTTPException) as exc_info:
        await join_team_by_code(UserId(50), TeamJoinBody(code=team.team_code))

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Team is full. Maximum size is 5 members."
    assert (await get_team_roster(team.id)).member_count == MAX_TEAM_MEMBERS
