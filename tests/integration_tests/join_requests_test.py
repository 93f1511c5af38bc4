import pytest
from starlette.exceptions import HTTPException

from campus_bracket.logic.tournaments import (
    approve_join_request,
    get_join_requests,
    remove_participant,
    request_join,
    seed_tournament,
)
from campus_bracket.models.db.join_request import JoinRequestStatus
from campus_bracket.sql.participants import sql_count_participants
from campus_bracket.utils.id_types import JoinRequestId, TeamId, UserId
from campus_bracket.utils.types import assert_some
from tests.integration_tests.helpers import (
    ADMIN_USER_ID,
    admit_teams,
    captain_of,
    create_draft_tournament,
    create_teams,
)


@pytest.mark.asyncio(loop_scope="session")
async def test_request_and_approve() -> None:
    tournament = await create_draft_tournament()
    [team] = await create_teams("Falcons")

    join_result = await request_join(captain_of(0), tournament.id, team.id)
    assert join_result.status is JoinRequestStatus.PENDING
    join_request = assert_some(join_result.join_request)
    assert join_request.requested_by_user_id == captain_of(0)

    approval = await approve_join_request(ADMIN_USER_ID, tournament.id, join_request.id)
    assert approval.status is JoinRequestStatus.APPROVED
    assert approval.participant.team_id == team.id

    [stored] = await get_join_requests(tournament.id)
    assert stored.status is JoinRequestStatus.APPROVED
    assert stored.reviewed_by_user_id == ADMIN_USER_ID
    assert stored.reviewed_at is not None

    again = await approve_join_request(ADMIN_USER_ID, tournament.id, join_request.id)
    assert again.participant.id == approval.participant.id
    assert await sql_count_participants(tournament.id) == 1


@pytest.mark.asyncio(loop_scope="session")
async def test_pending_request_cannot_be_resubmitted() -> None:
    tournament = await create_draft_tournament()
    [team] = await create_teams("Wolves")
    await request_join(captain_of(0), tournament.id, team.id)

    with pytest.raises(HTTPException) as exc_info:
        await request_join(captain_of(0), tournament.id, team.id)

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Join request is already pending admin approval."
    assert len(await get_join_requests(tournament.id)) == 1


@pytest.mark.asyncio(loop_scope="session")
async def test_admitted_team_request_is_idempotent() -> None:
    tournament = await create_draft_tournament()
    [team] = await create_teams("Bears")
    await admit_teams(tournament.id, [team])

    join_result = await request_join(captain_of(0), tournament.id, team.id)

    assert join_result.status is JoinRequestStatus.APPROVED
    assert join_result.participant is not None
    assert await sql_count_participants(tournament.id) == 1


@pytest.mark.asyncio(loop_scope="session")
async def test_only_captain_can_request() -> None:
    tournament = await create_draft_tournament()
    [team] = await create_teams("Foxes")

    with pytest.raises(HTTPException) as exc_info:
        await request_join(UserId(9_999), tournament.id, team.id)
    assert exc_info.value.status_code == 403

    with pytest.raises(HTTPException) as exc_info:
        await request_join(captain_of(0), tournament.id, TeamId(9_999))
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio(loop_scope="session")
async def test_capacity_is_never_exceeded() -> None:
    tournament = await create_draft_tournament(team_limit=2)
    teams = await create_teams("Pike", "Carp", "Eel", "Trout")

    pending = [
        assert_some((await request_join(captain_of(index), tournament.id, team.id)).join_request)
        for index, team in enumerate(teams[:3])
    ]
    await approve_join_request(ADMIN_USER_ID, tournament.id, pending[0].id)
    await approve_join_request(ADMIN_USER_ID, tournament.id, pending[1].id)

    with pytest.raises(HTTPException) as exc_info:
        await approve_join_request(ADMIN_USER_ID, tournament.id, pending[2].id)
    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Tournament is full (2 teams)."

    with pytest.raises(HTTPException) as exc_info:
        await request_join(captain_of(3), tournament.id, teams[3].id)
    assert exc_info.value.status_code == 409

    assert await sql_count_participants(tournament.id) == 2


@pytest.mark.asyncio(loop_scope="session")
async def test_unknown_request_is_not_found() -> None:
    tournament = await create_draft_tournament(title="Home Cup")
    other = await create_draft_tournament(title="Away Cup")
    [team] = await create_teams("Gulls")
    join_request = assert_some(
        (await request_join(captain_of(0), tournament.id, team.id)).join_request
    )

    with pytest.raises(HTTPException) as exc_info:
        await approve_join_request(ADMIN_USER_ID, other.id, join_request.id)
    assert exc_info.value.status_code == 404

    with pytest.raises(HTTPException) as exc_info:
        await approve_join_request(ADMIN_USER_ID, tournament.id, JoinRequestId(9_999))
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio(loop_scope="session")
async def test_removed_team_can_request_again() -> None:
    tournament = await create_draft_tournament()
    [team] = await create_teams("Moths")
    await admit_teams(tournament.id, [team])

    removal = await remove_participant(ADMIN_USER_ID, tournament.id, team.id)
    assert removal.status == "REMOVED"
    assert await sql_count_participants(tournament.id) == 0

    [rejected] = await get_join_requests(tournament.id)
    assert rejected.status is JoinRequestStatus.REJECTED
    assert rejected.review_note == "Removed by admin from tournament."

    join_result = await request_join(captain_of(0), tournament.id, team.id)
    reopened = assert_some(join_result.join_request)
    assert reopened.id == rejected.id
    assert reopened.status is JoinRequestStatus.PENDING
    assert reopened.reviewed_at is None
    assert reopened.reviewed_by_user_id is None
    assert reopened.review_note is None

    with pytest.raises(HTTPException) as exc_info:
        await remove_participant(ADMIN_USER_ID, tournament.id, team.id)
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio(loop_scope="session")
async def test_roster_is_locked_after_seeding() -> None:
    tournament = await create_draft_tournament()
    teams = await create_teams("Sparrows", "Finches", "Robins")
    await admit_teams(tournament.id, teams[:2])
    await seed_tournament(tournament.id, shuffle=False)

    with pytest.raises(HTTPException) as exc_info:
        await remove_participant(ADMIN_USER_ID, tournament.id, teams[0].id)
    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Teams can be removed only before bracket seeding starts."

    with pytest.raises(HTTPException) as exc_info:
        await request_join(captain_of(2), tournament.id, teams[2].id)
    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Tournament no longer accepts new team entries."
