import pytest
from heliclockter import datetime_utc, timedelta
from pydantic import ValidationError
from starlette.exceptions import HTTPException

from campus_bracket.logic.tournaments import get_bracket, seed_tournament, update_tournament
from campus_bracket.models.db.settings import DEFAULT_TOURNAMENT_SETTINGS
from campus_bracket.models.db.tournament import (
    TournamentCreateBody,
    TournamentInsertable,
    TournamentUpdateBody,
)
from campus_bracket.sql.settings import load_settings
from campus_bracket.sql.tournaments import sql_create_tournament
from tests.integration_tests.helpers import admit_teams, create_draft_tournament, create_teams


@pytest.mark.asyncio(loop_scope="session")
async def test_create_tournament_writes_settings_and_slug() -> None:
    tournament = await create_draft_tournament(
        title="Spring Clash", team_limit=8, match_best_of=3, final_best_of=5
    )
    duplicate = await create_draft_tournament(title="Spring Clash")

    assert tournament.slug == "spring-clash"
    assert duplicate.slug.startswith("spring-clash-")
    assert len(duplicate.slug) == len("spring-clash-") + 5

    settings = await load_settings(tournament.id)
    assert (settings.team_limit, settings.match_best_of, settings.final_best_of) == (8, 3, 5)


@pytest.mark.asyncio(loop_scope="session")
async def test_missing_settings_row_resolves_to_defaults() -> None:
    now = datetime_utc.now()
    tournament_id = await sql_create_tournament(
        TournamentInsertable(title="Legacy Cup", slug="legacy-cup", start_date=now, created=now)
    )

    assert await load_settings(tournament_id) == DEFAULT_TOURNAMENT_SETTINGS
    assert (await get_bracket(tournament_id)).settings == DEFAULT_TOURNAMENT_SETTINGS


@pytest.mark.asyncio(loop_scope="session")
async def test_update_tournament_details_and_settings() -> None:
    tournament = await create_draft_tournament(title="Autumn Open")

    result = await update_tournament(
        tournament.id,
        TournamentUpdateBody.model_validate(
            {"title": "Autumn Invitational", "headliner": "Grand finals live", "team_limit": 4}
        ),
    )

    assert result.tournament.title == "Autumn Invitational"
    assert result.tournament.slug == "autumn-invitational"
    assert result.tournament.headliner == "Grand finals live"
    assert result.settings.team_limit == 4
    assert (await load_settings(tournament.id)).team_limit == 4


@pytest.mark.asyncio(loop_scope="session")
async def test_team_limit_cannot_drop_below_participants() -> None:
    tournament = await create_draft_tournament()
    teams = await create_teams("Ants", "Bees", "Wasps")
    await admit_teams(tournament.id, teams)

    with pytest.raises(HTTPException) as exc_info:
        await update_tournament(tournament.id, TournamentUpdateBody(team_limit=2))

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Team limit cannot be less than current participants (3)."
    assert (await load_settings(tournament.id)).team_limit == 16


@pytest.mark.asyncio(loop_scope="session")
async def test_end_date_must_follow_start_date() -> None:
    tournament = await create_draft_tournament()

    with pytest.raises(HTTPException) as exc_info:
        await update_tournament(
            tournament.id,
            TournamentUpdateBody(end_date=tournament.start_date - timedelta(days=1)),
        )

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "End date must be after start date."


@pytest.mark.asyncio(loop_scope="session")
async def test_settings_are_frozen_after_seeding() -> None:
    tournament = await create_draft_tournament()
    teams = await create_teams("Dunes", "Cliffs")
    await admit_teams(tournament.id, teams)
    await seed_tournament(tournament.id, shuffle=False)

    with pytest.raises(HTTPException) as exc_info:
        await update_tournament(tournament.id, TournamentUpdateBody(final_best_of=3))
    assert exc_info.value.status_code == 409

    result = await update_tournament(
        tournament.id, TournamentUpdateBody(headliner="Finals moved to the main hall")
    )
    assert result.tournament.headliner == "Finals moved to the main hall"


def test_request_bodies_are_validated() -> None:
    start = datetime_utc.now()

    with pytest.raises(ValidationError):
        TournamentCreateBody(title="Cup", start_date=start, end_date=start - timedelta(days=1))
    with pytest.raises(ValidationError):
        TournamentCreateBody.model_validate(
            {"title": "Cup", "start_date": start, "match_best_of": 5}
        )
    with pytest.raises(ValidationError):
        TournamentCreateBody.model_validate({"title": "Cup", "start_date": start, "team_limit": 65})
    with pytest.raises(ValidationError):
        TournamentUpdateBody()
