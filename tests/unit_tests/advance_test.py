from typing import Any

import pytest

from campus_bracket.logic.ranking import elimination
from campus_bracket.models.db.match import Match, MatchInsertable, MatchStatus
from campus_bracket.utils.errors import BracketIntegrityError
from campus_bracket.utils.id_types import MatchId, TeamId, TournamentId

TOURNAMENT_ID = TournamentId(1)
A, B, C, D = (TeamId(team_id) for team_id in (1, 2, 3, 4))


def _match(
    round_: int, position: int, home: TeamId, away: TeamId | None, winner: TeamId | None
) -> Match:
    return Match(
        id=MatchId(round_ * 10 + position),
        tournament_id=TOURNAMENT_ID,
        round=round_,
        position=position,
        home_team_id=home,
        away_team_id=away,
        winner_team_id=winner,
        status=MatchStatus.COMPLETED if winner is not None else MatchStatus.SCHEDULED,
    )


def _patch_rounds(monkeypatch: pytest.MonkeyPatch, rounds: dict[int, list[Match]]) -> list[Match]:
    created: list[Match] = []

    async def fake_get_matches_in_round(_: TournamentId, round_: int) -> list[Match]:
        return rounds.get(round_, [])

    async def fake_create_match(match: MatchInsertable) -> Match:
        stored = Match(id=MatchId(1000 + len(created)), **match.model_dump())
        created.append(stored)
        rounds.setdefault(match.round, []).append(stored)
        return stored

    monkeypatch.setattr(elimination, "sql_get_matches_in_round", fake_get_matches_in_round)
    monkeypatch.setattr(elimination, "sql_create_match", fake_create_match)
    return created


@pytest.mark.asyncio
async def test_incomplete_round_does_nothing(monkeypatch: pytest.MonkeyPatch) -> None:
    created = _patch_rounds(monkeypatch, {1: [_match(1, 1, A, B, A), _match(1, 2, C, D, None)]})

    result = await elimination.advance_tournament_if_round_complete(TOURNAMENT_ID, 1)

    assert not result.finished
    assert result.generated_round is None
    assert created == []


@pytest.mark.asyncio
async def test_complete_round_generates_next_round(monkeypatch: pytest.MonkeyPatch) -> None:
    created = _patch_rounds(monkeypatch, {1: [_match(1, 1, A, B, B), _match(1, 2, C, D, C)]})

    result = await elimination.advance_tournament_if_round_complete(TOURNAMENT_ID, 1)

    assert result.generated_round == 2
    assert [(match.home_team_id, match.away_team_id) for match in created] == [(B, C)]


@pytest.mark.asyncio
async def test_existing_next_round_is_not_duplicated(monkeypatch: pytest.MonkeyPatch) -> None:
    created = _patch_rounds(
        monkeypatch,
        {1: [_match(1, 1, A, B, B), _match(1, 2, C, D, C)], 2: [_match(2, 1, B, C, None)]},
    )

    result = await elimination.advance_tournament_if_round_complete(TOURNAMENT_ID, 1)

    assert result.generated_round == 2
    assert created == []


@pytest.mark.asyncio
async def test_corrupted_next_round_is_an_integrity_fault(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _patch_rounds(
        monkeypatch,
        {1: [_match(1, 1, A, B, B), _match(1, 2, C, D, C)], 2: [_match(2, 1, A, D, None)]},
    )

    with pytest.raises(BracketIntegrityError) as exc_info:
        await elimination.advance_tournament_if_round_complete(TOURNAMENT_ID, 1)

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Bracket mismatch detected in round 2."


@pytest.mark.asyncio
async def test_single_winner_finishes_tournament(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_rounds(monkeypatch, {3: [_match(3, 1, A, C, C)]})
    finished: list[tuple[TournamentId, TeamId]] = []

    async def fake_mark_finished(tournament_id: TournamentId, champion: TeamId, _: Any) -> None:
        finished.append((tournament_id, champion))

    monkeypatch.setattr(elimination, "sql_mark_tournament_finished", fake_mark_finished)

    result = await elimination.advance_tournament_if_round_complete(TOURNAMENT_ID, 3)

    assert result.finished
    assert result.champion_team_id == C
    assert finished == [(TOURNAMENT_ID, C)]
