from heliclockter import datetime_utc

from campus_bracket.logic.scheduling.elimination import (
    assert_unique_team_ids,
    build_round_matches,
    build_round_pairings,
    find_round_corruption,
    get_missing_pairings,
    get_round_winner_ids,
)
from campus_bracket.models.db.bracket import AdvanceResult
from campus_bracket.models.db.match import Match
from campus_bracket.sql.matches import sql_create_match, sql_get_matches_in_round
from campus_bracket.sql.tournaments import sql_mark_tournament_finished
from campus_bracket.utils.errors import BracketIntegrityError
from campus_bracket.utils.id_types import TeamId, TournamentId
from campus_bracket.utils.logging import logger


async def ensure_round_matches(
    tournament_id: TournamentId, round_: int, team_ids: list[TeamId], now: datetime_utc
) -> list[Match]:
    """
    Make sure round `round_` holds exactly the pairings derived from `team_ids`.

    Matches that already exist must agree with the derivation, otherwise the bracket has been
    corrupted. Missing positions are created, byes are decided on creation.
    """
    expected_pairings = build_round_pairings(team_ids)
    existing_matches = await sql_get_matches_in_round(tournament_id, round_)

    if (corruption := find_round_corruption(existing_matches, expected_pairings)) is not None:
        logger.error(
            "Bracket integrity fault in tournament %s round %s: %s",
            tournament_id,
            round_,
            corruption,
        )
        raise BracketIntegrityError(f"Bracket mismatch detected in round {round_}.")

    missing_pairings = get_missing_pairings(existing_matches, expected_pairings)
    for match in build_round_matches(tournament_id, round_, missing_pairings, now):
        await sql_create_match(match)

    if len(missing_pairings) < 1:
        return existing_matches

    return await sql_get_matches_in_round(tournament_id, round_)


async def advance_tournament_if_round_complete(
    tournament_id: TournamentId, from_round: int
) -> AdvanceResult:
    """
    Walk the bracket forward from `from_round` for as long as rounds are fully decided.

    Each complete round either crowns the champion or produces the next round. Rounds that only
    consist of byes are complete on creation, so the walk continues through them.
    Must run inside the transaction of the operation that triggered it.
    """
    current_round = from_round

    while True:
        matches = await sql_get_matches_in_round(tournament_id, current_round)
        winner_ids = get_round_winner_ids(matches)
        if winner_ids is None:
            return AdvanceResult(finished=False)

        assert_unique_team_ids(winner_ids, tournament_id, current_round)
        now = datetime_utc.now()

        if len(winner_ids) == 1:
            champion_team_id = winner_ids[0]
            await sql_mark_tournament_finished(tournament_id, champion_team_id, now)
            logger.info(
                "Tournament %s finished after round %s, champion is team %s",
                tournament_id,
                current_round,
                champion_team_id,
            )
            return AdvanceResult(finished=True, champion_team_id=champion_team_id)

        next_round = current_round + 1
        next_matches = await ensure_round_matches(tournament_id, next_round, winner_ids, now)
        if all(match.is_resolved for match in next_matches):
            current_round = next_round
            continue

        logger.info("Generated round %s for tournament %s", next_round, tournament_id)
        return AdvanceResult(finished=False, generated_round=next_round)
