import random
from collections import Counter
from collections.abc import Sequence

from heliclockter import datetime_utc

from campus_bracket.models.db.bracket import BracketReplay, ReplayedMatch
from campus_bracket.models.db.match import Match, MatchInsertable, MatchPairing, MatchStatus
from campus_bracket.utils.errors import BracketIntegrityError
from campus_bracket.utils.id_types import TeamId, TournamentId
from campus_bracket.utils.logging import logger


def build_round_pairings(team_ids: Sequence[TeamId]) -> list[MatchPairing]:
    """
    Pair an ordered list of teams sequentially: (1st, 2nd), (3rd, 4th), ...

    An odd team out at the end gets a bye. Positions start at 1. Winners of a round are fed back
    into this function in position order, so the bracket tree only depends on the round-one order.
    """
    pairings: list[MatchPairing] = []
    for index in range(0, len(team_ids), 2):
        away_team_id = team_ids[index + 1] if index + 1 < len(team_ids) else None
        pairings.append(
            MatchPairing(
                position=index // 2 + 1,
                home_team_id=team_ids[index],
                away_team_id=away_team_id,
            )
        )
    return pairings


def shuffle_team_ids(
    team_ids: Sequence[TeamId], rng: random.Random | None = None
) -> list[TeamId]:
    """Fisher-Yates shuffle, `rng` can be passed in to get a reproducible order."""
    source = rng if rng is not None else random.SystemRandom()
    shuffled = list(team_ids)
    for i in range(len(shuffled) - 1, 0, -1):
        j = source.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def select_bracket_team_ids(ordered_team_ids: Sequence[TeamId], team_limit: int) -> list[TeamId]:
    # Earliest approvals take precedence, surplus teams stay participants but sit this bracket out.
    return list(ordered_team_ids[:team_limit])


def get_duplicate_team_ids(team_ids: Sequence[TeamId]) -> list[TeamId]:
    return [team_id for team_id, count in Counter(team_ids).items() if count > 1]


def assert_unique_team_ids(
    team_ids: Sequence[TeamId], tournament_id: TournamentId, round_: int
) -> None:
    if duplicates := get_duplicate_team_ids(team_ids):
        logger.error(
            "Bracket integrity fault: duplicate teams %s in tournament %s round %s",
            duplicates,
            tournament_id,
            round_,
        )
        raise BracketIntegrityError(f"Duplicate team detected in round {round_}.")


def build_round_matches(
    tournament_id: TournamentId,
    round_: int,
    pairings: Sequence[MatchPairing],
    now: datetime_utc,
) -> list[MatchInsertable]:
    return [
        MatchInsertable(
            tournament_id=tournament_id,
            round=round_,
            position=pairing.position,
            home_team_id=pairing.home_team_id,
            away_team_id=pairing.away_team_id,
            winner_team_id=pairing.home_team_id if pairing.is_bye else None,
            status=MatchStatus.COMPLETED if pairing.is_bye else MatchStatus.SCHEDULED,
            completed_at=now if pairing.is_bye else None,
        )
        for pairing in pairings
    ]


def find_round_corruption(
    existing_matches: Sequence[Match], expected_pairings: Sequence[MatchPairing]
) -> str | None:
    """
    Compare the stored matches of a round with the pairings derived from the previous round.

    Returns a description of the first deviation, or `None` when every stored match sits at an
    expected position with exactly the expected teams. Missing positions are not a deviation.
    """
    if len(existing_matches) > len(expected_pairings):
        return (
            f"Round has {len(existing_matches)} matches, "
            f"expected at most {len(expected_pairings)}."
        )

    expected_by_position = {pairing.position: pairing for pairing in expected_pairings}
    for match in existing_matches:
        expected = expected_by_position.get(match.position)
        if expected is None:
            return f"Unexpected match position {match.position}."

        if match.get_pairing() != expected:
            return f"Match at position {match.position} does not match the expected pairing."

    return None


def get_missing_pairings(
    existing_matches: Sequence[Match], expected_pairings: Sequence[MatchPairing]
) -> list[MatchPairing]:
    existing_positions = {match.position for match in existing_matches}
    return [pairing for pairing in expected_pairings if pairing.position not in existing_positions]


def get_round_winner_ids(matches: Sequence[Match]) -> list[TeamId] | None:
    """Winners in position order, `None` while any match of the round is undecided."""
    if len(matches) < 1 or any(not match.is_resolved for match in matches):
        return None
    return [TeamId(match.winner_team_id) for match in matches if match.winner_team_id is not None]


def is_bracket_consistent(rounds: Sequence[Sequence[Match]]) -> bool:
    """
    Check that every round after the first is exactly what its predecessor's winners produce.

    `rounds` holds the matches of round 1, 2, ... each ordered by position.
    """
    for previous_round, current_round in zip(rounds, rounds[1:]):
        winner_ids = get_round_winner_ids(previous_round)
        if winner_ids is None or len(winner_ids) < 2 or get_duplicate_team_ids(winner_ids):
            return False

        expected_pairings = build_round_pairings(winner_ids)
        if find_round_corruption(current_round, expected_pairings) is not None:
            return False
        if get_missing_pairings(current_round, expected_pairings):
            return False

    return True


def replay_bracket(team_ids: Sequence[TeamId], winners: Sequence[TeamId]) -> BracketReplay:
    """
    Rebuild the bracket from the round-one order and the winners in the order they were recorded.

    A team plays at most one undecided match at a time, so a winner id is enough to find the
    match it belongs to. Byes are decided on creation and have no entry in `winners`.
    """
    if len(team_ids) < 2:
        raise ValueError("At least 2 teams are required to replay a bracket.")
    if duplicates := get_duplicate_team_ids(team_ids):
        raise ValueError(f"Duplicate teams in round one: {duplicates}")

    pending_winners = iter(winners)
    rounds: list[list[ReplayedMatch]] = []
    current_team_ids = list(team_ids)
    round_ = 1

    while True:
        current_round = [
            ReplayedMatch(
                round=round_,
                winner_team_id=pairing.home_team_id if pairing.is_bye else None,
                **pairing.model_dump(),
            )
            for pairing in build_round_pairings(current_team_ids)
        ]
        rounds.append(current_round)

        while undecided := [match for match in current_round if match.winner_team_id is None]:
            winner_team_id = next(pending_winners, None)
            if winner_team_id is None:
                return BracketReplay(rounds=rounds, champion_team_id=None)

            match = next(
                (
                    match
                    for match in undecided
                    if winner_team_id in (match.home_team_id, match.away_team_id)
                ),
                None,
            )
            if match is None:
                raise ValueError(f"Team {winner_team_id} has no open match in round {round_}.")
            match.winner_team_id = winner_team_id

        current_team_ids = [
            TeamId(match.winner_team_id) for match in current_round if match.winner_team_id
        ]
        if len(current_team_ids) == 1:
            if next(pending_winners, None) is not None:
                raise ValueError("More winners were recorded than the bracket has matches.")
            return BracketReplay(rounds=rounds, champion_team_id=current_team_ids[0])

        round_ += 1
