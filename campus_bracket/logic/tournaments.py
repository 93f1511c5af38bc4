import random

from heliclockter import datetime_utc

from campus_bracket.logic.ranking.elimination import advance_tournament_if_round_complete
from campus_bracket.logic.ranking.win_rules import get_best_of, validate_match_result
from campus_bracket.logic.scheduling.elimination import (
    assert_unique_team_ids,
    build_round_matches,
    build_round_pairings,
    is_bracket_consistent,
    select_bracket_team_ids,
    shuffle_team_ids,
)
from campus_bracket.models.db.bracket import (
    ApprovalResult,
    BracketRound,
    BracketView,
    JoinResult,
    MatchResolution,
    RemovalResult,
    SeedResult,
    TournamentWithSettings,
)
from campus_bracket.models.db.join_request import (
    JoinRequest,
    JoinRequestInsertable,
    JoinRequestStatus,
)
from campus_bracket.models.db.match import Match, MatchResultBody, MatchStatus
from campus_bracket.models.db.settings import TournamentSettings
from campus_bracket.models.db.tournament import (
    Tournament,
    TournamentCreateBody,
    TournamentFormat,
    TournamentInsertable,
    TournamentStatus,
    TournamentUpdateBody,
)
from campus_bracket.sql.capabilities import JOIN_REQUESTS_TABLE, SETTINGS_TABLE
from campus_bracket.sql.join_requests import (
    sql_create_join_request,
    sql_get_join_request,
    sql_get_join_request_for_team,
    sql_get_join_requests,
    sql_reject_join_requests_of_team,
    sql_reopen_join_request,
    sql_review_join_request,
)
from campus_bracket.sql.matches import (
    sql_count_matches,
    sql_create_match,
    sql_get_match,
    sql_get_matches,
    sql_set_match_result,
)
from campus_bracket.sql.participants import (
    sql_count_participants,
    sql_create_participant,
    sql_delete_participant,
    sql_get_participant,
    sql_get_participants,
)
from campus_bracket.sql.settings import load_settings, sql_upsert_settings
from campus_bracket.sql.teams import sql_get_team_roster
from campus_bracket.sql.tournaments import (
    sql_create_tournament,
    sql_get_tournament,
    sql_mark_tournament_active,
    sql_tournament_slug_taken,
    sql_update_tournament_details,
)
from campus_bracket.sql.transactions import run_serializable
from campus_bracket.utils.errors import Conflict, NotFound, PermissionDenied, ValidationFailed
from campus_bracket.utils.id_types import JoinRequestId, MatchId, TeamId, TournamentId, UserId
from campus_bracket.utils.logging import logger
from campus_bracket.utils.slugs import unique_slug
from campus_bracket.utils.types import assert_some

TOURNAMENT_SLUG_MAX_LENGTH = 50
TOURNAMENT_SLUG_SUFFIX_LENGTH = 5
REMOVED_BY_ADMIN_NOTE = "Removed by admin from tournament."

ROSTER_TABLES = (SETTINGS_TABLE, JOIN_REQUESTS_TABLE)


async def get_tournament_or_404(tournament_id: TournamentId) -> Tournament:
    tournament = await sql_get_tournament(tournament_id)
    if tournament is None:
        raise NotFound("Tournament not found.")
    return tournament


def _full_tournament_error(settings: TournamentSettings) -> Conflict:
    return Conflict(f"Tournament is full ({settings.team_limit} teams).")


async def _generate_tournament_slug(title: str, current_slug: str | None = None) -> str:
    async def is_taken(slug: str) -> bool:
        return slug != current_slug and await sql_tournament_slug_taken(slug)

    return await unique_slug(
        title,
        is_taken,
        fallback="tournament",
        max_length=TOURNAMENT_SLUG_MAX_LENGTH,
        suffix_length=TOURNAMENT_SLUG_SUFFIX_LENGTH,
    )


async def create_tournament(body: TournamentCreateBody) -> TournamentWithSettings:
    async def operation() -> TournamentWithSettings:
        now = datetime_utc.now()
        tournament_id = await sql_create_tournament(
            TournamentInsertable(
                title=body.title,
                slug=await _generate_tournament_slug(body.title),
                start_date=body.start_date,
                end_date=body.end_date,
                headliner=body.headliner,
                created=now,
            )
        )
        settings = TournamentSettings(
            team_limit=body.team_limit,
            match_best_of=body.match_best_of,
            final_best_of=body.final_best_of,
        )
        await sql_upsert_settings(tournament_id, settings, now)
        tournament = assert_some(await sql_get_tournament(tournament_id))
        return TournamentWithSettings(tournament=tournament, settings=settings)

    return await run_serializable(
        operation,
        fallback_message="Unable to create tournament.",
        required_tables=(SETTINGS_TABLE,),
    )


async def update_tournament(
    tournament_id: TournamentId, body: TournamentUpdateBody
) -> TournamentWithSettings:
    """
    Apply a partial update to a tournament and its settings.

    Settings can only change while the tournament is still a draft, and the team limit can never
    drop below the number of teams that were already approved.
    """

    async def operation() -> TournamentWithSettings:
        tournament = await get_tournament_or_404(tournament_id)
        current_settings = await load_settings(tournament_id)
        changes_settings = any(
            getattr(body, field) is not None
            for field in ("team_limit", "match_best_of", "final_best_of")
        )
        if changes_settings and tournament.status is not TournamentStatus.DRAFT:
            raise Conflict("Tournament settings can only be changed before bracket seeding.")

        start_date = body.start_date if body.start_date is not None else tournament.start_date
        end_date = body.end_date if body.has_field("end_date") else tournament.end_date
        if end_date is not None and end_date < start_date:
            raise ValidationFailed("End date must be after start date.")

        settings = TournamentSettings(
            team_limit=body.team_limit or current_settings.team_limit,
            match_best_of=body.match_best_of or current_settings.match_best_of,
            final_best_of=body.final_best_of or current_settings.final_best_of,
        )
        participant_count = await sql_count_participants(tournament_id)
        if settings.team_limit < participant_count:
            raise ValidationFailed(
                f"Team limit cannot be less than current participants ({participant_count})."
            )

        details: dict[str, object] = {}
        if body.title is not None and body.title != tournament.title:
            details["title"] = body.title
            details["slug"] = await _generate_tournament_slug(body.title, tournament.slug)
        if body.start_date is not None:
            details["start_date"] = body.start_date
        if body.has_field("end_date"):
            details["end_date"] = body.end_date
        if body.has_field("headliner"):
            details["headliner"] = body.headliner

        now = datetime_utc.now()
        await sql_update_tournament_details(tournament_id, details)
        if changes_settings:
            await sql_upsert_settings(tournament_id, settings, now)

        tournament = assert_some(await sql_get_tournament(tournament_id))
        return TournamentWithSettings(tournament=tournament, settings=settings)

    return await run_serializable(
        operation,
        fallback_message="Unable to update tournament.",
        required_tables=(SETTINGS_TABLE,),
    )


async def seed_tournament(
    tournament_id: TournamentId, *, shuffle: bool = True, rng: random.Random | None = None
) -> SeedResult:
    """
    Create round one from the approved teams and start the tournament.

    Teams are taken in approval order up to the team limit, optionally shuffled, and paired
    sequentially. Seeding happens once, a second call fails because the bracket already exists.
    """

    async def operation() -> SeedResult:
        tournament = await get_tournament_or_404(tournament_id)
        if tournament.format is not TournamentFormat.SINGLE_ELIMINATION:
            raise ValidationFailed("Only single elimination tournaments can be seeded.")

        if tournament.status is not TournamentStatus.DRAFT:
            raise Conflict("Tournament has already been seeded or finished.")

        if await sql_count_matches(tournament_id) > 0:
            raise Conflict("Tournament bracket already exists.")

        settings = await load_settings(tournament_id)
        approved_team_ids = [
            participant.team_id for participant in await sql_get_participants(tournament_id)
        ]
        team_ids = select_bracket_team_ids(approved_team_ids, settings.team_limit)
        if len(team_ids) < len(approved_team_ids):
            logger.warning(
                "Tournament %s has %s approved teams, only the first %s are seeded",
                tournament_id,
                len(approved_team_ids),
                len(team_ids),
            )

        if len(team_ids) < 2:
            raise ValidationFailed("At least 2 approved teams are required to seed the bracket.")

        if shuffle:
            team_ids = shuffle_team_ids(team_ids, rng)

        assert_unique_team_ids(team_ids, tournament_id, 1)

        now = datetime_utc.now()
        round_one_matches = [
            await sql_create_match(match)
            for match in build_round_matches(tournament_id, 1, build_round_pairings(team_ids), now)
        ]
        await sql_mark_tournament_active(tournament_id, now)
        advance_result = await advance_tournament_if_round_complete(tournament_id, 1)
        logger.info("Seeded tournament %s with %s teams", tournament_id, len(team_ids))

        return SeedResult(
            tournament=assert_some(await sql_get_tournament(tournament_id)),
            seeded_team_ids=team_ids,
            round_one_matches=round_one_matches,
            settings=settings,
            generated_round=advance_result.generated_round,
        )

    return await run_serializable(
        operation,
        fallback_message="Unable to seed tournament bracket.",
        required_tables=(SETTINGS_TABLE,),
    )


async def resolve_match(
    tournament_id: TournamentId, match_id: MatchId, body: MatchResultBody
) -> MatchResolution:
    """
    Record the winner of a match and advance the bracket as far as it can go.

    A result is final, there is no correction path once a winner has been recorded.
    """

    async def operation() -> MatchResolution:
        tournament = await get_tournament_or_404(tournament_id)
        if tournament.format is not TournamentFormat.SINGLE_ELIMINATION:
            raise Conflict("Only single elimination matches can be resolved.")

        if tournament.status is not TournamentStatus.ACTIVE:
            raise Conflict("Tournament is not active.")

        match = await sql_get_match(match_id)
        if match is None or match.tournament_id != tournament_id:
            raise NotFound("Match not found.")

        if match.winner_team_id is not None or match.status is MatchStatus.COMPLETED:
            raise Conflict("Match result has already been submitted.")

        if match.is_bye:
            raise ValidationFailed("Cannot manually resolve an auto-advanced match.")

        settings = await load_settings(tournament_id)
        best_of = get_best_of(settings, await sql_count_matches(tournament_id, match.round))
        validate_match_result(match, body, best_of)

        await sql_set_match_result(
            match_id, body.winner_team_id, body.home_score, body.away_score, datetime_utc.now()
        )
        advance_result = await advance_tournament_if_round_complete(tournament_id, match.round)

        return MatchResolution(
            match=assert_some(await sql_get_match(match_id)),
            tournament=await sql_get_tournament(tournament_id) if advance_result.finished else None,
            generated_round=advance_result.generated_round,
        )

    return await run_serializable(
        operation,
        fallback_message="Unable to submit match result.",
        required_tables=(SETTINGS_TABLE,),
    )


async def request_join(
    user_id: UserId, tournament_id: TournamentId, team_id: TeamId
) -> JoinResult:
    """
    Ask for a team to be admitted to a draft tournament, on behalf of the team captain.

    Repeating the request for a team that is already in returns APPROVED again, a rejected
    request is reopened, and a pending one is a conflict.
    """

    async def operation() -> JoinResult:
        roster = await sql_get_team_roster(team_id)
        if roster is None:
            raise NotFound("Team not found.")

        if roster.captain_user_id != user_id:
            raise PermissionDenied("Only the team captain can join a tournament.")

        tournament = await get_tournament_or_404(tournament_id)
        if tournament.status is not TournamentStatus.DRAFT:
            raise Conflict("Tournament no longer accepts new team entries.")

        settings = await load_settings(tournament_id)
        existing_request = await sql_get_join_request_for_team(tournament_id, team_id)

        if (participant := await sql_get_participant(tournament_id, team_id)) is not None:
            return JoinResult(
                tournament_id=tournament_id,
                team_id=team_id,
                status=JoinRequestStatus.APPROVED,
                join_request=existing_request,
                participant=participant,
                settings=settings,
            )

        if existing_request is not None:
            match existing_request.status:
                case JoinRequestStatus.PENDING:
                    raise Conflict("Join request is already pending admin approval.")
                case JoinRequestStatus.APPROVED:
                    join_request = existing_request
                case JoinRequestStatus.REJECTED:
                    await sql_reopen_join_request(
                        existing_request.id, user_id, datetime_utc.now()
                    )
                    join_request = assert_some(await sql_get_join_request(existing_request.id))

            return JoinResult(
                tournament_id=tournament_id,
                team_id=team_id,
                status=join_request.status,
                join_request=join_request,
                participant=None,
                settings=settings,
            )

        if await sql_count_participants(tournament_id) >= settings.team_limit:
            raise _full_tournament_error(settings)

        join_request = await sql_create_join_request(
            JoinRequestInsertable(
                tournament_id=tournament_id,
                team_id=team_id,
                requested_by_user_id=user_id,
                requested_at=datetime_utc.now(),
            )
        )
        return JoinResult(
            tournament_id=tournament_id,
            team_id=team_id,
            status=join_request.status,
            join_request=join_request,
            participant=None,
            settings=settings,
        )

    return await run_serializable(
        operation,
        fallback_message="Unable to submit join request.",
        required_tables=ROSTER_TABLES,
    )


async def approve_join_request(
    admin_user_id: UserId, tournament_id: TournamentId, request_id: JoinRequestId
) -> ApprovalResult:
    async def operation() -> ApprovalResult:
        join_request = await sql_get_join_request(request_id)
        if join_request is None or join_request.tournament_id != tournament_id:
            raise NotFound("Join request not found.")

        tournament = await get_tournament_or_404(tournament_id)
        if tournament.status is not TournamentStatus.DRAFT:
            raise Conflict("Tournament is no longer accepting approvals.")

        settings = await load_settings(tournament_id)
        now = datetime_utc.now()
        participant = await sql_get_participant(tournament_id, join_request.team_id)
        if participant is None:
            if await sql_count_participants(tournament_id) >= settings.team_limit:
                raise _full_tournament_error(settings)
            participant = await sql_create_participant(tournament_id, join_request.team_id, now)

        if join_request.status is not JoinRequestStatus.APPROVED:
            await sql_review_join_request(
                request_id, JoinRequestStatus.APPROVED, admin_user_id, now
            )

        return ApprovalResult(
            request_id=request_id,
            tournament_id=tournament_id,
            team_id=join_request.team_id,
            status=JoinRequestStatus.APPROVED,
            participant=participant,
            settings=settings,
        )

    return await run_serializable(
        operation,
        fallback_message="Unable to approve join request.",
        required_tables=ROSTER_TABLES,
    )


async def remove_participant(
    admin_user_id: UserId, tournament_id: TournamentId, team_id: TeamId
) -> RemovalResult:
    async def operation() -> RemovalResult:
        tournament = await get_tournament_or_404(tournament_id)
        if (
            tournament.status is not TournamentStatus.DRAFT
            or await sql_count_matches(tournament_id) > 0
        ):
            raise Conflict("Teams can be removed only before bracket seeding starts.")

        if await sql_get_participant(tournament_id, team_id) is None:
            raise NotFound("Team is not currently approved in this tournament.")

        now = datetime_utc.now()
        await sql_delete_participant(tournament_id, team_id)
        await sql_reject_join_requests_of_team(
            tournament_id, team_id, admin_user_id, now, REMOVED_BY_ADMIN_NOTE
        )
        return RemovalResult(tournament_id=tournament_id, team_id=team_id)

    return await run_serializable(
        operation,
        fallback_message="Unable to remove team from tournament.",
        required_tables=ROSTER_TABLES,
    )


async def get_join_requests(tournament_id: TournamentId) -> list[JoinRequest]:
    async def operation() -> list[JoinRequest]:
        await get_tournament_or_404(tournament_id)
        return await sql_get_join_requests(tournament_id)

    return await run_serializable(
        operation,
        fallback_message="Unable to load join requests.",
        required_tables=(JOIN_REQUESTS_TABLE,),
    )


def group_matches_by_round(matches: list[Match]) -> list[BracketRound]:
    rounds: dict[int, list[Match]] = {}
    for match in sorted(matches, key=lambda match: (match.round, match.position)):
        rounds.setdefault(match.round, []).append(match)
    return [BracketRound(round=round_, matches=matches_) for round_, matches_ in rounds.items()]


async def get_bracket(tournament_id: TournamentId) -> BracketView:
    async def operation() -> BracketView:
        tournament = await get_tournament_or_404(tournament_id)
        settings = await load_settings(tournament_id)
        rounds = group_matches_by_round(await sql_get_matches(tournament_id))
        round_numbers = [round_.round for round_ in rounds]
        is_consistent = round_numbers == list(range(1, len(rounds) + 1)) and is_bracket_consistent(
            [round_.matches for round_ in rounds]
        )
        if not is_consistent:
            logger.error("Stored bracket of tournament %s is inconsistent", tournament_id)

        return BracketView(
            tournament=tournament,
            settings=settings,
            rounds=rounds,
            champion_team_id=tournament.champion_team_id,
            is_consistent=is_consistent,
        )

    return await run_serializable(
        operation,
        fallback_message="Unable to load tournament bracket.",
        required_tables=(SETTINGS_TABLE,),
    )
