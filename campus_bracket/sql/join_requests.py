from heliclockter import datetime_utc

from campus_bracket.database import database
from campus_bracket.models.db.join_request import (
    JoinRequest,
    JoinRequestInsertable,
    JoinRequestStatus,
)
from campus_bracket.schema import tournament_join_requests
from campus_bracket.utils.db import fetch_all_parsed, fetch_one_parsed
from campus_bracket.utils.id_types import JoinRequestId, TeamId, TournamentId, UserId


async def sql_get_join_request(request_id: JoinRequestId) -> JoinRequest | None:
    query = """
        SELECT *
        FROM tournament_join_requests
        WHERE id = :request_id
        """
    return await fetch_one_parsed(database, JoinRequest, query, values={"request_id": request_id})


async def sql_get_join_request_for_team(
    tournament_id: TournamentId, team_id: TeamId
) -> JoinRequest | None:
    query = """
        SELECT *
        FROM tournament_join_requests
        WHERE tournament_id = :tournament_id
        AND team_id = :team_id
        """
    return await fetch_one_parsed(
        database,
        JoinRequest,
        query,
        values={"tournament_id": tournament_id, "team_id": team_id},
    )


async def sql_get_join_requests(tournament_id: TournamentId) -> list[JoinRequest]:
    query = """
        SELECT *
        FROM tournament_join_requests
        WHERE tournament_id = :tournament_id
        ORDER BY requested_at ASC, id ASC
        """
    return await fetch_all_parsed(
        database, JoinRequest, query, values={"tournament_id": tournament_id}
    )


async def sql_create_join_request(join_request: JoinRequestInsertable) -> JoinRequest:
    new_id = await database.execute(
        query=tournament_join_requests.insert(), values=join_request.model_dump()
    )
    return JoinRequest(id=JoinRequestId(new_id), **join_request.model_dump())


async def sql_reopen_join_request(
    request_id: JoinRequestId, requested_by_user_id: UserId, requested_at: datetime_utc
) -> None:
    query = """
        UPDATE tournament_join_requests
        SET
            status = :status,
            requested_by_user_id = :requested_by_user_id,
            requested_at = :requested_at,
            reviewed_at = NULL,
            reviewed_by_user_id = NULL,
            review_note = NULL
        WHERE id = :request_id
        """
    await database.execute(
        query=query,
        values={
            "request_id": request_id,
            "status": JoinRequestStatus.PENDING.value,
            "requested_by_user_id": requested_by_user_id,
            "requested_at": requested_at,
        },
    )


async def sql_review_join_request(
    request_id: JoinRequestId,
    status: JoinRequestStatus,
    reviewed_by_user_id: UserId,
    reviewed_at: datetime_utc,
    review_note: str | None = None,
) -> None:
    query = """
        UPDATE tournament_join_requests
        SET
            status = :status,
            reviewed_by_user_id = :reviewed_by_user_id,
            reviewed_at = :reviewed_at,
            review_note = :review_note
        WHERE id = :request_id
        """
    await database.execute(
        query=query,
        values={
            "request_id": request_id,
            "status": status.value,
            "reviewed_by_user_id": reviewed_by_user_id,
            "reviewed_at": reviewed_at,
            "review_note": review_note,
        },
    )


async def sql_reject_join_requests_of_team(
    tournament_id: TournamentId,
    team_id: TeamId,
    reviewed_by_user_id: UserId,
    reviewed_at: datetime_utc,
    review_note: str,
) -> None:
    query = """
        UPDATE tournament_join_requests
        SET
            status = :status,
            reviewed_by_user_id = :reviewed_by_user_id,
            reviewed_at = :reviewed_at,
            review_note = :review_note
        WHERE tournament_id = :tournament_id
        AND team_id = :team_id
        """
    await database.execute(
        query=query,
        values={
            "tournament_id": tournament_id,
            "team_id": team_id,
            "status": JoinRequestStatus.REJECTED.value,
            "reviewed_by_user_id": reviewed_by_user_id,
            "reviewed_at": reviewed_at,
            "review_note": review_note,
        },
    )
