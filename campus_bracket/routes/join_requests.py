from fastapi import APIRouter, Depends

from campus_bracket.config import config
from campus_bracket.logic.tournaments import (
    approve_join_request,
    get_join_requests,
    remove_participant,
    request_join,
)
from campus_bracket.models.db.join_request import JoinRequestBody
from campus_bracket.models.db.user import Principal
from campus_bracket.routes.auth import get_principal, require_admin
from campus_bracket.routes.models import (
    ApprovalResponse,
    JoinRequestsResponse,
    JoinResponse,
    RemovalResponse,
)
from campus_bracket.utils.id_types import JoinRequestId, TeamId, TournamentId

router = APIRouter(prefix=config.api_prefix)


@router.get("/tournaments/{tournament_id}/join_requests", response_model=JoinRequestsResponse)
async def get_join_requests_route(
    tournament_id: TournamentId,
    _: Principal = Depends(require_admin),
) -> JoinRequestsResponse:
    return JoinRequestsResponse(data=await get_join_requests(tournament_id))


@router.post("/tournaments/{tournament_id}/join_requests", response_model=JoinResponse)
async def request_join_route(
    tournament_id: TournamentId,
    join_body: JoinRequestBody,
    principal: Principal = Depends(get_principal),
) -> JoinResponse:
    return JoinResponse(data=await request_join(principal.id, tournament_id, join_body.team_id))


@router.post(
    "/tournaments/{tournament_id}/join_requests/{request_id}/approve",
    response_model=ApprovalResponse,
)
async def approve_join_request_route(
    tournament_id: TournamentId,
    request_id: JoinRequestId,
    admin: Principal = Depends(require_admin),
) -> ApprovalResponse:
    return ApprovalResponse(data=await approve_join_request(admin.id, tournament_id, request_id))


@router.delete(
    "/tournaments/{tournament_id}/participants/{team_id}", response_model=RemovalResponse
)
async def remove_participant_route(
    tournament_id: TournamentId,
    team_id: TeamId,
    admin: Principal = Depends(require_admin),
) -> RemovalResponse:
    return RemovalResponse(data=await remove_participant(admin.id, tournament_id, team_id))
