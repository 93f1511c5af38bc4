from fastapi import APIRouter, Depends
from starlette import status

from campus_bracket.config import config
from campus_bracket.logic.tournaments import (
    create_tournament,
    get_bracket,
    seed_tournament,
    update_tournament,
)
from campus_bracket.models.db.tournament import (
    TournamentCreateBody,
    TournamentUpdateBody,
)
from campus_bracket.models.db.user import Principal
from campus_bracket.routes.auth import get_principal, require_admin
from campus_bracket.routes.models import BracketResponse, SeedResponse, TournamentResponse
from campus_bracket.utils.id_types import TournamentId

router = APIRouter(prefix=config.api_prefix)


@router.post(
    "/tournaments",
    response_model=TournamentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_tournament_route(
    tournament_body: TournamentCreateBody,
    _: Principal = Depends(require_admin),
) -> TournamentResponse:
    return TournamentResponse(data=await create_tournament(tournament_body))


@router.patch("/tournaments/{tournament_id}", response_model=TournamentResponse)
async def update_tournament_route(
    tournament_id: TournamentId,
    tournament_body: TournamentUpdateBody,
    _: Principal = Depends(require_admin),
) -> TournamentResponse:
    return TournamentResponse(data=await update_tournament(tournament_id, tournament_body))


@router.get("/tournaments/{tournament_id}/bracket", response_model=BracketResponse)
async def get_bracket_route(
    tournament_id: TournamentId,
    _: Principal = Depends(get_principal),
) -> BracketResponse:
    return BracketResponse(data=await get_bracket(tournament_id))


@router.post("/tournaments/{tournament_id}/seed", response_model=SeedResponse)
async def seed_tournament_route(
    tournament_id: TournamentId,
    shuffle: bool = True,
    _: Principal = Depends(require_admin),
) -> SeedResponse:
    return SeedResponse(data=await seed_tournament(tournament_id, shuffle=shuffle))
