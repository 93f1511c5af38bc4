from fastapi import APIRouter, Depends

from campus_bracket.config import config
from campus_bracket.logic.tournaments import resolve_match
from campus_bracket.models.db.match import MatchResultBody
from campus_bracket.models.db.user import Principal
from campus_bracket.routes.auth import require_admin
from campus_bracket.routes.models import MatchResolutionResponse
from campus_bracket.utils.id_types import MatchId, TournamentId

router = APIRouter(prefix=config.api_prefix)


@router.post(
    "/tournaments/{tournament_id}/matches/{match_id}/result",
    response_model=MatchResolutionResponse,
)
async def resolve_match_route(
    tournament_id: TournamentId,
    match_id: MatchId,
    match_body: MatchResultBody,
    _: Principal = Depends(require_admin),
) -> MatchResolutionResponse:
    return MatchResolutionResponse(data=await resolve_match(tournament_id, match_id, match_body))
