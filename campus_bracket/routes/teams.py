from fastapi import APIRouter, Depends
from starlette import status

from campus_bracket.config import config
from campus_bracket.logic.teams import (
    create_team,
    get_team_roster,
    join_team_by_code,
    regenerate_team_code,
)
from campus_bracket.models.db.team import TeamBody, TeamJoinBody
from campus_bracket.models.db.user import Principal
from campus_bracket.routes.auth import get_principal
from campus_bracket.routes.models import TeamResponse, TeamRosterResponse
from campus_bracket.utils.id_types import TeamId

router = APIRouter(prefix=config.api_prefix)


@router.post("/teams", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team_route(
    team_body: TeamBody,
    principal: Principal = Depends(get_principal),
) -> TeamResponse:
    return TeamResponse(data=await create_team(principal.id, team_body))


@router.get("/teams/{team_id}/roster", response_model=TeamRosterResponse)
async def get_team_roster_route(
    team_id: TeamId,
    _: Principal = Depends(get_principal),
) -> TeamRosterResponse:
    return TeamRosterResponse(data=await get_team_roster(team_id))


@router.post("/teams/{team_id}/regenerate_code", response_model=TeamResponse)
async def regenerate_team_code_route(
    team_id: TeamId,
    principal: Principal = Depends(get_principal),
) -> TeamResponse:
    return TeamResponse(data=await regenerate_team_code(principal.id, team_id))


@router.post("/teams/join", response_model=TeamRosterResponse)
async def join_team_route(
    team_join_body: TeamJoinBody,
    principal: Principal = Depends(get_principal),
) -> TeamRosterResponse:
    return TeamRosterResponse(data=await join_team_by_code(principal.id, team_join_body))
