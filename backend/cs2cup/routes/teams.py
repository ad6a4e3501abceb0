"""
Team Registration API Routes
"""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict

from cs2cup.errors import TournamentError
from cs2cup.routes.dependencies import get_tournament
from cs2cup.routes.http_errors import to_http
from cs2cup.tournament_engine import TournamentEngine

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class TeamCreateRequest(BaseModel):
    name: str


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    total_points: int
    total_scored: int
    total_wins: int
    total_losses: int
    match_history: List[str]
    created_at: datetime


# ============================================================================
# Team Endpoints
# ============================================================================


@router.post("/teams", response_model=TeamResponse, status_code=201)
def create_team(request: TeamCreateRequest, tournament: TournamentEngine = Depends(get_tournament)):
    """
    Register a new team.

    Constraints:
    - name must be non-empty
    - name must be unique (case-insensitive)
    - registration closes once the round-robin schedule exists
    """
    try:
        return tournament.add_team(request.name)
    except TournamentError as e:
        raise to_http(e)


@router.get("/teams", response_model=List[TeamResponse])
def get_teams(tournament: TournamentEngine = Depends(get_tournament)):
    """Get all teams in registration order."""
    return tournament.list_teams()


@router.get("/teams/{team_id}", response_model=TeamResponse)
def get_team(team_id: str, tournament: TournamentEngine = Depends(get_tournament)):
    try:
        return tournament.get_team(team_id)
    except TournamentError as e:
        raise to_http(e)
