"""
Match Routes: listings, result entry and the map veto.
Results on knockout matches advance the bracket (handled by the engine).
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from cs2cup.errors import TournamentError
from cs2cup.models.match import BYE_TEAM_ID, Match
from cs2cup.models.round_ref import PHASE_KNOCKOUT, PHASE_ROUND_ROBIN
from cs2cup.routes.dependencies import get_tournament
from cs2cup.routes.http_errors import to_http
from cs2cup.tournament_engine import TournamentEngine

router = APIRouter()


class MatchResultRequest(BaseModel):
    match_id: str
    score_a: int = Field(ge=0)
    score_b: int = Field(ge=0)


class VetoStepRequest(BaseModel):
    banned_maps: Optional[List[str]] = None
    side_choice: Optional[str] = None


class MatchResponse(BaseModel):
    id: str
    phase: str
    round: str
    round_number: Optional[int] = None
    knockout_stage: Optional[str] = None
    sequence_in_round: int
    team_a_id: str
    team_b_id: str
    team_a_name: Optional[str] = None
    team_b_name: Optional[str] = None
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    winner_id: Optional[str] = None
    status: str
    map: str
    veto_starter: Optional[str] = None
    side_choice: Optional[Dict[str, Any]] = None
    veto_progress: Optional[Dict[str, Any]] = None
    veto_rolled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class CurrentMatchesResponse(BaseModel):
    round: int
    phase: str
    matches: List[MatchResponse]


def team_names(tournament: TournamentEngine) -> Dict[str, str]:
    names = {t.id: t.name for t in tournament.list_teams()}
    names[BYE_TEAM_ID] = BYE_TEAM_ID
    return names


def match_to_response(m: Match, names: Dict[str, str]) -> MatchResponse:
    return MatchResponse(
        id=m.id,
        phase=m.phase,
        round=m.round_ref.label,
        round_number=m.round_number,
        knockout_stage=m.knockout_stage,
        sequence_in_round=m.sequence_in_round,
        team_a_id=m.team_a_id,
        team_b_id=m.team_b_id,
        team_a_name=names.get(m.team_a_id),
        team_b_name=names.get(m.team_b_id),
        score_a=m.score_a,
        score_b=m.score_b,
        winner_id=m.winner_id,
        status=m.status,
        map=m.map_name,
        veto_starter=m.veto_starter,
        side_choice=m.side_choice,
        veto_progress=m.veto_progress,
        veto_rolled_at=m.veto_rolled_at,
        completed_at=m.completed_at,
    )


def _respond(tournament: TournamentEngine, matches: List[Match]) -> List[MatchResponse]:
    names = team_names(tournament)
    return [match_to_response(m, names) for m in matches]


@router.get("/matches/all", response_model=List[MatchResponse])
def get_all_matches(tournament: TournamentEngine = Depends(get_tournament)):
    return _respond(tournament, tournament.list_matches())


@router.get("/matches/current", response_model=CurrentMatchesResponse)
def get_current_matches(tournament: TournamentEngine = Depends(get_tournament)):
    """Matches of the round being played."""
    config = tournament.get_config()
    return CurrentMatchesResponse(
        round=config.current_round,
        phase=config.current_phase,
        matches=_respond(tournament, tournament.current_matches()),
    )


@router.get("/matches/round-robin", response_model=List[MatchResponse])
def get_round_robin_matches(tournament: TournamentEngine = Depends(get_tournament)):
    return _respond(tournament, tournament.list_matches(PHASE_ROUND_ROBIN))


@router.get("/matches/knockout", response_model=List[MatchResponse])
def get_knockout_matches(tournament: TournamentEngine = Depends(get_tournament)):
    return _respond(tournament, tournament.list_matches(PHASE_KNOCKOUT))


@router.post("/matches/result", response_model=MatchResponse)
def record_result(payload: MatchResultRequest, tournament: TournamentEngine = Depends(get_tournament)):
    """Record a match result. Exact ties are accepted and go to team B."""
    try:
        match = tournament.record_match_result(payload.match_id, payload.score_a, payload.score_b)
    except TournamentError as e:
        raise to_http(e)
    return match_to_response(match, team_names(tournament))


@router.post("/matches/{match_id}/veto", response_model=MatchResponse)
def execute_veto_step(
    match_id: str,
    payload: VetoStepRequest,
    tournament: TournamentEngine = Depends(get_tournament),
):
    """
    Run the next veto step.

    Body: {"banned_maps": [...]} for steps 0-4, {"side_choice": "T" | "CT"} for step 5.
    """
    if payload.banned_maps is None and payload.side_choice is None:
        raise HTTPException(status_code=400, detail="Either banned_maps or side_choice is required")
    try:
        match = tournament.execute_veto_step(match_id, payload.banned_maps, payload.side_choice)
    except TournamentError as e:
        raise to_http(e)
    return match_to_response(match, team_names(tournament))


@router.patch("/matches/{match_id}/reroll", response_model=MatchResponse)
def reroll_veto(match_id: str, tournament: TournamentEngine = Depends(get_tournament)):
    """Redraw veto starter and map (admin)."""
    try:
        match = tournament.reroll_veto_and_side(match_id)
    except TournamentError as e:
        raise to_http(e)
    return match_to_response(match, team_names(tournament))
