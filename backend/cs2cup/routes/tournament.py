from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict

from cs2cup.errors import TournamentError
from cs2cup.routes.dependencies import get_tournament
from cs2cup.routes.http_errors import to_http
from cs2cup.routes.matches import MatchResponse, match_to_response, team_names
from cs2cup.routes.teams import TeamResponse
from cs2cup.tournament_engine import TournamentEngine

router = APIRouter()


class RoundResponse(BaseModel):
    round: int
    matches: List[MatchResponse]


class StandingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rank: int
    team: TeamResponse
    match_wins: int
    round_difference: int
    rounds_scored: int
    buchholz_score: int


class BracketMatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    round: str
    team_a_id: str
    team_b_id: str
    winner_id: Optional[str] = None
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    status: str
    position: int
    map: str


class ConfigResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_teams: int
    swiss_rounds: int
    knockout_size: int
    current_round: int
    current_phase: str
    champion_id: Optional[str] = None


class ResetResponse(BaseModel):
    message: str


@router.post("/tournament/generate-round", response_model=RoundResponse)
def generate_round(tournament: TournamentEngine = Depends(get_tournament)):
    """Reveal the next round-robin round (the full schedule is built on the first call)."""
    try:
        matches = tournament.generate_round()
    except TournamentError as e:
        raise to_http(e)
    names = team_names(tournament)
    return RoundResponse(
        round=tournament.get_config().current_round,
        matches=[match_to_response(m, names) for m in matches],
    )


@router.get("/tournament/standings", response_model=List[StandingResponse])
def get_standings(tournament: TournamentEngine = Depends(get_tournament)):
    """Ranked group-stage table: wins, round difference, rounds scored."""
    return [
        StandingResponse(
            rank=s.rank,
            team=TeamResponse.model_validate(s.team),
            match_wins=s.match_wins,
            round_difference=s.round_difference,
            rounds_scored=s.rounds_scored,
            buchholz_score=s.buchholz_score,
        )
        for s in tournament.get_standings()
    ]


@router.post("/tournament/generate-bracket", response_model=List[BracketMatchResponse])
def generate_bracket(tournament: TournamentEngine = Depends(get_tournament)):
    try:
        return tournament.generate_bracket()
    except TournamentError as e:
        raise to_http(e)


@router.get("/tournament/bracket", response_model=List[BracketMatchResponse])
def get_bracket(tournament: TournamentEngine = Depends(get_tournament)):
    return tournament.get_bracket()


@router.get("/tournament/config", response_model=ConfigResponse)
def get_config(tournament: TournamentEngine = Depends(get_tournament)):
    return tournament.get_config()


@router.post("/tournament/reset", response_model=ResetResponse)
def reset_tournament(tournament: TournamentEngine = Depends(get_tournament)):
    """Drop all teams and matches and restore the default config."""
    tournament.reset()
    return ResetResponse(message="Tournament reset successfully")


@router.get("/maps", response_model=List[str])
def get_map_pool(tournament: TournamentEngine = Depends(get_tournament)):
    return tournament.map_pool()
