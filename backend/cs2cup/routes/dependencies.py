from fastapi import Request

from cs2cup.tournament_engine import TournamentEngine


def get_tournament(request: Request) -> TournamentEngine:
    """FastAPI dependency: the engine owned by the running app"""
    return request.app.state.tournament
