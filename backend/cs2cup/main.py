import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cs2cup.routes import matches, teams, tournament
from cs2cup.settings import Settings, load_settings
from cs2cup.tournament_engine import TournamentEngine

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, engine: Optional[TournamentEngine] = None) -> FastAPI:
    """
    Build the API around one tournament engine.

    When no engine is given, one is created from settings on startup.
    """
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="CS2 Cup Tournament API")
    app.state.tournament = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(teams.router, prefix="/api", tags=["teams"])
    app.include_router(tournament.router, prefix="/api", tags=["tournament"])
    app.include_router(matches.router, prefix="/api", tags=["matches"])

    @app.on_event("startup")
    def on_startup():
        if app.state.tournament is None:
            app.state.tournament = TournamentEngine.from_settings(settings)
        logger.info(f"CS2 Cup API ready ({len(app.routes)} routes)")

    @app.get("/api/health")
    def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()
