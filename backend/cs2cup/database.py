from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# In-memory only. StaticPool keeps a single connection so every session
# sees the same database for the lifetime of the engine.
IN_MEMORY_URL = "sqlite://"


def build_engine(echo: bool = False) -> Engine:
    """Create a fresh in-memory store with all tables."""
    engine = create_engine(
        IN_MEMORY_URL,
        echo=echo,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    return engine


def _register_models() -> None:
    # Import all models to ensure they're registered with SQLModel metadata
    from cs2cup.models.match import Match  # noqa: F401
    from cs2cup.models.team import Team  # noqa: F401
    from cs2cup.models.tournament_config import TournamentConfig  # noqa: F401


def init_db(engine: Engine) -> None:
    """Initialize database - create all tables"""
    _register_models()
    SQLModel.metadata.create_all(engine)


def reset_db(engine: Engine) -> None:
    """Drop every table and recreate them empty"""
    _register_models()
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)


def open_session(engine: Engine) -> Session:
    # Objects returned from the engine outlive their session
    return Session(engine, expire_on_commit=False)
