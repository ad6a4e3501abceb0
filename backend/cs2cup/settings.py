import os
import random
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return int(raw)


@dataclass
class Settings:
    """Process configuration, read once from the environment (.env supported)."""

    random_seed: Optional[int] = None
    sql_echo: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    def build_rng(self) -> random.Random:
        """Random source for map draws and veto starters. Seeded when TOURNAMENT_SEED is set."""
        return random.Random(self.random_seed)


def load_settings() -> Settings:
    settings = Settings(
        random_seed=_env_int("TOURNAMENT_SEED"),
        sql_echo=_env_flag("SQL_ECHO"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
    extra = os.getenv("CORS_ORIGINS", "")
    if extra:
        settings.cors_origins.extend(o.strip() for o in extra.split(",") if o.strip())
    return settings
