from datetime import datetime, timezone
from typing import List
from uuid import uuid4

from sqlalchemy import JSON
from sqlmodel import Column, Field, SQLModel


def new_id() -> str:
    return uuid4().hex


def utc_now() -> datetime:
    """Timezone-aware UTC timestamp for created_at/completed_at columns."""
    return datetime.now(timezone.utc)


def normalize_team_name(name: str) -> str:
    """Key used for case-insensitive name uniqueness."""
    return name.strip().lower()


class Team(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    name_key: str = Field(unique=True, index=True)  # lower-cased name
    registration_index: int = Field(default=0, index=True)  # store iteration order

    total_points: int = Field(default=0)  # cumulative round difference
    total_scored: int = Field(default=0)  # cumulative rounds won ("goals for")
    total_wins: int = Field(default=0)
    total_losses: int = Field(default=0)

    # Opponent ids already played (never contains duplicates)
    match_history: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=utc_now)
