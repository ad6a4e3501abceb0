from typing import Optional

from sqlmodel import Field, SQLModel

from cs2cup.models.round_ref import PHASE_ROUND_ROBIN

CONFIG_ID = 1


class TournamentConfig(SQLModel, table=True):
    """Singleton row (id=1) describing the one tournament this process hosts."""

    id: int = Field(default=CONFIG_ID, primary_key=True)
    total_teams: int = Field(default=0)
    swiss_rounds: int = Field(default=0)  # total round-robin rounds
    knockout_size: int = Field(default=0)  # how many top teams qualify
    current_round: int = Field(default=0)
    current_phase: str = Field(default=PHASE_ROUND_ROBIN)  # "round_robin" | "knockout"
    champion_id: Optional[str] = Field(default=None)


def round_robin_round_count(team_count: int) -> int:
    """Even n: n-1 rounds. Odd n: n rounds (one team sits out each round)."""
    if team_count < 2:
        return 0
    if team_count % 2 == 0:
        return team_count - 1
    return team_count


def knockout_size_for(team_count: int) -> int:
    if team_count >= 8:
        return 8
    if team_count >= 4:
        return 4
    return 0
