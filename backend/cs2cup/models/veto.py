"""
Veto value types. Frozen: every accepted step produces a new VetoProgress.
Stored on the match as plain JSON (model_dump / model_validate).
"""

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict

TeamSide = Literal["teamA", "teamB"]
MapSide = Literal["T", "CT"]
VetoAction = Literal["ban", "side"]


class VetoStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: int
    team: TeamSide
    action: VetoAction
    count: int  # maps banned in this step (0 for the side step)
    banned_maps: Tuple[str, ...] = ()
    side_choice: Optional[MapSide] = None


class VetoProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    completed: bool = False
    current_step: int = 0
    available_maps: Tuple[str, ...]
    banned_maps: Tuple[str, ...] = ()
    steps: Tuple[VetoStep, ...] = ()


class SideChoice(BaseModel):
    model_config = ConfigDict(frozen=True)

    starter: TeamSide
    side: MapSide
