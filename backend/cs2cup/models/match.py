from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, SQLModel

from cs2cup.models.round_ref import (
    PHASE_KNOCKOUT,
    KnockoutRound,
    KnockoutStage,
    RoundRef,
    RoundRobinRound,
)
from cs2cup.models.team import new_id, utc_now
from cs2cup.models.veto import VetoProgress

BYE_TEAM_ID = "BYE"

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"


class Match(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    phase: str = Field(index=True)  # "round_robin" | "knockout"

    # Round reference: exactly one of these is set, see round_ref
    round_number: Optional[int] = Field(default=None, index=True)  # round-robin only
    knockout_stage: Optional[str] = Field(default=None, index=True)  # knockout only
    sequence_in_round: int = Field(default=1)

    team_a_id: str
    team_b_id: str  # BYE_TEAM_ID for an automatic-win placeholder

    score_a: Optional[int] = Field(default=None)
    score_b: Optional[int] = Field(default=None)
    winner_id: Optional[str] = Field(default=None)
    status: str = Field(default=STATUS_PENDING)  # "pending" | "completed", never reverts

    map_name: str  # frozen once the veto completes
    veto_starter: Optional[str] = Field(default=None)  # "teamA" | "teamB"
    side_choice: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    veto_progress: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    veto_rolled_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    completed_at: Optional[datetime] = Field(default=None)

    @property
    def round_ref(self) -> RoundRef:
        if self.phase == PHASE_KNOCKOUT:
            return KnockoutRound(KnockoutStage(self.knockout_stage))
        return RoundRobinRound(self.round_number)

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    @property
    def has_bye(self) -> bool:
        return BYE_TEAM_ID in (self.team_a_id, self.team_b_id)

    def get_veto_progress(self) -> Optional[VetoProgress]:
        if self.veto_progress is None:
            return None
        return VetoProgress.model_validate(self.veto_progress)
