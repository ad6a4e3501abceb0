"""
Round references.

A match belongs either to a numbered round-robin round or to a knockout
stage. The two are kept as distinct variants so knockout stages can never
collide with round-robin round numbers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

PHASE_ROUND_ROBIN = "round_robin"
PHASE_KNOCKOUT = "knockout"


class KnockoutStage(str, Enum):
    QUARTERFINALS = "quarterfinals"
    SEMIFINALS = "semifinals"
    FINALS = "finals"

    @property
    def order(self) -> int:
        return _STAGE_ORDER.index(self)

    def next_stage(self) -> Optional["KnockoutStage"]:
        """Stage the winners of this stage move into; None after the final."""
        idx = self.order + 1
        return _STAGE_ORDER[idx] if idx < len(_STAGE_ORDER) else None

    @classmethod
    def for_bracket_size(cls, size: int) -> "KnockoutStage":
        if size == 8:
            return cls.QUARTERFINALS
        if size == 4:
            return cls.SEMIFINALS
        if size == 2:
            return cls.FINALS
        raise ValueError(f"Unsupported bracket size: {size}")


_STAGE_ORDER = [KnockoutStage.QUARTERFINALS, KnockoutStage.SEMIFINALS, KnockoutStage.FINALS]


@dataclass(frozen=True)
class RoundRobinRound:
    number: int

    @property
    def phase(self) -> str:
        return PHASE_ROUND_ROBIN

    @property
    def label(self) -> str:
        return f"round_{self.number}"


@dataclass(frozen=True)
class KnockoutRound:
    stage: KnockoutStage

    @property
    def phase(self) -> str:
        return PHASE_KNOCKOUT

    @property
    def label(self) -> str:
        return self.stage.value


RoundRef = Union[RoundRobinRound, KnockoutRound]
