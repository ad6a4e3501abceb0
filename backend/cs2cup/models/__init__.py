from cs2cup.models.match import BYE_TEAM_ID, Match
from cs2cup.models.round_ref import KnockoutRound, KnockoutStage, RoundRef, RoundRobinRound
from cs2cup.models.team import Team
from cs2cup.models.tournament_config import TournamentConfig
from cs2cup.models.veto import SideChoice, VetoProgress, VetoStep

__all__ = [
    "BYE_TEAM_ID",
    "Match",
    "Team",
    "TournamentConfig",
    "RoundRef",
    "RoundRobinRound",
    "KnockoutRound",
    "KnockoutStage",
    "VetoProgress",
    "VetoStep",
    "SideChoice",
]
