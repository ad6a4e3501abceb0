"""
Group-stage standings.

Deterministic ranking of teams from their accumulated stats. Derived on
demand, never stored.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from cs2cup.models.team import Team


@dataclass
class Standing:
    rank: int
    team: Team
    match_wins: int
    round_difference: int
    rounds_scored: int
    buchholz_score: int  # sum of current opponents' wins; informational tie-break


def standing_sort_key(team: Team) -> tuple:
    """
    Return sort key for standings. Lower = better.

    Order: -wins, -round difference, -rounds scored. Anything still tied
    keeps the order the teams were supplied in (sorted() is stable).
    """
    return (
        -team.total_wins,
        -team.total_points,
        -team.total_scored,
    )


def buchholz_score(team: Team, wins_by_id: Dict[str, int]) -> int:
    return sum(wins_by_id.get(opponent_id, 0) for opponent_id in team.match_history)


def compute_standings(teams: Sequence[Team]) -> List[Standing]:
    """Rank teams, most successful first. teams must be in store (registration) order."""
    wins_by_id = {t.id: t.total_wins for t in teams}
    ranked = sorted(teams, key=standing_sort_key)
    return [
        Standing(
            rank=idx + 1,
            team=team,
            match_wins=team.total_wins,
            round_difference=team.total_points,
            rounds_scored=team.total_scored,
            buchholz_score=buchholz_score(team, wins_by_id),
        )
        for idx, team in enumerate(ranked)
    ]
