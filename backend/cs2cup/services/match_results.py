"""
Match result recording for the round-robin phase.

Completing a match is a one-way transition (pending -> completed). Team
stats are recomputed from the stored values and written back as a whole;
nothing is merged into the stored row piecemeal.
"""

import logging
from typing import Any, Dict

from sqlmodel import Session

from cs2cup.errors import AlreadyCompletedError, NotFoundError, ValidationError
from cs2cup.models.match import STATUS_COMPLETED, Match
from cs2cup.models.team import Team, utc_now

logger = logging.getLogger(__name__)


def validate_scores(score_a: int, score_b: int) -> None:
    if score_a < 0 or score_b < 0:
        raise ValidationError("Scores must be non-negative")


def decide_winner(match: Match, score_a: int, score_b: int) -> str:
    """
    Team A wins only on a strictly greater score. An exact tie therefore
    goes to team B; ties are not rejected.
    """
    return match.team_a_id if score_a > score_b else match.team_b_id


def team_stats_after(team: Team, own_score: int, opponent_score: int, opponent_id: str) -> Dict[str, Any]:
    """New stat values for team after one completed match. team is not modified."""
    won = own_score > opponent_score
    history = list(team.match_history)
    if opponent_id not in history:
        history.append(opponent_id)
    return {
        "total_points": team.total_points + (own_score - opponent_score),
        "total_scored": team.total_scored + own_score,
        "total_wins": team.total_wins + (1 if won else 0),
        "total_losses": team.total_losses + (0 if won else 1),
        "match_history": history,
    }


def complete_match(session: Session, match_id: str, score_a: int, score_b: int) -> Match:
    """Shared pending -> completed transition; used by both phases."""
    validate_scores(score_a, score_b)
    match = session.get(Match, match_id)
    if not match:
        raise NotFoundError("Match not found")
    if match.is_completed:
        raise AlreadyCompletedError("Match already completed")

    match.sqlmodel_update(
        {
            "score_a": score_a,
            "score_b": score_b,
            "winner_id": decide_winner(match, score_a, score_b),
            "status": STATUS_COMPLETED,
            "completed_at": utc_now(),
        }
    )
    session.add(match)
    return match


def _apply_side(session: Session, team_id: str, own_score: int, opponent_score: int, opponent_id: str) -> None:
    team = session.get(Team, team_id)
    if not team:
        raise NotFoundError(f"Team {team_id} not found")
    team.sqlmodel_update(team_stats_after(team, own_score, opponent_score, opponent_id))
    session.add(team)


def record_match_result(session: Session, match_id: str, score_a: int, score_b: int) -> Match:
    """Record a round-robin result and update both teams. Caller commits."""
    match = complete_match(session, match_id, score_a, score_b)

    # Byes complete the match but leave the stats alone
    if not match.has_bye:
        _apply_side(session, match.team_a_id, score_a, score_b, match.team_b_id)
        _apply_side(session, match.team_b_id, score_b, score_a, match.team_a_id)

    if score_a == score_b:
        logger.warning(f"Match {match_id} recorded as a {score_a}-{score_b} tie; awarded to team B")
    logger.info(f"Result recorded for match {match_id}: {score_a}-{score_b}, winner {match.winner_id}")
    return match
