"""
Knockout bracket: seeding from final group standings and winner advancement.

When every match of a stage is completed, its winners are paired in order
(winner 0 vs winner 1, winner 2 vs winner 3, ...) into the next stage. A
single remaining winner is the champion.
"""
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, TypeVar

from sqlmodel import Session, select

from cs2cup.errors import InsufficientTeamsError, PhaseIncompleteError, StateConflictError, ValidationError
from cs2cup.models.match import Match
from cs2cup.models.round_ref import PHASE_KNOCKOUT, KnockoutStage
from cs2cup.models.tournament_config import TournamentConfig
from cs2cup.services.map_pool import pick_random_map
from cs2cup.services.match_results import complete_match
from cs2cup.services.schedule_service import is_round_robin_complete, list_teams
from cs2cup.services.standings import compute_standings

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUPPORTED_BRACKET_SIZES = (4, 8)


@dataclass
class BracketMatch:
    """Display view of a knockout match."""

    id: str
    round: str  # "quarterfinals" | "semifinals" | "finals"
    team_a_id: str
    team_b_id: str
    winner_id: Optional[str]
    score_a: Optional[int]
    score_b: Optional[int]
    status: str
    position: int  # index in the bracket listing
    map: str


def seed_pairs(seeded: Sequence[T]) -> List[Tuple[T, T]]:
    """
    Classic bracket seeding: best vs worst, working inwards.
      8 entries -> (1v8), (2v7), (3v6), (4v5)
      4 entries -> (1v4), (2v3)
    """
    n = len(seeded)
    return [(seeded[i], seeded[n - 1 - i]) for i in range(n // 2)]


def knockout_matches(session: Session, stage: Optional[KnockoutStage] = None) -> List[Match]:
    query = select(Match).where(Match.phase == PHASE_KNOCKOUT)
    if stage is not None:
        query = query.where(Match.knockout_stage == stage.value)
    matches = session.exec(query).all()
    return sorted(matches, key=lambda m: (KnockoutStage(m.knockout_stage).order, m.sequence_in_round))


def _create_stage_matches(
    session: Session, stage: KnockoutStage, pairs: Sequence[Tuple[str, str]], rng: random.Random
) -> List[Match]:
    matches = []
    for seq, (team_a_id, team_b_id) in enumerate(pairs, start=1):
        match = Match(
            phase=PHASE_KNOCKOUT,
            knockout_stage=stage.value,
            sequence_in_round=seq,
            team_a_id=team_a_id,
            team_b_id=team_b_id,
            map_name=pick_random_map(rng),
        )
        session.add(match)
        matches.append(match)
    return matches


def generate_bracket(session: Session, config: TournamentConfig, rng: random.Random) -> List[BracketMatch]:
    """Seed the knockout bracket from final standings. Caller commits."""
    if config.current_phase == PHASE_KNOCKOUT or knockout_matches(session):
        raise StateConflictError("Knockout bracket already generated")
    if not is_round_robin_complete(session, config):
        raise PhaseIncompleteError("Round-robin phase is not complete yet")

    standings = compute_standings(list_teams(session))
    qualified = [s.team for s in standings[: config.knockout_size]]
    if len(qualified) < 2:
        raise InsufficientTeamsError("Not enough teams for knockout phase")
    if len(qualified) not in SUPPORTED_BRACKET_SIZES:
        raise ValidationError(f"Unsupported knockout size: {len(qualified)}")

    stage = KnockoutStage.for_bracket_size(len(qualified))
    pairs = [(a.id, b.id) for a, b in seed_pairs(qualified)]
    _create_stage_matches(session, stage, pairs, rng)

    config.current_phase = PHASE_KNOCKOUT
    config.current_round = 0
    session.add(config)
    session.flush()

    logger.info(
        f"Knockout bracket generated: {len(qualified)} teams, starting at {stage.value} "
        f"({', '.join(t.name for t in qualified)})"
    )
    return get_bracket(session)


def advance_winner(session: Session, config: TournamentConfig, match: Match, rng: random.Random) -> List[Match]:
    """
    Once every match of match's stage is completed, create the next stage from
    its winners. Returns the created matches (empty if the stage is still running
    or the final was just decided).
    """
    stage = KnockoutStage(match.knockout_stage)
    stage_matches = knockout_matches(session, stage)
    if not all(m.is_completed for m in stage_matches):
        return []

    winners = [m.winner_id for m in stage_matches if m.winner_id]
    if len(winners) == 1:
        config.champion_id = winners[0]
        session.add(config)
        logger.info(f"Tournament complete: champion {winners[0]}")
        return []

    next_stage = stage.next_stage()
    if next_stage is None:
        return []
    if knockout_matches(session, next_stage):
        return []

    pairs = [(winners[i], winners[i + 1]) for i in range(0, len(winners) - 1, 2)]
    created = _create_stage_matches(session, next_stage, pairs, rng)
    logger.info(f"{stage.value} finished; {len(created)} {next_stage.value} match(es) created")
    return created


def record_bracket_result(
    session: Session, config: TournamentConfig, match_id: str, score_a: int, score_b: int, rng: random.Random
) -> Match:
    """Record a knockout result and advance the bracket. Team stats are left alone. Caller commits."""
    existing = session.get(Match, match_id)
    if existing is not None and existing.phase != PHASE_KNOCKOUT:
        raise ValidationError("This is not a knockout match")

    match = complete_match(session, match_id, score_a, score_b)
    session.flush()
    logger.info(f"Knockout result for match {match_id} ({match.knockout_stage}): {score_a}-{score_b}")

    advance_winner(session, config, match, rng)
    return match


def get_bracket(session: Session) -> List[BracketMatch]:
    return [
        BracketMatch(
            id=m.id,
            round=m.round_ref.label,
            team_a_id=m.team_a_id,
            team_b_id=m.team_b_id,
            winner_id=m.winner_id,
            score_a=m.score_a,
            score_b=m.score_b,
            status=m.status,
            position=idx,
            map=m.map_name,
        )
        for idx, m in enumerate(knockout_matches(session))
    ]
