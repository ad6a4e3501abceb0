"""
Round-robin schedule: the whole group stage is generated in one pass on the
first round request; later requests only reveal the next stored round.
"""

import logging
import random
from typing import List, Sequence

from sqlmodel import Session, select

from cs2cup.errors import AllRoundsCompleteError, NoTeamsError, StateConflictError
from cs2cup.models.match import Match
from cs2cup.models.round_ref import PHASE_KNOCKOUT, PHASE_ROUND_ROBIN
from cs2cup.models.team import Team
from cs2cup.models.tournament_config import TournamentConfig
from cs2cup.services.round_robin import pair_entries, sit_outs_by_round
from cs2cup.services.veto import roll_veto

logger = logging.getLogger(__name__)


def list_teams(session: Session) -> List[Team]:
    """All teams in store (registration) order."""
    return list(session.exec(select(Team).order_by(Team.registration_index)).all())


def round_robin_matches(session: Session) -> List[Match]:
    return list(
        session.exec(
            select(Match)
            .where(Match.phase == PHASE_ROUND_ROBIN)
            .order_by(Match.round_number, Match.sequence_in_round)
        ).all()
    )


def matches_for_round(session: Session, round_number: int) -> List[Match]:
    return list(
        session.exec(
            select(Match)
            .where(Match.phase == PHASE_ROUND_ROBIN, Match.round_number == round_number)
            .order_by(Match.sequence_in_round)
        ).all()
    )


def schedule_exists(session: Session) -> bool:
    return session.exec(select(Match.id).where(Match.phase == PHASE_ROUND_ROBIN)).first() is not None


def generate_all_rounds(
    session: Session, config: TournamentConfig, teams: Sequence[Team], rng: random.Random
) -> List[Match]:
    """Create every round-robin match for teams (circle method). Caller commits."""
    if len(teams) < 2:
        raise NoTeamsError("At least 2 teams required")

    matches: List[Match] = []
    for round_num, seq, team_a, team_b in pair_entries(list(teams)):
        match = Match(
            phase=PHASE_ROUND_ROBIN,
            round_number=round_num,
            sequence_in_round=seq,
            team_a_id=team_a.id,
            team_b_id=team_b.id,
            **roll_veto(rng),
        )
        session.add(match)
        matches.append(match)
        logger.debug(f"Round {round_num} match {seq}: {team_a.name} vs {team_b.name}")

    for round_num, idxs in sit_outs_by_round(len(teams)).items():
        for idx in idxs:
            logger.debug(f"Round {round_num}: {teams[idx].name} sits out")

    total_rounds = max(m.round_number for m in matches)
    config.swiss_rounds = total_rounds
    session.add(config)

    logger.info(f"Generated round-robin schedule: {len(teams)} teams, {total_rounds} rounds, {len(matches)} matches")
    return matches


def generate_round(session: Session, config: TournamentConfig, rng: random.Random) -> List[Match]:
    """Advance to the next round-robin round and return its matches. Caller commits."""
    if config.current_phase == PHASE_KNOCKOUT:
        raise StateConflictError("Round-robin phase is over; the knockout bracket is running")

    teams = list_teams(session)
    if len(teams) < 2:
        raise NoTeamsError("At least 2 teams required")

    if not schedule_exists(session):
        generate_all_rounds(session, config, teams, rng)
        session.flush()

    next_round = config.current_round + 1
    if next_round > config.swiss_rounds:
        raise AllRoundsCompleteError("All rounds are completed. The group stage is finished!")

    config.current_round = next_round
    session.add(config)

    matches = matches_for_round(session, next_round)
    logger.info(f"Round {next_round}/{config.swiss_rounds} started with {len(matches)} matches")
    return matches


def is_round_robin_complete(session: Session, config: TournamentConfig) -> bool:
    """All rounds revealed and every round-robin match completed."""
    matches = round_robin_matches(session)
    if not matches:
        return False
    return config.current_round >= config.swiss_rounds and all(m.is_completed for m in matches)
