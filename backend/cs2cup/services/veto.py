"""
Map veto state machine.

Six steps per match:
  step 0      ban 2 maps
  steps 1..4  ban 1 map each; after step 4 the single surviving map is frozen
              as the match map
  step 5      pick a starting side (T or CT), then the veto is completed

Even steps belong to the veto starter, odd steps to the other team. Callers
never say which team they are: the step parity decides whose turn it is.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from sqlmodel import Session

from cs2cup.errors import AlreadyCompletedError, NotFoundError, StateConflictError, ValidationError
from cs2cup.models.match import Match
from cs2cup.models.team import utc_now
from cs2cup.models.veto import SideChoice, TeamSide, VetoProgress, VetoStep
from cs2cup.services.map_pool import CS2_MAP_POOL, pick_random_map

logger = logging.getLogger(__name__)

TEAM_A: TeamSide = "teamA"
TEAM_B: TeamSide = "teamB"

FIRST_BAN_COUNT = 2
BAN_COUNT = 1
SIDE_STEP = 5
VALID_SIDES = ("T", "CT")


@dataclass
class VetoOutcome:
    progress: VetoProgress
    final_map: Optional[str] = None  # set when the last ban leaves one map
    side_choice: Optional[SideChoice] = None  # set when the veto completes


def initial_veto_progress() -> VetoProgress:
    return VetoProgress(available_maps=CS2_MAP_POOL)


def other_team(side: TeamSide) -> TeamSide:
    return TEAM_B if side == TEAM_A else TEAM_A


def team_on_turn(starter: TeamSide, step: int) -> TeamSide:
    return starter if step % 2 == 0 else other_team(starter)


def required_ban_count(step: int) -> int:
    return FIRST_BAN_COUNT if step == 0 else BAN_COUNT


def roll_veto(rng: random.Random) -> Dict[str, Any]:
    """Fresh veto fields for a match: random map, random starter, untouched progress."""
    return {
        "map_name": pick_random_map(rng),
        "veto_starter": rng.choice((TEAM_A, TEAM_B)),
        "veto_progress": initial_veto_progress().model_dump(mode="json"),
        "side_choice": None,
        "veto_rolled_at": utc_now(),
    }


def apply_veto_step(
    progress: VetoProgress,
    starter: TeamSide,
    banned_maps: Optional[Sequence[str]] = None,
    side_choice: Optional[str] = None,
) -> VetoOutcome:
    """Validate one step against progress and return the next state. progress is not modified."""
    if progress.completed:
        raise StateConflictError("Veto already completed")

    step = progress.current_step
    team = team_on_turn(starter, step)
    bans = list(banned_maps or [])

    if step == SIDE_STEP:
        return _apply_side_choice(progress, team, bans, side_choice)

    if side_choice is not None:
        raise ValidationError(f"Step {step} is a ban step; side choice is only made at step {SIDE_STEP}")

    expected = required_ban_count(step)
    if len(bans) != expected:
        raise ValidationError(f"Step {step} requires exactly {expected} map ban(s), got {len(bans)}")
    if len(set(bans)) != len(bans):
        raise ValidationError("The same map cannot be banned twice in one step")
    for name in bans:
        if name not in progress.available_maps:
            raise ValidationError(f"Map '{name}' is not available for banning")

    available = tuple(m for m in progress.available_maps if m not in bans)
    entry = VetoStep(step=step, team=team, action="ban", count=expected, banned_maps=tuple(bans))
    new_progress = progress.model_copy(
        update={
            "current_step": step + 1,
            "available_maps": available,
            "banned_maps": progress.banned_maps + tuple(bans),
            "steps": progress.steps + (entry,),
        }
    )

    final_map = None
    if new_progress.current_step == SIDE_STEP:
        if len(available) != 1:
            raise StateConflictError(f"Expected exactly one map after the last ban, found {len(available)}")
        final_map = available[0]

    return VetoOutcome(progress=new_progress, final_map=final_map)


def _apply_side_choice(
    progress: VetoProgress,
    team: TeamSide,
    bans: Sequence[str],
    side_choice: Optional[str],
) -> VetoOutcome:
    if bans:
        raise ValidationError(f"Step {SIDE_STEP} is the side choice; no maps can be banned")
    if side_choice not in VALID_SIDES:
        raise ValidationError('sideChoice must be "T" or "CT"')

    entry = VetoStep(step=SIDE_STEP, team=team, action="side", count=0, side_choice=side_choice)
    new_progress = progress.model_copy(
        update={
            "current_step": SIDE_STEP + 1,
            "completed": True,
            "steps": progress.steps + (entry,),
        }
    )
    return VetoOutcome(progress=new_progress, side_choice=SideChoice(starter=team, side=side_choice))


def execute_veto_step(
    session: Session,
    match_id: str,
    banned_maps: Optional[Sequence[str]] = None,
    side_choice: Optional[str] = None,
) -> Match:
    """Run one veto step on a stored match. Caller commits."""
    match = session.get(Match, match_id)
    if not match:
        raise NotFoundError("Match not found")
    if match.is_completed:
        raise AlreadyCompletedError("Match already completed; veto is closed")

    progress = match.get_veto_progress()
    if progress is None or match.veto_starter is None:
        raise StateConflictError("Match has no veto in progress")

    outcome = apply_veto_step(progress, match.veto_starter, banned_maps, side_choice)

    updates: Dict[str, Any] = {"veto_progress": outcome.progress.model_dump(mode="json")}
    if outcome.final_map is not None:
        updates["map_name"] = outcome.final_map
    if outcome.side_choice is not None:
        updates["side_choice"] = outcome.side_choice.model_dump(mode="json")
    match.sqlmodel_update(updates)
    session.add(match)

    last = outcome.progress.steps[-1]
    logger.info(
        f"Veto step {last.step} on match {match_id}: {last.team} "
        f"{last.action} {list(last.banned_maps) or last.side_choice}"
    )
    if outcome.final_map is not None:
        logger.info(f"Match {match_id} will be played on {outcome.final_map}")
    return match


def reroll_veto_and_side(session: Session, match_id: str, rng: random.Random) -> Match:
    """Admin escape hatch: redraw starter and map, restart the veto from step 0."""
    match = session.get(Match, match_id)
    if not match:
        raise NotFoundError("Match not found")
    if match.is_completed:
        raise AlreadyCompletedError("Match already completed; cannot reroll veto")

    match.sqlmodel_update(roll_veto(rng))
    session.add(match)
    logger.info(f"Veto rerolled for match {match_id}: starter={match.veto_starter}, map={match.map_name}")
    return match
