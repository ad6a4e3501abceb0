"""
Tournament engine: the single entry point for every tournament operation.

One engine owns one in-memory store and one random source. Operations are
serialized by a lock and each runs in a single session that is committed
only when the whole operation succeeded, so a failed operation leaves the
store untouched.
"""

import logging
import random
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

from sqlalchemy.engine import Engine
from sqlmodel import Session, func, select

from cs2cup.database import build_engine, open_session, reset_db
from cs2cup.errors import DuplicateNameError, NotFoundError, StateConflictError, ValidationError
from cs2cup.models.match import Match
from cs2cup.models.round_ref import PHASE_KNOCKOUT, PHASE_ROUND_ROBIN
from cs2cup.models.team import Team, normalize_team_name
from cs2cup.models.tournament_config import (
    CONFIG_ID,
    TournamentConfig,
    knockout_size_for,
    round_robin_round_count,
)
from cs2cup.services import bracket_service, match_results, schedule_service, veto
from cs2cup.services.bracket_service import BracketMatch
from cs2cup.services.map_pool import CS2_MAP_POOL
from cs2cup.services.standings import Standing, compute_standings
from cs2cup.settings import Settings

logger = logging.getLogger(__name__)


class TournamentEngine:
    def __init__(self, rng: Optional[random.Random] = None, sql_echo: bool = False):
        self.rng = rng or random.Random()
        self.db: Engine = build_engine(echo=sql_echo)
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "TournamentEngine":
        return cls(rng=settings.build_rng(), sql_echo=settings.sql_echo)

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """Serialized session; commits only if the block raised nothing."""
        with self._lock, open_session(self.db) as session:
            yield session
            session.commit()

    @contextmanager
    def _read(self) -> Iterator[Session]:
        with self._lock, open_session(self.db) as session:
            yield session

    @staticmethod
    def _config(session: Session) -> TournamentConfig:
        config = session.get(TournamentConfig, CONFIG_ID)
        if config is None:
            config = TournamentConfig(id=CONFIG_ID)
            session.add(config)
        return config

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def add_team(self, name: str) -> Team:
        display_name = (name or "").strip()
        if not display_name:
            raise ValidationError("Team name is required")

        with self._transaction() as session:
            key = normalize_team_name(display_name)
            if session.exec(select(Team).where(Team.name_key == key)).first():
                raise DuplicateNameError("Team name already exists")
            if schedule_service.schedule_exists(session):
                raise StateConflictError("Registration is closed; the schedule has already been generated")

            count = session.exec(select(func.count()).select_from(Team)).one()
            team = Team(name=display_name, name_key=key, registration_index=count)
            session.add(team)

            total = count + 1
            config = self._config(session)
            config.sqlmodel_update(
                {
                    "total_teams": total,
                    "swiss_rounds": round_robin_round_count(total),
                    "knockout_size": knockout_size_for(total),
                }
            )
            session.add(config)

        logger.info(f"Team registered: {team.name} ({team.id}), {total} teams total")
        return team

    def list_teams(self) -> List[Team]:
        with self._read() as session:
            return schedule_service.list_teams(session)

    def get_team(self, team_id: str) -> Team:
        with self._read() as session:
            team = session.get(Team, team_id)
            if not team:
                raise NotFoundError("Team not found")
            return team

    # ------------------------------------------------------------------
    # Round-robin phase
    # ------------------------------------------------------------------

    def generate_round(self) -> List[Match]:
        with self._transaction() as session:
            return schedule_service.generate_round(session, self._config(session), self.rng)

    def get_standings(self) -> List[Standing]:
        with self._read() as session:
            return compute_standings(schedule_service.list_teams(session))

    def record_match_result(self, match_id: str, score_a: int, score_b: int) -> Match:
        """Record a result; knockout matches also advance the bracket."""
        with self._transaction() as session:
            match = session.get(Match, match_id)
            if match is not None and match.phase == PHASE_KNOCKOUT:
                return bracket_service.record_bracket_result(
                    session, self._config(session), match_id, score_a, score_b, self.rng
                )
            return match_results.record_match_result(session, match_id, score_a, score_b)

    # ------------------------------------------------------------------
    # Veto
    # ------------------------------------------------------------------

    def execute_veto_step(
        self,
        match_id: str,
        banned_maps: Optional[Sequence[str]] = None,
        side_choice: Optional[str] = None,
    ) -> Match:
        with self._transaction() as session:
            return veto.execute_veto_step(session, match_id, banned_maps, side_choice)

    def reroll_veto_and_side(self, match_id: str) -> Match:
        with self._transaction() as session:
            return veto.reroll_veto_and_side(session, match_id, self.rng)

    # ------------------------------------------------------------------
    # Knockout phase
    # ------------------------------------------------------------------

    def generate_bracket(self) -> List[BracketMatch]:
        with self._transaction() as session:
            return bracket_service.generate_bracket(session, self._config(session), self.rng)

    def get_bracket(self) -> List[BracketMatch]:
        with self._read() as session:
            return bracket_service.get_bracket(session)

    # ------------------------------------------------------------------
    # Matches, config, reset
    # ------------------------------------------------------------------

    def get_match(self, match_id: str) -> Match:
        with self._read() as session:
            match = session.get(Match, match_id)
            if not match:
                raise NotFoundError("Match not found")
            return match

    def list_matches(self, phase: Optional[str] = None) -> List[Match]:
        with self._read() as session:
            if phase == PHASE_ROUND_ROBIN:
                return schedule_service.round_robin_matches(session)
            if phase == PHASE_KNOCKOUT:
                return bracket_service.knockout_matches(session)
            return schedule_service.round_robin_matches(session) + bracket_service.knockout_matches(session)

    def current_matches(self) -> List[Match]:
        """Matches of the round being played: the current round-robin round, or the live knockout stage."""
        with self._read() as session:
            config = self._config(session)
            if config.current_phase == PHASE_KNOCKOUT:
                knockout = bracket_service.knockout_matches(session)
                if not knockout:
                    return []
                latest = knockout[-1].knockout_stage
                return [m for m in knockout if m.knockout_stage == latest]
            return schedule_service.matches_for_round(session, config.current_round)

    def get_config(self) -> TournamentConfig:
        with self._read() as session:
            config = self._config(session)
            return TournamentConfig.model_validate(config.model_dump())

    def map_pool(self) -> List[str]:
        return list(CS2_MAP_POOL)

    def reset(self) -> None:
        with self._lock:
            reset_db(self.db)
        logger.info("Tournament reset")

