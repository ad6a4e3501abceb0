import random
from typing import Callable, List

import pytest
from fastapi.testclient import TestClient

from cs2cup.main import create_app
from cs2cup.models.team import Team
from cs2cup.tournament_engine import TournamentEngine

TEST_SEED = 1234

# ============================================================================
# Engine Setup
# ============================================================================
# Every test gets its own TournamentEngine: a fresh in-memory store and a
# seeded random source, so map draws and veto starters are reproducible.


@pytest.fixture(name="engine")
def engine_fixture() -> TournamentEngine:
    return TournamentEngine(rng=random.Random(TEST_SEED))


@pytest.fixture(name="client")
def client_fixture(engine: TournamentEngine):
    """Test client whose routes run against the per-test engine"""
    app = create_app(engine=engine)

    with TestClient(app) as client:
        yield client


@pytest.fixture
def register(engine: TournamentEngine) -> Callable[..., List[Team]]:
    """register("A", "B", ...) -> teams in registration order"""

    def _register(*names: str) -> List[Team]:
        return [engine.add_team(name) for name in names]

    return _register


@pytest.fixture
def play_round_robin(engine: TournamentEngine) -> Callable[[], None]:
    """
    Play every round-robin round. The earlier-registered team always wins
    13-5, so final standings equal registration order.
    """

    def _play() -> None:
        order = {t.id: t.registration_index for t in engine.list_teams()}
        for _ in range(engine.get_config().swiss_rounds):
            for match in engine.generate_round():
                if order[match.team_a_id] < order[match.team_b_id]:
                    engine.record_match_result(match.id, 13, 5)
                else:
                    engine.record_match_result(match.id, 5, 13)

    return _play
