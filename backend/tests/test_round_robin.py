"""
Tests for the circle-method round-robin schedule.
"""

import random
from collections import Counter
from itertools import combinations

import pytest

from cs2cup.errors import AllRoundsCompleteError, NoTeamsError, StateConflictError
from cs2cup.models.tournament_config import round_robin_round_count
from cs2cup.services.round_robin import pair_entries, rr_pairings_by_round, sit_outs_by_round
from cs2cup.tournament_engine import TournamentEngine


class TestPairingPlan:
    @pytest.mark.parametrize("n", range(2, 13))
    def test_every_pair_meets_exactly_once(self, n):
        pairs = Counter(frozenset((a, b)) for _, _, a, b in rr_pairings_by_round(n))
        assert set(pairs) == {frozenset(p) for p in combinations(range(n), 2)}
        assert all(count == 1 for count in pairs.values())

    @pytest.mark.parametrize("n, expected", [(2, 1), (3, 3), (4, 3), (5, 5), (6, 5), (7, 7), (8, 7)])
    def test_round_count(self, n, expected):
        rounds = {r for r, _, _, _ in rr_pairings_by_round(n)}
        assert round_robin_round_count(n) == expected
        assert rounds == set(range(1, expected + 1))

    @pytest.mark.parametrize("n", [2, 4, 6, 8, 10])
    def test_even_nobody_sits_out(self, n):
        assert all(idxs == [] for idxs in sit_outs_by_round(n).values())

    @pytest.mark.parametrize("n", [3, 5, 7, 9])
    def test_odd_exactly_one_sits_out_per_round_and_each_team_once(self, n):
        sit_outs = sit_outs_by_round(n)
        assert all(len(idxs) == 1 for idxs in sit_outs.values())
        assert sorted(idx for idxs in sit_outs.values() for idx in idxs) == list(range(n))

    @pytest.mark.parametrize("n", range(2, 11))
    def test_nobody_plays_twice_in_a_round(self, n):
        seen = Counter()
        for r, _, a, b in rr_pairings_by_round(n):
            seen[(r, a)] += 1
            seen[(r, b)] += 1
        assert max(seen.values()) == 1

    def test_four_teams_plan(self):
        assert rr_pairings_by_round(4) == [
            (1, 1, 0, 3),
            (1, 2, 1, 2),
            (2, 1, 0, 2),
            (2, 2, 3, 1),
            (3, 1, 0, 1),
            (3, 2, 2, 3),
        ]

    def test_fewer_than_two_is_empty(self):
        assert rr_pairings_by_round(0) == []
        assert rr_pairings_by_round(1) == []

    def test_pair_entries_maps_positions(self):
        assert pair_entries(["A", "B", "C"]) == [
            (1, 1, "B", "C"),
            (2, 1, "A", "C"),
            (3, 1, "A", "B"),
        ]


class TestGenerateRound:
    def test_four_teams_three_rounds_two_matches(self, engine, register):
        register("A", "B", "C", "D")
        met = Counter()
        for round_num in range(1, 4):
            matches = engine.generate_round()
            assert len(matches) == 2
            assert {m.round_number for m in matches} == {round_num}
            assert engine.get_config().current_round == round_num
            for m in matches:
                assert "BYE" not in (m.team_a_id, m.team_b_id)
                met[frozenset((m.team_a_id, m.team_b_id))] += 1
        assert len(met) == 6
        assert all(count == 1 for count in met.values())
        with pytest.raises(AllRoundsCompleteError):
            engine.generate_round()

    def test_three_teams_each_sits_out_once(self, engine, register):
        teams = register("A", "B", "C")
        sat_out = Counter()
        for _ in range(3):
            matches = engine.generate_round()
            assert len(matches) == 1
            playing = {matches[0].team_a_id, matches[0].team_b_id}
            sat_out.update(t.id for t in teams if t.id not in playing)
        assert sat_out == Counter({t.id: 1 for t in teams})
        assert engine.get_config().swiss_rounds == 3

    def test_schedule_generated_once_up_front(self, engine, register):
        register("A", "B", "C", "D", "E")
        engine.generate_round()
        all_matches = engine.list_matches()
        assert len(all_matches) == 10
        engine.generate_round()
        assert [m.id for m in engine.list_matches()] == [m.id for m in all_matches]

    def test_matches_start_pending_with_map_and_veto(self, engine, register):
        register("A", "B")
        (match,) = engine.generate_round()
        assert match.status == "pending"
        assert match.score_a is None and match.winner_id is None
        assert match.veto_starter in ("teamA", "teamB")
        assert match.map_name in engine.map_pool()
        assert match.veto_progress["current_step"] == 0
        assert len(match.veto_progress["available_maps"]) == 7

    def test_seeded_random_source_is_reproducible(self, engine, register):
        other = TournamentEngine(rng=random.Random(1234))
        for name in ("A", "B", "C", "D"):
            other.add_team(name)
        register("A", "B", "C", "D")
        ours = [(m.map_name, m.veto_starter) for m in engine.generate_round()]
        theirs = [(m.map_name, m.veto_starter) for m in other.generate_round()]
        assert ours == theirs

    def test_requires_two_teams(self, engine, register):
        with pytest.raises(NoTeamsError):
            engine.generate_round()
        register("Solo")
        with pytest.raises(NoTeamsError, match="At least 2 teams required"):
            engine.generate_round()

    def test_registration_closes_once_schedule_exists(self, engine, register):
        register("A", "B")
        engine.generate_round()
        with pytest.raises(StateConflictError):
            engine.add_team("Late")
        assert engine.get_config().total_teams == 2
