"""
Tests for standings: wins, then round difference, then rounds scored.
"""

from cs2cup.models.team import Team
from cs2cup.services.standings import buchholz_score, compute_standings


def _team(name: str, wins=0, points=0, scored=0, history=None) -> Team:
    return Team(
        id=name,
        name=name,
        name_key=name.lower(),
        total_wins=wins,
        total_points=points,
        total_scored=scored,
        match_history=history or [],
    )


class TestComputeStandings:
    def test_empty(self):
        assert compute_standings([]) == []

    def test_wins_first(self):
        teams = [_team("A", wins=1, points=20), _team("B", wins=2, points=-5)]
        assert [s.team.name for s in compute_standings(teams)] == ["B", "A"]

    def test_round_difference_breaks_win_ties(self):
        teams = [_team("A", wins=2, points=3), _team("B", wins=2, points=9)]
        assert [s.team.name for s in compute_standings(teams)] == ["B", "A"]

    def test_rounds_scored_breaks_difference_ties(self):
        teams = [_team("A", wins=2, points=4, scored=20), _team("B", wins=2, points=4, scored=26)]
        assert [s.team.name for s in compute_standings(teams)] == ["B", "A"]

    def test_full_ties_keep_store_order(self):
        teams = [_team(name, wins=1, points=2, scored=10) for name in ("C", "A", "B")]
        assert [s.team.name for s in compute_standings(teams)] == ["C", "A", "B"]
        assert [s.team.name for s in compute_standings(teams)] == ["C", "A", "B"]

    def test_ranks_and_fields(self):
        teams = [_team("A", wins=0, points=-8, scored=5), _team("B", wins=1, points=8, scored=13)]
        first, second = compute_standings(teams)
        assert (first.rank, first.team.name, first.match_wins, first.round_difference, first.rounds_scored) == (
            1,
            "B",
            1,
            8,
            13,
        )
        assert second.rank == 2

    def test_buchholz_sums_opponent_wins(self):
        a = _team("A", wins=1, history=["B", "C"])
        b = _team("B", wins=2)
        c = _team("C", wins=3)
        assert buchholz_score(a, {"A": 1, "B": 2, "C": 3}) == 5
        standing_a = next(s for s in compute_standings([a, b, c]) if s.team.name == "A")
        assert standing_a.buchholz_score == 5


class TestEngineStandings:
    def test_no_teams(self, engine):
        assert engine.get_standings() == []

    def test_mid_tournament(self, engine, register):
        register("A", "B", "C", "D")
        matches = engine.generate_round()
        engine.record_match_result(matches[0].id, 13, 7)
        standings = engine.get_standings()
        assert len(standings) == 4
        assert standings[0].team.id == matches[0].team_a_id
        assert standings[0].match_wins == 1
        assert standings[-1].team.id == matches[0].team_b_id

    def test_after_full_round_robin_matches_registration_order(self, engine, register, play_round_robin):
        teams = register("A", "B", "C", "D", "E")
        play_round_robin()
        standings = engine.get_standings()
        assert [s.team.id for s in standings] == [t.id for t in teams]
        assert [s.match_wins for s in standings] == [4, 3, 2, 1, 0]
