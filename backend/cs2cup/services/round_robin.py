"""
Round-Robin Pairing Rules (circle method)

Single source of truth for the group-stage pairing plan. Pure functions,
no database access: positions are 0-based indexes into the registration
order of the teams.
"""

from typing import Dict, List, Sequence, Tuple, TypeVar

from cs2cup.models.tournament_config import round_robin_round_count

T = TypeVar("T")

# (round_index, sequence_in_round, idx_a, idx_b); round_index and sequence are 1-based
Pairing = Tuple[int, int, int, int]


def rr_pairings_by_round(team_count: int) -> List[Pairing]:
    """
    Round-robin pairings. Returns list of (round_index, sequence_in_round, idx_a, idx_b).

    Circle method: for odd n a placeholder slot is added so the working list
    has even size m. Slot 0 stays fixed, all other slots rotate by one after
    every round. Each round pairs slot i with slot m-1-i for i in [0, m/2).
    Pairings against the placeholder are dropped: that team sits out.

    Even n: n-1 rounds, everyone plays every round.
    Odd n: n rounds, exactly one team sits out per round.
    """
    if team_count < 2:
        return []

    n = team_count
    m = n + 1 if n % 2 == 1 else n
    placeholder = n if n % 2 == 1 else -1
    half = m // 2

    positions = list(range(m))
    result: List[Pairing] = []

    for round_num in range(1, round_robin_round_count(n) + 1):
        seq = 0
        for i in range(half):
            a, b = positions[i], positions[m - 1 - i]
            if a == placeholder or b == placeholder:
                continue
            seq += 1
            result.append((round_num, seq, a, b))
        # Rotate everything but slot 0 one step to the right
        positions = [positions[0], positions[-1]] + positions[1:-1]

    return result


def sit_outs_by_round(team_count: int) -> Dict[int, List[int]]:
    """Positions that do not play in each round (empty lists for even n)."""
    playing: Dict[int, set] = {r: set() for r in range(1, round_robin_round_count(team_count) + 1)}
    for round_num, _, a, b in rr_pairings_by_round(team_count):
        playing[round_num].update((a, b))
    return {
        r: [idx for idx in range(team_count) if idx not in seen]
        for r, seen in playing.items()
    }


def pair_entries(entries: Sequence[T]) -> List[Tuple[int, int, T, T]]:
    """Apply the pairing plan to concrete entries (teams, ids, names...)."""
    return [
        (round_num, seq, entries[a], entries[b])
        for round_num, seq, a, b in rr_pairings_by_round(len(entries))
    ]
