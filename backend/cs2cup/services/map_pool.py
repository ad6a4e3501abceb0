"""
CS2 active duty map pool.
"""

import random
from typing import Tuple

CS2_MAP_POOL: Tuple[str, ...] = (
    "Ancient",
    "Dust2",
    "Inferno",
    "Mirage",
    "Nuke",
    "Overpass",
    "Train",
)


def pick_random_map(rng: random.Random) -> str:
    return rng.choice(CS2_MAP_POOL)
