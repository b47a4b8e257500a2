"""
Dice rolls.
"""

import random
from typing import List, Optional


def roll(quantity: int = 1, faces: int = 6, rng: Optional[random.Random] = None) -> List[int]:
    """Roll `quantity` dice with `faces` sides each."""
    rng = rng or random
    return [rng.randint(1, faces) for _ in range(quantity)]


def is_doubles(dice: Optional[List[int]]) -> bool:
    """Check if a two-dice roll shows the same value twice."""
    return bool(dice) and len(dice) == 2 and dice[0] == dice[1]
