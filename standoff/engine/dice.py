# standoff/engine/dice.py
import random
from typing import Union


def rng_for(seed: int, turn: Union[int, str]) -> random.Random:
    # deterministic per room seed + turn
    return random.Random(f"{seed}:{turn}")


def chance(probability: float, r: random.Random) -> bool:
    # a zero chance never consumes a roll
    if probability <= 0:
        return False
    return r.random() < probability
