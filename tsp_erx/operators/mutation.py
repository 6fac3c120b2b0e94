import random
from typing import Sequence

from ..geometry import Point
from ..population import Individual


def swap_mutation(individual: Sequence[Point], p_mutation: float, rng: random.Random) -> Individual:
    """Swap two positions with probability ``p_mutation``; ``i == j`` is a valid no-op."""
    child = list(individual)
    if rng.random() < p_mutation and child:
        i = rng.randrange(len(child))
        j = rng.randrange(len(child))
        child[i], child[j] = child[j], child[i]
    return child
