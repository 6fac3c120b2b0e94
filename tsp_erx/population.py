import random
from collections import Counter
from typing import List, Sequence

from .errors import InvariantViolation
from .geometry import Point


Individual = List[Point]
Population = List[Individual]


def initialize_population(
    n_population: int, points: Sequence[Point], rng: random.Random
) -> Population:
    population: Population = []
    for _ in range(n_population):
        individual = list(points)
        rng.shuffle(individual)
        population.append(individual)
    return population


def check_permutation(individual: Sequence[Point], reference: Sequence[Point]) -> None:
    if len(individual) != len(reference):
        raise InvariantViolation(
            f"tour has {len(individual)} points, expected {len(reference)}"
        )
    have = Counter(individual)
    want = Counter(reference)
    if have != want:
        duplicated = sorted((have - want).keys(), key=lambda p: (p.x, p.y))
        missing = sorted((want - have).keys(), key=lambda p: (p.x, p.y))
        raise InvariantViolation(
            f"tour is not a permutation: duplicated={duplicated} missing={missing}"
        )
