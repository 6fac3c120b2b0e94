"""Edge recombination crossover (ERX) for permutation tours.

The edge table records, for every point, the points it sits next to in either
parent. Parents are read as open paths: the first and last points of a parent
are not neighbours of each other. Offspring are built by a greedy walk that
always moves to the neighbour with the fewest remaining neighbours.
"""

import random
from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from ..errors import InvariantViolation
from ..geometry import Point
from ..population import Individual


# Neighbour collections are dicts used as insertion-ordered sets.
EdgeTable = Dict[int, Dict[int, None]]


def _arena_indices(parent_a: Sequence[Point], parent_b: Sequence[Point]) -> List[int]:
    """Map every position of ``parent_b`` to the matching position of ``parent_a``.

    Coincident points are paired in order of appearance so that every slot of
    ``parent_a`` is claimed exactly once.
    """
    if len(parent_a) != len(parent_b):
        raise InvariantViolation(
            f"parents differ in length: {len(parent_a)} != {len(parent_b)}"
        )
    slots: Dict[Point, List[int]] = defaultdict(list)
    for idx in reversed(range(len(parent_a))):
        slots[parent_a[idx]].append(idx)
    mapping = []
    for point in parent_b:
        if not slots.get(point):
            raise InvariantViolation(f"{point} of the second parent is not in the first")
        mapping.append(slots[point].pop())
    return mapping


def _neighbours(sequence: Sequence[int], i: int) -> List[int]:
    neighbours = []
    if i > 0:
        neighbours.append(sequence[i - 1])
    if i < len(sequence) - 1:
        neighbours.append(sequence[i + 1])
    return neighbours


def build_edge_table(parent_a: Sequence[Point], parent_b: Sequence[Point]) -> EdgeTable:
    """Adjacency of every point of ``parent_a`` (by position) in both parents."""
    seq_a = list(range(len(parent_a)))
    seq_b = _arena_indices(parent_a, parent_b)
    table: EdgeTable = {idx: {} for idx in seq_a}
    for sequence in (seq_a, seq_b):
        for i, idx in enumerate(sequence):
            for neighbour in _neighbours(sequence, i):
                table[idx][neighbour] = None
    return table


def edge_recombination(
    parent_a: Sequence[Point], parent_b: Sequence[Point], rng: random.Random
) -> Individual:
    n = len(parent_a)
    table = build_edge_table(parent_a, parent_b)
    if n == 0:
        return []

    current = rng.randrange(n)
    child = [current]
    placed = {current}
    while len(child) < n:
        for neighbours in table.values():
            neighbours.pop(current, None)

        if table[current]:
            nxt = min(table[current], key=lambda idx: len(table[idx]))
        else:
            unvisited = [idx for idx in range(n) if idx not in placed]
            if not unvisited:
                raise InvariantViolation(
                    f"no unplaced point left with {len(child)} of {n} placed"
                )
            nxt = rng.choice(unvisited)

        child.append(nxt)
        placed.add(nxt)
        current = nxt
    return [parent_a[idx] for idx in child]


def crossover(
    parent_a: Sequence[Point],
    parent_b: Sequence[Point],
    p_crossover: float,
    rng: random.Random,
) -> Tuple[Individual, Individual]:
    if rng.random() < p_crossover:
        child_a = edge_recombination(parent_a, parent_b, rng)
        child_b = edge_recombination(parent_a, parent_b, rng)
        return child_a, child_b
    return list(parent_a), list(parent_b)
