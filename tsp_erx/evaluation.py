from dataclasses import dataclass, field
from typing import Sequence, Tuple

from .errors import EmptyPopulationError
from .geometry import Metric, Point
from .population import Individual


def tour_length(tour: Sequence[Point], metric: Metric = Metric.EUCLIDEAN) -> float:
    dist = 0.0
    n = len(tour)
    if n < 2:
        return dist
    for i in range(n):
        a = tour[i]
        b = tour[(i + 1) % n]
        dist += metric(a, b)
    return float(dist)


def fittest(
    population: Sequence[Individual], metric: Metric = Metric.EUCLIDEAN
) -> Tuple[float, Individual]:
    """Return ``(length, individual)`` of the shortest tour, first one on ties."""
    if not population:
        raise EmptyPopulationError("cannot select the fittest of an empty population")
    best_fitness = float("inf")
    best_individual = population[0]
    for individual in population:
        fitness = tour_length(individual, metric)
        if fitness < best_fitness:
            best_fitness = fitness
            best_individual = individual
    return best_fitness, best_individual


@dataclass
class BestRecord:
    fitness: float = float("inf")
    individual: Individual = field(default_factory=list)

    def update(self, fitness: float, individual: Individual) -> bool:
        # Ties keep the incumbent.
        if fitness < self.fitness:
            self.fitness = fitness
            self.individual = individual
            return True
        return False
