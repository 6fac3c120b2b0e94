import random
from typing import List, Sequence

from ..errors import ConfigurationError
from ..evaluation import tour_length
from ..geometry import Metric
from ..population import Individual


def tournament_selection(
    population: Sequence[Individual],
    metric: Metric,
    tournament_size: int,
    rng: random.Random,
) -> int:
    """Return the index of the shortest tour among ``tournament_size`` distinct draws."""
    if not 1 <= tournament_size <= len(population):
        raise ConfigurationError(
            f"tournament_size={tournament_size} must be between 1 and the "
            f"population size ({len(population)})"
        )
    participants: List[int] = []
    while len(participants) < tournament_size:
        idx = rng.randrange(len(population))
        if idx not in participants:
            participants.append(idx)
    return min(participants, key=lambda i: tour_length(population[i], metric))
