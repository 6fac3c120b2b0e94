import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError, EmptyPopulationError
from .evaluation import BestRecord, fittest, tour_length
from .geometry import Metric, Point, random_points
from .operators import crossover, swap_mutation, tournament_selection
from .population import Individual, Population, check_permutation, initialize_population


logger = logging.getLogger(__name__)

MAX_POPULATION = 100
MAX_ITERATIONS = 1000


@dataclass(frozen=True)
class TSPConfig:
    n_population: int = 100
    p_mutation: float = 0.2
    p_crossover: float = 0.8
    n_iter: int = 1000
    tournament_size: int = 10
    number_of_children: int = 2
    n_points: int = 10
    metric: Metric = Metric.EUCLIDEAN
    random_seed: Optional[int] = None

    def __post_init__(self):
        if self.n_population <= 0:
            raise ConfigurationError(f"n_population must be positive, got {self.n_population}")
        for name in ("p_mutation", "p_crossover"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")
        if not 1 <= self.tournament_size <= self.n_population:
            raise ConfigurationError(
                f"tournament_size must be in [1, {self.n_population}], got {self.tournament_size}"
            )
        if self.number_of_children < 2:
            raise ConfigurationError(
                f"number_of_children must be at least 2, got {self.number_of_children}"
            )
        offspring = self.offspring_size
        if offspring == 0:
            raise ConfigurationError(
                f"number_of_children={self.number_of_children} leaves no parent pairs "
                f"in a population of {self.n_population}"
            )
        if self.tournament_size > offspring:
            raise ConfigurationError(
                f"tournament_size={self.tournament_size} exceeds the {offspring} individuals "
                f"each generation after the first holds"
            )
        if self.n_iter <= 0:
            raise ConfigurationError(f"n_iter must be positive, got {self.n_iter}")
        if self.n_points < 0:
            raise ConfigurationError(f"n_points must not be negative, got {self.n_points}")
        if not isinstance(self.metric, Metric):
            raise ConfigurationError(f"metric must be a Metric, got {self.metric!r}")

    @property
    def offspring_size(self) -> int:
        """Size of every generation produced by :func:`run_step`."""
        return 2 * (self.n_population // self.number_of_children)

    def make_rng(self) -> random.Random:
        return random.Random(self.random_seed)


@dataclass
class RunResult:
    best_fitness: float
    best_individual: Individual
    generations: int
    best_history: List[float] = field(default_factory=list)
    mean_history: List[float] = field(default_factory=list)

    def gap(self, optimum: Optional[float]) -> float:
        if optimum is None or np.isclose(optimum, 0.0):
            return float("inf")
        return (self.best_fitness - optimum) / optimum


def initialize(
    config: TSPConfig, seed_points: Optional[Sequence[Point]], rng: random.Random
) -> Population:
    """Create ``config.n_population`` shuffles of ``seed_points``.

    Without seed points, ``config.n_points`` random points are generated first.
    """
    if seed_points is None:
        seed_points = random_points(config.n_points, rng)
    return initialize_population(config.n_population, seed_points, rng)


def evaluate(population: Sequence[Individual], metric: Metric = Metric.EUCLIDEAN) -> Tuple[float, Individual]:
    return fittest(population, metric)


def run_step(config: TSPConfig, population: Sequence[Individual], rng: random.Random) -> Population:
    """Produce the next generation from ``population``.

    Only the first two tournament winners of each mating pool breed, so the
    result holds ``2 * (n_population // number_of_children)`` individuals.
    """
    new_generation: Population = []
    for _ in range(config.offspring_size // 2):
        mating_pool = [
            tournament_selection(population, config.metric, config.tournament_size, rng)
            for _ in range(config.number_of_children)
        ]
        parent_a = population[mating_pool[0]]
        parent_b = population[mating_pool[1]]
        child_a, child_b = crossover(parent_a, parent_b, config.p_crossover, rng)
        child_a = swap_mutation(child_a, config.p_mutation, rng)
        child_b = swap_mutation(child_b, config.p_mutation, rng)
        if __debug__:
            check_permutation(child_a, parent_a)
            check_permutation(child_b, parent_a)
        new_generation.append(child_a)
        new_generation.append(child_b)
    return new_generation


step = run_step


def check_batch_limits(config: TSPConfig) -> None:
    if config.n_population > MAX_POPULATION:
        raise ConfigurationError(
            f"Population size {config.n_population} is greater than {MAX_POPULATION}"
        )
    if config.n_iter > MAX_ITERATIONS:
        raise ConfigurationError(
            f"Number of iterations {config.n_iter} is greater than {MAX_ITERATIONS}"
        )


def run(
    config: TSPConfig,
    seed_points: Optional[Sequence[Point]] = None,
    rng: Optional[random.Random] = None,
    on_generation: Optional[Callable[[int, float, Individual], None]] = None,
) -> RunResult:
    """Evolve for ``config.n_iter`` generations, the initial population included."""
    check_batch_limits(config)
    rng = rng or config.make_rng()

    generation = initialize(config, seed_points, rng)
    best = BestRecord()
    best.update(*fittest(generation, config.metric))
    best_history = [best.fitness]
    mean_history = [_mean_length(generation, config.metric)]

    for i in range(1, config.n_iter):
        generation = run_step(config, generation, rng)
        best.update(*fittest(generation, config.metric))
        best_history.append(best.fitness)
        mean_history.append(_mean_length(generation, config.metric))
        logger.debug("generation %d best distance: %.4f", i, best.fitness)
        if on_generation is not None:
            on_generation(i, best.fitness, best.individual)

    logger.info(
        "finished %d generations, best distance %.4f", config.n_iter, best.fitness
    )
    return RunResult(
        best_fitness=best.fitness,
        best_individual=best.individual,
        generations=config.n_iter,
        best_history=best_history,
        mean_history=mean_history,
    )


def _mean_length(population: Sequence[Individual], metric: Metric) -> float:
    return float(np.mean([tour_length(ind, metric) for ind in population]))


class EvolutionarySearch:
    """Stepwise driver: one call to :meth:`next` advances one generation."""

    def __init__(
        self,
        config: TSPConfig,
        points: Optional[Sequence[Point]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.cfg = config
        self.rng = rng or config.make_rng()
        self.points: List[Point] = list(points) if points is not None else random_points(
            config.n_points, self.rng
        )
        self.population: Population = []
        self.generation = 0
        self.started = False
        self._best = BestRecord()

    @property
    def ready(self) -> bool:
        return len(self.population) > 0

    @property
    def fittest(self) -> float:
        return self._best.fitness

    @property
    def fittest_individual(self) -> Individual:
        return self._best.individual

    def initialize(self) -> None:
        self.population = initialize(self.cfg, self.points, self.rng)
        logger.debug(
            "initialized %d individuals of %d points", len(self.population), len(self.points)
        )
        fitness, individual = fittest(self.population, self.cfg.metric)
        self._best = BestRecord(fitness, individual)

    def next(self) -> Population:
        if not self.population:
            raise EmptyPopulationError("initialize() must be called before next()")
        self.started = True
        self.population = run_step(self.cfg, self.population, self.rng)
        self.generation += 1
        self._best.update(*fittest(self.population, self.cfg.metric))
        return self.population

    def best(self) -> Tuple[float, Individual]:
        return self._best.fitness, self._best.individual

    def reset(self) -> None:
        self.started = False
        self.generation = 0
        self.population = []
        self._best = BestRecord()

    def update_config(self, config: TSPConfig, reset: bool = True) -> None:
        if config.n_points != self.cfg.n_points:
            self.points = random_points(config.n_points, self.rng)
        self.cfg = config
        if reset:
            self.reset()
            self.initialize()
