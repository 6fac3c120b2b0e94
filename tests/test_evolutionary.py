import random
from collections import Counter

import pytest

from tsp_erx.errors import ConfigurationError, EmptyPopulationError
from tsp_erx.evaluation import tour_length
from tsp_erx.evolutionary import (
    EvolutionarySearch,
    RunResult,
    TSPConfig,
    evaluate,
    initialize,
    run,
    run_step,
    step,
)
from tsp_erx.geometry import Metric


class _Untouchable:
    def __getattr__(self, name):
        raise AssertionError(f"rng.{name} used before validation")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"n_population": 0},
        {"p_mutation": 1.5},
        {"p_crossover": -0.1},
        {"n_population": 5, "tournament_size": 6},
        {"tournament_size": 0},
        {"number_of_children": 1},
        {"n_iter": 0},
        {"n_points": -1},
        {"metric": "euclidean"},
    ],
)
def test_invalid_config_is_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        TSPConfig(**kwargs)


def test_config_is_immutable():
    cfg = TSPConfig()
    with pytest.raises(AttributeError):
        cfg.n_population = 5


def test_initialize_uses_seed_points(cities, rng):
    cfg = TSPConfig(n_population=6, tournament_size=2)
    population = initialize(cfg, cities, rng)
    assert len(population) == 6
    assert all(Counter(ind) == Counter(cities) for ind in population)


def test_initialize_generates_points_when_missing(rng):
    cfg = TSPConfig(n_population=4, tournament_size=2, n_points=7)
    population = initialize(cfg, None, rng)
    assert len(population) == 4
    assert all(len(ind) == 7 for ind in population)
    assert Counter(population[0]) == Counter(population[3])


def test_step_keeps_population_size(cities, rng):
    cfg = TSPConfig(n_population=10, tournament_size=3, number_of_children=2)
    population = initialize(cfg, cities, rng)
    new_population = run_step(cfg, population, rng)
    assert len(new_population) == 10
    for individual in new_population:
        assert Counter(individual) == Counter(cities)


def test_step_alias():
    assert step is run_step


@pytest.mark.parametrize(
    "n_population, children, expected",
    [(10, 3, 6), (9, 2, 8), (12, 4, 6)],
)
def test_population_size_drifts(cities, rng, n_population, children, expected):
    cfg = TSPConfig(n_population=n_population, tournament_size=2, number_of_children=children)
    population = initialize(cfg, cities, rng)
    assert len(run_step(cfg, population, rng)) == expected


def test_without_crossover_or_mutation_children_are_parents(cities, rng):
    cfg = TSPConfig(n_population=10, tournament_size=3, p_crossover=0.0, p_mutation=0.0)
    population = initialize(cfg, cities, rng)
    for child in run_step(cfg, population, rng):
        assert child in population
        assert all(child is not ind for ind in population)


def test_without_crossover_children_are_at_most_one_swap_away(cities, rng):
    cfg = TSPConfig(n_population=10, tournament_size=3, p_crossover=0.0, p_mutation=1.0)
    population = initialize(cfg, cities, rng)
    for child in run_step(cfg, population, rng):
        diffs = [sum(a != b for a, b in zip(child, ind)) for ind in population]
        assert min(diffs) in (0, 2)


def test_step_leaves_previous_generation_untouched(cities, rng):
    cfg = TSPConfig(n_population=10, tournament_size=3, p_mutation=1.0)
    population = initialize(cfg, cities, rng)
    snapshot = [list(ind) for ind in population]
    run_step(cfg, population, rng)
    assert population == snapshot


def test_step_selection_rejects_shrunken_population(cities, rng):
    cfg = TSPConfig(n_population=10, tournament_size=8)
    population = initialize(cfg, cities, rng)[:5]
    with pytest.raises(ConfigurationError):
        run_step(cfg, population, rng)


def test_evaluate(square):
    fitness, best = evaluate([square[::-1], [square[0], square[2], square[1], square[3]]])
    assert fitness == 4.0
    assert best == square[::-1]


@pytest.mark.parametrize("kwargs", [{"n_population": 101}, {"n_iter": 1001}])
def test_run_caps_fail_before_any_work(kwargs):
    cfg = TSPConfig(**kwargs)
    with pytest.raises(ConfigurationError):
        run(cfg, rng=_Untouchable())


@pytest.mark.parametrize(
    "kwargs",
    [
        {"n_population": 10, "number_of_children": 3, "tournament_size": 8},
        {"n_population": 3, "number_of_children": 4, "tournament_size": 1},
    ],
)
def test_tournament_too_large_for_later_generations_fails_before_any_work(kwargs):
    with pytest.raises(ConfigurationError):
        run(TSPConfig(n_iter=5, **kwargs), rng=_Untouchable())


def test_offspring_size_bounds_the_tournament(cities):
    cfg = TSPConfig(n_population=10, number_of_children=3, tournament_size=6, n_iter=5, random_seed=2)
    assert cfg.offspring_size == 6
    result = run(cfg, seed_points=cities)
    assert len(result.best_history) == 5


def test_run_tracks_best_ever(cities):
    cfg = TSPConfig(n_population=20, tournament_size=4, n_iter=15, random_seed=3)
    seen = []
    result = run(cfg, seed_points=cities, on_generation=lambda g, f, ind: seen.append((g, f)))
    assert isinstance(result, RunResult)
    assert result.generations == 15
    assert len(result.best_history) == 15
    assert len(result.mean_history) == 15
    assert [g for g, _ in seen] == list(range(1, 15))
    assert all(a >= b for a, b in zip(result.best_history, result.best_history[1:]))
    assert result.best_fitness == result.best_history[-1] == min(result.best_history)
    assert result.best_fitness == pytest.approx(tour_length(result.best_individual))
    assert Counter(result.best_individual) == Counter(cities)


def test_run_is_reproducible_with_seed(cities):
    cfg = TSPConfig(n_population=10, tournament_size=3, n_iter=10, random_seed=99)
    first = run(cfg, seed_points=cities)
    second = run(cfg, seed_points=cities)
    assert first.best_individual == second.best_individual
    assert first.best_history == second.best_history


def test_run_improves_on_random_tours():
    rng = random.Random(0)
    cfg = TSPConfig(n_population=40, tournament_size=5, n_iter=60, n_points=15)
    result = run(cfg, rng=rng)
    assert result.best_fitness <= result.best_history[0]
    assert result.best_fitness < result.mean_history[0]


def test_run_gap():
    result = RunResult(best_fitness=110.0, best_individual=[], generations=1)
    assert result.gap(100.0) == pytest.approx(0.1)
    assert result.gap(None) == float("inf")


def test_search_lifecycle(cities):
    cfg = TSPConfig(n_population=10, tournament_size=3, metric=Metric.MANHATTAN)
    search = EvolutionarySearch(cfg, points=cities, rng=random.Random(8))
    assert not search.ready
    assert search.fittest == float("inf")
    with pytest.raises(EmptyPopulationError):
        search.next()

    search.initialize()
    assert search.ready
    initial = search.fittest
    for _ in range(5):
        search.next()
    assert search.generation == 5
    assert search.started
    assert search.fittest <= initial
    fitness, individual = search.best()
    assert fitness == pytest.approx(tour_length(individual, Metric.MANHATTAN))

    search.reset()
    assert not search.ready
    assert search.generation == 0
    assert search.fittest_individual == []


def test_search_update_config_regenerates_points(cities):
    cfg = TSPConfig(n_population=10, tournament_size=3, n_points=len(cities))
    search = EvolutionarySearch(cfg, points=cities, rng=random.Random(1))
    search.initialize()
    search.next()

    search.update_config(TSPConfig(n_population=10, tournament_size=3, n_points=5))
    assert len(search.points) == 5
    assert search.ready
    assert search.generation == 0
    assert all(len(ind) == 5 for ind in search.population)


def test_search_update_config_without_reset(cities):
    cfg = TSPConfig(n_population=10, tournament_size=3, n_points=len(cities))
    search = EvolutionarySearch(cfg, points=cities, rng=random.Random(1))
    search.initialize()
    search.next()
    search.update_config(TSPConfig(n_population=10, tournament_size=5, n_points=len(cities)), reset=False)
    assert search.generation == 1
    assert search.cfg.tournament_size == 5
    assert search.points == cities
