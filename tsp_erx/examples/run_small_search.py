import random

from tsp_erx.evolutionary import EvolutionarySearch, TSPConfig
from tsp_erx.geometry import Metric, random_points


def main():
    rng = random.Random(7)
    points = random_points(12, rng)
    cfg = TSPConfig(
        n_population=20,
        tournament_size=4,
        p_mutation=0.2,
        p_crossover=0.8,
        metric=Metric.MANHATTAN,
    )
    search = EvolutionarySearch(cfg, points=points, rng=rng)
    search.initialize()
    print(f"gen 0: best distance={search.fittest:.2f}")
    generations = 25
    for g in range(generations):
        search.next()
        print(f"gen {g+1}: best distance={search.fittest:.2f}")


if __name__ == "__main__":
    main()
