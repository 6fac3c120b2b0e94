import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from tsp_erx.data import load_instance, load_tsplib_instances
from tsp_erx.errors import ConfigurationError
from tsp_erx.evolutionary import TSPConfig, run as run_ga
from tsp_erx.geometry import Metric


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def _format_tour(tour) -> str:
    return " -> ".join(f"({p.x:g},{p.y:g})" for p in tour)


def run(args) -> None:
    metric = Metric(args.metric)
    instance = None
    points = None
    if args.tsplib:
        instance = load_instance(Path(args.tsplib), metric=metric)
        points = instance.points
        log(f"loaded {instance.name}: {len(points)} points")

    cfg = TSPConfig(
        n_population=args.population,
        p_mutation=args.mutation,
        p_crossover=args.crossover,
        n_iter=args.iterations,
        tournament_size=args.tournament,
        number_of_children=args.children,
        n_points=args.points,
        metric=metric,
        random_seed=args.seed,
    )

    def progress(generation: int, best_fitness: float, _best) -> None:
        if generation % args.log_every == 0:
            print(f"gen {generation}: best distance={best_fitness:.2f}")

    t0 = time.perf_counter()
    result = run_ga(cfg, seed_points=points, on_generation=progress)
    log(f"finished {result.generations} generations in {time.perf_counter() - t0:.2f}s")
    log(f"best distance: {result.best_fitness:.2f}")
    if instance is not None and instance.optimum is not None:
        log(f"optimum ({metric.value}): {instance.optimum:.2f} gap={result.gap(instance.optimum):.2%}")
    print(_format_tour(result.best_individual))


def instances(args) -> None:
    data_root = Path(args.data_root)
    found = load_tsplib_instances(data_root, max_nodes=args.max_nodes, metric=Metric(args.metric))
    if not found:
        print(f"No TSPLIB instances found in {data_root}.")
        return
    for inst in found:
        optimum = "-" if inst.optimum is None else f"{inst.optimum:.2f}"
        print(f"{inst.name:<20} points={len(inst.points):<6} optimum={optimum}")


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="TSP edge-recombination GA")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every generation")
    subparsers = parser.add_subparsers(dest="command", required=True)

    defaults = TSPConfig()
    run_parser = subparsers.add_parser("run", help="Evolve a tour over random or TSPLIB points")
    source = run_parser.add_mutually_exclusive_group()
    source.add_argument("--points", type=int, default=defaults.n_points)
    source.add_argument("--tsplib", help="Path to a .tsp file with node coordinates")
    run_parser.add_argument("--population", type=int, default=defaults.n_population)
    run_parser.add_argument("--iterations", type=int, default=defaults.n_iter)
    run_parser.add_argument("--mutation", type=float, default=defaults.p_mutation)
    run_parser.add_argument("--crossover", type=float, default=defaults.p_crossover)
    run_parser.add_argument("--tournament", type=int, default=defaults.tournament_size)
    run_parser.add_argument("--children", type=int, default=defaults.number_of_children)
    run_parser.add_argument(
        "--metric", choices=[m.value for m in Metric], default=defaults.metric.value
    )
    run_parser.add_argument("--seed", type=int, default=None)
    run_parser.add_argument("--log-every", type=int, default=100)
    run_parser.set_defaults(func=run)

    inst_parser = subparsers.add_parser("instances", help="List TSPLIB instances")
    inst_parser.add_argument("--data-root", default="data/tsplib")
    inst_parser.add_argument("--max-nodes", type=int, default=None)
    inst_parser.add_argument(
        "--metric", choices=[m.value for m in Metric], default=defaults.metric.value
    )
    inst_parser.set_defaults(func=instances)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    if getattr(args, "log_every", 1) <= 0:
        parser.error("--log-every must be positive")
    try:
        args.func(args)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
