from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import tsplib95

from .evaluation import tour_length
from .geometry import Metric, Point


TOUR_SUFFIXES = (".opt.tour", ".opt", ".tour")


@dataclass
class Instance:
    name: str
    path: Path
    points: List[Point]
    optimum: Optional[float]
    metric: Metric = Metric.EUCLIDEAN


def _tour_files(path: Path) -> List[Path]:
    """Known-optimal tour files for ``path``, beside it first, then under ``solutions/``."""
    beside = [path.with_suffix(TOUR_SUFFIXES[0])]
    under = [path.parent / "solutions" / f"{path.stem}{suffix}" for suffix in TOUR_SUFFIXES]
    return [p for p in beside + under if p.exists()]


def _optimal_tour(points_by_node: Dict[int, Point], path: Path) -> Optional[List[Point]]:
    for tour_path in _tour_files(path):
        try:
            nodes = tsplib95.parse(tour_path.read_text()).tours[0]
            return [points_by_node[n] for n in nodes]
        except Exception:
            continue
    return None


def _to_instance(problem, path: Path, metric: Metric) -> Instance:
    coords = dict(problem.node_coords)
    if not coords:
        raise ValueError(f"{path} has no NODE_COORD_SECTION")
    points_by_node = {node: Point(*coords[node][:2]) for node in sorted(coords)}
    tour = _optimal_tour(points_by_node, path)
    return Instance(
        name=problem.name or path.stem,
        path=path,
        points=list(points_by_node.values()),
        optimum=None if tour is None else tour_length(tour, metric),
        metric=metric,
    )


def load_instance(path: Path, metric: Metric = Metric.EUCLIDEAN) -> Instance:
    """Read the coordinates of a TSPLIB file.

    ``optimum`` is the length of the companion optimal tour measured with
    ``metric``, so it is comparable with tours scored under the same metric.
    """
    path = Path(path)
    return _to_instance(tsplib95.load(path), path, metric)


def load_tsplib_instances(
    root: Path,
    max_nodes: Optional[int] = None,
    max_instances: Optional[int] = None,
    metric: Metric = Metric.EUCLIDEAN,
) -> List[Instance]:
    instances: List[Instance] = []
    for path in sorted(Path(root).glob("*.tsp")):
        if max_instances is not None and len(instances) >= max_instances:
            break
        problem = tsplib95.load(path)
        if max_nodes is not None and problem.dimension > max_nodes:
            continue
        instances.append(_to_instance(problem, path, metric))
    return instances
