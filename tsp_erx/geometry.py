import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

import networkx as nx


MAX_X = 1000
MAX_Y = 1000
POINT_SIZE = 5


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Edge:
    a: Point
    b: Point


def euclidean_distance(a: Point, b: Point) -> float:
    return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2)


def manhattan_distance(a: Point, b: Point) -> float:
    return abs(a.x - b.x) + abs(a.y - b.y)


class Metric(Enum):
    """Distance functions a tour can be scored with.

    Members are callable: ``Metric.EUCLIDEAN(a, b)``.
    """

    EUCLIDEAN = "euclidean"
    MANHATTAN = "manhattan"

    def __call__(self, a: Point, b: Point) -> float:
        return _DISTANCES[self](a, b)


_DISTANCES = {
    Metric.EUCLIDEAN: euclidean_distance,
    Metric.MANHATTAN: manhattan_distance,
}


def random_point(rng: random.Random) -> Point:
    # Keep a POINT_SIZE margin so points are never drawn on the border.
    x = round(rng.random() * (MAX_X - 2 * POINT_SIZE) + POINT_SIZE)
    y = round(rng.random() * (MAX_Y - 2 * POINT_SIZE) + POINT_SIZE)
    return Point(x, y)


def random_points(n: int, rng: random.Random) -> List[Point]:
    """Generate ``n`` random points. Coincident points are not filtered."""
    return [random_point(rng) for _ in range(n)]


def create_edges(points: Sequence[Point]) -> List[Edge]:
    """Edges of the closed tour through ``points``, ready for a renderer."""
    if not points:
        return []
    edges = [Edge(points[i], points[i + 1]) for i in range(len(points) - 1)]
    edges.append(Edge(points[-1], points[0]))
    return edges


def tour_graph(tour: Sequence[Point], metric: Metric = Metric.EUCLIDEAN) -> nx.MultiGraph:
    """One parallel edge per tour step, so weights always sum to the tour length.

    Coincident points share a node; adjacent ones add a zero-weight self loop.
    """
    graph = nx.MultiGraph()
    for point in tour:
        graph.add_node(point, pos=(point.x, point.y))
    for edge in create_edges(tour):
        graph.add_edge(edge.a, edge.b, weight=metric(edge.a, edge.b))
    return graph
