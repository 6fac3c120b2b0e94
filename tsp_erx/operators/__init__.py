from .crossover import build_edge_table, crossover, edge_recombination
from .mutation import swap_mutation
from .selection import tournament_selection

__all__ = [
    "build_edge_table",
    "crossover",
    "edge_recombination",
    "swap_mutation",
    "tournament_selection",
]
