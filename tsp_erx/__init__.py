"""
Genetic algorithm for the TSP built on edge recombination crossover, swap mutation
and tournament selection.
"""

__all__ = [
    "data",
    "evaluation",
    "evolutionary",
    "geometry",
    "operators",
    "population",
]
