"""
Strategies Package - Concrete strategy implementations.

Import this module to register all built-in strategies.
"""

from .greedy import GreedyStrategy
from .bfs import BFSStrategy
from .weighted_astar import WeightedAStarStrategy
from .beam_search import BeamSearchStrategy
from .astar import AStarStrategy
from .ida_star import IDAStarStrategy

__all__ = [
    "GreedyStrategy",
    "BFSStrategy",
    "WeightedAStarStrategy",
    "BeamSearchStrategy",
    "AStarStrategy",
    "IDAStarStrategy",
]
