"""
Weighted A* Strategy - A* with an inflated heuristic.
"""

from ..factory import register_strategy
from .astar import AStarStrategy


@register_strategy
class WeightedAStarStrategy(AStarStrategy):
    """
    A* on f = g + 2.0 * h.

    Inflating the heuristic makes the search dive toward the goal and
    expand far fewer nodes. Paths are valid but may be longer than the
    shortest one.
    """
    name = "wastar"
    label = "Weighted A*"
    description = "Weighted A* (fast) - A* with heuristic weight 2.0"
    timeout_sec = 20.0
    optimal = False
    yield_every = 1000

    weight = 2.0
    max_expansions = 100_000
