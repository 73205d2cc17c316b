"""
A* Strategy - Best-first search on f = g + w * h.

With w = 1 and the consistent Manhattan heuristic the first goal popped
from the open list is reached by a shortest path.
"""

import heapq
import itertools
import logging
import math
from typing import Dict, List, Set, Tuple

from ..base import SolverStrategy
from ..move import neighbors
from ..heuristic import manhattan
from ..node import NodeArena, SearchNode
from ..context import SolutionContext
from ..solution import AlgorithmResult
from ..factory import register_strategy

logger = logging.getLogger(__name__)

# (f, h, insertion order, arena index)
OpenEntry = Tuple[float, int, int, int]


@register_strategy
class AStarStrategy(SolverStrategy):
    """
    Classic A* with a closed set and a best-g map.

    The open list is a binary heap ordered by (f, h, insertion order),
    so ties prefer nodes closer to the goal and are otherwise broken
    first-in-first-out. A neighbor is (re-)enqueued whenever it has no
    recorded g yet or the new g improves on it; stale heap entries for
    closed states are skipped when popped.
    """
    name = "astar"
    label = "A*"
    description = "A* (optimal) - Best-first search on moves + Manhattan distance"
    timeout_sec = 30.0
    optimal = True
    yield_every = 2000

    weight: float = 1.0
    max_expansions: int = 200_000

    def __init__(self, max_expansions: int = 0):
        """
        Initialize A* strategy.

        Args:
            max_expansions: Expansion cap (class default if 0)
        """
        if max_expansions:
            self.max_expansions = max_expansions

    def priority(self, g: int, h: int) -> float:
        """f value for a node with cost g and estimate h."""
        return g + self.weight * h

    async def solve(self, context: SolutionContext) -> AlgorithmResult:
        """
        Run best-first search from context.board.

        Args:
            context: Solution context with board and cancellation

        Returns:
            Found result with the reconstructed path, or not-found
        """
        start = context.board
        max_expansions = context.budget.node_limit(self.max_expansions)

        arena = NodeArena()
        counter = itertools.count()
        h0 = manhattan(start)
        root = arena.add(SearchNode(board=start, g=0, h=h0, f=self.priority(0, h0)))

        open_heap: List[OpenEntry] = [(arena[root].f, h0, next(counter), root)]
        best_g: Dict[str, int] = {start.key: 0}
        closed: Set[str] = set()

        nodes_explored = 0
        iterations = 0
        logger.info(f"[{self.label}] Starting with initial heuristic: {h0}")

        while open_heap and nodes_explored < max_expansions:
            iterations += 1
            if context.should_yield(iterations, self.yield_every):
                logger.debug(
                    f"[{self.label}] {nodes_explored} nodes, open set size: {len(open_heap)}"
                )
                if await context.checkpoint(
                    nodes_explored, open_size=len(open_heap), closed_size=len(closed)
                ):
                    return self._build_result(
                        context, False, (), nodes_explored, was_cancelled=True
                    )

            _, _, _, index = heapq.heappop(open_heap)
            node = arena[index]
            key = node.board.key

            if key in closed:
                continue

            closed.add(key)
            nodes_explored += 1

            if node.board.is_goal():
                path = arena.path_to(index)
                logger.info(
                    f"[{self.label}] Found solution: {len(path)} moves, {nodes_explored} nodes"
                )
                return self._build_result(
                    context, True, path, nodes_explored,
                    open_size=len(open_heap), closed_size=len(closed)
                )

            g = node.g + 1
            for next_board, move in neighbors(node.board):
                next_key = next_board.key
                if next_key in closed:
                    continue

                if g < best_g.get(next_key, math.inf):
                    best_g[next_key] = g
                    h = manhattan(next_board)
                    child = arena.add(SearchNode(
                        board=next_board, g=g, h=h, f=self.priority(g, h),
                        parent=index, move=move,
                    ))
                    heapq.heappush(open_heap, (arena[child].f, h, next(counter), child))

        logger.info(f"[{self.label}] Failed: explored {nodes_explored} nodes")
        return self._build_result(
            context, False, (), nodes_explored,
            open_size=len(open_heap), closed_size=len(closed)
        )
