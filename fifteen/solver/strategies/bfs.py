"""
BFS Strategy - Level-order search with explicit depth and node caps.
"""

import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from ..base import SolverStrategy
from ..board import Board
from ..move import Move, neighbors
from ..context import SolutionContext
from ..solution import AlgorithmResult
from ..factory import register_strategy

logger = logging.getLogger(__name__)


@register_strategy
class BFSStrategy(SolverStrategy):
    """
    Breadth-first search over board states.

    Finds a shortest path when one exists within the caps. A full-depth
    BFS on the 15-puzzle is intractable, so depth and node caps turn
    that into an explicit not-found result.

    Paths are stored as a parent map keyed by canonical key rather than
    copied into every queued node.
    """
    name = "bfs"
    label = "BFS"
    description = "BFS (optimal, shallow only) - Level-order search up to depth 30"
    timeout_sec = 8.0
    optimal = True
    yield_every = 2500

    def __init__(self, max_depth: int = 30, max_nodes: int = 500_000):
        """
        Initialize BFS strategy.

        Args:
            max_depth: Deepest level that is still goal-tested
            max_nodes: Nodes dequeued before giving up
        """
        self.max_depth = max_depth
        self.max_nodes = max_nodes

    async def solve(self, context: SolutionContext) -> AlgorithmResult:
        """
        Search level by level from context.board.

        Args:
            context: Solution context with board and cancellation

        Returns:
            Found result with a shortest path, or not-found with nodes explored
        """
        start = context.board
        max_nodes = context.budget.node_limit(self.max_nodes)

        queue: Deque[Tuple[Board, int]] = deque([(start, 0)])
        parents: Dict[str, Tuple[Optional[str], Optional[Move]]] = {start.key: (None, None)}
        nodes_explored = 0

        while queue and nodes_explored < max_nodes:
            board, depth = queue.popleft()
            nodes_explored += 1

            if context.should_yield(nodes_explored, self.yield_every):
                logger.debug(
                    f"[BFS] {nodes_explored} nodes, depth {depth}, queue size {len(queue)}"
                )
                if await context.checkpoint(nodes_explored, depth=depth, queue_size=len(queue)):
                    return self._build_result(
                        context, False, (), nodes_explored, was_cancelled=True
                    )

            if board.is_goal():
                path = self._reconstruct_path(parents, board.key)
                logger.info(f"[BFS] Found solution: {len(path)} moves, {nodes_explored} nodes")
                return self._build_result(
                    context, True, path, nodes_explored, depth=depth, queue_size=len(queue)
                )

            if depth >= self.max_depth:
                continue

            for next_board, move in neighbors(board):
                key = next_board.key
                if key not in parents:
                    parents[key] = (board.key, move)
                    queue.append((next_board, depth + 1))

        logger.info(f"[BFS] Failed: explored {nodes_explored} nodes, max depth {self.max_depth}")
        return self._build_result(context, False, (), nodes_explored, queue_size=len(queue))

    @staticmethod
    def _reconstruct_path(
        parents: Dict[str, Tuple[Optional[str], Optional[Move]]],
        key: str
    ) -> List[Move]:
        """Walk the parent map from key back to the start board."""
        path: List[Move] = []
        parent_key, move = parents[key]
        while parent_key is not None:
            path.append(move)
            parent_key, move = parents[parent_key]
        path.reverse()
        return path
