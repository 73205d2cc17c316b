"""
IDA* Strategy - Iterative deepening over f = g + h thresholds.

Repeated depth-first searches with a growing f bound. Memory use is
proportional to the solution depth instead of the number of states seen,
at the cost of re-expanding shallow nodes on every iteration.
"""

import logging
import math
from typing import List, NamedTuple, Optional, Tuple

from ..base import SolverStrategy
from ..board import Board
from ..move import Move, neighbors
from ..heuristic import manhattan
from ..context import SolutionContext
from ..solution import AlgorithmResult
from ..factory import register_strategy

logger = logging.getLogger(__name__)


class _Iteration(NamedTuple):
    """Outcome of one bounded depth-first pass."""
    path: Optional[List[Move]]
    next_threshold: float
    nodes_explored: int
    cancelled: bool = False
    capped: bool = False


@register_strategy
class IDAStarStrategy(SolverStrategy):
    """
    IDA* with an explicit stack.

    Each pass starts from the start board and prunes every node whose
    f exceeds the current threshold, remembering the smallest pruned f
    as the next threshold. The blank is never moved straight back into
    the cell it just left. Passes repeat until the goal is found, the
    threshold reaches max_depth, or nothing was pruned (exhausted).

    Every visited node counts as explored, pruned ones included.
    """
    name = "idastar"
    label = "IDA*"
    description = "IDA* (optimal, low memory) - Iterative deepening A*"
    timeout_sec = 45.0
    optimal = True
    yield_every = 2000

    def __init__(self, max_depth: int = 60):
        """
        Initialize IDA* strategy.

        Args:
            max_depth: Thresholds at or above this are not searched
        """
        self.max_depth = max_depth

    async def solve(self, context: SolutionContext) -> AlgorithmResult:
        """
        Run bounded passes with increasing thresholds.

        Args:
            context: Solution context with board and cancellation

        Returns:
            Found result with a shortest path, or not-found
        """
        start = context.board
        node_cap = context.budget.node_limit(math.inf)
        threshold = manhattan(start)
        nodes_explored = 0
        iterations = 0

        while threshold < self.max_depth:
            iterations += 1
            outcome = await self._bounded_search(context, start, threshold, nodes_explored, node_cap)
            nodes_explored = outcome.nodes_explored

            if outcome.path is not None:
                logger.info(
                    f"[IDA*] Found solution: {len(outcome.path)} moves, "
                    f"{nodes_explored} nodes, threshold {threshold}"
                )
                return self._build_result(
                    context, True, outcome.path, nodes_explored,
                    threshold=threshold, iterations=iterations
                )

            if outcome.cancelled:
                return self._build_result(
                    context, False, (), nodes_explored, was_cancelled=True,
                    threshold=threshold, iterations=iterations
                )

            if outcome.capped or outcome.next_threshold == math.inf:
                break

            logger.debug(f"[IDA*] Threshold {threshold} exhausted, next {outcome.next_threshold}")
            threshold = int(outcome.next_threshold)

            if await context.checkpoint(nodes_explored, threshold=threshold, iterations=iterations):
                return self._build_result(
                    context, False, (), nodes_explored, was_cancelled=True,
                    threshold=threshold, iterations=iterations
                )

        logger.info(f"[IDA*] Failed: explored {nodes_explored} nodes, last threshold {threshold}")
        return self._build_result(
            context, False, (), nodes_explored, threshold=threshold, iterations=iterations
        )

    async def _bounded_search(
        self,
        context: SolutionContext,
        start: Board,
        threshold: int,
        nodes_explored: int,
        node_cap: float
    ) -> _Iteration:
        """
        Depth-first pass pruning nodes with f > threshold.

        Stack entries are (board, g, move that produced it). When a node
        at depth g is popped, path is cut back to its parent's g - 1
        moves before the node's own move is appended.
        """
        stack: List[Tuple[Board, int, Optional[Move]]] = [(start, 0, None)]
        path: List[Move] = []
        next_threshold = math.inf

        while stack:
            board, g, move = stack.pop()
            del path[max(g - 1, 0):]
            if move is not None:
                path.append(move)

            nodes_explored += 1
            if context.should_yield(nodes_explored, self.yield_every):
                if await context.checkpoint(
                    nodes_explored, threshold=threshold, depth=g, stack_size=len(stack)
                ):
                    return _Iteration(None, next_threshold, nodes_explored, cancelled=True)

            f = g + manhattan(board)
            if f > threshold:
                if f < next_threshold:
                    next_threshold = f
                continue

            if board.is_goal():
                return _Iteration(list(path), next_threshold, nodes_explored)

            if nodes_explored >= node_cap:
                return _Iteration(None, next_threshold, nodes_explored, capped=True)

            # Reversed so children are explored in emission order
            for child, child_move in reversed(neighbors(board)):
                if move is not None and child_move.target == move.origin:
                    continue
                stack.append((child, g + 1, child_move))

        return _Iteration(None, next_threshold, nodes_explored)
