"""
Beam Search Strategy - Bounded-width level search ordered by heuristic.

Keeps only the beam_width most promising boards at each depth. Memory and
time per level are bounded, at the cost of completeness and optimality.
"""

import logging
from dataclasses import dataclass
from typing import List, Set, Tuple

from ..base import SolverStrategy
from ..board import Board
from ..move import Move, neighbors
from ..heuristic import manhattan
from ..context import SolutionContext
from ..solution import AlgorithmResult
from ..factory import register_strategy

logger = logging.getLogger(__name__)


@dataclass
class BeamNode:
    """
    Node in beam search.

    Attributes:
        board: Current board state
        path: Moves taken to reach this state (as tuple for immutability)
        heuristic: Manhattan estimate for sorting
    """
    board: Board
    path: Tuple[Move, ...]
    heuristic: int

    @property
    def depth(self) -> int:
        """Current depth in search tree."""
        return len(self.path)


@register_strategy
class BeamSearchStrategy(SolverStrategy):
    """
    Beam search with a global visited set.

    Algorithm:
        1. Start with the start board as the only beam member
        2. For each depth level:
           - Goal-test and expand every member of the beam
           - Drop successors already seen at any earlier level
           - Sort successors by heuristic (stable, so ties keep
             generation order) and keep the best beam_width
        3. Stop at max_depth or when the beam empties

    Parameters:
        beam_width: Candidates kept per level (default 100)
        max_depth: Levels explored (default 100)
    """
    name = "beam"
    label = "Beam Search"
    description = "Beam Search (balanced) - Best 100 boards per depth"
    timeout_sec = 15.0
    # Measured in depth levels, not nodes
    yield_every = 5

    def __init__(self, beam_width: int = 100, max_depth: int = 100):
        """
        Initialize beam search strategy.

        Args:
            beam_width: Candidates kept per level
            max_depth: Maximum number of levels
        """
        self.beam_width = beam_width
        self.max_depth = max_depth

    async def solve(self, context: SolutionContext) -> AlgorithmResult:
        """
        Search with a bounded beam.

        Args:
            context: Solution context with board and cancellation

        Returns:
            First goal match found, or not-found with nodes explored
        """
        start = context.board
        max_nodes = context.budget.node_limit(self.beam_width * self.max_depth)

        beam = [BeamNode(board=start, path=(), heuristic=manhattan(start))]
        visited: Set[str] = {start.key}
        nodes_explored = 0

        for depth in range(self.max_depth):
            if not beam:
                break

            logger.debug(f"[BeamSearch] Depth {depth}, beam size: {len(beam)}")
            candidates: List[BeamNode] = []

            for node in beam:
                if nodes_explored >= max_nodes:
                    break
                nodes_explored += 1

                if node.board.is_goal():
                    logger.info(
                        f"[BeamSearch] Found solution: {node.depth} moves, {nodes_explored} nodes"
                    )
                    return self._build_result(
                        context, True, node.path, nodes_explored, depth=depth, beam_size=len(beam)
                    )

                for next_board, move in neighbors(node.board):
                    key = next_board.key
                    if key not in visited:
                        visited.add(key)
                        candidates.append(BeamNode(
                            board=next_board,
                            path=node.path + (move,),
                            heuristic=manhattan(next_board),
                        ))

            candidates.sort(key=lambda n: n.heuristic)
            beam = candidates[:self.beam_width]

            if depth % self.yield_every == 0:
                if await context.checkpoint(nodes_explored, depth=depth, beam_size=len(beam)):
                    return self._build_result(
                        context, False, (), nodes_explored, was_cancelled=True
                    )

        logger.info(f"[BeamSearch] Failed: explored {nodes_explored} nodes")
        return self._build_result(context, False, (), nodes_explored)
