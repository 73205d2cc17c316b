"""
Greedy Strategy - Hill climbing on the Manhattan heuristic with restarts.
"""

import logging
import math
import random
from typing import List, Optional, Tuple

from ..base import SolverStrategy
from ..board import Board
from ..move import Move, neighbors
from ..heuristic import manhattan
from ..context import SolutionContext
from ..solution import AlgorithmResult
from ..factory import register_strategy

logger = logging.getLogger(__name__)


@register_strategy
class GreedyStrategy(SolverStrategy):
    """
    Hill-climbing strategy that always steps to the neighbor with the
    lowest heuristic.

    This is the fastest strategy but easily trapped in local optima.
    When no neighbor improves on the current estimate it counts a stuck
    step; after a few stuck steps it jumps to a random non-worsening
    neighbor, and after too many it abandons the attempt. Later restarts
    begin with a short random walk to diversify the starting point.
    """
    name = "greedy"
    label = "Greedy"
    description = "Greedy (instant) - Hill climbing with random restarts"
    timeout_sec = 3.0
    yield_every = 20

    def __init__(self, max_restarts: int = 5, max_moves: int = 200,
                 stuck_random_after: int = 3, stuck_abandon_after: int = 10,
                 seed: Optional[int] = None):
        """
        Initialize greedy strategy.

        Args:
            max_restarts: Attempts before giving up
            max_moves: Greedy steps allowed per attempt
            stuck_random_after: Stuck steps before taking a random non-worsening move
            stuck_abandon_after: Stuck steps before abandoning an attempt
            seed: Seed for the random escapes and walks
        """
        self.max_restarts = max_restarts
        self.max_moves = max_moves
        self.stuck_random_after = stuck_random_after
        self.stuck_abandon_after = stuck_abandon_after
        self._rng = random.Random(seed)

    async def solve(self, context: SolutionContext) -> AlgorithmResult:
        """
        Run up to max_restarts hill-climbing attempts.

        Args:
            context: Solution context with board and cancellation

        Returns:
            Found result from the first attempt reaching the goal, otherwise
            a not-found result carrying the best partial path
        """
        start = context.board
        node_cap = context.budget.node_limit(self.max_restarts * self.max_moves)
        total_nodes = 0

        best_path: Tuple[Move, ...] = ()
        best_h = math.inf

        for restart in range(self.max_restarts):
            board = start
            path: List[Move] = []

            if restart > 0:
                board = self._random_walk(board, path, restart * 3)

            if board.is_goal():
                return self._build_result(context, True, path, total_nodes, restart=restart)

            last_h = manhattan(board)
            steps = 0
            stuck = 0

            while (steps < self.max_moves and total_nodes + steps < node_cap
                   and not board.is_goal()):
                best_neighbor, best_neighbor_h, non_worsening = self._rank_neighbors(board, last_h)

                if best_neighbor_h >= last_h:
                    stuck += 1
                    if stuck > self.stuck_random_after and non_worsening:
                        best_neighbor, best_neighbor_h = self._rng.choice(non_worsening)
                        stuck = 0
                    elif stuck > self.stuck_abandon_after:
                        break
                else:
                    stuck = 0

                board, move = best_neighbor
                path.append(move)
                steps += 1
                last_h = best_neighbor_h

                if board.is_goal():
                    logger.info(f"[Greedy] Success on restart {restart}: {len(path)} moves")
                    return self._build_result(
                        context, True, path, total_nodes + steps, restart=restart
                    )

                if steps % self.yield_every == 0:
                    if await context.checkpoint(total_nodes + steps, restart=restart, heuristic=last_h):
                        return self._build_result(
                            context, False, best_path, total_nodes + steps, was_cancelled=True
                        )

            total_nodes += steps

            if last_h < best_h or (last_h == best_h and len(path) > len(best_path)):
                best_h = last_h
                best_path = tuple(path)

            logger.debug(f"[Greedy] Restart {restart}: {steps} moves, final h={last_h}")

            if await context.checkpoint(total_nodes, restart=restart, heuristic=last_h):
                return self._build_result(
                    context, False, best_path, total_nodes, was_cancelled=True
                )

        logger.info(f"[Greedy] Failed after {self.max_restarts} restarts, best h={best_h}")
        return self._build_result(
            context, False, best_path, total_nodes, best_heuristic=best_h
        )

    def _rank_neighbors(
        self,
        board: Board,
        current_h: int
    ) -> Tuple[Tuple[Board, Move], int, List[Tuple[Tuple[Board, Move], int]]]:
        """
        Score every neighbor.

        Returns:
            (best neighbor, its heuristic, neighbors no worse than current_h + 1)
        """
        best = None
        best_h = math.inf
        non_worsening = []

        for candidate in neighbors(board):
            h = manhattan(candidate[0])
            if h < best_h:
                best = candidate
                best_h = h
            if h <= current_h + 1:
                non_worsening.append((candidate, h))

        return best, best_h, non_worsening

    def _random_walk(self, board: Board, path: List[Move], steps: int) -> Board:
        """Take random slides from board, appending them to path."""
        for _ in range(steps):
            board, move = self._rng.choice(neighbors(board))
            path.append(move)
        return board
