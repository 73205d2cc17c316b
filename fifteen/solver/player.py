"""
Player Module - Step-by-step replay of a found path against a live board.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .board import Board
from .move import IllegalMoveError, Move, apply_move
from .solution import AlgorithmResult

logger = logging.getLogger(__name__)

# Receives (board after the move, move, 1-based step number)
StepCallback = Callable[[Board, Move, int], None]


@dataclass(frozen=True)
class PlaybackReport:
    """
    Final statistics of a replay.

    Attributes:
        board: Board after the last applied move
        moves_applied: Moves actually applied
        completed: True if the whole path was applied
        cancelled: True if the replay stopped on request
        nodes_explored: From the result that produced the path
        elapsed_time: Search time of that result in seconds
        strategy_name: Strategy that produced the path
        note: Non-optimality remark, empty for optimal strategies
    """
    board: Board
    moves_applied: int
    completed: bool
    cancelled: bool = False
    nodes_explored: int = 0
    elapsed_time: float = 0.0
    strategy_name: str = ""
    note: str = ""


class SolutionPlayer:
    """
    Applies a path one move at a time with a fixed delay.

    The cancel flag is checked before each step; on cancellation the
    board stays wherever it got to. Each step goes through apply_move, so
    an illegal move ends the replay instead of corrupting the board.
    """

    def __init__(self, move_delay: float = 0.3):
        """
        Initialize the player.

        Args:
            move_delay: Seconds to wait before each move
        """
        self.move_delay = move_delay

    async def play(
        self,
        path: Sequence[Move],
        board: Board,
        on_step: Optional[StepCallback] = None,
        cancel_flag: Optional[threading.Event] = None
    ) -> PlaybackReport:
        """
        Replay path starting from board.

        Args:
            path: Moves to apply
            board: Live board at the start of the replay
            on_step: Called after every applied move
            cancel_flag: Event checked before each move

        Returns:
            PlaybackReport (search statistics left at defaults)
        """
        applied = 0

        for move in path:
            if cancel_flag is not None and cancel_flag.is_set():
                logger.info(f"Playback cancelled after {applied}/{len(path)} moves")
                return PlaybackReport(board=board, moves_applied=applied,
                                      completed=False, cancelled=True)

            await asyncio.sleep(self.move_delay)

            try:
                board = apply_move(board, move.target)
            except IllegalMoveError as e:
                logger.warning(f"Playback stopped at move {applied + 1}: {e}")
                return PlaybackReport(board=board, moves_applied=applied, completed=False)

            applied += 1
            if on_step is not None:
                on_step(board, move, applied)

        return PlaybackReport(board=board, moves_applied=applied, completed=True)

    async def play_result(
        self,
        result: AlgorithmResult,
        board: Board,
        on_step: Optional[StepCallback] = None,
        cancel_flag: Optional[threading.Event] = None,
        optimal: bool = True
    ) -> PlaybackReport:
        """
        Replay a strategy result and attach its search statistics.

        Args:
            result: Found result to replay
            board: Live board the result was computed for
            on_step: Called after every applied move
            cancel_flag: Event checked before each move
            optimal: Whether the strategy guarantees shortest paths

        Returns:
            PlaybackReport with statistics and optional non-optimality note
        """
        report = await self.play(result.path, board, on_step=on_step, cancel_flag=cancel_flag)
        note = "" if optimal else "Solution may not be optimal"

        logger.info(
            f"Playback finished: {report.moves_applied}/{len(result.path)} moves, "
            f"strategy {result.strategy_name}"
        )
        return PlaybackReport(
            board=report.board,
            moves_applied=report.moves_applied,
            completed=report.completed,
            cancelled=report.cancelled,
            nodes_explored=result.nodes_explored,
            elapsed_time=result.elapsed_time,
            strategy_name=result.strategy_name,
            note=note,
        )


async def playback(
    path: Sequence[Move],
    board: Board,
    on_step: Optional[StepCallback] = None,
    cancel_flag: Optional[threading.Event] = None,
    move_delay: float = 0.3
) -> Board:
    """
    Cancellable, step-delayed move application.

    Returns:
        Final board
    """
    report = await SolutionPlayer(move_delay).play(path, board, on_step=on_step, cancel_flag=cancel_flag)
    return report.board
