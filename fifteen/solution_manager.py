"""
Solution Manager Module - Session state machine for auto-solve and comparison.

This module provides the SolutionManager which owns the live game, runs
the selected strategy, replays its solution onto the live board and runs
strategy comparisons on a snapshot of it.

For the core solving logic, see the fifteen.solver package.
"""

from enum import Enum, auto
from typing import Callable, List, Optional
import logging
import threading

from fifteen.game_state import GameState
from fifteen.solver import (
    Board, Move, AlgorithmResult, ComparisonEntry, SearchBudget,
    SolverRunner, SolutionPlayer, PlaybackReport, ProgressSnapshot,
    get_strategy_class, get_default_strategy_name,
)

logger = logging.getLogger(__name__)


__all__ = [
    "SolutionState",
    "SolutionManager",
]

# Receives (live board after the move, move, 1-based step number)
BoardCallback = Callable[[Board, Move, int], None]


class SolutionState(Enum):
    """
    States of a solving session.

    States:
        IDLE: Accepting manual moves
        SOLVING: Selected strategy is searching
        PLAYING: Found solution is being replayed onto the live board
        COMPARING: All strategies are running on a snapshot
    """
    IDLE = auto()
    SOLVING = auto()
    PLAYING = auto()
    COMPARING = auto()


class SolutionManager:
    """
    Coordinates the live game with the runner and the player.

    State Flow:
        IDLE -> SOLVING -> PLAYING -> IDLE
          |        |                   ^
          |        +-- not found ------|
          +-> COMPARING ---------------+

    Manual slides are refused while busy. stop() sets the shared cancel
    flag; the search or replay notices it at its next suspension point.
    The live board is only changed by slide() and by the replay, never
    while a search is running.
    """

    def __init__(self, game: Optional[GameState] = None, strategy_name: str = "",
                 runner: Optional[SolverRunner] = None,
                 player: Optional[SolutionPlayer] = None):
        """
        Initialize solution manager.

        Args:
            game: Live game (new scramble if None)
            strategy_name: Strategy to use (game's selected algorithm if empty)
            runner: Runner used for searches
            player: Player used for replays
        """
        self._game = game or GameState.new()
        self._runner = runner or SolverRunner()
        self._player = player or SolutionPlayer()

        self._strategy_name = ""
        try:
            self.set_strategy(strategy_name or self._game.selected_algorithm)
        except ValueError as e:
            logger.warning(f"{e}, using default strategy")
            self.set_strategy(get_default_strategy_name())

        self._state = SolutionState.IDLE
        self._cancel_flag = threading.Event()

        self._last_result: Optional[AlgorithmResult] = None
        self._last_report: Optional[PlaybackReport] = None
        self._comparison: List[ComparisonEntry] = []

    @property
    def state(self) -> SolutionState:
        """Get current state machine state."""
        return self._state

    @property
    def game(self) -> GameState:
        """Get the live game."""
        return self._game

    @property
    def board(self) -> Board:
        """Get the live board."""
        return self._game.board

    @property
    def strategy_name(self) -> str:
        """Get current strategy name."""
        return self._strategy_name

    @property
    def is_busy(self) -> bool:
        """True while searching, replaying or comparing."""
        return self._state != SolutionState.IDLE

    @property
    def last_result(self) -> Optional[AlgorithmResult]:
        """Result of the most recent auto-solve search."""
        return self._last_result

    @property
    def last_report(self) -> Optional[PlaybackReport]:
        """Report of the most recent replay."""
        return self._last_report

    @property
    def comparison_results(self) -> List[ComparisonEntry]:
        """Ranked entries of the most recent comparison."""
        return list(self._comparison)

    def set_strategy(self, strategy_name: str) -> None:
        """
        Change the solving strategy.

        Args:
            strategy_name: Name of strategy to use

        Raises:
            ValueError: If the strategy is not registered
        """
        get_strategy_class(strategy_name)
        self._strategy_name = strategy_name
        self._game.selected_algorithm = strategy_name
        logger.info(f"Strategy changed to: {strategy_name}")

    def set_progress_callback(self, callback: Optional[Callable[[ProgressSnapshot], None]]) -> None:
        """Route runner progress snapshots to callback."""
        self._runner.progress_callback = callback

    def slide(self, target: int) -> bool:
        """
        Apply a manual move.

        Args:
            target: Cell index the blank moves into

        Returns:
            True if the move was applied
        """
        if self.is_busy:
            logger.debug(f"Ignoring manual move to {target} while {self._state.name}")
            return False
        return self._game.slide(target)

    def stop(self) -> None:
        """
        Request cancellation of the current search, replay or comparison.

        A stop that arrives before a job starts cancels that job; the flag
        is cleared when a job finishes.
        """
        if self.is_busy:
            logger.info(f"Stop requested while {self._state.name}")
        self._cancel_flag.set()

    def new_game(self) -> None:
        """Scramble a new board (ignored while busy)."""
        if self.is_busy:
            return
        self._game.reset()
        self._last_result = None
        self._last_report = None
        self._comparison = []

    async def auto_solve(
        self,
        budget: Optional[SearchBudget] = None,
        on_step: Optional[BoardCallback] = None
    ) -> Optional[PlaybackReport]:
        """
        Single-strategy mode: search, then replay the solution.

        Args:
            budget: Optional node/time limits for the search
            on_step: Called after every replayed move

        Returns:
            PlaybackReport if a solution was found and replayed,
            None if busy, already won, or the search failed
        """
        if self.is_busy or self._game.win:
            return None

        self._last_report = None
        self._state = SolutionState.SOLVING
        logger.info(f"State[SOLVING]: running {self._strategy_name}")

        try:
            result = await self._runner.solve(
                self._game.board, self._strategy_name,
                budget=budget, cancel_flag=self._cancel_flag
            )
            self._last_result = result

            if not result.found:
                logger.info(f"State[SOLVING]: no solution ({result.status})")
                return None

            self._state = SolutionState.PLAYING
            logger.info(f"State[PLAYING]: replaying {result.moves} moves")

            def apply_step(board: Board, move: Move, step: int) -> None:
                self._game.slide(move.target)
                if on_step is not None:
                    on_step(self._game.board, move, step)

            report = await self._player.play_result(
                result, self._game.board,
                on_step=apply_step,
                cancel_flag=self._cancel_flag,
                optimal=get_strategy_class(result.strategy_name).optimal,
            )
            self._last_report = report
            return report
        finally:
            self._cancel_flag.clear()
            self._state = SolutionState.IDLE
            logger.info("State[IDLE]")

    async def compare(self) -> List[ComparisonEntry]:
        """
        Comparison mode: rank all strategies on a snapshot of the live board.

        Returns:
            Ranked entries, or an empty list if busy
        """
        if self.is_busy:
            return []

        self._state = SolutionState.COMPARING
        snapshot = self._game.board
        logger.info("State[COMPARING]: running all strategies")

        try:
            self._comparison = await self._runner.compare_all(snapshot, cancel_flag=self._cancel_flag)
            return list(self._comparison)
        finally:
            self._cancel_flag.clear()
            self._state = SolutionState.IDLE
            logger.info("State[IDLE]")
