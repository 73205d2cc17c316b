"""
Solver Worker Module for the Fifteen Puzzle Solver

Provides a background QThread worker that runs an auto-solve or a
strategy comparison off the UI thread. Communicates with the UI via Qt
signals for thread-safe status updates.
"""

import asyncio
import logging
from typing import Optional

from PyQt5.QtCore import QThread, pyqtSignal

from fifteen.solver import Board, Move, ProgressSnapshot, SearchBudget
from fifteen.solution_manager import SolutionManager


# Configure module logger
logger = logging.getLogger(__name__)


class SolverWorker(QThread):
    """
    Background worker thread for one solve or comparison.

    Each start() runs a single job on a private asyncio event loop:
    1. Auto-solve: search with the manager's strategy, then replay
    2. Compare: run every strategy on a snapshot of the live board

    Signals:
        status_changed(str): Emitted when worker status changes
        progress_changed(object): Emitted for every ProgressSnapshot
        board_changed(object, object, int): Emitted after each replayed
            move as (Board, Move, step)
        solve_finished(object): Emitted with the PlaybackReport, or None
            when no solution was replayed
        comparison_finished(object): Emitted with the ranked entry list
        error_occurred(str): Emitted when an error occurs

    Example:
        worker = SolverWorker(manager, mode=SolverWorker.MODE_COMPARE)
        worker.comparison_finished.connect(ui.show_table)
        worker.start()
        # ...
        worker.request_stop()
        worker.wait()
    """

    # Signals for UI updates (thread-safe)
    status_changed = pyqtSignal(str)
    progress_changed = pyqtSignal(object)
    board_changed = pyqtSignal(object, object, int)
    solve_finished = pyqtSignal(object)
    comparison_finished = pyqtSignal(object)
    error_occurred = pyqtSignal(str)

    MODE_SOLVE = "solve"
    MODE_COMPARE = "compare"

    def __init__(self, manager: SolutionManager, mode: str = MODE_SOLVE,
                 budget: Optional[SearchBudget] = None):
        """
        Initialize the solver worker.

        Args:
            manager: Session whose live board is solved or compared
            mode: MODE_SOLVE or MODE_COMPARE
            budget: Optional node/time limits for auto-solve
        """
        super().__init__()
        if mode not in (self.MODE_SOLVE, self.MODE_COMPARE):
            raise ValueError(f"Unknown worker mode: {mode}")

        self._manager = manager
        self._mode = mode
        self._budget = budget
        self._running = False

    @property
    def mode(self) -> str:
        return self._mode

    def run(self):
        """
        Worker entry point. Called when thread starts.

        Runs the job to completion on a fresh event loop and emits the
        result. Errors are reported through error_occurred instead of
        escaping the thread.
        """
        self._running = True
        self._manager.set_progress_callback(self._on_progress)

        logger.info(f"Solver worker started ({self._mode})")
        self.status_changed.emit("Running")

        try:
            if self._mode == self.MODE_COMPARE:
                entries = asyncio.run(self._manager.compare())
                self.comparison_finished.emit(entries)
            else:
                report = asyncio.run(self._manager.auto_solve(
                    budget=self._budget, on_step=self._on_step
                ))
                self.solve_finished.emit(report)
            self.status_changed.emit("Finished")
        except Exception as e:
            logger.exception("Error in solver worker")
            self.error_occurred.emit(str(e))
            self.status_changed.emit("Error")
        finally:
            self._manager.set_progress_callback(None)
            self._running = False
            logger.info("Solver worker stopped")

    def request_stop(self):
        """
        Request the worker to stop gracefully.

        The search or replay stops at its next checkpoint.
        Use wait() after calling this to block until stopped.
        """
        logger.info("Stop requested")
        self._manager.stop()

    def is_running(self) -> bool:
        """
        Check if the worker is currently running.

        Returns:
            True if a job is active, False otherwise
        """
        return self._running

    def _on_progress(self, snapshot: ProgressSnapshot) -> None:
        self.progress_changed.emit(snapshot)

    def _on_step(self, board: Board, move: Move, step: int) -> None:
        self.board_changed.emit(board, move, step)
