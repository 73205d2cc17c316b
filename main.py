"""
Fifteen Puzzle Solver - Entry Point

Loads the saved game, solves it with one strategy (replaying the moves
onto the board) or compares all strategies, and saves the game again.

Example:
    python main.py
    python main.py --strategy astar --depth 25
    python main.py --compare --seed 7
"""

import sys
import random
import signal
import logging
import argparse
from typing import List, Optional

from PyQt5.QtCore import QCoreApplication, QTimer

from fifteen.settings import load_settings, save_settings
from fifteen.game_state import load_game_state, save_game_state, format_time
from fifteen.solution_manager import SolutionManager
from fifteen.solver_worker import SolverWorker
from fifteen.solver import (
    Board, Move, ComparisonEntry, PlaybackReport, ProgressSnapshot, ProgressStatus,
    SolverRunner, SolutionPlayer, get_strategy_info, get_strategy_names,
    scramble_by_walk,
)


logger = logging.getLogger(__name__)


def setup_logging(debug: bool) -> None:
    """Configure logging - output to both console and file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),  # Console output
            logging.FileHandler("solver.log", mode='w', encoding='utf-8')  # File output
        ]
    )


class Application:
    """
    Command line application controller.

    Builds the runner and player from settings, then runs one solve or
    comparison on a SolverWorker and prints its signals to the console.
    """

    def __init__(self, args: argparse.Namespace):
        """
        Initialize the application.

        Args:
            args: Parsed command line arguments (override saved settings)
        """
        self.args = args
        self.settings = load_settings()

        # Effective debug mode: CLI flag overrides saved setting
        self.debug_mode = args.debug or self.settings.get("debug_enabled", False)

        self.strategy_name = args.strategy or self.settings.get("strategy_name", "")
        self.comparison_mode = args.compare or self.settings.get("comparison_mode", False)
        self.manager: Optional[SolutionManager] = None
        self.worker: Optional[SolverWorker] = None
        self.exit_code = 1
        self.interrupted = False

    def setup(self) -> None:
        """Load or scramble the board and build the session."""
        rng = random.Random(self.args.seed) if self.args.seed is not None else None
        game = load_game_state(rng=rng)

        if self.args.depth is not None:
            game.reset(board=scramble_by_walk(self.args.depth, rng))
            logger.info(f"Scrambled board with a {self.args.depth}-move walk")
        elif self.args.new or game.win:
            game.reset(rng)
            logger.info("Scrambled a new board")

        runner = SolverRunner(
            progress_interval=self.settings["progress_interval_ms"] / 1000,
            comparison_pause=self.settings["comparison_pause_ms"] / 1000,
            single_timeout=self.settings["single_timeout_sec"],
        )
        move_delay = 0.0 if self.args.no_playback else self.settings["move_delay_ms"] / 1000
        player = SolutionPlayer(move_delay=move_delay)

        self.manager = SolutionManager(
            game=game,
            strategy_name=self.strategy_name or game.selected_algorithm,
            runner=runner,
            player=player,
        )

        if self.debug_mode:
            logger.info("Debug mode enabled")
        logger.info(f"Application initialized, strategy: {self.manager.strategy_name}")

    def run(self, app: QCoreApplication) -> int:
        """
        Run the selected mode on a background SolverWorker.

        The Qt event loop delivers the worker's signals on this thread
        and quits when the worker finishes. Ctrl+C requests a stop.

        Args:
            app: Application event loop

        Returns:
            Exit code
        """
        print_board(self.manager.board, "Start board")

        mode = SolverWorker.MODE_COMPARE if self.comparison_mode else SolverWorker.MODE_SOLVE
        self.worker = SolverWorker(self.manager, mode=mode)

        # Connect worker signals to console output
        self.worker.progress_changed.connect(self._on_progress)
        self.worker.board_changed.connect(self._on_step)
        self.worker.solve_finished.connect(self._on_solve_finished)
        self.worker.comparison_finished.connect(self._on_comparison_finished)
        self.worker.error_occurred.connect(self._on_error)
        self.worker.finished.connect(app.quit)

        previous_handler = signal.signal(signal.SIGINT, self._on_interrupt)
        # Hand control back to Python regularly so SIGINT is noticed
        wakeup = QTimer()
        wakeup.timeout.connect(lambda: None)
        wakeup.start(200)

        self.worker.start()
        app.exec_()
        wakeup.stop()
        self.worker.wait()
        signal.signal(signal.SIGINT, previous_handler)

        save_game_state(self.manager.game)
        self.settings["strategy_name"] = self.manager.strategy_name
        save_settings(self.settings)
        return 130 if self.interrupted else self.exit_code

    def _on_interrupt(self, signum, frame) -> None:
        logger.info("Interrupted")
        self.interrupted = True
        if self.worker is not None:
            self.worker.request_stop()

    def _on_solve_finished(self, report: Optional[PlaybackReport]) -> None:
        result = self.manager.last_result

        if report is None:
            status = result.status if result is not None else "skipped"
            print(f"\nNo solution replayed ({status})")
            self.exit_code = 1
            return

        print_board(report.board, "Final board")
        print(
            f"\n{self.manager.strategy_name}: {report.moves_applied} moves, "
            f"{report.nodes_explored} nodes, {report.elapsed_time:.3f}s"
        )
        if report.note:
            print(report.note)

        game = self.manager.game
        if game.win and game.high_score is not None:
            print(f"Time {format_time(game.game_time)}, best {format_time(game.high_score)}")
        self.exit_code = 0 if report.completed else 1

    def _on_comparison_finished(self, entries: List[ComparisonEntry]) -> None:
        print_comparison(entries)
        self.exit_code = 0

    def _on_error(self, error_msg: str) -> None:
        """Handle worker error."""
        logger.error(f"Worker error: {error_msg}")
        self.exit_code = 1

    def _on_progress(self, snapshot: ProgressSnapshot) -> None:
        """Print progress on one line, finishing it on a final status."""
        line = (
            f"\r[{snapshot.label}] {snapshot.status.value:<14} "
            f"{snapshot.nodes_explored:>9} nodes {snapshot.elapsed_time:7.2f}s"
        )
        final = snapshot.status not in (ProgressStatus.STARTING, ProgressStatus.RUNNING)
        sys.stdout.write(line + ("\n" if final else ""))
        sys.stdout.flush()

    def _on_step(self, board: Board, move: Move, step: int) -> None:
        logger.debug(f"Step {step}: {move}")
        if not self.args.no_playback:
            print_board(board, f"Move {step} ({move})")


def print_board(board: Board, title: str) -> None:
    print(f"\n{title}:")
    print(board)


def print_comparison(entries: List[ComparisonEntry]) -> None:
    """Print the ranked comparison table."""
    print()
    print(f"{'#':>2}  {'Strategy':<12} {'Status':<10} {'Moves':>6} {'Nodes':>9} {'Time':>8}")
    for entry in entries:
        result = entry.result
        moves = str(result.moves) if result.found else "-"
        print(
            f"{entry.rank:>2}  {entry.label:<12} {result.status:<10} {moves:>6} "
            f"{result.nodes_explored:>9} {result.elapsed_time:>7.2f}s"
        )


def print_strategies() -> None:
    for info in get_strategy_info():
        print(f"{info['name']:<8} {info['description']}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Fifteen Puzzle Solver - Search strategy runner and comparison"
    )
    parser.add_argument(
        "--strategy", "-s",
        choices=get_strategy_names(),
        help="Strategy to solve with (default: saved setting)"
    )
    parser.add_argument(
        "--compare", "-c",
        action="store_true",
        help="Run every strategy on the board and print a ranked table"
    )
    parser.add_argument(
        "--depth",
        type=int,
        help="Scramble with a random walk of this many moves instead of the saved board"
    )
    parser.add_argument(
        "--new", "-n",
        action="store_true",
        help="Start from a fresh uniform scramble"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for scrambling"
    )
    parser.add_argument(
        "--no-playback",
        action="store_true",
        help="Apply the solution without delay or per-move output"
    )
    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="List available strategies and exit"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args(argv)


def main():
    """Initialize and run the Fifteen Puzzle Solver."""
    args = parse_args()

    if args.list:
        print_strategies()
        sys.exit(0)

    app = QCoreApplication(sys.argv)

    application = Application(args)
    setup_logging(application.debug_mode)
    application.setup()

    sys.exit(application.run(app))


if __name__ == "__main__":
    main()
