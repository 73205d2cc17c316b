"""
Runner Module - Timeout races, progress reporting and strategy comparison.

Every strategy run is a coroutine raced against a timer with
asyncio.wait_for. Strategies only suspend at their checkpoints, so a
timeout or cancellation takes effect at the next checkpoint. Progress
snapshots come from a separate ticker task on a fixed wall-clock cadence,
independent of how often the strategy itself yields.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from .board import Board
from .base import SolverStrategy
from .context import SearchBudget, SolutionContext
from .factory import create_strategy, get_strategy_names
from .solution import AlgorithmResult, ComparisonEntry

logger = logging.getLogger(__name__)


# Order the comparison harness runs strategies in
COMPARISON_ORDER = ("greedy", "bfs", "wastar", "beam", "astar", "idastar")


class ProgressStatus(str, Enum):
    """Lifecycle of one strategy run as seen by the host."""
    STARTING = "starting"
    RUNNING = "running"
    SOLUTION_FOUND = "solution_found"
    COMPLETED = "completed"
    TIMEOUT = "timeout"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ProgressSnapshot:
    """
    Point-in-time view of a running strategy.

    Attributes:
        strategy_name: Registry name
        label: Display name
        nodes_explored: Nodes counted so far
        elapsed_time: Seconds since the run started
        status: Current lifecycle status
        extras: Strategy statistics (queue_size, depth, ...) and comparison
            position (algorithm_index, total_algorithms)
    """
    strategy_name: str
    label: str
    nodes_explored: int
    elapsed_time: float
    status: ProgressStatus
    extras: Dict[str, Any] = field(default_factory=dict)


ProgressCallback = Callable[[ProgressSnapshot], None]


class SolverRunner:
    """
    Runs strategies under timeouts and reports their progress.

    Single-strategy runs use single_timeout unless the budget sets
    max_time. Comparison runs use each strategy's own timeout_sec.

    Example:
        runner = SolverRunner(progress_callback=print)
        result = asyncio.run(runner.solve(board, "astar"))
    """

    def __init__(
        self,
        progress_callback: Optional[ProgressCallback] = None,
        progress_interval: float = 0.1,
        comparison_pause: float = 0.5,
        single_timeout: float = 60.0,
        strategy_options: Optional[Dict[str, Dict[str, Any]]] = None
    ):
        """
        Initialize the runner.

        Args:
            progress_callback: Receives ProgressSnapshot objects
            progress_interval: Seconds between periodic snapshots
            comparison_pause: Seconds to pause between comparison runs
            single_timeout: Timeout for single-strategy solves
            strategy_options: Per-strategy constructor kwargs, keyed by name
        """
        self.progress_callback = progress_callback
        self.progress_interval = progress_interval
        self.comparison_pause = comparison_pause
        self.single_timeout = single_timeout
        self.strategy_options = strategy_options or {}

    async def solve(
        self,
        board: Board,
        strategy_name: str,
        budget: Optional[SearchBudget] = None,
        cancel_flag: Optional[threading.Event] = None
    ) -> AlgorithmResult:
        """
        Single-strategy mode: run one strategy against the board.

        Args:
            board: Start board
            strategy_name: Registry name of the strategy
            budget: Optional node/time limits
            cancel_flag: Event the host sets to stop the search

        Returns:
            AlgorithmResult
        """
        budget = budget or SearchBudget()
        timeout = budget.max_time if budget.max_time is not None else self.single_timeout
        return await self.run_strategy(
            board, strategy_name, budget=budget, timeout=timeout,
            cancel_flag=cancel_flag, success_status=ProgressStatus.SOLUTION_FOUND
        )

    async def run_strategy(
        self,
        board: Board,
        strategy_name: str,
        budget: Optional[SearchBudget] = None,
        timeout: Optional[float] = None,
        cancel_flag: Optional[threading.Event] = None,
        extras: Optional[Dict[str, Any]] = None,
        success_status: ProgressStatus = ProgressStatus.COMPLETED
    ) -> AlgorithmResult:
        """
        Race one strategy against its timeout.

        An already-solved board short-circuits without running the
        strategy. A lost race produces timed_out=True with the node count
        the strategy had reported so far.

        Args:
            board: Start board
            strategy_name: Registry name
            budget: Optional node/time limits
            timeout: Seconds; defaults to budget.max_time, then the strategy's timeout_sec
            cancel_flag: Event the host sets to stop the search
            extras: Values added to every progress snapshot of this run
            success_status: Status reported when a solution is found

        Returns:
            AlgorithmResult

        Raises:
            ValueError: If strategy_name is not registered
        """
        strategy = create_strategy(strategy_name, **self.strategy_options.get(strategy_name, {}))
        budget = budget or SearchBudget()
        extras = extras or {}

        if board.is_goal():
            logger.info(f"[{strategy.label}] Board already solved")
            result = AlgorithmResult(found=True, strategy_name=strategy.name)
            self._emit(strategy, result.nodes_explored, 0.0, success_status, extras)
            return result

        if timeout is None:
            timeout = budget.max_time if budget.max_time is not None else strategy.timeout_sec

        context = SolutionContext(
            board=board,
            budget=budget,
            cancel_flag=cancel_flag if cancel_flag is not None else threading.Event()
        )

        logger.info(f"[{strategy.label}] Starting (timeout {timeout:.1f}s)")
        self._emit(strategy, 0, 0.0, ProgressStatus.STARTING, extras)
        ticker = asyncio.ensure_future(self._tick(strategy, context, extras))

        try:
            result = await asyncio.wait_for(strategy.solve(context), timeout)
        except asyncio.TimeoutError:
            logger.info(
                f"[{strategy.label}] Timed out after {timeout:.1f}s, "
                f"{context.nodes_explored} nodes explored"
            )
            result = AlgorithmResult(
                found=False,
                nodes_explored=context.nodes_explored,
                elapsed_time=context.elapsed_time(),
                timed_out=True,
                strategy_name=strategy.name,
                extras=dict(context.extras),
            )
        except Exception as e:
            logger.exception(f"[{strategy.label}] Search failed")
            result = AlgorithmResult(
                found=False,
                nodes_explored=context.nodes_explored,
                elapsed_time=context.elapsed_time(),
                strategy_name=strategy.name,
                extras={**context.extras, "error": str(e)},
            )
        finally:
            ticker.cancel()

        status = self._final_status(result, success_status)
        logger.info(
            f"[{strategy.label}] {status.value}: {result.moves} moves, "
            f"{result.nodes_explored} nodes, {result.elapsed_time:.3f}s"
        )
        self._emit(
            strategy, result.nodes_explored, result.elapsed_time, status,
            {**result.extras, **extras}
        )
        return result

    async def compare_all(
        self,
        board: Board,
        cancel_flag: Optional[threading.Event] = None,
        strategy_names: Sequence[str] = COMPARISON_ORDER
    ) -> List[ComparisonEntry]:
        """
        Comparison mode: run every strategy in turn on the same board.

        Boards are immutable, so every strategy searches from an identical
        snapshot. If cancelled, strategies that have not run yet are
        entered as cancelled results so the report stays complete.

        Args:
            board: Start board
            cancel_flag: Event the host sets to stop the comparison
            strategy_names: Strategies to run, in order

        Returns:
            Ranked ComparisonEntry list, one per strategy
        """
        cancel_flag = cancel_flag if cancel_flag is not None else threading.Event()
        names = [name for name in strategy_names if name in get_strategy_names()]
        total = len(names)
        entries: List[ComparisonEntry] = []

        logger.info(f"Starting algorithm comparison of {total} strategies")

        for index, name in enumerate(names, start=1):
            label = create_strategy(name).label

            if cancel_flag.is_set():
                result = AlgorithmResult(found=False, cancelled=True, strategy_name=name)
            else:
                logger.info(f"--- Testing {label} ({index}/{total}) ---")
                result = await self.run_strategy(
                    board, name,
                    cancel_flag=cancel_flag,
                    extras={"algorithm_index": index, "total_algorithms": total},
                )
                if index < total and self.comparison_pause > 0:
                    await asyncio.sleep(self.comparison_pause)

            entries.append(ComparisonEntry(strategy_name=name, label=label, result=result))

        ranked = rank_results(entries)
        logger.info(
            "Comparison complete: "
            + ", ".join(f"{e.rank}. {e.label} ({e.result.status})" for e in ranked)
        )
        return ranked

    async def _tick(
        self,
        strategy: SolverStrategy,
        context: SolutionContext,
        extras: Dict[str, Any]
    ) -> None:
        """Emit RUNNING snapshots every progress_interval until cancelled."""
        while True:
            await asyncio.sleep(self.progress_interval)
            self._emit(
                strategy, context.nodes_explored, context.elapsed_time(),
                ProgressStatus.RUNNING, {**context.extras, **extras}
            )

    def _emit(
        self,
        strategy: SolverStrategy,
        nodes_explored: int,
        elapsed_time: float,
        status: ProgressStatus,
        extras: Dict[str, Any]
    ) -> None:
        """Send a snapshot to the progress callback, if any."""
        if self.progress_callback is None:
            return
        self.progress_callback(ProgressSnapshot(
            strategy_name=strategy.name,
            label=strategy.label,
            nodes_explored=nodes_explored,
            elapsed_time=elapsed_time,
            status=status,
            extras=dict(extras),
        ))

    @staticmethod
    def _final_status(result: AlgorithmResult, success_status: ProgressStatus) -> ProgressStatus:
        if result.found:
            return success_status
        if result.timed_out:
            return ProgressStatus.TIMEOUT
        if result.cancelled:
            return ProgressStatus.CANCELLED
        return ProgressStatus.FAILED


def rank_results(entries: Sequence[ComparisonEntry]) -> List[ComparisonEntry]:
    """
    Order comparison entries for the report.

    Successful results come first, ordered by fewer moves and then lower
    elapsed time. Failed and timed-out results keep their run order.

    Args:
        entries: Entries in run order

    Returns:
        New list with rank set (1 = best)
    """
    def sort_key(entry: ComparisonEntry):
        result = entry.result
        if result.found:
            return (0, result.moves, result.elapsed_time)
        return (1, 0, 0.0)

    ranked = sorted(entries, key=sort_key)
    return [replace(entry, rank=rank) for rank, entry in enumerate(ranked, start=1)]


async def solve(
    board: Board,
    strategy_name: str,
    budget: Optional[SearchBudget] = None,
    progress_callback: Optional[ProgressCallback] = None,
    cancel_flag: Optional[threading.Event] = None
) -> AlgorithmResult:
    """
    Solve board with one strategy using a default runner.

    Args:
        board: Start board
        strategy_name: Registry name
        budget: Optional node/time limits
        progress_callback: Receives ProgressSnapshot objects
        cancel_flag: Event the host sets to stop the search

    Returns:
        AlgorithmResult
    """
    runner = SolverRunner(progress_callback=progress_callback)
    return await runner.solve(board, strategy_name, budget=budget, cancel_flag=cancel_flag)


async def compare_all(
    board: Board,
    progress_callback: Optional[ProgressCallback] = None,
    cancel_flag: Optional[threading.Event] = None
) -> List[ComparisonEntry]:
    """Run all strategies on board with a default runner and rank them."""
    runner = SolverRunner(progress_callback=progress_callback)
    return await runner.compare_all(board, cancel_flag=cancel_flag)
