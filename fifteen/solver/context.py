"""
Solution Context Module - Shared context for strategy execution.
"""

import asyncio
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .board import Board


@dataclass(frozen=True)
class SearchBudget:
    """
    Caller-supplied limits for one strategy run.

    Attributes:
        max_nodes: Upper bound on nodes; only tightens a strategy's own cap
        max_time: Timeout in seconds; overrides the strategy's default
    """
    max_nodes: Optional[int] = None
    max_time: Optional[float] = None

    def node_limit(self, default: int) -> int:
        """
        Effective node cap for a strategy.

        Args:
            default: Strategy's built-in cap

        Returns:
            The smaller of default and max_nodes
        """
        if self.max_nodes is None:
            return default
        return min(default, self.max_nodes)


@dataclass
class SolutionContext:
    """
    Shared context passed to strategies containing the start board,
    budget, cancellation and live progress counters.

    Strategies call checkpoint() at their suspension points. The
    orchestrator reads nodes_explored and extras from another task
    to publish progress at its own cadence.

    Attributes:
        board: Start board (immutable, so strategies never share mutable state)
        budget: Node/time limits
        cancel_flag: Event set by the host to stop the run
        start_time: perf_counter() when the run started
        nodes_explored: Latest node count reported by the strategy
        extras: Latest strategy-specific statistics
        time_slice: Longest stretch in seconds a strategy should run between yields
        last_yield: perf_counter() at the most recent checkpoint
    """
    board: Board
    budget: SearchBudget = field(default_factory=SearchBudget)
    cancel_flag: threading.Event = field(default_factory=threading.Event)
    start_time: float = field(default_factory=time.perf_counter)
    nodes_explored: int = 0
    extras: Dict[str, Any] = field(default_factory=dict)
    time_slice: float = 0.02
    last_yield: float = field(default_factory=time.perf_counter)

    def is_cancelled(self) -> bool:
        """
        Check if cancellation was requested.

        Returns:
            True if strategy should stop execution
        """
        return self.cancel_flag.is_set()

    def cancel(self) -> None:
        """Request cancellation; observed at the next checkpoint."""
        self.cancel_flag.set()

    def update(self, nodes_explored: int, **extras: Any) -> None:
        """
        Record live statistics without yielding.

        Args:
            nodes_explored: Current node count
            **extras: Strategy-specific values (depth, queue_size, ...)
        """
        self.nodes_explored = nodes_explored
        if extras:
            self.extras.update(extras)

    def should_yield(self, iterations: int, every: int) -> bool:
        """
        Whether a strategy loop has reached a suspension point.

        True every `every` iterations, or sooner once time_slice seconds
        have passed since the last checkpoint.
        """
        if iterations % every == 0:
            return True
        return time.perf_counter() - self.last_yield >= self.time_slice

    async def checkpoint(self, nodes_explored: int, **extras: Any) -> bool:
        """
        Suspension point: record progress, yield to the event loop and
        report whether the run should stop.

        A pending timeout is delivered here as CancelledError.

        Args:
            nodes_explored: Current node count
            **extras: Strategy-specific values

        Returns:
            True if cancellation was requested
        """
        self.update(nodes_explored, **extras)
        await asyncio.sleep(0)
        self.last_yield = time.perf_counter()
        return self.is_cancelled()

    def elapsed_time(self) -> float:
        """
        Get seconds elapsed since the run started.

        Returns:
            Elapsed time in seconds
        """
        return time.perf_counter() - self.start_time
