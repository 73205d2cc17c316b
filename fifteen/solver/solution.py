"""
Solution Module - Results of strategy runs and comparison entries.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .move import Move


@dataclass(frozen=True)
class AlgorithmResult:
    """
    Outcome of one strategy invocation.

    A search that runs out of nodes, depth or time is an ordinary negative
    result (found=False), never an exception.

    Attributes:
        found: True if path reaches the goal
        path: Ordered moves from the start board (partial for failed greedy runs)
        nodes_explored: Nodes counted by the strategy
        elapsed_time: Wall-clock seconds
        timed_out: True if the orchestrator's timer won the race
        cancelled: True if the run was stopped by the user
        strategy_name: Registry name of the strategy
        extras: Strategy-specific statistics (depth, queue size, ...)
    """
    found: bool
    path: Tuple[Move, ...] = ()
    nodes_explored: int = 0
    elapsed_time: float = 0.0
    timed_out: bool = False
    cancelled: bool = False
    strategy_name: str = ""
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def moves(self) -> int:
        """Number of moves in the solution (0 when not found)."""
        return len(self.path) if self.found else 0

    @property
    def targets(self) -> Tuple[int, ...]:
        """Path as plain blank target indices."""
        return tuple(move.target for move in self.path)

    @property
    def status(self) -> str:
        """Short outcome label: solved, timeout, cancelled or failed."""
        if self.found:
            return "solved"
        if self.timed_out:
            return "timeout"
        if self.cancelled:
            return "cancelled"
        return "failed"


@dataclass(frozen=True)
class ComparisonEntry:
    """
    One strategy's row in a comparison report.

    Attributes:
        strategy_name: Registry name
        label: Display name
        result: The strategy's result
        rank: 1-based position after ranking (0 before ranking)
    """
    strategy_name: str
    label: str
    result: AlgorithmResult
    rank: int = 0

    @property
    def timed_out(self) -> bool:
        """True if the strategy lost its race against the timer."""
        return self.result.timed_out

    @property
    def found(self) -> bool:
        return self.result.found
