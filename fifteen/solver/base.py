"""
Base Strategy Module - Abstract base class for search strategies.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from .context import SolutionContext
from .move import Move
from .solution import AlgorithmResult


class SolverStrategy(ABC):
    """
    Abstract base class for all search strategies.

    Subclasses must implement the solve() coroutine and define the
    class attributes below.

    Attributes:
        name: Short identifier used by the registry
        label: Display name for progress and reports
        description: Human-readable description for UI
        timeout_sec: Default timeout for this strategy in a comparison
        optimal: True if found paths are guaranteed shortest
        yield_every: Iterations between suspension points
    """
    name: str = "base"
    label: str = "Base"
    description: str = "Base strategy"
    timeout_sec: float = 20.0
    optimal: bool = False
    yield_every: int = 1000

    @abstractmethod
    async def solve(self, context: SolutionContext) -> AlgorithmResult:
        """
        Search from context.board toward the goal.

        Must await context.checkpoint() whenever
        context.should_yield(iterations, yield_every) is True, and return
        a cancelled result if the checkpoint reports True.

        Args:
            context: Solution context with board, budget and cancellation

        Returns:
            AlgorithmResult for this run
        """
        pass

    def _build_result(
        self,
        context: SolutionContext,
        found: bool,
        path: Sequence[Move],
        nodes_explored: int,
        was_cancelled: bool = False,
        **extras: Any
    ) -> AlgorithmResult:
        """Build AlgorithmResult from computation results."""
        context.update(nodes_explored, **extras)
        return AlgorithmResult(
            found=found,
            path=tuple(path),
            nodes_explored=nodes_explored,
            elapsed_time=context.elapsed_time(),
            cancelled=was_cancelled,
            strategy_name=self.name,
            extras=dict(context.extras),
        )
