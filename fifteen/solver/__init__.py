"""
Solver Package - Search engine for the 15-puzzle.

This package provides six interchangeable search strategies behind one
interface, a runner that races them against timeouts and compares them,
and a player that replays a found path against a live board.

Public API:
    - Board: Immutable board representation
    - Move: A single slide of the blank
    - AlgorithmResult: Outcome of one strategy run
    - ComparisonEntry: One row of a comparison report
    - SolutionContext / SearchBudget: Per-run context and limits
    - SolverStrategy: Abstract base for strategies
    - SolverRunner: Timeouts, progress and comparison
    - SolutionPlayer: Cancellable replay
    - scramble(), is_legal_move(), apply_move(), is_goal()
    - solve(), compare_all(), playback(): Host-facing coroutines
    - create_strategy(): Factory function
    - get_strategy_names(): List available strategies
    - get_strategy_info(): Get strategy metadata

Usage:
    import asyncio
    from fifteen.solver import scramble_by_walk, solve, playback

    board = scramble_by_walk(20)
    result = asyncio.run(solve(board, "astar"))

    if result.found:
        final = asyncio.run(playback(result.path, board, move_delay=0))
        assert final.is_goal()
"""

# Core data structures
from .board import Board, GOAL_BOARD, InvalidBoardError, is_goal
from .move import Move, IllegalMoveError, neighbors, is_legal_move, apply_move
from .heuristic import manhattan
from .scrambler import scramble, shuffle, scramble_by_walk, is_solvable, inversion_count
from .solution import AlgorithmResult, ComparisonEntry
from .context import SolutionContext, SearchBudget

# Strategy framework
from .base import SolverStrategy
from .factory import (
    create_strategy,
    get_strategy_class,
    get_strategy_names,
    get_strategy_info,
    get_default_strategy_name,
    register_strategy,
)

# Import strategies to register them
from . import strategies

# Orchestration
from .runner import (
    SolverRunner,
    ProgressSnapshot,
    ProgressStatus,
    COMPARISON_ORDER,
    rank_results,
    solve,
    compare_all,
)
from .player import SolutionPlayer, PlaybackReport, playback

__all__ = [
    # Data structures
    "Board",
    "GOAL_BOARD",
    "InvalidBoardError",
    "Move",
    "IllegalMoveError",
    "AlgorithmResult",
    "ComparisonEntry",
    "SolutionContext",
    "SearchBudget",
    # Board operations
    "is_goal",
    "neighbors",
    "is_legal_move",
    "apply_move",
    "manhattan",
    "scramble",
    "shuffle",
    "scramble_by_walk",
    "is_solvable",
    "inversion_count",
    # Strategy framework
    "SolverStrategy",
    "create_strategy",
    "get_strategy_class",
    "get_strategy_names",
    "get_strategy_info",
    "get_default_strategy_name",
    "register_strategy",
    # Orchestration
    "SolverRunner",
    "ProgressSnapshot",
    "ProgressStatus",
    "COMPARISON_ORDER",
    "rank_results",
    "solve",
    "compare_all",
    "SolutionPlayer",
    "PlaybackReport",
    "playback",
]
