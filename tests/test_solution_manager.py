"""
Test script for the SolutionManager session state machine

Usage:
    python tests/test_solution_manager.py
"""

import asyncio
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fifteen.game_state import GameState
from fifteen.solution_manager import SolutionManager, SolutionState
from fifteen.solver import (
    Board,
    GOAL_BOARD,
    SolverRunner,
    SolutionPlayer,
    apply_move,
    scramble_by_walk,
)


HARD_BOARD = Board.from_rows([
    [14, 13, 7, 11],
    [9, 10, 8, 12],
    [1, 5, 4, 0],
    [2, 6, 3, None],
])


def make_manager(board, strategy_name="astar") -> SolutionManager:
    return SolutionManager(
        game=GameState(board=board),
        strategy_name=strategy_name,
        runner=SolverRunner(comparison_pause=0, progress_interval=0.01),
        player=SolutionPlayer(move_delay=0),
    )


def test_initial_state():
    manager = make_manager(GOAL_BOARD)
    assert manager.state == SolutionState.IDLE
    assert not manager.is_busy
    assert manager.strategy_name == "astar"
    assert manager.game.selected_algorithm == "astar"


def test_unknown_saved_strategy_falls_back_to_default():
    game = GameState(board=GOAL_BOARD, selected_algorithm="quantum")
    manager = SolutionManager(game=game)
    assert manager.strategy_name == "beam"


def test_set_strategy_rejects_unknown_name():
    manager = make_manager(GOAL_BOARD)
    with pytest.raises(ValueError):
        manager.set_strategy("quantum")
    assert manager.strategy_name == "astar"

    manager.set_strategy("idastar")
    assert manager.strategy_name == "idastar"


def test_auto_solve_replays_onto_live_board():
    board = scramble_by_walk(7, random.Random(3))
    manager = make_manager(board)
    states = []

    def on_step(live_board, move, step):
        states.append(manager.state)
        # Manual moves are refused while the replay runs
        assert not manager.slide(move.origin)

    report = asyncio.run(manager.auto_solve(on_step=on_step))

    assert report is not None
    assert report.completed
    assert report.board == GOAL_BOARD
    assert manager.board == GOAL_BOARD
    assert manager.game.win
    assert manager.state == SolutionState.IDLE
    assert states and all(s == SolutionState.PLAYING for s in states)
    assert manager.last_result.moves == report.moves_applied
    assert report.note == ""


def test_auto_solve_starts_timer_and_sets_high_score():
    manager = make_manager(apply_move(GOAL_BOARD, 14))
    asyncio.run(manager.auto_solve())

    game = manager.game
    assert game.win
    assert game.start_time is not None
    assert game.high_score == game.game_time


def test_auto_solve_non_optimal_strategy_adds_note():
    manager = make_manager(scramble_by_walk(5, random.Random(1)), strategy_name="wastar")
    report = asyncio.run(manager.auto_solve())
    assert report.completed
    assert report.note == "Solution may not be optimal"


def test_auto_solve_failure_leaves_board_untouched():
    board = scramble_by_walk(10, random.Random(2))
    manager = SolutionManager(
        game=GameState(board=board),
        strategy_name="bfs",
        runner=SolverRunner(strategy_options={"bfs": {"max_depth": 1}}),
        player=SolutionPlayer(move_delay=0),
    )

    report = asyncio.run(manager.auto_solve())

    assert report is None
    assert manager.board == board
    assert manager.last_result.status == "failed"
    assert manager.state == SolutionState.IDLE


def test_auto_solve_ignored_after_win():
    manager = make_manager(GOAL_BOARD)
    manager.game.win = True
    assert asyncio.run(manager.auto_solve()) is None
    assert manager.last_result is None


def test_stop_during_replay():
    board = scramble_by_walk(8, random.Random(4))
    manager = make_manager(board)

    def on_step(live_board, move, step):
        if step == 1:
            manager.stop()

    report = asyncio.run(manager.auto_solve(on_step=on_step))

    assert report.cancelled
    assert report.moves_applied == 1
    assert not manager.game.win
    assert manager.state == SolutionState.IDLE


def test_stop_before_start_cancels_next_job():
    board = HARD_BOARD
    manager = make_manager(board)

    manager.stop()
    report = asyncio.run(manager.auto_solve())

    assert report is None
    assert manager.last_result.status == "cancelled"
    assert manager.board == board
    assert manager.state == SolutionState.IDLE


def test_stop_request_does_not_outlive_its_job():
    manager = make_manager(HARD_BOARD)
    manager.stop()
    asyncio.run(manager.auto_solve())

    manager.game.reset(board=apply_move(GOAL_BOARD, 14))
    report = asyncio.run(manager.auto_solve())

    assert report.completed
    assert manager.game.win


def test_compare_uses_snapshot_and_keeps_board():
    board = scramble_by_walk(5, random.Random(5))
    manager = make_manager(board)

    entries = asyncio.run(manager.compare())

    assert len(entries) == 6
    assert manager.comparison_results == entries
    assert manager.board == board
    assert manager.state == SolutionState.IDLE


def test_manual_slide_when_idle():
    manager = make_manager(apply_move(GOAL_BOARD, 14))
    assert manager.slide(15)
    assert manager.game.win


def test_new_game_clears_results():
    manager = make_manager(apply_move(GOAL_BOARD, 14))
    asyncio.run(manager.auto_solve())
    manager.new_game()

    assert not manager.game.win
    assert manager.last_result is None
    assert manager.last_report is None
    assert manager.comparison_results == []


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
