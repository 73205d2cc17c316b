"""
Test script for search strategies

Covers:
1. Strategy registry and metadata
2. One-move boards for every strategy
3. Replay validity of every found path
4. Optimal strategies match BFS on short scrambles
5. Cancellation, node budgets and time slicing

Usage:
    python tests/test_strategies.py
"""

import asyncio
import random
import sys
import threading
import time
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fifteen.solver import (
    Board,
    GOAL_BOARD,
    COMPARISON_ORDER,
    SearchBudget,
    SolutionContext,
    apply_move,
    create_strategy,
    get_strategy_class,
    get_strategy_info,
    get_strategy_names,
    get_default_strategy_name,
    manhattan,
    neighbors,
    playback,
    scramble_by_walk,
    shuffle,
)

ALL_STRATEGIES = list(COMPARISON_ORDER)
OPTIMAL_STRATEGIES = ["bfs", "astar", "idastar"]
SUBOPTIMAL_STRATEGIES = ["greedy", "wastar", "beam"]

# One of the 80-move positions, the longest optimal solutions on the 4x4 board
HARD_BOARD = Board.from_rows([
    [14, 13, 7, 11],
    [9, 10, 8, 12],
    [1, 5, 4, 0],
    [2, 6, 3, None],
])


def run_strategy(name, board, budget=None, cancel_flag=None, **kwargs):
    """Run a strategy's solve() directly, bypassing the runner."""
    strategy = create_strategy(name, **kwargs)
    context = SolutionContext(
        board=board,
        budget=budget or SearchBudget(),
        cancel_flag=cancel_flag or threading.Event(),
    )
    return asyncio.run(strategy.solve(context))


def replays_to_goal(board, path) -> bool:
    final = asyncio.run(playback(path, board, move_delay=0))
    return final.is_goal()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def test_all_strategies_registered():
    assert sorted(get_strategy_names()) == sorted(ALL_STRATEGIES)
    assert get_default_strategy_name() == "beam"


def test_strategy_info_has_labels():
    info = {item["name"]: item for item in get_strategy_info()}
    assert info["astar"]["label"] == "A*"
    assert info["idastar"]["label"] == "IDA*"
    assert all(item["description"] for item in info.values())


def test_unknown_strategy_raises():
    with pytest.raises(ValueError):
        create_strategy("dijkstra")
    with pytest.raises(ValueError):
        get_strategy_class("dijkstra")


def test_optimal_flags():
    for name in OPTIMAL_STRATEGIES:
        assert get_strategy_class(name).optimal
    for name in SUBOPTIMAL_STRATEGIES:
        assert not get_strategy_class(name).optimal


def test_timeouts():
    timeouts = {name: get_strategy_class(name).timeout_sec for name in ALL_STRATEGIES}
    assert timeouts == {
        "greedy": 3.0, "bfs": 8.0, "wastar": 20.0,
        "beam": 15.0, "astar": 30.0, "idastar": 45.0,
    }


def test_constructor_overrides():
    assert create_strategy("beam", beam_width=10).beam_width == 10
    assert create_strategy("astar", max_expansions=50).max_expansions == 50
    assert create_strategy("wastar").weight == 2.0
    assert create_strategy("bfs", max_depth=4).max_depth == 4


# ---------------------------------------------------------------------------
# Correctness
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("name", ALL_STRATEGIES)
def test_one_move_board(name):
    board = apply_move(GOAL_BOARD, 14)
    result = run_strategy(name, board)

    assert result.found
    assert result.moves == 1
    assert result.targets == (15,)
    assert result.strategy_name == name
    assert result.nodes_explored >= 0
    assert result.elapsed_time >= 0


@pytest.mark.parametrize("name", ALL_STRATEGIES)
def test_found_paths_replay_to_goal(name):
    rng = random.Random(2024)
    for _ in range(3):
        board = scramble_by_walk(12, rng)
        result = run_strategy(name, board)
        if result.found:
            assert replays_to_goal(board, result.path)


def test_optimal_strategies_match_bfs():
    rng = random.Random(7)
    for _ in range(10):
        board = scramble_by_walk(rng.randint(1, 8), rng)
        shortest = run_strategy("bfs", board)
        assert shortest.found

        for name in ("astar", "idastar"):
            result = run_strategy(name, board)
            assert result.found, name
            assert result.moves == shortest.moves, name


def test_suboptimal_strategies_never_beat_optimum():
    rng = random.Random(13)
    for _ in range(10):
        board = scramble_by_walk(rng.randint(1, 8), rng)
        optimum = run_strategy("bfs", board).moves

        for name in SUBOPTIMAL_STRATEGIES:
            result = run_strategy(name, board, **({"seed": 1} if name == "greedy" else {}))
            if result.found:
                assert result.moves >= optimum, name


def test_optimal_path_is_at_least_heuristic():
    board = scramble_by_walk(14, random.Random(99))
    result = run_strategy("astar", board)
    assert result.found
    assert result.moves >= manhattan(board)


# ---------------------------------------------------------------------------
# Strategy-specific behavior
# ---------------------------------------------------------------------------

def test_bfs_depth_cap_gives_not_found():
    board = scramble_by_walk(10, random.Random(4))
    result = run_strategy("bfs", board, max_depth=3)
    assert not result.found
    assert not result.cancelled
    assert result.path == ()


def test_idastar_depth_cap_gives_not_found():
    board = scramble_by_walk(16, random.Random(4))
    result = run_strategy("idastar", board, max_depth=manhattan(board))
    assert not result.found
    assert result.nodes_explored == 0


def test_idastar_records_threshold():
    board = scramble_by_walk(10, random.Random(21))
    result = run_strategy("idastar", board)
    assert result.found
    assert result.extras["threshold"] == result.moves


def test_greedy_keeps_best_partial_path():
    board = shuffle(random.Random(31))
    result = run_strategy("greedy", board, max_restarts=2, max_moves=30, seed=5)

    assert not result.found
    assert result.moves == 0
    assert len(result.path) > 0

    # Partial path is still a legal sequence from the start board
    current = board
    for move in result.path:
        current = apply_move(current, move.target)
    assert manhattan(current) == result.extras["best_heuristic"]


def test_greedy_with_seed_is_deterministic():
    board = scramble_by_walk(20, random.Random(8))
    a = run_strategy("greedy", board, seed=3)
    b = run_strategy("greedy", board, seed=3)
    assert a.found == b.found
    assert a.path == b.path


def test_greedy_non_worsening_candidates():
    board = scramble_by_walk(12, random.Random(40))
    current_h = manhattan(board)
    strategy = create_strategy("greedy")

    best, best_h, non_worsening = strategy._rank_neighbors(board, current_h)

    scored = [(candidate, manhattan(candidate[0])) for candidate in neighbors(board)]
    assert best_h == min(h for _, h in scored)
    assert manhattan(best[0]) == best_h
    assert non_worsening == [(c, h) for c, h in scored if h <= current_h + 1]


class RecordingRandom(random.Random):
    """Random source that counts choice() calls."""

    def __init__(self, seed=None):
        super().__init__(seed)
        self.calls = 0

    def choice(self, seq):
        self.calls += 1
        return super().choice(seq)


def stuck_ranker(with_escape):
    """_rank_neighbors replacement where no neighbor ever improves."""
    def rank(board, current_h):
        options = neighbors(board)
        escape = [(c, current_h) for c in options] if with_escape else []
        return options[0], current_h, escape
    return rank


def test_greedy_takes_random_escape_after_three_stuck_steps():
    strategy = create_strategy("greedy", max_restarts=1, max_moves=12)
    strategy._rng = RecordingRandom(1)
    strategy._rank_neighbors = stuck_ranker(with_escape=True)

    result = asyncio.run(strategy.solve(SolutionContext(board=HARD_BOARD)))

    # Escapes on stuck steps 4, 8 and 12; the counter resets each time
    assert strategy._rng.calls == 3
    assert result.nodes_explored == 12
    assert not result.found


def test_greedy_abandons_attempt_after_ten_stuck_steps():
    strategy = create_strategy("greedy", max_restarts=1, max_moves=200)
    strategy._rng = RecordingRandom(1)
    strategy._rank_neighbors = stuck_ranker(with_escape=False)

    result = asyncio.run(strategy.solve(SolutionContext(board=HARD_BOARD)))

    assert strategy._rng.calls == 0
    assert result.nodes_explored == 10
    assert len(result.path) == 10


def test_greedy_restart_walk_lengths():
    strategy = create_strategy("greedy", max_restarts=4, max_moves=0, seed=2)
    walks = []

    def record_walk(board, path, steps):
        walks.append(steps)
        return board

    strategy._random_walk = record_walk
    result = asyncio.run(strategy.solve(SolutionContext(board=HARD_BOARD)))

    assert walks == [3, 6, 9]
    assert not result.found
    assert result.extras["best_heuristic"] == manhattan(HARD_BOARD)


def test_greedy_restart_prefix_is_part_of_path():
    strategy = create_strategy("greedy", max_restarts=2, max_moves=0, seed=9)
    result = asyncio.run(strategy.solve(SolutionContext(board=HARD_BOARD)))

    # Restart 1 walks 3 moves and takes no greedy steps
    if manhattan(HARD_BOARD) > result.extras["best_heuristic"]:
        assert len(result.path) == 3
    current = HARD_BOARD
    for move in result.path:
        current = apply_move(current, move.target)
    assert manhattan(current) == result.extras["best_heuristic"]


def test_beam_width_one_follows_lowest_heuristic():
    # Two slides from the goal; each undo strictly lowers the estimate
    board = apply_move(apply_move(GOAL_BOARD, 14), 10)
    result = run_strategy("beam", board, beam_width=1)

    assert result.found
    assert result.targets == (14, 15)
    assert result.nodes_explored == 3


def test_beam_deduplicates_against_all_levels():
    # Blank in the corner: 2 successors, then 2 x 3 minus the start board twice
    result = run_strategy("beam", HARD_BOARD, max_depth=3)
    assert not result.found
    assert result.nodes_explored == 1 + 2 + 4


def test_beam_truncates_to_width():
    result = run_strategy("beam", HARD_BOARD, beam_width=3, max_depth=3)
    assert result.nodes_explored == 1 + 2 + 3


class RecordingContext(SolutionContext):
    """Context that keeps the extras seen at every checkpoint."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.seen = []

    async def checkpoint(self, nodes_explored, **extras):
        self.seen.append(dict(extras))
        return await super().checkpoint(nodes_explored, **extras)


def test_beam_size_never_exceeds_width():
    strategy = create_strategy("beam", beam_width=7, max_depth=40)
    context = RecordingContext(board=HARD_BOARD)

    asyncio.run(strategy.solve(context))

    assert len(context.seen) == 8
    assert all(extras["beam_size"] <= 7 for extras in context.seen)


# ---------------------------------------------------------------------------
# Cancellation and budgets
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("name", ALL_STRATEGIES)
def test_preset_cancel_flag_stops_search(name):
    board = HARD_BOARD
    flag = threading.Event()
    flag.set()

    result = run_strategy(name, board, cancel_flag=flag)

    assert not result.found
    assert result.cancelled
    assert not result.timed_out
    assert result.status == "cancelled"


@pytest.mark.parametrize("name", ["bfs", "astar", "wastar", "beam"])
def test_node_budget_caps_search(name):
    result = run_strategy(name, HARD_BOARD, budget=SearchBudget(max_nodes=300))

    assert not result.found
    assert not result.cancelled
    assert result.nodes_explored <= 300


async def longest_loop_stall(name, duration):
    """Run a strategy on HARD_BOARD and return the longest gap between event loop turns."""
    strategy = create_strategy(name)
    context = SolutionContext(board=HARD_BOARD)
    gaps = []

    async def watch():
        last = time.perf_counter()
        while True:
            await asyncio.sleep(0)
            now = time.perf_counter()
            gaps.append(now - last)
            last = now

    watcher = asyncio.ensure_future(watch())
    try:
        await asyncio.wait_for(strategy.solve(context), timeout=duration)
    except asyncio.TimeoutError:
        pass
    finally:
        watcher.cancel()
        await asyncio.gather(watcher, return_exceptions=True)
    return max(gaps, default=0.0)


@pytest.mark.parametrize("name", ALL_STRATEGIES)
def test_search_never_stalls_event_loop(name):
    stall = asyncio.run(longest_loop_stall(name, duration=0.5))
    assert stall < 0.05, f"{name} held the loop for {stall * 1000:.1f} ms"


def test_should_yield_on_count_or_elapsed_slice():
    context = SolutionContext(board=GOAL_BOARD, time_slice=60.0)
    assert context.should_yield(2000, 1000)
    assert not context.should_yield(1999, 1000)

    context.last_yield -= 61.0
    assert context.should_yield(1999, 1000)


def test_node_budget_never_raises_strategy_cap():
    assert SearchBudget(max_nodes=10).node_limit(500) == 10
    assert SearchBudget(max_nodes=1000).node_limit(500) == 500
    assert SearchBudget().node_limit(500) == 500


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
