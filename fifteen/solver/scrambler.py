"""
Scrambler Module - Random solvable starting boards.
"""

import logging
import random
from typing import List, Optional

from .board import Board, BLANK, SIZE, CELL_COUNT, GOAL_BOARD
from .move import neighbors

logger = logging.getLogger(__name__)


def inversion_count(board: Board) -> int:
    """
    Count pairs of tiles that appear in the wrong order, ignoring the blank.

    Args:
        board: Board to inspect

    Returns:
        Number of inversions
    """
    values = [t for t in board.tiles if t is not BLANK]
    inversions = 0
    for i in range(len(values)):
        for j in range(i + 1, len(values)):
            if values[i] > values[j]:
                inversions += 1
    return inversions


def is_solvable(board: Board) -> bool:
    """
    Check the 4x4 solvability invariant.

    The board is reachable from the goal iff the inversion count and the
    blank's row (1-indexed from the top) have the same parity.

    Args:
        board: Board to check

    Returns:
        True if a sequence of slides can solve the board
    """
    blank_row_from_top = board.blank_index // SIZE + 1
    return inversion_count(board) % 2 == blank_row_from_top % 2


def shuffle(rng: Optional[random.Random] = None) -> Board:
    """
    Fisher-Yates shuffle of all 16 cells, retried until solvable.

    Half of all permutations pass, so this terminates quickly.

    Args:
        rng: Random source (module-level random if None)

    Returns:
        Random solvable Board
    """
    rng = rng or random.Random()
    attempts = 0

    while True:
        attempts += 1
        cells: List = list(GOAL_BOARD.tiles)
        for i in range(CELL_COUNT - 1, 0, -1):
            j = rng.randint(0, i)
            cells[i], cells[j] = cells[j], cells[i]

        board = Board(tiles=tuple(cells))
        if is_solvable(board):
            logger.debug(f"Scrambled board accepted after {attempts} attempt(s)")
            return board


def scramble() -> Board:
    """New solvable starting board."""
    return shuffle()


def scramble_by_walk(depth: int, rng: Optional[random.Random] = None) -> Board:
    """
    Random walk of depth slides from the goal with no immediate backtrack.

    The optimal solution length is at most depth, which makes these boards
    useful when exhaustive strategies must finish.

    Args:
        depth: Number of random slides
        rng: Random source

    Returns:
        Solvable Board
    """
    rng = rng or random.Random()
    board = GOAL_BOARD
    last_move = None

    for _ in range(depth):
        candidates = neighbors(board)
        if last_move is not None:
            candidates = [(b, m) for b, m in candidates if not m.reverses(last_move)]
        board, last_move = rng.choice(candidates)

    return board
