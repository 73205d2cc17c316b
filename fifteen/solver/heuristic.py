"""
Heuristic Module - Manhattan distance estimate for the 15-puzzle.
"""

from typing import List

from .board import Board, SIZE, CELL_COUNT


# _DISTANCE[tile][index] = moves tile needs from index to its home cell
_DISTANCE: List[List[int]] = [
    [
        abs(index // SIZE - tile // SIZE) + abs(index % SIZE - tile % SIZE)
        for index in range(CELL_COUNT)
    ]
    for tile in range(CELL_COUNT - 1)
]


def manhattan(board: Board) -> int:
    """
    Sum of row and column offsets of every tile from its target cell.

    Admissible and consistent for single-slide moves (each slide changes
    the estimate by exactly 1), and zero only for the solved board.

    Args:
        board: Board to estimate

    Returns:
        Non-negative lower bound on moves to solve
    """
    total = 0
    for index, tile in enumerate(board.tiles):
        if tile is not None:
            total += _DISTANCE[tile][index]
    return total
