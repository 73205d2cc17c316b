"""
Move Module - Slides of the blank and legal successor generation.
"""

from dataclasses import dataclass
from typing import List, Tuple

from .board import Board, SIZE, CELL_COUNT, row_col


# Blank offsets in emission order: up, down, left, right
DIRECTIONS: Tuple[Tuple[str, int, int], ...] = (
    ("up", -1, 0),
    ("down", 1, 0),
    ("left", 0, -1),
    ("right", 0, 1),
)


class IllegalMoveError(ValueError):
    """Raised when a move target is not adjacent to the blank."""


@dataclass(frozen=True)
class Move:
    """
    A single slide, identified by the cell the blank moves into.

    The tile at target slides into origin, the cell the blank vacates.

    Attributes:
        origin: Blank index before the move
        target: Blank index after the move
    """
    origin: int
    target: int

    @property
    def direction(self) -> str:
        """Direction the blank travels ("up", "down", "left", "right")."""
        delta = self.target - self.origin
        if delta == -SIZE:
            return "up"
        if delta == SIZE:
            return "down"
        return "left" if delta == -1 else "right"

    def reverses(self, other: 'Move') -> bool:
        """True if this move puts the blank back where other took it from."""
        return self.target == other.origin and self.origin == other.target

    def __str__(self) -> str:
        return f"{self.direction}->{self.target}"


def neighbors(board: Board) -> List[Tuple[Board, Move]]:
    """
    Enumerate legal successor boards in a fixed order (up, down, left, right).

    Args:
        board: Current board state

    Returns:
        List of (new_board, move) pairs; 2 for a corner blank,
        3 on an edge, 4 in the interior
    """
    blank = board.blank_index
    row, col = row_col(blank)
    result = []

    for _, dr, dc in DIRECTIONS:
        new_row = row + dr
        new_col = col + dc
        if 0 <= new_row < SIZE and 0 <= new_col < SIZE:
            target = new_row * SIZE + new_col
            result.append((board.swap_blank(target), Move(origin=blank, target=target)))

    return result


def is_legal_move(board: Board, target: int) -> bool:
    """
    Check whether the blank can move into target.

    Args:
        board: Current board state
        target: Cell index the blank would move into

    Returns:
        True if target is orthogonally adjacent to the blank
    """
    if not isinstance(target, int) or not 0 <= target < CELL_COUNT:
        return False
    blank_row, blank_col = row_col(board.blank_index)
    row, col = row_col(target)
    return abs(blank_row - row) + abs(blank_col - col) == 1


def apply_move(board: Board, target: int) -> Board:
    """
    Slide the tile at target into the blank.

    Args:
        board: Current board state
        target: Cell index the blank moves into

    Returns:
        New Board; the input board is unchanged

    Raises:
        IllegalMoveError: If target is not adjacent to the blank
    """
    if not is_legal_move(board, target):
        raise IllegalMoveError(
            f"Cell {target} is not adjacent to the blank at {board.blank_index}"
        )
    return board.swap_blank(target)
