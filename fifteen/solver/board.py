"""
Board Module - Immutable board representation for the 15-puzzle.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Iterable, List, Optional, Sequence, Tuple, Union

SIZE = 4
CELL_COUNT = SIZE * SIZE

# Blank marker inside Board.tiles
BLANK = None

# Blank marker used by the persisted JSON schema
SERIALIZED_BLANK = ""

Tile = Optional[int]


class InvalidBoardError(ValueError):
    """Raised when cells are not a permutation of 0..14 plus one blank."""


@dataclass(frozen=True)
class Board:
    """
    Immutable 4x4 board state.

    Cells are stored row-major in a 16-tuple. Tiles are the integers
    0..14 and the blank is None. Tile v belongs at index v, so the
    solved board is 0..14 followed by the blank.

    Boards produced by the move generator are trusted; boards coming
    from outside the solver should be built with from_tiles() or
    from_serialized(), which validate the permutation.

    Attributes:
        tiles: 16-tuple of cell values
    """
    tiles: Tuple[Tile, ...]

    @classmethod
    def from_tiles(cls, tiles: Iterable[Tile]) -> 'Board':
        """
        Create a validated Board from any iterable of cells.

        Args:
            tiles: 16 cells, tiles 0..14 and one None

        Returns:
            Board instance

        Raises:
            InvalidBoardError: If cells are not a valid permutation
        """
        cells = tuple(tiles)
        validate_tiles(cells)
        return cls(tiles=cells)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Tile]]) -> 'Board':
        """
        Create a validated Board from a 4x4 list of rows.

        Args:
            rows: Row-major 2D list

        Returns:
            Board instance
        """
        return cls.from_tiles(cell for row in rows for cell in row)

    @classmethod
    def from_serialized(cls, cells: Sequence[Union[int, str, None]]) -> 'Board':
        """
        Create a Board from the persisted form, where the blank is "".

        Args:
            cells: 16 values, ints for tiles and "" (or None) for the blank

        Returns:
            Board instance

        Raises:
            InvalidBoardError: If the cells are malformed
        """
        if not isinstance(cells, (list, tuple)):
            raise InvalidBoardError(f"Expected a list of cells, got {type(cells).__name__}")

        converted: List[Tile] = []
        for cell in cells:
            if cell == SERIALIZED_BLANK or cell is None:
                converted.append(BLANK)
            elif isinstance(cell, bool) or not isinstance(cell, int):
                raise InvalidBoardError(f"Invalid cell value: {cell!r}")
            else:
                converted.append(cell)
        return cls.from_tiles(converted)

    @cached_property
    def key(self) -> str:
        """Canonical key: comma-joined cells with the blank as ""."""
        return ",".join(SERIALIZED_BLANK if t is None else str(t) for t in self.tiles)

    @cached_property
    def blank_index(self) -> int:
        """Cell index of the blank."""
        return self.tiles.index(BLANK)

    def is_goal(self) -> bool:
        """Check if this is the solved arrangement."""
        return self.key == GOAL_KEY

    def get_cell(self, row: int, col: int) -> Tile:
        """
        Get value at specific cell position.

        Args:
            row: Row index
            col: Column index

        Returns:
            Tile value, or None for the blank or out-of-range positions
        """
        if 0 <= row < SIZE and 0 <= col < SIZE:
            return self.tiles[row * SIZE + col]
        return None

    def swap_blank(self, target: int) -> 'Board':
        """
        Swap the blank with the tile at target, without legality checks.

        Args:
            target: Cell index the blank moves into

        Returns:
            New Board
        """
        cells = list(self.tiles)
        blank = self.blank_index
        cells[blank], cells[target] = cells[target], cells[blank]
        return Board(tiles=tuple(cells))

    def to_rows(self) -> List[List[Tile]]:
        """Convert to a mutable 4x4 list of rows."""
        return [list(self.tiles[r * SIZE:(r + 1) * SIZE]) for r in range(SIZE)]

    def to_serialized(self) -> List[Union[int, str]]:
        """Convert to the persisted list form ("" for the blank)."""
        return [SERIALIZED_BLANK if t is None else t for t in self.tiles]

    def __str__(self) -> str:
        lines = []
        for row in self.to_rows():
            lines.append(" ".join("  ." if t is None else f"{t:3d}" for t in row))
        return "\n".join(lines)


def validate_tiles(cells: Tuple[Tile, ...]) -> None:
    """
    Check the board invariant: 16 cells, each of 0..14 once, one blank.

    Raises:
        InvalidBoardError: If the invariant does not hold
    """
    if len(cells) != CELL_COUNT:
        raise InvalidBoardError(f"Expected {CELL_COUNT} cells, got {len(cells)}")
    if cells.count(BLANK) != 1:
        raise InvalidBoardError("Board must contain exactly one blank")

    values = [t for t in cells if t is not BLANK]
    if any(isinstance(t, bool) or not isinstance(t, int) for t in values):
        raise InvalidBoardError("Tiles must be integers")
    if sorted(values) != list(range(CELL_COUNT - 1)):
        raise InvalidBoardError("Tiles must be a permutation of 0..14")


def row_col(index: int) -> Tuple[int, int]:
    """Row and column of a cell index."""
    return divmod(index, SIZE)


def is_goal(board: Board) -> bool:
    """Win check used after every manual or automated move."""
    return board.is_goal()


GOAL_BOARD = Board(tiles=tuple(range(CELL_COUNT - 1)) + (BLANK,))
GOAL_KEY = GOAL_BOARD.key
