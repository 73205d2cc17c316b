"""
Game State Module - Live board, win tracking and persisted snapshot.

The snapshot uses the host's JSON schema:

    {
        "tiles": [0, 1, ..., 14, ""],   # row-major, "" is the blank
        "win": false,
        "startTime": 1700000000000,      # ms since epoch, or null
        "endTime": null,                 # ms since epoch, or null
        "highScore": 42,                 # best completion in seconds, or null
        "gameTime": 0,                   # seconds
        "selectedAlgorithm": "beam"
    }

Loaded boards are validated; a malformed or unsolvable board is replaced
by a fresh scramble instead of being played.
"""

import json
import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from fifteen.solver import (
    Board, GOAL_BOARD, InvalidBoardError,
    apply_move, is_legal_move, is_solvable, shuffle,
    get_default_strategy_name,
)

logger = logging.getLogger(__name__)

# Game state file location (working directory)
GAME_STATE_FILE = Path("game_state.json")


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def format_time(seconds: int) -> str:
    """
    Format a duration as minutes and zero-padded seconds.

    Args:
        seconds: Duration in whole seconds

    Returns:
        String like "3:07"
    """
    minutes, remaining = divmod(int(seconds), 60)
    return f"{minutes}:{remaining:02d}"


@dataclass
class GameState:
    """
    Mutable game session around an immutable Board.

    The timer starts on the first slide. After every slide the board is
    checked for a win; a timed win updates the high score when it beats
    the previous best.

    Attributes:
        board: Current live board
        win: True once the goal was reached
        start_time: ms since epoch of the first slide, or None
        end_time: ms since epoch of the win, or None
        high_score: Best completion time in seconds, or None
        game_time: Seconds taken by the finished (or last saved) game
        selected_algorithm: Strategy the host last selected
    """
    board: Board
    win: bool = False
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    high_score: Optional[int] = None
    game_time: int = 0
    selected_algorithm: str = ""

    @classmethod
    def new(cls, rng: Optional[random.Random] = None, high_score: Optional[int] = None,
            selected_algorithm: str = "") -> 'GameState':
        """
        Start a game on a fresh scramble.

        Args:
            rng: Random source for the scramble
            high_score: Best time carried over from a previous session
            selected_algorithm: Strategy name (registry default if empty)

        Returns:
            GameState
        """
        return cls(
            board=shuffle(rng),
            high_score=high_score,
            selected_algorithm=selected_algorithm or get_default_strategy_name(),
        )

    def slide(self, target: int, now: Optional[int] = None) -> bool:
        """
        Move the tile at target into the blank.

        Args:
            target: Cell index the blank moves into
            now: Timestamp in ms (current time if None)

        Returns:
            True if the move was applied, False if illegal or the game is won
        """
        if self.win or not is_legal_move(self.board, target):
            return False

        now = now if now is not None else now_ms()
        self.board = apply_move(self.board, target)

        if self.start_time is None:
            self.start_time = now

        self.check_win(now)
        return True

    def check_win(self, now: Optional[int] = None) -> bool:
        """
        Mark the game won if the board is solved.

        Args:
            now: Timestamp in ms (current time if None)

        Returns:
            True if the board is solved
        """
        if not self.board.is_goal():
            return False

        self.win = True
        if self.start_time is not None:
            self.end_time = now if now is not None else now_ms()
            self.game_time = (self.end_time - self.start_time) // 1000
            if self.high_score is None or self.game_time < self.high_score:
                logger.info(f"New best time: {format_time(self.game_time)}")
                self.high_score = self.game_time
        return True

    def elapsed_seconds(self, now: Optional[int] = None) -> int:
        """Seconds on the game clock (frozen once the game is won)."""
        if self.start_time is None:
            return 0
        end = self.end_time if self.end_time is not None else (now if now is not None else now_ms())
        return max(0, (end - self.start_time) // 1000)

    def reset(self, rng: Optional[random.Random] = None, board: Optional[Board] = None) -> None:
        """Start a new game on board (fresh scramble if None), keeping the high score."""
        self.board = board if board is not None else shuffle(rng)
        self.win = False
        self.start_time = None
        self.end_time = None
        self.game_time = 0

    def reset_high_score(self) -> None:
        """Forget the best completion time."""
        self.high_score = None

    def set_winning_state(self, now: Optional[int] = None) -> None:
        """Put the tiles in solved order and run the win check."""
        self.board = GOAL_BOARD
        self.check_win(now)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the persisted schema.

        Returns:
            JSON-compatible dictionary
        """
        return {
            "tiles": self.board.to_serialized(),
            "win": self.win,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "highScore": self.high_score,
            "gameTime": self.game_time,
            "selectedAlgorithm": self.selected_algorithm,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], rng: Optional[random.Random] = None) -> 'GameState':
        """
        Restore from the persisted schema.

        Unknown keys are ignored and missing or mistyped fields fall back
        to defaults. A board that breaks the tile invariant or cannot be
        solved is replaced by a fresh scramble, and the session timers
        are cleared with it.

        Args:
            data: Parsed JSON object
            rng: Random source for the replacement scramble

        Returns:
            GameState
        """
        high_score = _optional_int(data.get("highScore"))
        selected = data.get("selectedAlgorithm")
        if not isinstance(selected, str) or not selected:
            selected = get_default_strategy_name()

        try:
            board = Board.from_serialized(data.get("tiles"))
            if not is_solvable(board):
                raise InvalidBoardError("Board is not solvable")
        except InvalidBoardError as e:
            logger.warning(f"Discarding saved board: {e}, starting a new game")
            return cls.new(rng=rng, high_score=high_score, selected_algorithm=selected)

        return cls(
            board=board,
            win=bool(data.get("win", False)) and board.is_goal(),
            start_time=_optional_int(data.get("startTime")),
            end_time=_optional_int(data.get("endTime")),
            high_score=high_score,
            game_time=_optional_int(data.get("gameTime")) or 0,
            selected_algorithm=selected,
        )


def _optional_int(value: Any) -> Optional[int]:
    """Return value as int if it is a real number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def load_game_state(path: Optional[Path] = None, rng: Optional[random.Random] = None) -> GameState:
    """
    Load the saved game.

    Args:
        path: State file (GAME_STATE_FILE if None)
        rng: Random source used when a new game must be started

    Returns:
        Restored GameState, or a new game if the file is missing or invalid
    """
    path = path or GAME_STATE_FILE
    if not path.exists():
        logger.debug("Game state file not found, starting a new game")
        return GameState.new(rng=rng)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    except (json.JSONDecodeError, ValueError, IOError) as e:
        logger.warning(f"Failed to load game state: {e}, starting a new game")
        return GameState.new(rng=rng)

    state = GameState.from_dict(data, rng=rng)
    logger.debug(f"Game state loaded: win={state.win}, high score={state.high_score}")
    return state


def save_game_state(state: GameState, path: Optional[Path] = None) -> None:
    """
    Save the game to disk.

    Args:
        state: Game state to save
        path: State file (GAME_STATE_FILE if None)
    """
    path = path or GAME_STATE_FILE
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(state.to_dict(), f, indent=2)
        logger.debug("Game state saved")
    except IOError as e:
        logger.error(f"Failed to save game state: {e}")
