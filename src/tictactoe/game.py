"""Core rules, turn order and outcome detection for a 3x3 tic-tac-toe game."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Union

logger = logging.getLogger(__name__)

Player = str  # "X" or "O"

EMPTY = ""
BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE


# ---------- Errors ----------


class GameError(Exception):
    """Base class for errors raised by the game engine."""


class InvalidPosition(GameError, ValueError):
    """Position is not an integer in [0, 9)."""


def _check_position(position: object) -> None:
    # bool is an int subclass but never a valid cell
    if isinstance(position, bool) or not isinstance(position, int):
        raise InvalidPosition(f"position must be an integer, got {position!r}")
    if not 0 <= position < CELL_COUNT:
        raise InvalidPosition(f"position {position} outside [0, {CELL_COUNT})")


# ---------- Addressing ----------


def row_col_to_index(row: int, col: int) -> int:
    """Map a 0-based (row, col) pair to its row-major board position."""
    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        raise InvalidPosition(f"row/col out of range: ({row}, {col})")
    return row * BOARD_SIZE + col


def index_to_row_col(index: int) -> Tuple[int, int]:
    """Inverse of row_col_to_index."""
    _check_position(index)
    return divmod(index, BOARD_SIZE)


def _build_winning_lines() -> Tuple[Tuple[int, int, int], ...]:
    span = range(BOARD_SIZE)
    rows = [tuple(row_col_to_index(r, c) for c in span) for r in span]
    cols = [tuple(row_col_to_index(r, c) for r in span) for c in span]
    diagonals = [
        tuple(row_col_to_index(i, i) for i in span),
        tuple(row_col_to_index(i, BOARD_SIZE - 1 - i) for i in span),
    ]
    return tuple(rows + cols + diagonals)


# Detection order: rows, then columns, then the two diagonals.
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = _build_winning_lines()


# ---------- Status ----------


@dataclass(frozen=True)
class InProgress:
    pass


@dataclass(frozen=True)
class Won:
    winner: Player
    line: Tuple[int, int, int]


@dataclass(frozen=True)
class Tied:
    pass


GameStatus = Union[InProgress, Won, Tied]


def evaluate_board(board: List[str]) -> GameStatus:
    """
    Classify a board: the first completed line in WINNING_LINES order wins,
    otherwise a full board is a tie, otherwise play continues.
    """
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return Won(winner=v, line=(a, b, c))
    if all(cell != EMPTY for cell in board):
        return Tied()
    return InProgress()


@dataclass(frozen=True)
class Snapshot:
    board: Tuple[str, ...]
    current_player: Player
    status: GameStatus

    @property
    def game_over(self) -> bool:
        return not isinstance(self.status, InProgress)

    def status_text(self) -> str:
        if isinstance(self.status, Won):
            return f"{self.status.winner} wins"
        if isinstance(self.status, Tied):
            return "Tie"
        return "Playing"

    def to_dict(self) -> Dict[str, object]:
        """JSON-friendly view consumed by the web UI."""
        status = self.status
        if isinstance(status, Won):
            tag, winner, line = "won", status.winner, list(status.line)
        elif isinstance(status, Tied):
            tag, winner, line = "tied", None, []
        else:
            tag, winner, line = "in_progress", None, []
        return {
            "board": list(self.board),
            "currentPlayer": self.current_player,
            "status": tag,
            "winner": winner,
            "winningLine": line,
            "gameOver": self.game_over,
            "statusText": self.status_text(),
        }


class RejectReason(str, enum.Enum):
    GAME_OVER = "game_over"
    CELL_OCCUPIED = "cell_occupied"


@dataclass(frozen=True)
class MoveRejected:
    """A well-formed move that could not be played; ``snapshot`` is the untouched state."""

    reason: RejectReason
    position: int
    snapshot: Snapshot

    @property
    def message(self) -> str:
        if self.reason is RejectReason.GAME_OVER:
            return "Game already finished"
        return f"Cell {self.position} already occupied"


MoveResult = Union[Snapshot, MoveRejected]


# ---------- Engine ----------


@dataclass
class GameEngine:
    board: List[str] = field(default_factory=lambda: [EMPTY] * CELL_COUNT)
    # First entry is the player to move
    players: List[Player] = field(default_factory=lambda: ["X", "O"])
    game_over: bool = False
    outcome: GameStatus = field(default_factory=InProgress)

    @property
    def current_player(self) -> Player:
        return self.players[0]

    def new_game(self) -> Snapshot:
        """Clear the board, hand the first move to X and return the fresh state."""
        self.board = [EMPTY] * CELL_COUNT
        self.players = ["X", "O"]
        self.game_over = False
        self.outcome = InProgress()
        logger.debug("New game started")
        return self.snapshot()

    def snapshot(self) -> Snapshot:
        return Snapshot(
            board=tuple(self.board),
            current_player=self.current_player,
            status=self.outcome,
        )

    def apply_move(self, position: int) -> MoveResult:
        """
        Place the current player's mark at ``position``.

        Returns the new Snapshot, or a MoveRejected when the game is over or
        the cell is taken. Raises InvalidPosition for anything outside [0, 9).
        Only a returned Snapshot reflects a change of state.
        """
        try:
            _check_position(position)
        except InvalidPosition:
            logger.warning("Rejected invalid position %r", position)
            raise

        if self.game_over:
            logger.info("Move at %d ignored: game over", position)
            return MoveRejected(RejectReason.GAME_OVER, position, self.snapshot())
        if self.board[position] != EMPTY:
            logger.info("Move at %d ignored: cell occupied", position)
            return MoveRejected(RejectReason.CELL_OCCUPIED, position, self.snapshot())

        player = self.current_player
        self.board[position] = player
        logger.debug("%s played %d", player, position)

        status = evaluate_board(self.board)
        if isinstance(status, InProgress):
            self.players.reverse()
        else:
            self.game_over = True
            self.outcome = status
            logger.debug("Game finished: %s", status)
        return self.snapshot()

