"""Value types shared by the board, rules engine, history and coordinator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple

Coord = Tuple[int, int]


class Stone(IntEnum):
    # Same encoding as the board cells: -1 black, 0 empty, 1 white
    BLACK = -1
    EMPTY = 0
    WHITE = 1

    @property
    def opponent(self) -> "Stone":
        if self is Stone.EMPTY:
            raise ValueError("empty cell has no opponent")
        return Stone(-self.value)

    @property
    def label(self) -> str:
        return {Stone.BLACK: "Black", Stone.WHITE: "White", Stone.EMPTY: "Empty"}[self]


class Phase(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


class Status(str, Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    DRAW = "draw"


class Rejection(str, Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    OCCUPIED = "occupied"
    GAME_OVER = "game_over"
    NOTHING_TO_UNDO = "nothing_to_undo"
    UNDO_HORIZON_REACHED = "undo_horizon_reached"
    GAME_NOT_ACTIVE = "game_not_active"


@dataclass(frozen=True)
class Move:
    row: int
    col: int
    player: Stone
    move_number: int
    timestamp: int

    @property
    def coord(self) -> Coord:
        return self.row, self.col


@dataclass(frozen=True)
class Outcome:
    status: Status = Status.IN_PROGRESS
    winner: Optional[Stone] = None
    winning_line: Tuple[Coord, ...] = ()

    @classmethod
    def in_progress(cls) -> "Outcome":
        return cls()

    @classmethod
    def win(cls, player: Stone, line) -> "Outcome":
        return cls(Status.WIN, Stone(player), tuple(tuple(c) for c in line))

    @classmethod
    def draw(cls) -> "Outcome":
        return cls(Status.DRAW)

    @property
    def is_terminal(self) -> bool:
        return self.status is not Status.IN_PROGRESS


@dataclass(frozen=True)
class Session:
    """Turn order, outcome and phase of one game."""

    current_player: Stone
    move_number: int
    outcome: Outcome
    phase: Phase


@dataclass(frozen=True)
class Rejected:
    reason: Rejection

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class Placed:
    move: Move
    outcome: Outcome
    # None once the game has ended
    next_player: Optional[Stone] = None


@dataclass(frozen=True)
class Undone:
    move: Move


@dataclass(frozen=True)
class HistoryStats:
    total_moves: int = 0
    black_moves: int = 0
    white_moves: int = 0
    average_think_time_ms: int = 0
    evicted_moves: int = 0
