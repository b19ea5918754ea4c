"""Rules engine: placement, turn order, win/draw detection and single-step undo."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..Board import Board
from ..models import Move, Outcome, Placed, Rejected, Stone
from ..utils import timer
from . import referee


@dataclass(frozen=True)
class RulesSnapshot:
    cells: tuple
    stone_count: int
    current_player: Stone
    move_number: int
    outcome: Outcome


class RulesEngine:
    """
    Owns the Board and the turn state (current player, next move number, outcome).

    The board is only ever mutated through place() and undo_last(); callers get
    results back instead of reaching into the grid.
    """

    def __init__(self, board_size=15):
        self.board = Board(size=board_size)
        self.current_player = Stone.BLACK
        self.move_number = 1
        self.outcome = Outcome.in_progress()

    @property
    def size(self) -> int:
        return self.board.size

    def can_place(self, row: int, col: int) -> bool:
        return referee.check_move(self.board, row, col, self.outcome.is_terminal) is None

    def place(self, row: int, col: int, timestamp: Optional[int] = None):
        """Place the current player's stone at (row, col). Returns Placed or Rejected."""
        reason = referee.check_move(self.board, row, col, self.outcome.is_terminal)
        if reason is not None:
            return Rejected(reason)

        player = self.current_player
        self.board.place(row, col, player)
        move = Move(
            row=row,
            col=col,
            player=player,
            move_number=self.move_number,
            timestamp=timer.now_ms() if timestamp is None else int(timestamp),
        )
        self.move_number += 1

        line = self.board.five_line(row, col)
        if line is not None:
            self.outcome = Outcome.win(player, line)
            return Placed(move, self.outcome, None)
        if self.board.is_full():
            self.outcome = Outcome.draw()
            return Placed(move, self.outcome, None)

        self.current_player = player.opponent
        return Placed(move, self.outcome, self.current_player)

    def undo_last(self, move: Move) -> None:
        """
        Reverse `move`, which must be the most recently applied one.
        Only the coordinator calls this, with the move popped from its history.
        """
        self.board.remove(move.row, move.col)
        self.current_player = move.player
        self.move_number = move.move_number
        self.outcome = Outcome.in_progress()

    def snapshot(self) -> RulesSnapshot:
        return RulesSnapshot(
            cells=self.board.rows(),
            stone_count=self.board.stone_count,
            current_player=self.current_player,
            move_number=self.move_number,
            outcome=self.outcome,
        )

    def restore(self, state: RulesSnapshot) -> None:
        """Restore board and turn state from snapshot()."""
        board = Board(size=len(state.cells))
        board.cells = [list(row) for row in state.cells]
        board.stone_count = state.stone_count
        self.board = board
        self.current_player = state.current_player
        self.move_number = state.move_number
        self.outcome = state.outcome
