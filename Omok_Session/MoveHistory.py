"""Bounded move log with undo-by-pop and explicit front eviction."""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterator, List, Optional, Tuple

from .models import HistoryStats, Move, Stone
from .utils import timer

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1000


class MoveHistory:
    """
    Ordered log of applied moves.

    When the log grows past max_size the oldest moves are dropped and returned
    to the caller; dropped moves are gone for good, so undo stops at the oldest
    retained move (the eviction horizon).
    """

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self.max_size = max_size
        self._moves: deque[Move] = deque()
        self.evicted_count = 0

    def __len__(self) -> int:
        return len(self._moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(tuple(self._moves))

    @property
    def is_partial(self) -> bool:
        return self.evicted_count > 0

    def append(self, move: Move) -> List[Move]:
        """Add a move; return the moves evicted from the front (usually none)."""
        self._moves.append(move)
        return self._evict_overflow()

    def pop_last(self) -> Optional[Move]:
        if not self._moves:
            return None
        return self._moves.pop()

    def peek_last(self) -> Optional[Move]:
        return self._moves[-1] if self._moves else None

    def can_undo(self) -> bool:
        return bool(self._moves)

    def clear(self) -> None:
        self._moves.clear()
        self.evicted_count = 0

    def set_max_size(self, size: int) -> List[Move]:
        if size < 1:
            raise ValueError("max_size must be >= 1")
        self.max_size = size
        return self._evict_overflow()

    def by_player(self, player: Stone) -> Tuple[Move, ...]:
        return tuple(m for m in self._moves if m.player == player)

    def by_move_number(self, move_number: int) -> Optional[Move]:
        for move in self._moves:
            if move.move_number == move_number:
                return move
        return None

    def snapshot(self) -> Tuple[Move, ...]:
        return tuple(self._moves)

    def restore(self, moves, evicted_count: int = 0) -> None:
        self._moves = deque(moves)
        self.evicted_count = evicted_count

    def statistics(self) -> HistoryStats:
        moves = self.snapshot()
        if not moves:
            return HistoryStats(evicted_moves=self.evicted_count)
        gaps = timer.think_times_ms([m.timestamp for m in moves])
        return HistoryStats(
            total_moves=len(moves),
            black_moves=sum(1 for m in moves if m.player == Stone.BLACK),
            white_moves=sum(1 for m in moves if m.player == Stone.WHITE),
            average_think_time_ms=round(sum(gaps) / len(gaps)) if gaps else 0,
            evicted_moves=self.evicted_count,
        )

    def _evict_overflow(self) -> List[Move]:
        evicted = []
        while len(self._moves) > self.max_size:
            evicted.append(self._moves.popleft())
        if evicted:
            self.evicted_count += len(evicted)
            LOGGER.info(
                "History cap %d reached: evicted moves %d..%d",
                self.max_size,
                evicted[0].move_number,
                evicted[-1].move_number,
            )
        return evicted
