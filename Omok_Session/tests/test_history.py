"""MoveHistory: bounded retention, eviction reporting, queries and statistics."""

import pytest

from Omok_Session.models import Move, Stone
from Omok_Session.MoveHistory import MoveHistory


def make_moves(n, start_ts=1000, step_ms=500):
    moves = []
    for i in range(n):
        player = Stone.BLACK if i % 2 == 0 else Stone.WHITE
        moves.append(Move(row=i, col=0, player=player, move_number=i + 1, timestamp=start_ts + i * step_ms))
    return moves


def test_pop_and_peek_on_empty_history_return_none():
    h = MoveHistory()
    assert h.pop_last() is None
    assert h.peek_last() is None
    assert not h.can_undo()


def test_append_pop_is_lifo():
    h = MoveHistory()
    moves = make_moves(3)
    for m in moves:
        assert h.append(m) == []
    assert h.peek_last() == moves[-1]
    assert h.pop_last() == moves[-1]
    assert h.pop_last() == moves[-2]
    assert len(h) == 1


def test_eviction_returns_oldest_moves_and_is_counted():
    h = MoveHistory(max_size=3)
    moves = make_moves(5)
    evicted = []
    for m in moves:
        evicted.extend(h.append(m))
    assert evicted == moves[:2]
    assert h.snapshot() == tuple(moves[2:])
    assert h.evicted_count == 2
    assert h.is_partial


def test_shrinking_max_size_evicts_oldest():
    h = MoveHistory(max_size=10)
    moves = make_moves(4)
    for m in moves:
        h.append(m)
    assert h.set_max_size(1) == moves[:3]
    assert h.max_size == 1
    assert h.snapshot() == (moves[3],)


def test_clear_resets_eviction_horizon():
    h = MoveHistory(max_size=1)
    for m in make_moves(3):
        h.append(m)
    h.clear()
    assert len(h) == 0
    assert not h.is_partial


def test_queries_are_read_only_copies():
    h = MoveHistory()
    moves = make_moves(4)
    for m in moves:
        h.append(m)
    assert h.by_player(Stone.BLACK) == (moves[0], moves[2])
    assert h.by_move_number(2) == moves[1]
    assert h.by_move_number(99) is None
    snap = h.snapshot()
    assert isinstance(snap, tuple)
    assert list(h) == moves
    with pytest.raises(AttributeError):
        snap[0].row = 5


def test_statistics_average_think_time():
    h = MoveHistory()
    for m in make_moves(3, start_ts=1000, step_ms=0):
        h.append(m)
    stats = h.statistics()
    assert stats.total_moves == 3
    assert stats.black_moves == 2
    assert stats.white_moves == 1
    assert stats.average_think_time_ms == 0

    h = MoveHistory()
    for ts, m in zip((1000, 1500, 2500), make_moves(3)):
        h.append(Move(m.row, m.col, m.player, m.move_number, ts))
    assert h.statistics().average_think_time_ms == 750


def test_invalid_max_size_rejected():
    with pytest.raises(ValueError):
        MoveHistory(max_size=0)
    h = MoveHistory(max_size=3)
    with pytest.raises(ValueError):
        h.set_max_size(0)
    assert h.max_size == 3
