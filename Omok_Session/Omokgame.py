"""Session coordinator: owns rules + history, gates by phase, publishes notifications."""

from __future__ import annotations

import functools
import logging
from dataclasses import asdict, dataclass
from typing import Optional, Tuple

from . import persistence
from .engine.rules import RulesEngine, RulesSnapshot
from .errors import CorruptSave, ReentrantCallError
from .events import (
    EventChannel,
    GameDrawn,
    GameReset,
    GameWon,
    HistoryEvicted,
    MoveApplied,
    PhaseChanged,
    UndoApplied,
)
from .models import Move, Phase, Placed, Rejected, Rejection, Session, Status, Stone, Undone
from .MoveHistory import DEFAULT_MAX_SIZE, MoveHistory
from .utils import config as config_mod
from .utils.logger import log_event, narration_sink

LOGGER = logging.getLogger(__name__)


def _mutating(method):
    """Reject calls made from inside an event listener."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self._dispatching:
            raise ReentrantCallError(f"{method.__name__}() called while notifying listeners")
        return method(self, *args, **kwargs)

    return wrapper


@dataclass(frozen=True)
class GameSnapshot:
    rules: RulesSnapshot
    moves: Tuple[Move, ...]
    evicted_count: int
    phase: Phase


class Omokgame:
    """
    One game session: a RulesEngine (board + turn state), a MoveHistory and the
    session phase. Every mutation goes through this object so the three never
    drift apart; observers follow along through `subscribe`.
    """

    def __init__(self, board_size=15, max_history=DEFAULT_MAX_SIZE, logger=log_event):
        self.max_history = max_history
        self.logger = logger
        self.events = EventChannel()
        self._rules = RulesEngine(board_size=board_size)
        self._history = MoveHistory(max_size=max_history)
        self.phase = Phase.IDLE
        self._dispatching = False

    @classmethod
    def from_config(cls, config: config_mod.GameConfig, logger=None):
        if logger is None:
            logger = narration_sink(config.log_moves)
        return cls(board_size=config.board_size, max_history=config.max_history, logger=logger)

    @classmethod
    def from_settings(cls, path=config_mod.DEFAULT_SETTINGS, logger=None):
        return cls.from_config(config_mod.load_settings(path), logger=logger)

    # --- queries ---

    @property
    def board_size(self) -> int:
        return self._rules.size

    @property
    def session(self) -> Session:
        return Session(
            current_player=self._rules.current_player,
            move_number=self._rules.move_number,
            outcome=self._rules.outcome,
            phase=self.phase,
        )

    def stone_at(self, row, col) -> Optional[Stone]:
        return self._rules.board.get(row, col)

    def board_rows(self):
        return self._rules.board.rows()

    def can_place(self, row, col) -> bool:
        return self.phase is Phase.PLAYING and self._rules.can_place(row, col)

    def can_undo(self) -> bool:
        return self.phase in (Phase.PLAYING, Phase.FINISHED) and self._history.can_undo()

    def moves(self) -> Tuple[Move, ...]:
        return self._history.snapshot()

    def moves_by_player(self, player) -> Tuple[Move, ...]:
        return self._history.by_player(Stone(player))

    def move_by_number(self, move_number) -> Optional[Move]:
        return self._history.by_move_number(move_number)

    def last_move(self) -> Optional[Move]:
        return self._history.peek_last()

    @property
    def history_is_partial(self) -> bool:
        return self._history.is_partial

    def game_stats(self) -> dict:
        session = self.session
        return {
            "phase": session.phase.value,
            "current_player": int(session.current_player),
            "move_number": session.move_number,
            "game_over": session.outcome.is_terminal,
            "winner": None if session.outcome.winner is None else int(session.outcome.winner),
            "history": asdict(self._history.statistics()),
        }

    def subscribe(self, listener, *event_types):
        return self.events.subscribe(listener, *event_types)

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            rules=self._rules.snapshot(),
            moves=self._history.snapshot(),
            evicted_count=self._history.evicted_count,
            phase=self.phase,
        )

    # --- operations ---

    @_mutating
    def start_new_game(self, board_size=None) -> Session:
        size = self.board_size if board_size is None else board_size
        self._rules = RulesEngine(board_size=size)
        self._history = MoveHistory(max_size=self.max_history)
        events = [GameReset(size)]
        events.append(self._set_phase(Phase.PLAYING))
        self.logger(f"New game ({size}x{size})")
        self._publish(events)
        return self.session

    @_mutating
    def place_at(self, row, col):
        """Place the current player's stone. Returns Placed or Rejected."""
        if self.phase in (Phase.IDLE, Phase.PAUSED):
            return Rejected(Rejection.GAME_NOT_ACTIVE)
        events = []
        result = self._apply(row, col, events)
        if not result:
            LOGGER.debug("Placement at (%s, %s) rejected: %s", row, col, result.reason.value)
        self._publish(events)
        return result

    @_mutating
    def undo(self):
        """Take back the most recent move. Returns Undone or Rejected."""
        if self.phase not in (Phase.PLAYING, Phase.FINISHED):
            return Rejected(Rejection.GAME_NOT_ACTIVE)
        move = self._history.pop_last()
        if move is None:
            if self._history.is_partial:
                return Rejected(Rejection.UNDO_HORIZON_REACHED)
            return Rejected(Rejection.NOTHING_TO_UNDO)

        self._rules.undo_last(move)
        events = [UndoApplied(move)]
        if self.phase is Phase.FINISHED:
            events.append(self._set_phase(Phase.PLAYING))
        self.logger(f"Undo move {move.move_number}: {move.player.label} {move.coord}")
        self._publish(events)
        return Undone(move)

    @_mutating
    def pause(self):
        if self.phase is not Phase.PLAYING:
            return Rejected(Rejection.GAME_NOT_ACTIVE)
        self._publish([self._set_phase(Phase.PAUSED)])
        return self.phase

    @_mutating
    def resume(self):
        if self.phase is not Phase.PAUSED:
            return Rejected(Rejection.GAME_NOT_ACTIVE)
        self._publish([self._set_phase(Phase.PLAYING)])
        return self.phase

    @_mutating
    def set_history_limit(self, max_history: int):
        evicted = self._history.set_max_size(max_history)
        self.max_history = self._history.max_size
        if evicted:
            self._publish([HistoryEvicted(tuple(evicted))])
        return evicted

    def export_state(self) -> dict:
        return persistence.encode_state(
            board_size=self.board_size,
            session=self.session,
            moves=self._history.snapshot(),
            partial=self._history.is_partial,
        )

    @_mutating
    def import_state(self, data) -> Session:
        """
        Replace the current game with a saved one by replaying its moves.
        Raises CorruptSave and leaves the current game untouched if the save
        does not replay into exactly the recorded session.
        """
        save = persistence.decode_state(data)
        before = self.snapshot()
        try:
            events = self._replay(save)
        except Exception:
            self._restore(before)
            raise
        self.logger(f"Imported game: {len(save.moves)} moves, {self.session.outcome.status.value}")
        self._publish(events)
        return self.session

    def replay(self):
        """
        Restart the current game on an empty board and play its moves again,
        yielding each Placed result. Listeners see the game rebuilt move by move.
        """
        if self._history.is_partial:
            raise ValueError("cannot replay a game whose oldest moves were evicted")
        moves = self._history.snapshot()
        self.start_new_game(self.board_size)
        for move in moves:
            yield self._replay_move(move)

    @_mutating
    def _replay_move(self, move: Move):
        events = []
        result = self._apply(move.row, move.col, events, timestamp=move.timestamp)
        self._publish(events)
        return result

    # --- internals ---

    def _apply(self, row, col, events, timestamp=None, narrate=True):
        result = self._rules.place(row, col, timestamp=timestamp)
        if not isinstance(result, Placed):
            return result

        move = result.move
        evicted = self._history.append(move)
        events.append(MoveApplied(move))
        if evicted:
            events.append(HistoryEvicted(tuple(evicted)))
        if narrate:
            self.logger(f"Move {move.move_number}: {move.player.label} ({row}, {col})")

        outcome = result.outcome
        if outcome.is_terminal:
            events.append(self._set_phase(Phase.FINISHED, narrate))
            if outcome.status is Status.WIN:
                events.append(GameWon(outcome.winner, outcome.winning_line))
                if narrate:
                    self.logger(f"Winner: {outcome.winner.label} {list(outcome.winning_line)}")
            else:
                events.append(GameDrawn())
                if narrate:
                    self.logger("Result: Draw (board full)")
        return result

    def _replay(self, save):
        self._rules = RulesEngine(board_size=save.board_size)
        self._history = MoveHistory(max_size=self.max_history)
        events = [GameReset(save.board_size)]
        events.append(self._set_phase(Phase.PLAYING, narrate=False))

        for record in save.moves:
            if self._rules.outcome.is_terminal:
                raise CorruptSave(f"move {record.move_number} recorded after the game ended")
            if record.player != self._rules.current_player:
                raise CorruptSave(
                    f"move {record.move_number} played by {record.player.label}, "
                    f"expected {self._rules.current_player.label}"
                )
            if record.move_number != self._rules.move_number:
                raise CorruptSave(
                    f"move number {record.move_number} out of sequence (expected {self._rules.move_number})"
                )
            result = self._apply(record.row, record.col, events, timestamp=record.timestamp, narrate=False)
            if not result:
                raise CorruptSave(
                    f"move {record.move_number} at ({record.row}, {record.col}) rejected: {result.reason.value}"
                )

        replayed = self.session
        expected = save.session
        if (
            replayed.current_player != expected.current_player
            or replayed.move_number != expected.move_number
            or replayed.outcome != expected.outcome
        ):
            raise CorruptSave("replayed moves do not reproduce the recorded session")
        return events

    def _restore(self, snap: GameSnapshot):
        self._rules = RulesEngine(board_size=len(snap.rules.cells))
        self._rules.restore(snap.rules)
        self._history = MoveHistory(max_size=self.max_history)
        self._history.restore(snap.moves, snap.evicted_count)
        self.phase = snap.phase

    def _set_phase(self, phase: Phase, narrate=True) -> Optional[PhaseChanged]:
        """Switch phase; returns the notification, or None when the phase is unchanged."""
        previous = self.phase
        if previous is phase:
            return None
        self.phase = phase
        if narrate:
            self.logger(f"Phase: {previous.value} -> {phase.value}")
        return PhaseChanged(phase, previous)

    def _publish(self, events):
        reentered = None
        self._dispatching = True
        try:
            for event in events:
                if event is None:
                    continue
                try:
                    self.events.publish(event)
                except ReentrantCallError as exc:
                    reentered = reentered or exc
        finally:
            self._dispatching = False
        if reentered is not None:
            raise reentered
