"""Notification variants published by the coordinator and the channel that delivers them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .errors import ReentrantCallError
from .models import Coord, Move, Phase, Stone

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveApplied:
    move: Move


@dataclass(frozen=True)
class GameWon:
    player: Stone
    winning_line: Tuple[Coord, ...]


@dataclass(frozen=True)
class GameDrawn:
    pass


@dataclass(frozen=True)
class GameReset:
    board_size: int


@dataclass(frozen=True)
class UndoApplied:
    move: Move


@dataclass(frozen=True)
class PhaseChanged:
    phase: Phase
    previous: Optional[Phase] = None


@dataclass(frozen=True)
class HistoryEvicted:
    moves: Tuple[Move, ...]


EVENT_TYPES = (MoveApplied, GameWon, GameDrawn, GameReset, UndoApplied, PhaseChanged, HistoryEvicted)


class EventChannel:
    """Synchronous in-process fan-out of game events to subscribed listeners."""

    def __init__(self):
        self._listeners = []

    def subscribe(self, listener: Callable, *event_types) -> Callable[[], None]:
        """
        Register listener for the given event classes (all events when none given).
        Returns a callable that removes the subscription.
        """
        for etype in event_types:
            if etype not in EVENT_TYPES:
                raise TypeError(f"unknown event type: {etype!r}")
        entry = (listener, tuple(event_types))
        self._listeners.append(entry)

        def unsubscribe():
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def publish(self, event) -> None:
        """Deliver event to every matching listener; a re-entrant call is re-raised once all have run."""
        reentered = None
        for listener, types in list(self._listeners):
            if types and not isinstance(event, types):
                continue
            try:
                listener(event)
            except ReentrantCallError as exc:
                reentered = reentered or exc
            except Exception:
                LOGGER.exception("Listener %r failed on %s", listener, type(event).__name__)
        if reentered is not None:
            raise reentered
