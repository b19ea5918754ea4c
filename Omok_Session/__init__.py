"""Omok_Session package exports."""

from .Board import Board
from .MoveHistory import MoveHistory
from .Omokgame import Omokgame
from .errors import CorruptSave, ReentrantCallError
from .models import Move, Outcome, Phase, Placed, Rejected, Rejection, Session, Status, Stone, Undone

# Subpackages for the rules engine and helpers
from . import engine, events, persistence, utils

__all__ = [
    "Board",
    "MoveHistory",
    "Omokgame",
    "CorruptSave",
    "ReentrantCallError",
    "Move",
    "Outcome",
    "Phase",
    "Placed",
    "Rejected",
    "Rejection",
    "Session",
    "Status",
    "Stone",
    "Undone",
    "engine",
    "events",
    "persistence",
    "utils",
]
