"""Serialized game form: dict/JSON encoding, validation and file helpers."""

from __future__ import annotations

import datetime
import json
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .Board import MAX_SIZE, MIN_SIZE
from .errors import CorruptSave
from .models import Move, Outcome, Phase, Session, Status, Stone

FORMAT_VERSION = "1.0"


@dataclass(frozen=True)
class SaveData:
    board_size: int
    session: Session
    moves: List[Move]


def move_to_dict(move: Move) -> dict:
    return {
        "row": move.row,
        "col": move.col,
        "player": int(move.player),
        "move_number": move.move_number,
        "timestamp": move.timestamp,
    }


def outcome_to_dict(outcome: Outcome) -> dict:
    return {
        "status": outcome.status.value,
        "winner": None if outcome.winner is None else int(outcome.winner),
        "winning_line": [list(c) for c in outcome.winning_line],
    }


def encode_state(board_size: int, session: Session, moves, partial: bool = False) -> dict:
    return {
        "version": FORMAT_VERSION,
        "board_size": board_size,
        "session": {
            "current_player": int(session.current_player),
            "move_number": session.move_number,
            "outcome": outcome_to_dict(session.outcome),
        },
        "history": [move_to_dict(m) for m in moves],
        "partial": bool(partial),
        "export_time": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }


def _int(value, name):
    # bool is an int subclass; a save with true/false in a numeric slot is corrupt
    if isinstance(value, bool) or not isinstance(value, int):
        raise CorruptSave(f"{name} must be an integer, got {value!r}")
    return value


def _player(value, name):
    value = _int(value, name)
    if value not in (Stone.BLACK, Stone.WHITE):
        raise CorruptSave(f"{name} must be -1 (black) or 1 (white), got {value}")
    return Stone(value)


def _mapping(value, name):
    if not isinstance(value, dict):
        raise CorruptSave(f"{name} must be an object")
    return value


def _decode_outcome(raw) -> Outcome:
    raw = _mapping(raw, "session.outcome")
    try:
        status = Status(raw.get("status"))
    except ValueError as exc:
        raise CorruptSave(f"unknown outcome status {raw.get('status')!r}") from exc
    if status is Status.IN_PROGRESS:
        return Outcome.in_progress()
    if status is Status.DRAW:
        return Outcome.draw()
    winner = _player(raw.get("winner"), "session.outcome.winner")
    line = raw.get("winning_line")
    if not isinstance(line, list):
        raise CorruptSave("session.outcome.winning_line must be a list")
    coords = []
    for i, cell in enumerate(line):
        if not isinstance(cell, (list, tuple)) or len(cell) != 2:
            raise CorruptSave(f"winning_line[{i}] must be a [row, col] pair")
        coords.append((_int(cell[0], f"winning_line[{i}]"), _int(cell[1], f"winning_line[{i}]")))
    return Outcome.win(winner, coords)


def _decode_move(raw, index) -> Move:
    raw = _mapping(raw, f"history[{index}]")
    try:
        return Move(
            row=_int(raw["row"], f"history[{index}].row"),
            col=_int(raw["col"], f"history[{index}].col"),
            player=_player(raw["player"], f"history[{index}].player"),
            move_number=_int(raw["move_number"], f"history[{index}].move_number"),
            timestamp=_int(raw["timestamp"], f"history[{index}].timestamp"),
        )
    except KeyError as exc:
        raise CorruptSave(f"history[{index}] is missing {exc.args[0]!r}") from exc


def decode_state(data) -> SaveData:
    """Validate the shape of a serialized game. Raises CorruptSave."""
    data = _mapping(data, "save")
    version = data.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise CorruptSave(f"unsupported save version {version!r}")
    if data.get("partial"):
        raise CorruptSave("save holds a partial history (moves were evicted) and cannot be replayed")

    board_size = _int(data.get("board_size"), "board_size")
    if not MIN_SIZE <= board_size <= MAX_SIZE:
        raise CorruptSave(f"board_size must be in [{MIN_SIZE}, {MAX_SIZE}], got {board_size}")

    raw_session = _mapping(data.get("session"), "session")
    outcome = _decode_outcome(raw_session.get("outcome"))
    session = Session(
        current_player=_player(raw_session.get("current_player"), "session.current_player"),
        move_number=_int(raw_session.get("move_number"), "session.move_number"),
        outcome=outcome,
        phase=Phase.FINISHED if outcome.is_terminal else Phase.PLAYING,
    )

    history = data.get("history")
    if not isinstance(history, list):
        raise CorruptSave("history must be a list")
    moves = [_decode_move(raw, i) for i, raw in enumerate(history)]
    return SaveData(board_size=board_size, session=session, moves=moves)


def dumps(game) -> str:
    return json.dumps(game.export_state(), ensure_ascii=False, indent=2)


def loads(game, text: str):
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorruptSave(f"save is not valid JSON: {exc}") from exc
    return game.import_state(data)


def save_game(game, path) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(dumps(game))
    return output_path


def load_game(game, path):
    with open(Path(path), "r", encoding="utf-8") as f:
        return loads(game, f.read())
