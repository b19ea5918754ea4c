"""Export/import of whole games: replay determinism and all-or-nothing import."""

import copy
import json

import pytest

from Omok_Session import events, persistence
from Omok_Session.errors import CorruptSave
from Omok_Session.models import Phase, Status, Stone
from Omok_Session.Omokgame import Omokgame

WIN_MOVES = [(0, 0), (1, 0), (0, 1), (1, 1), (0, 2), (1, 2), (0, 3), (3, 3), (0, 4)]
# 5x5 fill with no five anywhere, alternating black and white
DRAW_MOVES = [
    (0, 0), (0, 2), (0, 1), (0, 3), (0, 4), (1, 0), (1, 2), (1, 1), (1, 3), (1, 4),
    (2, 0), (2, 2), (2, 1), (2, 3), (2, 4), (3, 0), (3, 2), (3, 1), (3, 3), (3, 4),
    (4, 0), (4, 2), (4, 1), (4, 3), (4, 4),
]


def quiet_game(size=9, max_history=1000):
    game = Omokgame(board_size=size, max_history=max_history, logger=lambda _msg: None)
    game.start_new_game()
    return game


def played(moves, size=9):
    game = quiet_game(size)
    for r, c in moves:
        game.place_at(r, c)
    return game


def test_round_trip_reproduces_board_session_and_history():
    source = played([(4, 4), (4, 5), (3, 3), (2, 2), (5, 5)])
    data = source.export_state()

    target = quiet_game(size=15)
    target.place_at(0, 0)
    session = target.import_state(data)

    assert target.board_size == 9
    assert target.board_rows() == source.board_rows()
    assert session == source.session
    assert target.moves() == source.moves()


def test_round_trip_of_finished_game():
    source = played(WIN_MOVES, size=5)
    target = quiet_game()
    target.import_state(json.loads(json.dumps(source.export_state())))
    assert target.phase is Phase.FINISHED
    assert target.session.outcome.status is Status.WIN
    assert target.session.outcome.winner == Stone.BLACK
    assert target.session == source.session


def test_round_trip_of_drawn_game():
    source = played(DRAW_MOVES, size=5)
    assert source.session.outcome.status is Status.DRAW
    target = quiet_game()
    seen = []
    target.subscribe(seen.append)
    persistence.loads(target, persistence.dumps(source))

    assert target.phase is Phase.FINISHED
    assert target.session == source.session
    assert target.moves() == source.moves()
    assert target.board_rows() == source.board_rows()
    assert seen[-2:] == [events.PhaseChanged(Phase.FINISHED, Phase.PLAYING), events.GameDrawn()]


def test_import_publishes_reset_then_moves_then_terminal_event():
    data = played(WIN_MOVES, size=5).export_state()
    target = quiet_game()
    seen = []
    target.subscribe(seen.append)
    target.import_state(data)
    assert isinstance(seen[0], events.GameReset)
    assert not any(isinstance(e, events.PhaseChanged) and e.phase is Phase.PLAYING for e in seen)
    assert sum(isinstance(e, events.MoveApplied) for e in seen) == len(WIN_MOVES)
    assert isinstance(seen[-1], events.GameWon)


def test_export_shape():
    data = played([(4, 4)]).export_state()
    assert data["version"] == persistence.FORMAT_VERSION
    assert data["board_size"] == 9
    assert data["session"] == {
        "current_player": 1,
        "move_number": 2,
        "outcome": {"status": "in_progress", "winner": None, "winning_line": []},
    }
    assert data["history"][0]["row"] == 4
    assert data["history"][0]["player"] == -1
    assert data["partial"] is False


def corrupt_variants():
    good = played([(4, 4), (4, 5), (3, 3)]).export_state()

    occupied = copy.deepcopy(good)
    occupied["history"][2]["row"], occupied["history"][2]["col"] = 4, 4

    wrong_session = copy.deepcopy(good)
    wrong_session["session"]["move_number"] = 7

    wrong_player = copy.deepcopy(good)
    wrong_player["history"][1]["player"] = -1

    bad_number = copy.deepcopy(good)
    bad_number["history"][1]["move_number"] = 5

    bool_row = copy.deepcopy(good)
    bool_row["history"][0]["row"] = True

    missing_key = copy.deepcopy(good)
    del missing_key["history"][0]["timestamp"]

    partial = copy.deepcopy(good)
    partial["partial"] = True

    version = copy.deepcopy(good)
    version["version"] = "9.9"

    tiny = copy.deepcopy(good)
    tiny["board_size"] = 3

    huge = copy.deepcopy(good)
    huge["board_size"] = 200000

    out_of_bounds = copy.deepcopy(good)
    out_of_bounds["history"][0]["col"] = 40

    return [occupied, wrong_session, wrong_player, bad_number, bool_row, missing_key,
            partial, version, tiny, huge, out_of_bounds, "not a dict"]


@pytest.mark.parametrize("data", corrupt_variants())
def test_corrupt_import_leaves_game_untouched(data):
    target = played([(0, 0), (8, 8)])
    before = target.snapshot()
    seen = []
    target.subscribe(seen.append)
    with pytest.raises(CorruptSave):
        target.import_state(data)
    assert target.snapshot() == before
    assert seen == []
    # the restored game keeps working
    assert target.place_at(1, 1)


def test_moves_after_game_end_are_corrupt():
    data = played(WIN_MOVES, size=5).export_state()
    data["history"].append(
        {"row": 4, "col": 4, "player": 1, "move_number": 10, "timestamp": 0}
    )
    with pytest.raises(CorruptSave):
        quiet_game().import_state(data)


def test_partial_history_is_flagged_on_export():
    game = quiet_game(max_history=2)
    for r, c in [(0, 0), (8, 8), (0, 2)]:
        game.place_at(r, c)
    data = game.export_state()
    assert data["partial"] is True
    with pytest.raises(CorruptSave):
        quiet_game().import_state(data)


def test_save_and_load_file(tmp_path):
    source = played([(4, 4), (4, 5), (3, 3)])
    path = persistence.save_game(source, tmp_path / "saves" / "game.json")
    assert path.exists()

    target = quiet_game()
    persistence.load_game(target, path)
    assert target.board_rows() == source.board_rows()
    assert target.moves() == source.moves()


def test_loads_rejects_invalid_json():
    with pytest.raises(CorruptSave):
        persistence.loads(quiet_game(), "{not json")
