import threading

from boluxiones.models.game import TileStatus
from boluxiones.services.game_engine import GameEngine
from boluxiones.services.positions import ORDERED_POSITIONS
from boluxiones.services.presentation import build_board_view

from conftest import DATE_KEY, GROUP_A, GROUP_B, advance, select_and_submit


def tile(board, word):
    return next(t for t in board.tiles if t.word == word)


def test_initial_board(engine):
    board = engine.view()
    assert len(board.tiles) == 16
    assert all((t.dx, t.dy) == (0, 0) for t in board.tiles)
    assert board.attempts_remaining == 4
    assert board.can_submit is False
    assert board.can_deselect_all is False
    assert board.catalog_status == "loaded"


def test_flags_follow_selection(engine):
    engine.select_word("w1")
    board = engine.view()
    assert tile(board, "w1").selected
    assert board.can_deselect_all and not board.can_submit

    for word in ["w2", "w3", "w4"]:
        engine.select_word(word)
    assert engine.view().can_submit


def test_offsets_after_relocation(engine, clock):
    select_and_submit(engine, GROUP_B)
    advance(engine, clock, 2_000)
    board = engine.view()
    assert (tile(board, "w5").dx, tile(board, "w5").dy) == (0, -1)
    assert (tile(board, "w2").dx, tile(board, "w2").dy) == (0, 1)
    assert tile(board, "w5").status is TileStatus.SOLVED
    assert tile(board, "w5").in_play is False
    assert [s.group for s in board.solutions] == ["B"]


def test_handler_routes_selection(engine):
    board = engine.view()
    tile(board, "w7").set_selected(True)
    assert engine.session.selected_words == ("w7",)

    tile(engine.view(), "w7").set_selected(False)
    assert engine.session.selected_words == ()


def test_handler_ignores_out_of_play_tiles(engine, clock):
    select_and_submit(engine, GROUP_A)
    advance(engine, clock, 2_000)
    tile(engine.view(), "w1").set_selected(True)
    assert engine.session.selected_words == ()


def test_flags_after_game_end(engine):
    for guess in (["w5", "w6", "w13", "w14"], ["w7", "w8", "w15", "w16"],
                  ["w5", "w7", "w13", "w15"], ["w6", "w8", "w14", "w16"]):
        engine.deselect_all()
        select_and_submit(engine, guess)
    board = engine.view()
    assert board.ended and not board.won
    assert board.can_submit is False
    assert board.can_deselect_all is False
    assert board.attempts_remaining == 0


def test_view_without_handlers(engine):
    board = build_board_view(engine.session, engine.catalog, ORDERED_POSITIONS)
    assert all(t.set_selected is None for t in board.tiles)


def test_to_dict(engine):
    engine.select_word("w1")
    data = engine.view().to_dict()
    assert data["tiles"][0] == {"word": "w1", "status": None, "selected": True,
                                "in_play": True, "dx": 0, "dy": 0}
    assert data["selected_words"] == ["w1"]
    assert data["solutions"] == []


class RecordingLock:
    def __init__(self):
        self.inner = threading.RLock()
        self.entered = 0

    def __enter__(self):
        self.inner.acquire()
        self.entered += 1
        return self

    def __exit__(self, *exc_info):
        self.inner.release()


def test_handler_takes_the_engine_lock(catalog):
    lock = RecordingLock()
    game = GameEngine(DATE_KEY, catalog=catalog, lock=lock)
    game.initialize(shuffle=False)
    lock.entered = 0

    tile(game.view(), "w3").set_selected(True)
    assert lock.entered >= 1
    assert game.session.selected_words == ("w3",)
