import cv2
import numpy as np
import pytest

from postcard_extractor.commands import Command, command_for_key, dispatch
from postcard_extractor.session import Postcard

from conftest import gradient_image


def test_key_bindings():
    assert command_for_key("plus") is Command.ZOOM_IN
    assert command_for_key("KP_Subtract") is Command.ZOOM_OUT
    assert command_for_key("Return") is Command.COMMIT_CORNER
    assert command_for_key("space") is Command.NEXT_IMAGE
    assert command_for_key("BackSpace") is Command.PREV_IMAGE
    assert command_for_key("h") is Command.FLIP_HORIZONTAL
    assert command_for_key("v") is Command.FLIP_VERTICAL
    assert command_for_key("Escape") is Command.QUIT
    assert command_for_key("x") is None


def test_nudges(session):
    dispatch(session, Command.MOVE_CURSOR, (50, 50))
    dispatch(session, Command.NUDGE_RIGHT)
    dispatch(session, Command.NUDGE_DOWN)
    dispatch(session, Command.NUDGE_DOWN)
    assert (session.cursor_x, session.cursor_y) == (50.5, 51.0)
    dispatch(session, Command.NUDGE_LEFT)
    dispatch(session, Command.NUDGE_UP)
    assert (session.cursor_x, session.cursor_y) == (50.0, 50.5)


def test_zoom_commands(session):
    level = session.zoom_level
    dispatch(session, Command.ZOOM_OUT)
    assert session.zoom_level == level + 1
    dispatch(session, Command.ZOOM_IN)
    dispatch(session, Command.ZOOM_IN)
    assert session.zoom_level == level - 1


def test_corner_commands(session, scan_files):
    session.load_playlist(scan_files)
    dispatch(session, Command.MOVE_CURSOR, (100, 100))
    dispatch(session, Command.COMMIT_CORNER)
    assert len(session.collector) == 1
    dispatch(session, Command.CLEAR_CORNERS)
    assert len(session.collector) == 0


def test_navigation_commands(session, scan_files):
    session.load_playlist(scan_files)
    assert dispatch(session, Command.PREV_IMAGE)
    assert session.idx == 2
    assert dispatch(session, Command.NEXT_IMAGE)
    assert session.idx == 0


def test_postcard_commands_without_postcard(session):
    assert dispatch(session, Command.ROTATE_90) is False
    assert dispatch(session, Command.FLIP_HORIZONTAL) is False
    assert dispatch(session, Command.FLIP_VERTICAL) is False


def test_move_needs_position(session):
    with pytest.raises(ValueError):
        dispatch(session, Command.MOVE_CURSOR)


def test_quit(session):
    with pytest.raises(SystemExit):
        dispatch(session, Command.QUIT)


@pytest.mark.parametrize("key, flip_code", [("h", 0), ("f", 1), ("v", 1)])
def test_flip_keys_axis(session, tmp_path, key, flip_code):
    img = gradient_image(3, 2)
    session.postcard = Postcard(image=img, index=0, path=str(tmp_path / "pc.png"))
    assert dispatch(session, command_for_key(key))
    assert np.array_equal(session.postcard.image, cv2.flip(img, flip_code))
    assert np.array_equal(cv2.imread(str(tmp_path / "pc.png"), cv2.IMREAD_COLOR), cv2.flip(img, flip_code))
