"""
Postcard Scan Extractor - interactive command surface
License: GPLv3
"""

from enum import Enum
from typing import Optional, Tuple


class Command(Enum):
    MOVE_CURSOR = "move_cursor"
    NUDGE_LEFT = "nudge_left"
    NUDGE_RIGHT = "nudge_right"
    NUDGE_UP = "nudge_up"
    NUDGE_DOWN = "nudge_down"
    COMMIT_CORNER = "commit_corner"
    CLEAR_CORNERS = "clear_corners"
    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    NEXT_IMAGE = "next_image"
    PREV_IMAGE = "prev_image"
    ROTATE_90 = "rotate_90"
    FLIP_HORIZONTAL = "flip_horizontal"
    FLIP_VERTICAL = "flip_vertical"
    QUIT = "quit"


# Tk keysyms -> command
KEY_BINDINGS = {
    "Left": Command.NUDGE_LEFT,
    "Right": Command.NUDGE_RIGHT,
    "Up": Command.NUDGE_UP,
    "Down": Command.NUDGE_DOWN,
    "plus": Command.ZOOM_IN,
    "KP_Add": Command.ZOOM_IN,
    "minus": Command.ZOOM_OUT,
    "KP_Subtract": Command.ZOOM_OUT,
    "Return": Command.COMMIT_CORNER,
    "KP_Enter": Command.COMMIT_CORNER,
    "p": Command.PREV_IMAGE,
    "BackSpace": Command.PREV_IMAGE,
    "n": Command.NEXT_IMAGE,
    "space": Command.NEXT_IMAGE,
    "r": Command.ROTATE_90,
    "f": Command.FLIP_VERTICAL,
    "v": Command.FLIP_VERTICAL,
    "h": Command.FLIP_HORIZONTAL,
    "q": Command.QUIT,
    "Escape": Command.QUIT,
}

_NUDGES = {
    Command.NUDGE_LEFT: (-1.0, 0.0),
    Command.NUDGE_RIGHT: (1.0, 0.0),
    Command.NUDGE_UP: (0.0, -1.0),
    Command.NUDGE_DOWN: (0.0, 1.0),
}


def command_for_key(keysym: str) -> Optional[Command]:
    return KEY_BINDINGS.get(keysym)


def dispatch(session, command: Command, pos: Optional[Tuple[float, float]] = None):
    """Forward one command to the session. ``pos`` is needed for MOVE_CURSOR only."""
    if command is Command.MOVE_CURSOR:
        if pos is None:
            raise ValueError("MOVE_CURSOR needs a position.")
        return session.move_cursor(pos[0], pos[1])
    if command in _NUDGES:
        ux, uy = _NUDGES[command]
        step = session.cfg.nudge_step
        return session.nudge(ux * step, uy * step)
    if command is Command.COMMIT_CORNER:
        return session.commit_corner()
    if command is Command.CLEAR_CORNERS:
        return session.clear_corners()
    if command is Command.ZOOM_IN:
        return session.zoom_in()
    if command is Command.ZOOM_OUT:
        return session.zoom_out()
    if command is Command.NEXT_IMAGE:
        return session.goto_next()
    if command is Command.PREV_IMAGE:
        return session.goto_prev()
    if command is Command.ROTATE_90:
        return session.rotate_postcard()
    if command is Command.FLIP_HORIZONTAL:
        return session.flip_postcard_horizontal()
    if command is Command.FLIP_VERTICAL:
        return session.flip_postcard_vertical()
    if command is Command.QUIT:
        return session.quit()
    raise ValueError(f"Unknown command {command!r}")
