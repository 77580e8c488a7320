"""
Postcard Scan Extractor - session / playlist driver

Owns the active scan, the corner collector, cursor + zoom state and the last
extracted postcard. Every operation runs to completion and reports success
with a bool; failures are printed for the operator and logged.
License: GPLv3
"""

import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence

import cv2
import numpy as np

from . import scan_io
from .config import ExtractorConfig
from .corners import CornerCollector
from .errors import DecodeFailure, DegenerateGeometry, WriteFailure
from .geometry import (
    Point,
    auto_rotate,
    compute_display_factor,
    flip_horizontal,
    flip_vertical,
    rectify,
    rotate_90,
)
from .preview import Layout, compose, make_thumbnail, render_zoom, zoom_in_level, zoom_out_level

logger = logging.getLogger(__name__)

HELP_TOKENS = ("--help", "-h")
FAREWELL = "The application will shut down now. Have a nice day."

USAGE = (
    "Synopsis\n"
    "  postcard-extractor [--suffix SUFFIX] [--zoom-level N] [--no-auto-rotate]\n"
    "                     [--log-level LEVEL] INPUTFILES\n"
    "Description\n"
    "  INPUTFILES  can be any file read by OpenCV, notably JPEGs, PNGs, BMPs, TIFFs, etc.\n"
    "\n"
    "Keys:\n"
    "  MOUSE MOVE:             move cursor\n"
    "  UP, DOWN, LEFT, RIGHT:  precisely move cursor\n"
    "  LEFT CLICK, ENTER:      set current cursor position as corner\n"
    "  RIGHT CLICK:            clear corners\n"
    "  '+':                    increase zoom level\n"
    "  '-':                    decrease zoom level\n"
    "  'p', BACKSPACE:         go to previous image\n"
    "  'n', SPACE:             go to next image\n"
    "  'r':                    rotate last postcard of 90 degrees\n"
    "  'f', 'v':               flip last postcard vertically\n"
    "  'h':                    flip last postcard horizontally\n"
    "  'q', ESCAPE:            exit program\n"
)


def print_usage() -> None:
    print(USAGE)


@dataclass
class Scan:
    path: str
    hires: np.ndarray
    lores: np.ndarray
    scale: float


@dataclass
class Postcard:
    image: np.ndarray
    index: int
    path: str


class ExtractorSession:
    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.cfg = config or ExtractorConfig()

        # playlist
        self.playlist: List[str] = []
        self.idx: int = 0

        # current scan
        self.scan: Optional[Scan] = None
        self.layout: Optional[Layout] = None

        # cursor / zoom (display coords)
        self.cursor_x: float = 0.0
        self.cursor_y: float = 0.0
        self.zoom_level: float = float(self.cfg.default_zoom_level)

        # corners / postcards
        self.collector = CornerCollector(margin=self.cfg.margin)
        self.postcard_idx: int = 0
        self.postcard: Optional[Postcard] = None
        self.thumbnail: Optional[np.ndarray] = None
        self.last_outline: Optional[List[Point]] = None

        # render output
        self.zoom_img: Optional[np.ndarray] = None
        self.frame: Optional[np.ndarray] = None

        blank = np.full((self.cfg.window_height, self.cfg.window_width, 3), 255, dtype=np.uint8)
        self.set_image(blank, path="")

    # ---------- playlist ----------
    def load_playlist(self, paths: Sequence[str]) -> bool:
        paths = [str(p) for p in paths]
        if not paths or any(p in HELP_TOKENS for p in paths):
            print_usage()
            self.quit()
        logger.debug("load_playlist(%d images)", len(paths))
        self.playlist = paths
        return self.goto(0)

    def current_path(self) -> str:
        return self.playlist[self.idx]

    def goto_next(self) -> bool:
        if not self.playlist:
            return False
        return self.goto((self.idx + 1) % len(self.playlist))

    def goto_prev(self) -> bool:
        if not self.playlist:
            return False
        return self.goto((self.idx + len(self.playlist) - 1) % len(self.playlist))

    def goto(self, index: int) -> bool:
        if index < 0 or index >= len(self.playlist):
            return False
        prev_idx = self.idx
        self.idx = index
        if not self.load_current():
            self.idx = prev_idx
            return False
        return True

    def load_current(self) -> bool:
        path = self.current_path()
        logger.debug("load_current(%s)", path)
        try:
            img = scan_io.read_scan(path)
        except DecodeFailure as e:
            print(f"Could not read file '{path}'!")
            logger.info("%s", e)
            return False
        return self.set_image(img, path=path)

    # ---------- scan ----------
    def set_image(self, img: np.ndarray, path: str = "") -> bool:
        if img is None or img.size == 0:
            print("Cannot set an empty scan image!")
            return False

        hires = auto_rotate(img) if self.cfg.auto_rotate else img.copy()
        h, w = hires.shape[:2]
        scale = compute_display_factor(w, h, self.cfg.window_width, self.cfg.window_height)
        lw = max(1, int(round(w * scale)))
        lh = max(1, int(round(h * scale)))
        interp = cv2.INTER_AREA if scale < 1.0 else cv2.INTER_LINEAR
        lores = cv2.resize(hires, (lw, lh), interpolation=interp)
        logger.debug("set_image(%dx%d) scale=%.4f", w, h, scale)

        self.scan = Scan(path=path, hires=hires, lores=lores, scale=scale)
        self.layout = Layout(scan_w=lw, scan_h=lh, margin=self.cfg.margin, zoom_size=self.cfg.zoom_window_size)

        # per-image state
        self.collector.set_mapping(scale, self.cfg.margin)
        self.postcard_idx = 0
        self.postcard = None
        self.thumbnail = None
        self.last_outline = None

        self.redraw()
        return True

    # ---------- cursor / zoom ----------
    def move_cursor(self, x: float, y: float) -> None:
        self.cursor_x, self.cursor_y = self.collector.constrain((x, y))
        self.redraw()

    def nudge(self, dx: float, dy: float) -> None:
        self.cursor_x += float(dx)
        self.cursor_y += float(dy)
        self.redraw()

    def zoom_in(self) -> None:
        self.zoom_level = zoom_in_level(self.zoom_level)
        self.redraw()

    def zoom_out(self) -> None:
        self.zoom_level = zoom_out_level(self.zoom_level)
        self.redraw()

    # ---------- corners ----------
    def commit_corner(self) -> bool:
        if not self.scan.path:
            print("No scan loaded, cannot extract a postcard.")
            return False
        try:
            quad = self.collector.commit((self.cursor_x, self.cursor_y))
        except DegenerateGeometry as e:
            print(f"Cannot use this corner: {e} Right click clears the corners.")
            logger.debug("degenerate corner at (%.1f, %.1f)", self.cursor_x, self.cursor_y)
            self.redraw()
            return False

        if quad is None:
            self.last_outline = None
            self.redraw()
            return True

        try:
            image = rectify(self.scan.hires, *quad.hires[:3])
        except DegenerateGeometry as e:
            print(f"Cannot extract postcard: {e}")
            self.redraw()
            return False

        self.postcard = Postcard(
            image=image,
            index=self.postcard_idx,
            path=scan_io.postcard_path(self.scan.path, self.cfg.postcard_suffix, self.postcard_idx),
        )
        self.postcard_idx += 1
        self.last_outline = quad.display
        return self.save_postcard()

    def clear_corners(self) -> None:
        self.collector.clear()
        self.redraw()

    # ---------- postcard ----------
    def _transform_postcard(self, fn) -> bool:
        if self.postcard is None:
            return False
        self.postcard.image = fn(self.postcard.image)
        return self.save_postcard()

    def rotate_postcard(self) -> bool:
        return self._transform_postcard(rotate_90)

    def flip_postcard_horizontal(self) -> bool:
        return self._transform_postcard(flip_horizontal)

    def flip_postcard_vertical(self) -> bool:
        return self._transform_postcard(flip_vertical)

    def save_postcard(self) -> bool:
        if self.postcard is None:
            return False
        self.thumbnail = make_thumbnail(self.postcard.image, self.cfg.zoom_window_size)
        self.redraw()

        path = self.postcard.path
        logger.debug("save_postcard(%s)", path)
        try:
            scan_io.write_postcard(path, self.postcard.image)
        except WriteFailure as e:
            print(f"Could not write '{path}'!")
            logger.info("%s", e)
            return False
        print(f"Successfully written '{path}'")
        return True

    # ---------- render ----------
    def redraw(self) -> np.ndarray:
        self.zoom_img = render_zoom(
            self.scan.hires, (self.cursor_x, self.cursor_y), self.zoom_level,
            self.scan.scale, self.cfg.margin, self.cfg.zoom_window_size,
        )
        self.frame = compose(
            self.cfg, self.layout, self.scan.lores, self.zoom_img,
            (self.cursor_x, self.cursor_y), self.collector.display_pts,
            outline=self.last_outline, thumbnail=self.thumbnail,
        )
        return self.frame

    # ---------- exit ----------
    def quit(self) -> None:
        print(FAREWELL)
        sys.exit(0)
