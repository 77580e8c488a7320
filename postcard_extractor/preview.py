"""
Postcard Scan Extractor - zoom viewport and window composition
License: GPLv3
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

from .config import Color, ExtractorConfig
from .geometry import Point, affine_from_triangles, display_to_hires


# -----------------------------
# Zoom
# -----------------------------

def zoom_in_level(level: float) -> float:
    return max(float(level) - 1.0, 1.0)


def zoom_out_level(level: float) -> float:
    return float(level) + 1.0


def zoom_source_triangle(center: Sequence[float], extent: float) -> List[Point]:
    cx, cy = float(center[0]), float(center[1])
    return [(cx - extent, cy - extent), (cx + extent, cy - extent), (cx + extent, cy + extent)]


def render_zoom(
    hires: np.ndarray,
    cursor_display: Sequence[float],
    zoom_level: float,
    scale: float,
    margin: float,
    size: int,
) -> np.ndarray:
    """
    Magnified crop of the hires scan around the cursor. ``zoom_level`` is the
    half-width of the sampled region in display px, so a lower level means
    more magnification.
    """
    center = display_to_hires(cursor_display, scale, margin)
    extent = float(zoom_level) / scale
    M = affine_from_triangles(zoom_source_triangle(center, extent), [(0, 0), (size, 0), (size, size)])
    return cv2.warpAffine(
        hires, M, (size, size),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=0,
    )


# -----------------------------
# Drawing helpers
# -----------------------------

def draw_bicolor_cross(img: np.ndarray, x: float, y: float, color1: Color, color2: Color, step: int = 10) -> None:
    xi = int(round(x))
    yi = int(round(y))
    h, w = img.shape[:2]
    for col in range(0, w, step):
        cv2.line(img, (col, yi), (col + step, yi), color1, 1)
        color1, color2 = color2, color1
    for row in range(0, h, step):
        cv2.line(img, (xi, row), (xi, row + step), color1, 1)
        color1, color2 = color2, color1


def _ipt(p: Sequence[float]) -> Tuple[int, int]:
    return int(round(p[0])), int(round(p[1]))


def draw_corners(img: np.ndarray, corners: Sequence[Point], color: Color) -> None:
    n = len(corners)
    for i in range(n):
        cv2.circle(img, _ipt(corners[i]), 3, color, 2)
        if i < n - 1 or n == 4:
            cv2.line(img, _ipt(corners[i]), _ipt(corners[(i + 1) % n]), color, 1)


def make_thumbnail(postcard: np.ndarray, size: int) -> np.ndarray:
    h, w = postcard.shape[:2]
    s = min(float(size) / w, float(size) / h)
    tw = max(1, min(size, int(w * s)))
    th = max(1, min(size, int(h * s)))
    interp = cv2.INTER_AREA if s < 1.0 else cv2.INTER_LINEAR
    return cv2.resize(postcard, (tw, th), interpolation=interp)


# -----------------------------
# Window layout
# -----------------------------

@dataclass
class Layout:
    scan_w: int
    scan_h: int
    margin: int
    zoom_size: int

    @property
    def side_x(self) -> int:
        return self.scan_w + 2 * self.margin

    @property
    def width(self) -> int:
        return self.side_x + self.zoom_size

    @property
    def height(self) -> int:
        return max(self.scan_h + 2 * self.margin, 2 * self.zoom_size + self.margin)

    def scan_roi(self) -> Tuple[slice, slice]:
        return (slice(self.margin, self.margin + self.scan_h),
                slice(self.margin, self.margin + self.scan_w))

    def zoom_roi(self) -> Tuple[slice, slice]:
        return slice(0, self.zoom_size), slice(self.side_x, self.side_x + self.zoom_size)

    def thumbnail_roi(self, thumb_w: int, thumb_h: int) -> Tuple[slice, slice]:
        y0 = self.zoom_size + self.margin
        return slice(y0, y0 + thumb_h), slice(self.side_x, self.side_x + thumb_w)


def compose(
    cfg: ExtractorConfig,
    layout: Layout,
    lores: np.ndarray,
    zoom_img: np.ndarray,
    cursor: Sequence[float],
    corners: Sequence[Point],
    outline: Optional[Sequence[Point]] = None,
    thumbnail: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Build the full window: scan + corners, zoom viewport, postcard thumbnail."""
    canvas = np.full((layout.height, layout.width, 3), cfg.background, dtype=np.uint8)

    scan_view = canvas[layout.scan_roi()]
    scan_view[:] = lores
    draw_bicolor_cross(scan_view, cursor[0] - layout.margin, cursor[1] - layout.margin,
                       cfg.cross_color1, cfg.cross_color2, cfg.cross_step)

    # corner coords are window coords
    if outline:
        draw_corners(canvas, outline, cfg.outline_color)
    draw_corners(canvas, corners, cfg.corner_color)

    zoom_view = canvas[layout.zoom_roi()]
    zoom_view[:] = zoom_img
    half = layout.zoom_size / 2.0
    draw_bicolor_cross(zoom_view, half, half, cfg.cross_color1, cfg.cross_color2, cfg.cross_step)

    if thumbnail is not None:
        th, tw = thumbnail.shape[:2]
        canvas[layout.thumbnail_roi(tw, th)] = thumbnail
    return canvas
