"""
Postcard Scan Extractor - coordinate mapping and rectification
License: GPLv3
"""

import math
from typing import Sequence, Tuple

import cv2
import numpy as np

from .errors import DegenerateGeometry

Point = Tuple[float, float]


# -----------------------------
# Coordinate mapping (display <-> hires)
# -----------------------------

def compute_display_factor(hires_w: int, hires_h: int, display_w: int, display_h: int) -> float:
    if hires_w <= 0 or hires_h <= 0:
        raise ValueError(f"Invalid image size {hires_w}x{hires_h}")
    return min(float(display_w) / hires_w, float(display_h) / hires_h)


def display_to_hires(p: Sequence[float], scale: float, margin: float) -> Point:
    return (float(p[0]) - margin) / scale, (float(p[1]) - margin) / scale


def hires_to_display(p: Sequence[float], scale: float, margin: float) -> Point:
    return float(p[0]) * scale + margin, float(p[1]) * scale + margin


def dist_l2(a: Sequence[float], b: Sequence[float]) -> float:
    return math.hypot(float(a[0]) - float(b[0]), float(a[1]) - float(b[1]))


# -----------------------------
# Rectangle construction
# -----------------------------

def project_on_perpendicular(c1: Sequence[float], c2: Sequence[float], p: Sequence[float]) -> Point:
    """
    Closest point to ``p`` on the line through ``c2`` perpendicular to c1->c2.
    Raises DegenerateGeometry when c1 and c2 coincide.
    """
    a = float(c2[0]) - float(c1[0])
    b = float(c2[1]) - float(c1[1])
    n2 = a * a + b * b
    if n2 < 1e-12:
        raise DegenerateGeometry("First two corners coincide.")
    # direction of the allowed line is (b, -a)
    t = ((float(p[0]) - float(c2[0])) * b - (float(p[1]) - float(c2[1])) * a) / n2
    return float(c2[0]) + t * b, float(c2[1]) - t * a


def parallelogram_fourth(c1: Sequence[float], c2: Sequence[float], c3: Sequence[float]) -> Point:
    return (float(c1[0]) + float(c3[0]) - float(c2[0]),
            float(c1[1]) + float(c3[1]) - float(c2[1]))


def rectangle_size(p0: Sequence[float], p1: Sequence[float], p2: Sequence[float]) -> Tuple[float, float]:
    return dist_l2(p0, p1), dist_l2(p1, p2)


def output_size(p0: Sequence[float], p1: Sequence[float], p2: Sequence[float]) -> Tuple[int, int]:
    w, h = rectangle_size(p0, p1, p2)
    out_w, out_h = int(round(w)), int(round(h))
    if out_w <= 0 or out_h <= 0:
        raise DegenerateGeometry(f"Rectangle too small ({w:.2f}x{h:.2f}).")
    return out_w, out_h


# -----------------------------
# Affine warp
# -----------------------------

def affine_from_triangles(src: Sequence[Sequence[float]], dst: Sequence[Sequence[float]]) -> np.ndarray:
    return cv2.getAffineTransform(np.asarray(src, dtype=np.float32), np.asarray(dst, dtype=np.float32))


def rectify(img_bgr: np.ndarray, p0: Sequence[float], p1: Sequence[float], p2: Sequence[float]) -> np.ndarray:
    """
    Warp the rectangle spanned by p0->p1 (width) and p1->p2 (height) onto an
    upright buffer. Points are in hires coordinates.
    """
    out_w, out_h = output_size(p0, p1, p2)
    w, h = rectangle_size(p0, p1, p2)
    M = affine_from_triangles([p0, p1, p2], [(0, 0), (w, 0), (w, h)])
    out = np.zeros((out_h, out_w) + img_bgr.shape[2:], dtype=img_bgr.dtype)
    cv2.warpAffine(
        img_bgr, M, (out_w, out_h), dst=out,
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=0,
    )
    return out


# -----------------------------
# Postcard transforms
# -----------------------------

def rotate_90(img: np.ndarray) -> np.ndarray:
    return cv2.flip(cv2.transpose(img), 0)


def flip_horizontal(img: np.ndarray) -> np.ndarray:
    # around the horizontal (x) axis: rows reversed
    return cv2.flip(img, 0)


def flip_vertical(img: np.ndarray) -> np.ndarray:
    # around the vertical (y) axis: columns reversed
    return cv2.flip(img, 1)


def auto_rotate(img: np.ndarray) -> np.ndarray:
    """Portrait scans are turned to landscape, same rotation as rotate_90."""
    h, w = img.shape[:2]
    if w < h:
        return rotate_90(img)
    return img.copy()
