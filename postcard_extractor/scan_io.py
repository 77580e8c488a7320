"""
Postcard Scan Extractor - image decode/encode
License: GPLv3
"""

import logging
import os
from pathlib import Path

import cv2
import numpy as np
import tifffile
from PIL import Image

from .errors import DecodeFailure, WriteFailure

logger = logging.getLogger(__name__)

TIFF_SUFFIXES = (".tif", ".tiff")


# -----------------------------
# Decode
# -----------------------------

def _to_bgr8(arr: np.ndarray, rgb_order: bool) -> np.ndarray:
    if arr.dtype == np.uint16:
        arr = (arr >> 8).astype(np.uint8)
    elif arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)

    if arr.ndim == 2:
        return cv2.cvtColor(arr, cv2.COLOR_GRAY2BGR)
    if arr.ndim != 3:
        raise ValueError(f"Unsupported image shape {arr.shape}")
    arr = arr[:, :, :3]
    if arr.shape[2] == 1:
        return cv2.cvtColor(arr, cv2.COLOR_GRAY2BGR)
    if rgb_order:
        arr = arr[:, :, ::-1]
    return np.ascontiguousarray(arr)


def read_tiff_bgr(path: str) -> np.ndarray:
    with tifffile.TiffFile(path) as tf:
        arr = tf.pages[0].asarray()
    return _to_bgr8(arr, rgb_order=True)


def read_pil_bgr(path: str) -> np.ndarray:
    with Image.open(path) as im:
        im = im.convert("RGB")
        arr = np.array(im, dtype=np.uint8)
    return _to_bgr8(arr, rgb_order=True)


def read_scan(path: str) -> np.ndarray:
    """
    Decode an image file into a BGR uint8 buffer.
    TIFF scans go through tifffile (16-bit aware), everything else through
    OpenCV with Pillow as a fallback for formats OpenCV does not handle.
    """
    if not os.path.isfile(path):
        raise DecodeFailure(f"No such file: {path}")

    if Path(path).suffix.lower() in TIFF_SUFFIXES:
        try:
            return read_tiff_bgr(path)
        except Exception as e:
            logger.debug("tifffile could not read %s: %s", path, e)

    img = cv2.imread(path, cv2.IMREAD_COLOR)
    if img is not None and img.size > 0:
        return img

    try:
        return read_pil_bgr(path)
    except Exception as e:
        raise DecodeFailure(f"Could not decode {path}: {e}") from e


# -----------------------------
# Encode / output naming
# -----------------------------

def remove_extension(path: str) -> str:
    return os.path.splitext(path)[0]


def postcard_path(source_path: str, suffix: str, index: int) -> str:
    return f"{remove_extension(source_path)}{suffix}{index}.png"


def write_postcard(path: str, img_bgr: np.ndarray) -> None:
    try:
        ok = cv2.imwrite(path, img_bgr)
    except cv2.error as e:
        raise WriteFailure(f"Could not write {path}: {e}") from e
    if not ok:
        raise WriteFailure(f"Could not write {path}")
