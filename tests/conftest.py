import cv2
import numpy as np
import pytest

from postcard_extractor.config import ExtractorConfig
from postcard_extractor.session import ExtractorSession


def gradient_image(w: int, h: int) -> np.ndarray:
    xs = np.tile(np.arange(w, dtype=np.uint32), (h, 1))
    ys = np.tile(np.arange(h, dtype=np.uint32)[:, None], (1, w))
    img = np.zeros((h, w, 3), dtype=np.uint8)
    img[:, :, 0] = (xs % 256).astype(np.uint8)
    img[:, :, 1] = (ys % 256).astype(np.uint8)
    img[:, :, 2] = ((xs + 3 * ys) % 251).astype(np.uint8)
    return img


@pytest.fixture
def scan_files(tmp_path):
    paths = []
    for i, (w, h) in enumerate([(400, 300), (1600, 1200), (300, 500)]):
        p = tmp_path / f"scan{i}.png"
        cv2.imwrite(str(p), gradient_image(w, h))
        paths.append(str(p))
    return paths


@pytest.fixture
def session():
    return ExtractorSession(ExtractorConfig())
