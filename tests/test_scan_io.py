import cv2
import numpy as np
import pytest
import tifffile

from postcard_extractor.errors import DecodeFailure, WriteFailure
from postcard_extractor.scan_io import postcard_path, read_scan, remove_extension, write_postcard


@pytest.mark.parametrize("path, expected", [
    ("/foo/bar", "/foo/bar"),
    ("/foo/bar.dat", "/foo/bar"),
    ("/foo.zim/bar.dat", "/foo.zim/bar"),
    ("/foo.zim/bar", "/foo.zim/bar"),
])
def test_remove_extension(path, expected):
    assert remove_extension(path) == expected


def test_postcard_path():
    assert postcard_path("/scans/album.jpg", "_postcard", 0) == "/scans/album_postcard0.png"
    assert postcard_path("/scans/album.v2/page", "_pc", 12) == "/scans/album.v2/page_pc12.png"


def test_read_missing_file(tmp_path):
    with pytest.raises(DecodeFailure):
        read_scan(str(tmp_path / "nothing.png"))


def test_read_garbage_file(tmp_path):
    p = tmp_path / "broken.jpg"
    p.write_bytes(b"this is not an image")
    with pytest.raises(DecodeFailure):
        read_scan(str(p))


def test_read_png_grayscale_as_bgr(tmp_path):
    p = tmp_path / "gray.png"
    cv2.imwrite(str(p), np.full((12, 8), 77, dtype=np.uint8))
    img = read_scan(str(p))
    assert img.shape == (12, 8, 3)
    assert img.dtype == np.uint8
    assert (img == 77).all()


def test_read_16bit_tiff(tmp_path):
    p = tmp_path / "scan.tif"
    rgb = np.zeros((10, 20, 3), dtype=np.uint16)
    rgb[..., 0] = 0x1200
    rgb[..., 1] = 0x3400
    rgb[..., 2] = 0x5600
    tifffile.imwrite(str(p), rgb, photometric="rgb")
    img = read_scan(str(p))
    assert img.shape == (10, 20, 3)
    assert img.dtype == np.uint8
    assert tuple(img[0, 0]) == (0x56, 0x34, 0x12)


def test_write_and_read_back(tmp_path):
    p = str(tmp_path / "out.png")
    img = np.random.default_rng(0).integers(0, 255, size=(16, 9, 3), dtype=np.uint8)
    write_postcard(p, img)
    assert np.array_equal(cv2.imread(p, cv2.IMREAD_COLOR), img)


def test_write_into_missing_dir(tmp_path):
    with pytest.raises(WriteFailure):
        write_postcard(str(tmp_path / "no" / "such" / "dir.png"), np.zeros((4, 4, 3), dtype=np.uint8))
