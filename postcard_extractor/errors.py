"""
Postcard Scan Extractor - error taxonomy
License: GPLv3
"""


class ExtractorError(Exception):
    pass


class DecodeFailure(ExtractorError):
    """Source image missing or unreadable."""


class DegenerateGeometry(ExtractorError):
    """Corner picks do not span a rectangle (coincident or collinear points)."""


class WriteFailure(ExtractorError):
    """A postcard could not be written to disk."""
