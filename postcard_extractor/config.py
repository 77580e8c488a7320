"""
Postcard Scan Extractor - configuration
License: GPLv3
"""

from dataclasses import dataclass
from typing import Tuple

Color = Tuple[int, int, int]


@dataclass
class ExtractorConfig:
    # display budget for the lores scan (px)
    window_width: int = 800
    window_height: int = 600
    margin: int = 10

    # zoom viewport (px, square) and default half-extent in display px
    zoom_window_size: int = 200
    default_zoom_level: float = 50.0

    postcard_suffix: str = "_postcard"
    auto_rotate: bool = True

    # drawing (BGR)
    cross_step: int = 10
    cross_color1: Color = (0, 0, 255)
    cross_color2: Color = (0, 0, 0)
    corner_color: Color = (255, 0, 0)
    outline_color: Color = (0, 200, 0)
    background: int = 100

    nudge_step: float = 0.5
    redraw_delay_ms: int = 15

    @classmethod
    def from_args(cls, args) -> "ExtractorConfig":
        cfg = cls()
        if getattr(args, "suffix", None) is not None:
            cfg.postcard_suffix = str(args.suffix)
        if getattr(args, "zoom_level", None) is not None:
            cfg.default_zoom_level = max(1.0, float(args.zoom_level))
        if getattr(args, "no_auto_rotate", False):
            cfg.auto_rotate = False
        return cfg
