"""
Postcard Scan Extractor - corner collection

Three clicks define a postcard: the first two give one side, the third is
forced onto the perpendicular through the second corner so the picked region
is always a true rectangle. The fourth corner is the parallelogram closure.
License: GPLv3
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import DegenerateGeometry
from .geometry import (
    Point,
    display_to_hires,
    output_size,
    parallelogram_fourth,
    project_on_perpendicular,
)

logger = logging.getLogger(__name__)


@dataclass
class CompletedQuad:
    display: List[Point]  # 4 corners, display coords
    hires: List[Point]    # same 4 corners, hires coords


class CornerCollector:
    def __init__(self, scale: float = 1.0, margin: float = 0.0):
        self.scale = float(scale)
        self.margin = float(margin)
        self.display_pts: List[Point] = []
        self.hires_pts: List[Point] = []

    def __len__(self) -> int:
        return len(self.display_pts)

    def set_mapping(self, scale: float, margin: float) -> None:
        self.scale = float(scale)
        self.margin = float(margin)
        self.clear()

    def clear(self) -> None:
        self.display_pts.clear()
        self.hires_pts.clear()

    def constrain(self, p: Tuple[float, float]) -> Point:
        """Snap a pending cursor position while the third corner is being picked."""
        if len(self.display_pts) != 2:
            return float(p[0]), float(p[1])
        try:
            return project_on_perpendicular(self.display_pts[0], self.display_pts[1], p)
        except DegenerateGeometry:
            return float(p[0]), float(p[1])

    def commit(self, p: Tuple[float, float]) -> Optional[CompletedQuad]:
        """
        Add a corner. Returns the completed quad once the third corner lands,
        after which the collector is empty again. Raises DegenerateGeometry
        (without changing state) if the third corner cannot close a rectangle.
        """
        n = len(self.display_pts)
        if n < 2:
            self._append((float(p[0]), float(p[1])))
            logger.debug("corner %d at (%.1f, %.1f)", n + 1, p[0], p[1])
            return None

        p3 = project_on_perpendicular(self.display_pts[0], self.display_pts[1], p)
        h3 = display_to_hires(p3, self.scale, self.margin)
        output_size(self.hires_pts[0], self.hires_pts[1], h3)

        self._append(p3)
        self.display_pts.append(parallelogram_fourth(*self.display_pts[:3]))
        self.hires_pts.append(parallelogram_fourth(*self.hires_pts[:3]))
        quad = CompletedQuad(display=list(self.display_pts), hires=list(self.hires_pts))
        logger.debug("quad complete: %s", quad.display)
        self.clear()
        return quad

    def _append(self, p: Point) -> None:
        self.display_pts.append(p)
        self.hires_pts.append(display_to_hires(p, self.scale, self.margin))
