"""Calligraphic segment compositor.

Architecture:
    - The nib is a straight bar of total length L centred on the follower,
      oriented at heading + rotation_offset (perpendicular to travel)
    - The bar is split into N equal sections ("bristles")
    - Each frame, every section sweeps a quadrilateral from where it was
      last frame to where it is now; the quad is painted in the section's
      flat colour, or erased when the eraser is selected
    - Quads are written straight into the persistent buffer; nothing is
      kept, so strokes cannot be edited afterwards

Drawing is skipped when the pointer is inactive, on the first sample after
a press, or when the follower moved no more than min_motion: all three
would produce a degenerate sliver.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from src.canvas import raster
from src.utils import geometry
from src.utils.color import rgb_to_unit

from .heading import BrushHeading
from .pointer import Follower

logger = logging.getLogger(__name__)


@dataclass
class BrushSections:
    """The nib: total length and one flat colour per section."""
    total_length: float
    colors: List[Tuple[int, int, int]] = field(default_factory=list)
    erase: bool = False

    @property
    def num_sections(self) -> int:
        return len(self.colors)

    def bounds(self) -> np.ndarray:
        """Offset range of each section along the nib axis, shape (N, 2)."""
        return geometry.section_bounds(self.total_length, self.num_sections)


class SegmentCompositor:
    """Turns one frame of follower motion into painted (or erased) quads.

    Parameters
    ----------
    rotation_offset : float
        Added to both headings before projecting, default π/2
    min_motion : float
        Motion at or below this distance draws nothing, default 0.5 px
    """

    def __init__(self, rotation_offset: float = math.pi / 2, min_motion: float = 0.5):
        self.rotation_offset = rotation_offset
        self.min_motion = min_motion

    def should_draw(self, follower: Follower) -> bool:
        return follower.active and not follower.is_first_sample and follower.motion > self.min_motion

    def section_quads(self, follower: Follower, heading: BrushHeading, brush: BrushSections) -> np.ndarray:
        """Quad corners for every section this frame, shape (N, 4, 2)."""
        return geometry.bristle_quads(
            follower.prev_position, heading.prev_angle + self.rotation_offset,
            follower.position, heading.angle + self.rotation_offset,
            brush.bounds()
        )

    def composite(
        self,
        pixels: np.ndarray,
        follower: Follower,
        heading: BrushHeading,
        brush: BrushSections
    ) -> int:
        """Draw this frame's quads into an RGBA buffer.

        Parameters
        ----------
        pixels : np.ndarray
            Persistent buffer, (H, W, 4) float32, modified in place
        follower : Follower
            Follower after this frame's step
        heading : BrushHeading
            Heading after this frame's update (prev_angle still last frame's)
        brush : BrushSections
            Nib length, section colours and erase flag

        Returns
        -------
        int
            Number of sections that touched the buffer
        """
        if not self.should_draw(follower):
            return 0

        quads = self.section_quads(follower, heading, brush)
        drawn = 0
        for quad, section_color in zip(quads, brush.colors):
            if brush.erase:
                hit = raster.fill_polygon(pixels, quad, None, erase=True)
            else:
                hit = raster.fill_polygon(pixels, quad, rgb_to_unit(section_color))
            drawn += int(hit)
        return drawn
