"""Freeform stroke rasterizer for the grid-paint buffer.

Paints raw pointer motion, unsmoothed, as constant-width round-capped lines
into the offscreen buffer. A press without motion (current == previous)
leaves a dot of the same diameter. Strokes overpaint opaquely and never
decay.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from src.canvas import raster
from src.canvas.surface import DrawingBuffer
from src.utils.color import rgb_to_unit

logger = logging.getLogger(__name__)


class FreeformRasterizer:
    """Draws press dots and drag segments."""

    def draw(
        self,
        buffer: Optional[DrawingBuffer],
        current: Sequence[float],
        previous: Sequence[float],
        width: float,
        color: Sequence[int]
    ) -> bool:
        """Paint one pointer sample.

        Parameters
        ----------
        buffer : DrawingBuffer or None
            Target buffer; None (not yet created) makes this a no-op
        current, previous : sequence of float
            Pointer position now and at the previous sample (px)
        width : float
            Stroke width / dot diameter (px)
        color : sequence of int
            8-bit (R, G, B)

        Returns
        -------
        bool
            True if any pixel was painted
        """
        if buffer is None:
            logger.debug("Freeform stroke before buffer creation, ignored")
            return False

        rgb = rgb_to_unit(color)
        if np.allclose(current, previous):
            return raster.fill_disc(buffer.pixels, current, width, rgb)
        return raster.stroke_line(buffer.pixels, previous, current, width, rgb)
