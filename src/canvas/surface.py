"""Persistent drawing buffers and their lifecycle (create, resize, reset).

A DrawingBuffer is the off-screen surface that accumulates every committed
stroke. BufferLifecycle owns at most one buffer per session and is the only
place that allocates, swaps or clears it:

    - create: allocate at canvas size; transparent (calligraphy) or filled
      with an opaque background (grid paint)
    - resize: allocate the new size, scale old content by a uniform fit
      factor (max of ratios when growing, min when shrinking), centre it,
      then swap the new buffer in
    - reset: clear in place, no reallocation

Invariants:
    - pixels is (H, W, 4) float32 [0,1], straight alpha
    - A resize is a single attribute swap, so a frame never sees a
      half-built buffer
    - Before create() every operation is a silent no-op
"""

import logging
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from src.utils import geometry
from src.utils.color import rgb_to_unit

logger = logging.getLogger(__name__)


class DrawingBuffer:
    """Off-screen RGBA surface.

    Attributes
    ----------
    pixels : np.ndarray
        (H, W, 4) float32 straight-alpha RGBA in [0,1]
    fill : np.ndarray
        RGBA clear value: (0,0,0,0) when transparent, (r,g,b,1) otherwise
    """

    def __init__(self, width: int, height: int, fill_rgb: Optional[Sequence[int]] = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"Buffer size must be positive, got {width}x{height}")
        if fill_rgb is None:
            self.fill = np.zeros(4, dtype=np.float32)
        else:
            self.fill = np.concatenate([rgb_to_unit(fill_rgb), [1.0]]).astype(np.float32)
        self.pixels = np.empty((height, width, 4), dtype=np.float32)
        self.pixels[...] = self.fill

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) in px."""
        return self.width, self.height

    @property
    def transparent(self) -> bool:
        return self.fill[3] == 0.0

    def clear(self) -> None:
        """Reset every pixel to the fill value in place."""
        self.pixels[...] = self.fill

    def rescaled(self, width: int, height: int) -> Tuple['DrawingBuffer', float]:
        """Build a new buffer of the given size carrying this one's content.

        Content is scaled by geometry.fit_scale_factor() about the centre.
        Uncovered area gets the fill value. Interpolation runs on
        premultiplied colour so transparent pixels don't darken edges.

        Returns
        -------
        tuple
            (new buffer, scale factor)
        """
        factor = geometry.fit_scale_factor(self.size, (width, height))
        out = DrawingBuffer.__new__(DrawingBuffer)
        out.fill = self.fill.copy()

        tx = 0.5 * width - 0.5 * self.width * factor
        ty = 0.5 * height - 0.5 * self.height * factor
        matrix = np.array([[factor, 0.0, tx], [0.0, factor, ty]], dtype=np.float64)

        src = self.pixels.copy()
        src[..., :3] *= src[..., 3:4]
        fill_premul = self.fill.copy()
        fill_premul[:3] *= fill_premul[3]

        warped = cv2.warpAffine(
            src, matrix, (width, height),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=tuple(float(v) for v in fill_premul)
        )
        alpha = warped[..., 3:4]
        warped[..., :3] = np.where(alpha > 1e-6, warped[..., :3] / np.maximum(alpha, 1e-6), 0.0)
        out.pixels = np.clip(warped, 0.0, 1.0).astype(np.float32)
        return out, factor


class BufferLifecycle:
    """Owns one session's persistent drawing buffer.

    Parameters
    ----------
    fill_rgb : sequence of int, optional
        Opaque background fill (grid paint); None for a transparent buffer
        (calligraphy)
    """

    def __init__(self, fill_rgb: Optional[Sequence[int]] = None):
        self.fill_rgb = tuple(fill_rgb) if fill_rgb is not None else None
        self.buffer: Optional[DrawingBuffer] = None

    @property
    def ready(self) -> bool:
        return self.buffer is not None

    def create(self, width: int, height: int) -> DrawingBuffer:
        """Allocate a fresh buffer, discarding any previous one."""
        self.buffer = DrawingBuffer(width, height, self.fill_rgb)
        logger.debug(f"Buffer created: {width}x{height}, transparent={self.buffer.transparent}")
        return self.buffer

    def resize(self, width: int, height: int) -> Optional[float]:
        """Carry the buffer over to a new canvas size.

        Returns
        -------
        float or None
            Scale factor applied to the content, or None if no buffer
            exists yet (in which case one is created) or the size is
            unchanged
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        if self.buffer is None:
            self.create(width, height)
            return None
        if self.buffer.size == (width, height):
            return None

        new_buffer, factor = self.buffer.rescaled(width, height)
        self.buffer = new_buffer
        logger.info(f"Buffer resized to {width}x{height} (content scale {factor:.3f})")
        return factor

    def reset(self) -> bool:
        """Clear the buffer in place; False if there is nothing to clear."""
        if self.buffer is None:
            logger.debug("Reset requested before buffer creation, ignored")
            return False
        self.buffer.clear()
        return True
