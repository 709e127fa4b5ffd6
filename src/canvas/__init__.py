"""Raster canvas layer shared by both painting tools.

Modules:
    - raster: anti-aliased coverage masks (polygon, line, disc) and
      paint/erase blending into RGBA buffers
    - surface: DrawingBuffer and BufferLifecycle (create, resize, reset)
    - session: PaintSession, the host-facing base of every tool

Invariants:
    - Buffers are (H, W, 4) float32 straight-alpha RGBA in [0,1]
    - Only BufferLifecycle allocates or swaps a session's buffer
"""

from .session import PaintSession
from .surface import BufferLifecycle, DrawingBuffer

__all__ = ['PaintSession', 'BufferLifecycle', 'DrawingBuffer']
