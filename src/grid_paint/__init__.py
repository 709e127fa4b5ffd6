"""Grid paint tool: freeform strokes read back through a coarse cell grid.

Modules:
    - freeform: FreeformRasterizer (dots and round-capped lines)
    - raster_grid: RasterGrid (lattice, per-frame resample, cell render)
    - tool: GridPaintTool (the session the host drives)

Invariants:
    - cols = floor(W/cell) + 2, rows = floor(H/cell) + 2, grid centred
    - Cell colours are resampled every frame, not only at stroke end
    - The offscreen buffer is opaque (filled with the background colour)
"""

from .freeform import FreeformRasterizer
from .raster_grid import RasterGrid
from .tool import GridPaintTool

__all__ = ['FreeformRasterizer', 'GridPaintTool', 'RasterGrid']
