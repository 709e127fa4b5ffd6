"""Grid paint tool session.

Pointer input paints straight into an opaque offscreen buffer (stroke width
= cell size). Every frame the buffer is resampled onto the raster grid and
the visible frame shows only the grid's flat cells, so the drawing reads
back pixelated while it is being made.

Cell size moves in steps of 25 px (12.5 px on touch devices) inside
[5, 200]; changing it, or resizing the canvas, rebuilds the grid.

Usage:
    from src.grid_paint import GridPaintTool

    tool = GridPaintTool()
    tool.setup(800, 600)
    tool.set_active_color(2)              # red
    tool.on_pointer_active(100, 300)
    tool.on_pointer_move(700, 300)
    tool.on_pointer_release()
    tool.update()
    frame = tool.export_frame()
"""

import logging
import math
from typing import Optional

import numpy as np

from src.canvas.session import BrushCommand, PaintSession
from src.utils import color as color_utils
from src.utils.validators import GridPaintConfig

from .freeform import FreeformRasterizer
from .raster_grid import RasterGrid

logger = logging.getLogger(__name__)


class GridPaintTool(PaintSession):
    """Freeform strokes, displayed through a coarse resampled grid.

    Attributes
    ----------
    config : GridPaintConfig
        Validated tool settings
    cell_size : float
        Current cell side (px); also the stroke width
    cell_step : float
        Increment used by "+" / "-"
    grid : RasterGrid or None
        Current lattice, None before setup
    """

    tool_name = "grid"

    def __init__(self, config: Optional[GridPaintConfig] = None):
        self.config = config or GridPaintConfig()
        cfg = self.config

        self.cell_size = cfg.effective_cell_size
        self.cell_step = cfg.effective_cell_step
        self.grid: Optional[RasterGrid] = None
        self.rasterizer = FreeformRasterizer()
        self.canvas_rgb = color_utils.rgb_to_unit(cfg.canvas_color)

        self._drawing = False
        self._last_point: Optional[tuple] = None

        super().__init__(cfg.palette, cfg.default_color_index, fill_rgb=cfg.background)

    # ------------------------------------------------------------------
    # Grid
    # ------------------------------------------------------------------

    def _regenerate_grid(self) -> None:
        if not self.ready:
            return
        width, height = self.size
        self.grid = RasterGrid(width, height, self.cell_size)
        logger.debug(
            f"Grid regenerated: cell={self.cell_size:g}px, "
            f"{self.grid.cols}x{self.grid.rows} cells for {width}x{height}"
        )

    def set_brush_length(self, command: BrushCommand) -> None:
        """Change the cell size and rebuild the grid.

        Parameters
        ----------
        command : str or float
            "+" / "-": one step up/down; "reset": back to the preset; a
            number: scale factor, snapped to the nearest step

        Raises
        ------
        ValueError
            On an unknown string command or a non-positive factor
        """
        if not self.ready:
            logger.debug("grid: cell size change before setup ignored")
            return
        cfg = self.config
        if command == "+":
            size = self.cell_size + self.cell_step
        elif command == "-":
            size = self.cell_size - self.cell_step
        elif command == "reset":
            size = cfg.effective_cell_size
        elif isinstance(command, (int, float)) and not isinstance(command, bool):
            if command <= 0:
                raise ValueError(f"Cell size factor must be positive, got {command}")
            # Round half up onto the step lattice
            size = math.floor(self.cell_size * command / self.cell_step + 0.5) * self.cell_step
        else:
            raise ValueError(f"Cell size command must be '+', '-', 'reset' or a factor, got {command!r}")

        self.cell_size = float(np.clip(size, cfg.cell_min, cfg.cell_max))
        self._regenerate_grid()

    # ------------------------------------------------------------------
    # Lifecycle hooks
    # ------------------------------------------------------------------

    def _on_setup(self) -> None:
        self._drawing = False
        self._last_point = None
        self._regenerate_grid()

    def _on_resized(self, factor: float) -> None:
        # A drag in progress carries on across the resize
        self.set_brush_length(factor)

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def on_pointer_active(self, x: float, y: float) -> None:
        if not self.ready:
            return
        self._drawing = True
        self._last_point = (float(x), float(y))
        self.rasterizer.draw(self.buffer, self._last_point, self._last_point, self.cell_size, self.active_color)

    def on_pointer_move(self, x: float, y: float) -> None:
        if not self._drawing:
            return
        point = (float(x), float(y))
        self.rasterizer.draw(self.buffer, point, self._last_point, self.cell_size, self.active_color)
        self._last_point = point

    def on_pointer_release(self) -> None:
        self._drawing = False

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def update(self) -> None:
        if not self.ready:
            logger.debug("grid: update before setup ignored")
            return
        self.grid.resample(self.buffer.pixels, self.config.sample_density)
        self.frame = color_utils.to_uint8(self.grid.render(self.canvas_rgb))
        self.frame_count += 1

    def compose_frame(self) -> np.ndarray:
        colors = self.grid.sample(self.buffer.pixels, self.config.sample_density)
        return color_utils.to_uint8(self.grid.render(self.canvas_rgb, colors))
