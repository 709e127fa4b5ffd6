"""Calligraphy tool session.

Frame pipeline (one update() call):
    1. Follower steps toward the latest pointer target (lerp while pressed,
       jump while released)
    2. Heading resolves toward the travel direction (shortest rotation,
       smoothed)
    3. Compositor sweeps one quad per bristle section into the persistent
       buffer (or erases, when the eraser entry is selected)
    4. Visible frame = background colour + buffer

Usage:
    from src.calligraphy import CalligraphyTool

    tool = CalligraphyTool()
    tool.setup(800, 600)
    tool.on_pointer_active(100, 100)
    for y in range(104, 304, 4):
        tool.on_pointer_move(100, y)
        tool.update()
    tool.on_pointer_release()
    frame = tool.export_frame()
"""

import logging
from typing import Optional

import numpy as np

from src.canvas.session import BrushCommand, PaintSession
from src.utils import color as color_utils
from src.utils.validators import CalligraphyConfig

from .compositor import BrushSections, SegmentCompositor
from .heading import BrushHeading
from .pointer import Follower

logger = logging.getLogger(__name__)


class CalligraphyTool(PaintSession):
    """Continuous calligraphic stroke engine over a transparent buffer.

    Attributes
    ----------
    config : CalligraphyConfig
        Validated tool settings
    brush : BrushSections
        Current nib (length, per-section colours, erase flag)
    follower : Follower
        Smoothed pointer, created at canvas centre on setup()
    heading : BrushHeading
        Nib orientation
    """

    tool_name = "calligraphy"

    def __init__(self, config: Optional[CalligraphyConfig] = None):
        self.config = config or CalligraphyConfig()
        cfg = self.config

        self.brush = BrushSections(total_length=cfg.brush_length)
        self.follower = Follower(follow_factor=cfg.follow_factor)
        self.heading = BrushHeading(smoothing=cfg.heading_smoothing, min_motion=cfg.min_motion_px)
        self.compositor = SegmentCompositor(cfg.rotation_offset, cfg.min_motion_px)
        self.background = color_utils.rgb_to_unit(cfg.background)

        self._target = np.zeros(2)
        self._pressed = False

        super().__init__(cfg.palette, cfg.default_color_index, fill_rgb=None)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def brush_length(self) -> float:
        return self.brush.total_length

    @property
    def erasing(self) -> bool:
        return self.config.erase_index is not None and self.color_index == self.config.erase_index

    def _on_color_changed(self) -> None:
        self.brush.colors = [self.active_color] * self.config.num_sections
        self.brush.erase = self.erasing

    def set_brush_length(self, command: BrushCommand) -> None:
        """Grow/shrink the nib by one step, or restore the configured length.

        Raises
        ------
        ValueError
            If command is not "+", "-" or "reset"
        """
        if not self.ready:
            logger.debug("calligraphy: brush length change before setup ignored")
            return
        cfg = self.config
        if command == "+":
            length = self.brush.total_length + cfg.brush_length_step
        elif command == "-":
            length = self.brush.total_length - cfg.brush_length_step
        elif command == "reset":
            length = cfg.brush_length
        else:
            raise ValueError(f"Brush length command must be '+', '-' or 'reset', got {command!r}")

        self.brush.total_length = float(np.clip(length, cfg.brush_length_min, cfg.brush_length_max))
        logger.debug(f"Brush length: {self.brush.total_length:.0f} px")

    # ------------------------------------------------------------------
    # Lifecycle hooks
    # ------------------------------------------------------------------

    def _on_setup(self) -> None:
        width, height = self.size
        self._target = np.array([width / 2.0, height / 2.0])
        self.follower = Follower.at(width / 2.0, height / 2.0, self.config.follow_factor)
        self.heading.reset()
        self._pressed = False

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def on_pointer_active(self, x: float, y: float) -> None:
        if not self.ready:
            return
        if not self._pressed:
            # An idle follower tracks the pointer; land it on the press point
            self.follower.snap(x, y)
        self._pressed = True
        self._target = np.array([x, y], dtype=np.float64)

    def on_pointer_move(self, x: float, y: float) -> None:
        if not self.ready:
            return
        self._target = np.array([x, y], dtype=np.float64)

    def on_pointer_release(self) -> None:
        self._pressed = False

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def update(self) -> None:
        if not self.ready:
            logger.debug("calligraphy: update before setup ignored")
            return

        self.follower.step(self._target, self._pressed)
        self.heading.update(self.follower.prev_position, self.follower.position)
        self.compositor.composite(self.buffer.pixels, self.follower, self.heading, self.brush)

        if self.follower.active:
            self.heading.commit()
        self.follower.end_frame()

        self.frame = self.compose_frame()
        self.frame_count += 1

    def compose_frame(self) -> np.ndarray:
        rgb = color_utils.composite_over(self.buffer.pixels, self.background)
        return color_utils.to_uint8(rgb)
