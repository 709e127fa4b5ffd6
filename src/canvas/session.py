"""Base class for a painting tool session.

A session is the explicit context object of one tool instance: it owns the
palette selection, the brush settings and the persistent buffer, and the
host drives it with plain method calls:

    tool.setup(800, 600)
    tool.on_pointer_active(x, y)    # press
    tool.on_pointer_move(x, y)      # drag (coalesced per frame)
    tool.update()                   # one display frame
    tool.on_pointer_release()
    frame = tool.export_frame()     # (H, W, 3) uint8, read-only

Until setup() has run every drawing, settings, resize and reset call is a
silent no-op and export_frame() returns None.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .surface import BufferLifecycle, DrawingBuffer

logger = logging.getLogger(__name__)

BrushCommand = Union[str, float]


class PaintSession(ABC):
    """Shared entry points of the calligraphy and grid-paint tools."""

    tool_name = "session"

    def __init__(
        self,
        palette: Sequence[Sequence[int]],
        default_color_index: int,
        fill_rgb: Optional[Sequence[int]] = None
    ):
        self.palette: List[Tuple[int, int, int]] = [tuple(int(c) for c in entry) for entry in palette]
        self.lifecycle = BufferLifecycle(fill_rgb)
        self.color_index = 0
        self.frame: Optional[np.ndarray] = None
        self.frame_count = 0
        self._select_color(default_color_index)

    # ------------------------------------------------------------------
    # Buffer access
    # ------------------------------------------------------------------

    @property
    def ready(self) -> bool:
        return self.lifecycle.ready

    @property
    def buffer(self) -> Optional[DrawingBuffer]:
        return self.lifecycle.buffer

    @property
    def size(self) -> Optional[Tuple[int, int]]:
        """(width, height) of the canvas, None before setup."""
        return self.buffer.size if self.buffer is not None else None

    # ------------------------------------------------------------------
    # Lifecycle entry points
    # ------------------------------------------------------------------

    def setup(self, width: int, height: int) -> None:
        """Create the canvas; the session is inert until this runs."""
        self.lifecycle.create(width, height)
        self.frame = None
        self.frame_count = 0
        self._on_setup()
        logger.info(f"{self.tool_name} session ready: {width}x{height}")

    def on_resize(self, width: int, height: int) -> None:
        """Carry the drawing over to a new canvas size."""
        if not self.ready:
            logger.debug(f"{self.tool_name}: resize before setup ignored")
            return
        factor = self.lifecycle.resize(width, height)
        if factor is None:
            return
        self.frame = None
        self._on_resized(factor)

    def reset_canvas(self) -> None:
        """Clear the drawing; brush settings and colour selection are kept."""
        if self.lifecycle.reset():
            self.frame = None
            self._on_reset()

    def set_active_color(self, index: int) -> None:
        """Select a palette entry; ignored before setup.

        Raises
        ------
        IndexError
            If index is outside the palette
        """
        if not self.ready:
            logger.debug(f"{self.tool_name}: colour change before setup ignored")
            return
        self._select_color(index)

    def _select_color(self, index: int) -> None:
        if not 0 <= index < len(self.palette):
            raise IndexError(f"Colour index {index} out of palette range [0, {len(self.palette)})")
        self.color_index = int(index)
        self._on_color_changed()

    @property
    def active_color(self) -> Tuple[int, int, int]:
        return self.palette[self.color_index]

    def export_frame(self) -> Optional[np.ndarray]:
        """Current visible frame as (H, W, 3) uint8; None before setup.

        Read-only: composes the frame from the current buffer without
        touching session state.
        """
        if not self.ready:
            return None
        return self.compose_frame()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _on_setup(self) -> None:
        pass

    def _on_resized(self, factor: float) -> None:
        pass

    def _on_reset(self) -> None:
        pass

    def _on_color_changed(self) -> None:
        pass

    # ------------------------------------------------------------------
    # Tool-specific entry points
    # ------------------------------------------------------------------

    @abstractmethod
    def update(self) -> None:
        """Run one display frame."""

    @abstractmethod
    def on_pointer_active(self, x: float, y: float) -> None:
        """Pointer pressed (or touch started) at (x, y)."""

    @abstractmethod
    def on_pointer_move(self, x: float, y: float) -> None:
        """Pointer moved to (x, y)."""

    @abstractmethod
    def on_pointer_release(self) -> None:
        """Pointer released (or touch ended)."""

    @abstractmethod
    def set_brush_length(self, command: BrushCommand) -> None:
        """Adjust the brush size: "+", "-", "reset" (grid also takes a factor)."""

    @abstractmethod
    def compose_frame(self) -> np.ndarray:
        """Visible frame for the current buffer, (H, W, 3) uint8."""
