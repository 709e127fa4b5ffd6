"""Raster grid and per-frame resampler for the grid-paint effect.

Architecture:
    - The grid covers the canvas with square cells of side cell_size,
      padded by one extra column/row (cols = floor(W/cell) + 2) so edge
      cells that are only partly visible still render, and centred so the
      remainder is split evenly between both edges
    - Cell centres and colours are flat row-major arrays indexed by
      ``row * cols + col``, sized once per regeneration
    - Each frame the offscreen buffer is area-downsampled to
      (int(W/cell)·k, int(H/cell)·k), k = sample_density, which averages
      out anti-aliasing inside a cell before a single sample is taken
    - Each cell reads the downsampled pixel under its centre (clamped to
      the copy's bounds for the padding cells)
    - Render: clear to the canvas colour, then draw every cell as an opaque
      square of its colour

Notes:
    - The downsample filter is a tuning detail; exact cell colours are not
      bit-stable across filters, only the region average is
"""

import math
from typing import Optional, Tuple

import cv2
import numpy as np


class RasterGrid:
    """Cell lattice for one (canvas size, cell size) pair.

    Attributes
    ----------
    cols, rows : int
        Grid dimensions (floor(W/cell) + 2, floor(H/cell) + 2)
    cell_size : float
        Cell side in px
    centers_x : np.ndarray
        Cell centre x per column, shape (cols,)
    centers_y : np.ndarray
        Cell centre y per row, shape (rows,)
    positions : np.ndarray
        Cell centres, shape (rows * cols, 2), row-major
    colors : np.ndarray
        Last sampled colour per cell, shape (rows * cols, 3), float32 [0,1]
    """

    def __init__(self, width: int, height: int, cell_size: float):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")

        self.width = int(width)
        self.height = int(height)
        self.cell_size = float(cell_size)
        self.cols = math.floor(self.width / self.cell_size) + 2
        self.rows = math.floor(self.height / self.cell_size) + 2

        # Left/top edge of cell 0; negative once the padding overhangs
        self.origin_x = (self.width - self.cell_size * self.cols) / 2.0
        self.origin_y = (self.height - self.cell_size * self.rows) / 2.0

        half = self.cell_size / 2.0
        self.centers_x = np.arange(self.cols) * self.cell_size + self.origin_x + half
        self.centers_y = np.arange(self.rows) * self.cell_size + self.origin_y + half

        grid_x, grid_y = np.meshgrid(self.centers_x, self.centers_y)
        self.positions = np.stack([grid_x.ravel(), grid_y.ravel()], axis=1)
        self.colors = np.zeros((self.rows * self.cols, 3), dtype=np.float32)

    def __len__(self) -> int:
        return self.rows * self.cols

    def index(self, col: int, row: int) -> int:
        """Flat index of cell (col, row).

        Raises
        ------
        IndexError
            If (col, row) is outside the grid
        """
        if not (0 <= col < self.cols and 0 <= row < self.rows):
            raise IndexError(f"Cell ({col}, {row}) outside grid {self.cols}x{self.rows}")
        return row * self.cols + col

    def position(self, col: int, row: int) -> Tuple[float, float]:
        x, y = self.positions[self.index(col, row)]
        return float(x), float(y)

    def color(self, col: int, row: int) -> np.ndarray:
        return self.colors[self.index(col, row)]

    def downsample_size(self, density: int) -> Tuple[int, int]:
        """(width, height) of the low-resolution copy for a sampling density."""
        return (
            max(1, int(self.width / self.cell_size) * density),
            max(1, int(self.height / self.cell_size) * density),
        )

    def sample(self, pixels: np.ndarray, density: int = 4) -> np.ndarray:
        """Cell colours for a buffer, without storing them.

        Parameters
        ----------
        pixels : np.ndarray
            Buffer (H, W, 3|4) float32 [0,1] matching the grid's canvas size
        density : int
            Samples per cell per axis in the downsampled copy

        Returns
        -------
        np.ndarray
            Colours, shape (rows * cols, 3), row-major
        """
        h, w = pixels.shape[:2]
        if (w, h) != (self.width, self.height):
            raise ValueError(f"Buffer {w}x{h} doesn't match grid canvas {self.width}x{self.height}")

        small_w, small_h = self.downsample_size(density)
        small = cv2.resize(
            np.ascontiguousarray(pixels[..., :3]), (small_w, small_h),
            interpolation=cv2.INTER_AREA
        )

        ix = np.clip(np.floor(self.centers_x * (small_w / w)).astype(np.int64), 0, small_w - 1)
        iy = np.clip(np.floor(self.centers_y * (small_h / h)).astype(np.int64), 0, small_h - 1)
        return small[iy[:, np.newaxis], ix[np.newaxis, :]].reshape(-1, 3).astype(np.float32)

    def resample(self, pixels: np.ndarray, density: int = 4) -> None:
        """Refresh every cell colour from the buffer."""
        self.colors = self.sample(pixels, density)

    def render(self, canvas_rgb: np.ndarray, colors: Optional[np.ndarray] = None) -> np.ndarray:
        """Draw the cells as flat squares.

        Parameters
        ----------
        canvas_rgb : np.ndarray
            Clear colour, shape (3,), float32 [0,1]
        colors : np.ndarray, optional
            Per-cell colours (rows * cols, 3); defaults to the stored ones

        Returns
        -------
        np.ndarray
            Frame, shape (H, W, 3), float32 [0,1]
        """
        colors = self.colors if colors is None else colors
        cell_img = colors.reshape(self.rows, self.cols, 3)

        # Cell containing each pixel centre; -1 / out of range means bare canvas
        col_of_x = np.floor((np.arange(self.width) + 0.5 - self.origin_x) / self.cell_size).astype(np.int64)
        row_of_y = np.floor((np.arange(self.height) + 0.5 - self.origin_y) / self.cell_size).astype(np.int64)
        valid_x = (col_of_x >= 0) & (col_of_x < self.cols)
        valid_y = (row_of_y >= 0) & (row_of_y < self.rows)

        frame = cell_img[
            np.clip(row_of_y, 0, self.rows - 1)[:, np.newaxis],
            np.clip(col_of_x, 0, self.cols - 1)[np.newaxis, :]
        ]
        covered = valid_y[:, np.newaxis] & valid_x[np.newaxis, :]
        return np.where(covered[..., np.newaxis], frame, canvas_rgb[np.newaxis, np.newaxis, :]).astype(np.float32)
