"""Planar geometry for brush motion and buffer rescaling.

Provides:
    - Linear interpolation and point distance
    - Angle wrapping into (−π, π] and signed shortest rotation
    - Brush section bounds and bristle quadrilateral corners
    - Uniform fit factor for resizing a buffer to a new canvas

Used by:
    - Calligraphy: follower smoothing, heading resolution, segment quads
    - Canvas: resize-with-content-preservation
    - Tests: synthetic pointer paths

All coordinates in canvas pixels, image frame (top-left origin, +Y down),
so positive angles turn clockwise on screen.
"""

import math
from typing import Sequence, Tuple

import numpy as np


def lerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    """Linear interpolation ``a + (b - a) * t``, elementwise."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return a + (b - a) * t


def distance(p: Sequence[float], q: Sequence[float]) -> float:
    """Euclidean distance between two 2D points."""
    return float(math.hypot(q[0] - p[0], q[1] - p[1]))


def wrap_angle(theta: float) -> float:
    """Wrap an angle into (−π, π].

    ``atan2(sin, cos)`` lands in [−π, π]; the −π end is folded onto +π so
    every heading has exactly one representation.
    """
    wrapped = math.atan2(math.sin(theta), math.cos(theta))
    if wrapped <= -math.pi:
        wrapped = math.pi
    return wrapped


def angle_delta(target: float, current: float) -> float:
    """Signed rotation from ``current`` to ``target``, normalised to [−π, π]."""
    d = target - current
    return math.atan2(math.sin(d), math.cos(d))


def direction(angle: float) -> np.ndarray:
    """Unit vector (cos, sin) for an angle in radians."""
    return np.array([math.cos(angle), math.sin(angle)], dtype=np.float64)


def section_bounds(total_length: float, num_sections: int) -> np.ndarray:
    """Offset range of each brush section along the nib axis.

    Parameters
    ----------
    total_length : float
        Total brush length L in px
    num_sections : int
        Number of sections N (≥ 1)

    Returns
    -------
    np.ndarray
        Shape (N, 2): row i is ``[−L/2 + i·L/N, −L/2 + (i+1)·L/N]``
    """
    if num_sections < 1:
        raise ValueError(f"num_sections must be >= 1, got {num_sections}")
    edges = -0.5 * total_length + np.arange(num_sections + 1) * (total_length / num_sections)
    return np.stack([edges[:-1], edges[1:]], axis=1)


def bristle_quads(
    prev_position: Sequence[float],
    prev_axis_angle: float,
    position: Sequence[float],
    axis_angle: float,
    bounds: np.ndarray
) -> np.ndarray:
    """Corners of the quadrilateral swept by each brush section in one frame.

    Parameters
    ----------
    prev_position, position : sequence of float
        Nib anchor at the previous and current frame (px)
    prev_axis_angle, axis_angle : float
        Direction of the nib axis at each frame (radians), i.e. the brush
        heading with the perpendicular offset already applied
    bounds : np.ndarray
        Section offset ranges, shape (N, 2), from section_bounds()

    Returns
    -------
    np.ndarray
        Shape (N, 4, 2). Corner order per section: previous-start,
        previous-end, current-end, current-start, so the outline never
        crosses itself for small rotations.
    """
    prev_position = np.asarray(prev_position, dtype=np.float64)
    position = np.asarray(position, dtype=np.float64)
    d_prev = direction(prev_axis_angle)
    d_cur = direction(axis_angle)

    start = bounds[:, 0:1]
    end = bounds[:, 1:2]
    return np.stack([
        prev_position + d_prev * start,
        prev_position + d_prev * end,
        position + d_cur * end,
        position + d_cur * start,
    ], axis=1)


def fit_scale_factor(old_size: Tuple[int, int], new_size: Tuple[int, int]) -> float:
    """Uniform factor used to carry buffer content across a resize.

    Parameters
    ----------
    old_size, new_size : tuple of int
        (width, height) before and after

    Returns
    -------
    float
        ``max`` of the per-axis ratios if the canvas grew on either axis,
        otherwise ``min``; aspect ratio is always preserved.
    """
    old_w, old_h = old_size
    new_w, new_h = new_size
    if old_w <= 0 or old_h <= 0:
        raise ValueError(f"Old size must be positive, got {old_size}")
    ratio_w = new_w / old_w
    ratio_h = new_h / old_h
    if new_w > old_w or new_h > old_h:
        return max(ratio_w, ratio_h)
    return min(ratio_w, ratio_h)
