"""Anti-aliased coverage masks and straight-alpha blending on RGBA buffers.

Architecture:
    - Rasterise a shape (polygon, round-capped line, disc) into a uint8
      coverage mask with OpenCV LINE_AA at 1/16 px precision (shift=4)
    - Only the shape's bounding box (clipped to the buffer) is rasterised
    - Blend the colour into that region of the buffer:
        paint: opaque colour "over" the existing pixels
        erase: destination alpha scaled by (1 - coverage)

Invariants:
    - Buffers are (H, W, 4) float32, straight alpha, [0,1]
    - Blending never touches pixels outside the shape's coverage, so erase
      mode cannot leak beyond the shape or into later draws
    - Shapes entirely off-buffer are a no-op (return False)

Usage:
    from src.canvas import raster
    raster.fill_polygon(buffer.pixels, corners, color_rgb)
    raster.fill_polygon(buffer.pixels, corners, None, erase=True)
    raster.stroke_line(buffer.pixels, p0, p1, width=75.0, color_rgb=red)
"""

from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

# Fixed-point fraction bits handed to OpenCV drawing calls
_SHIFT = 4
_ONE = 1 << _SHIFT

Region = Tuple[slice, slice]


def _clip_region(
    x_min: float, y_min: float, x_max: float, y_max: float,
    shape: Tuple[int, int]
) -> Optional[Tuple[int, int, int, int]]:
    """Integer bounding box clipped to the buffer, or None if empty."""
    h, w = shape
    x0 = max(int(np.floor(x_min)) - 1, 0)
    y0 = max(int(np.floor(y_min)) - 1, 0)
    x1 = min(int(np.ceil(x_max)) + 2, w)
    y1 = min(int(np.ceil(y_max)) + 2, h)
    if x1 <= x0 or y1 <= y0:
        return None
    return x0, y0, x1, y1


def _to_fixed(points: np.ndarray, x0: int, y0: int) -> np.ndarray:
    local = points - np.array([x0, y0], dtype=np.float64)
    return np.round(local * _ONE).astype(np.int32)


def polygon_coverage(
    points: Sequence[Sequence[float]],
    shape: Tuple[int, int]
) -> Optional[Tuple[Region, np.ndarray]]:
    """Coverage of an arbitrary (possibly self-intersecting) polygon.

    Parameters
    ----------
    points : sequence of (x, y)
        Polygon vertices in px, at least 3
    shape : tuple of int
        Buffer (H, W)

    Returns
    -------
    tuple or None
        ((rows, cols) slices, coverage float32 [0,1] of the region), or
        None when the polygon misses the buffer entirely
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] < 3 or pts.shape[1] != 2:
        raise ValueError(f"Polygon needs (N>=3, 2) points, got shape {pts.shape}")
    if not np.all(np.isfinite(pts)):
        return None

    box = _clip_region(pts[:, 0].min(), pts[:, 1].min(), pts[:, 0].max(), pts[:, 1].max(), shape)
    if box is None:
        return None
    x0, y0, x1, y1 = box

    mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
    cv2.fillPoly(mask, [_to_fixed(pts, x0, y0).reshape(-1, 1, 2)], 255,
                 lineType=cv2.LINE_AA, shift=_SHIFT)
    return (slice(y0, y1), slice(x0, x1)), mask.astype(np.float32) / 255.0


def line_coverage(
    p0: Sequence[float],
    p1: Sequence[float],
    width: float,
    shape: Tuple[int, int]
) -> Optional[Tuple[Region, np.ndarray]]:
    """Coverage of a round-capped line segment of the given width."""
    pts = np.asarray([p0, p1], dtype=np.float64)
    radius = 0.5 * width
    box = _clip_region(
        pts[:, 0].min() - radius, pts[:, 1].min() - radius,
        pts[:, 0].max() + radius, pts[:, 1].max() + radius,
        shape
    )
    if box is None:
        return None
    x0, y0, x1, y1 = box

    fixed = _to_fixed(pts, x0, y0)
    mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
    # OpenCV thick lines end in round caps
    cv2.line(mask, tuple(int(v) for v in fixed[0]), tuple(int(v) for v in fixed[1]), 255,
             thickness=max(1, int(round(width))), lineType=cv2.LINE_AA, shift=_SHIFT)
    return (slice(y0, y1), slice(x0, x1)), mask.astype(np.float32) / 255.0


def disc_coverage(
    center: Sequence[float],
    diameter: float,
    shape: Tuple[int, int]
) -> Optional[Tuple[Region, np.ndarray]]:
    """Coverage of a filled disc."""
    cx, cy = float(center[0]), float(center[1])
    radius = 0.5 * diameter
    box = _clip_region(cx - radius, cy - radius, cx + radius, cy + radius, shape)
    if box is None:
        return None
    x0, y0, x1, y1 = box

    fixed = _to_fixed(np.array([[cx, cy]]), x0, y0)[0]
    mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
    cv2.circle(mask, (int(fixed[0]), int(fixed[1])), max(1, int(round(radius * _ONE))), 255,
               thickness=-1, lineType=cv2.LINE_AA, shift=_SHIFT)
    return (slice(y0, y1), slice(x0, x1)), mask.astype(np.float32) / 255.0


def blend_paint(pixels: np.ndarray, region: Region, coverage: np.ndarray, color_rgb: np.ndarray) -> None:
    """Composite an opaque colour over ``pixels[region]`` weighted by coverage (in place)."""
    dst = pixels[region]
    cov = coverage[..., np.newaxis]
    dst_alpha = dst[..., 3:4]

    out_alpha = cov + dst_alpha * (1.0 - cov)
    safe_alpha = np.where(out_alpha > 0.0, out_alpha, 1.0)
    out_rgb = (color_rgb[np.newaxis, np.newaxis, :] * cov + dst[..., :3] * dst_alpha * (1.0 - cov)) / safe_alpha

    dst[..., :3] = out_rgb
    dst[..., 3:4] = out_alpha


def blend_erase(pixels: np.ndarray, region: Region, coverage: np.ndarray) -> None:
    """Clear alpha of ``pixels[region]`` in proportion to coverage (in place)."""
    dst = pixels[region]
    dst[..., 3] *= (1.0 - coverage)


def _apply(pixels: np.ndarray, hit, color_rgb: Optional[np.ndarray], erase: bool) -> bool:
    if hit is None:
        return False
    region, coverage = hit
    if erase:
        blend_erase(pixels, region, coverage)
    else:
        if color_rgb is None:
            raise ValueError("color_rgb is required unless erasing")
        blend_paint(pixels, region, coverage, np.asarray(color_rgb, dtype=np.float32))
    return True


def fill_polygon(
    pixels: np.ndarray,
    points: Sequence[Sequence[float]],
    color_rgb: Optional[np.ndarray],
    erase: bool = False
) -> bool:
    """Paint (or erase) a polygon into an RGBA buffer; True if any pixel was hit."""
    return _apply(pixels, polygon_coverage(points, pixels.shape[:2]), color_rgb, erase)


def stroke_line(
    pixels: np.ndarray,
    p0: Sequence[float],
    p1: Sequence[float],
    width: float,
    color_rgb: np.ndarray
) -> bool:
    """Paint a round-capped line into an RGBA buffer."""
    return _apply(pixels, line_coverage(p0, p1, width, pixels.shape[:2]), color_rgb, False)


def fill_disc(
    pixels: np.ndarray,
    center: Sequence[float],
    diameter: float,
    color_rgb: np.ndarray
) -> bool:
    """Paint a filled disc into an RGBA buffer."""
    return _apply(pixels, disc_coverage(center, diameter, pixels.shape[:2]), color_rgb, False)
