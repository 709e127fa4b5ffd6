"""Palettes and colour conversions for the painting buffers.

Provides:
    - The fixed palettes of both tools (8-bit RGB triples)
    - 8-bit ↔ unit-range conversions
    - Straight-alpha "over" compositing of a buffer onto a flat background

Invariants:
    - Buffers hold straight (non-premultiplied) RGBA float32 in [0,1]
    - Exported frames are RGB uint8
    - Palette entries are (R, G, B) ints in [0, 255]
"""

from typing import List, Sequence, Tuple

import numpy as np

RGB = Tuple[int, int, int]

# Index 0 is the eraser: selecting it switches composition to erase mode
CALLIGRAPHY_PALETTE: List[RGB] = [
    (255, 255, 255),
    (0, 0, 0),
    (255, 0, 0),
    (0, 255, 0),
    (0, 0, 255),
    (255, 255, 0),
    (255, 0, 255),
]

GRID_PALETTE: List[RGB] = [
    (0, 0, 0),        # Black
    (255, 255, 255),  # White
    (255, 0, 0),      # Red
    (0, 255, 0),      # Green
    (0, 0, 255),      # Blue
    (255, 255, 0),    # Yellow
    (255, 0, 255),    # Magenta
    (0, 255, 255),    # Cyan
    (255, 136, 0),    # Orange
    (136, 0, 255),    # Purple
    (0, 255, 136),    # Mint
    (255, 0, 136),    # Pink
    (136, 136, 136),  # Gray
    (255, 68, 68),    # Light Red
    (68, 255, 68),    # Light Green
    (68, 68, 255),    # Light Blue
    (255, 255, 68),   # Light Yellow
    (255, 68, 255),   # Light Magenta
    (68, 255, 255),   # Light Cyan
    (255, 170, 0),    # Light Orange
    (170, 0, 255),    # Light Purple
    (0, 255, 170),    # Light Mint
    (255, 0, 170),    # Light Pink
    (170, 170, 170),  # Light Gray
    (255, 102, 102),  # Lighter Red
    (102, 255, 102),  # Lighter Green
    (102, 102, 255),  # Lighter Blue
    (255, 255, 102),  # Lighter Yellow
    (255, 102, 255),  # Lighter Magenta
    (102, 255, 255),  # Lighter Cyan
    (204, 0, 0),      # Dark Red
    (0, 204, 0),      # Dark Green
    (0, 0, 204),      # Dark Blue
    (204, 204, 0),    # Dark Yellow
    (204, 0, 204),    # Dark Magenta
    (0, 204, 204),    # Dark Cyan
    (153, 0, 0),      # Darker Red
    (0, 153, 0),      # Darker Green
    (0, 0, 153),      # Darker Blue
    (153, 153, 0),    # Darker Yellow
]


def rgb_to_unit(rgb: Sequence[int]) -> np.ndarray:
    """Convert an 8-bit (R, G, B) triple to float32 in [0,1], shape (3,)."""
    arr = np.asarray(rgb, dtype=np.float32)
    if arr.shape != (3,):
        raise ValueError(f"Expected an (R, G, B) triple, got shape {arr.shape}")
    return np.clip(arr / 255.0, 0.0, 1.0)


def to_uint8(img: np.ndarray) -> np.ndarray:
    """Quantise a [0,1] float image to uint8 with round-half-up."""
    return (np.clip(img, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)


def composite_over(rgba: np.ndarray, background: np.ndarray) -> np.ndarray:
    """Composite a straight-alpha buffer over an opaque flat colour.

    Parameters
    ----------
    rgba : np.ndarray
        Buffer, shape (H, W, 4), float32 [0,1]
    background : np.ndarray
        Background colour, shape (3,), float32 [0,1]

    Returns
    -------
    np.ndarray
        Opaque RGB frame, shape (H, W, 3), float32 [0,1]
    """
    alpha = rgba[..., 3:4]
    return rgba[..., :3] * alpha + background[np.newaxis, np.newaxis, :] * (1.0 - alpha)
