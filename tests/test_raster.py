"""Tests for anti-aliased coverage and straight-alpha blending.

Test suites:
1. Polygon fill (paint, clipping, validation)
2. Erase confinement
3. Lines and discs
4. Blend arithmetic
"""

import numpy as np
import pytest

from src.canvas import raster

BLACK = np.array([0.0, 0.0, 0.0], dtype=np.float32)
RED = np.array([1.0, 0.0, 0.0], dtype=np.float32)
BLUE = np.array([0.0, 0.0, 1.0], dtype=np.float32)


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def transparent():
    """40×60 (H×W) transparent buffer."""
    return np.zeros((40, 60, 4), dtype=np.float32)


@pytest.fixture
def opaque_black():
    pixels = np.zeros((40, 60, 4), dtype=np.float32)
    pixels[..., 3] = 1.0
    return pixels


SQUARE = [(10.0, 10.0), (30.0, 10.0), (30.0, 30.0), (10.0, 30.0)]


# ============================================================================
# TEST SUITE 1: Polygon fill
# ============================================================================

def test_fill_polygon_paints_interior_only(transparent):
    assert raster.fill_polygon(transparent, SQUARE, RED)
    assert np.allclose(transparent[20, 20], [1.0, 0.0, 0.0, 1.0])
    assert transparent[5, 5, 3] == 0.0
    assert transparent[20, 40, 3] == 0.0


def test_fill_polygon_off_buffer_is_noop(transparent):
    far = [(500.0, 500.0), (520.0, 500.0), (520.0, 520.0)]
    assert not raster.fill_polygon(transparent, far, RED)
    assert not transparent.any()


def test_fill_polygon_partially_off_buffer_is_clipped(transparent):
    quad = [(-20.0, -20.0), (15.0, -20.0), (15.0, 15.0), (-20.0, 15.0)]
    assert raster.fill_polygon(transparent, quad, RED)
    assert transparent[0, 0, 3] == pytest.approx(1.0)
    assert transparent[30, 30, 3] == 0.0


def test_polygon_needs_three_points():
    with pytest.raises(ValueError, match="N>=3"):
        raster.polygon_coverage([(0.0, 0.0), (1.0, 1.0)], (10, 10))


def test_non_finite_polygon_is_skipped(transparent):
    assert raster.polygon_coverage([(0.0, 0.0), (np.nan, 1.0), (5.0, 5.0)], (40, 60)) is None


def test_degenerate_polygon_paints_nothing_solid(transparent):
    sliver = [(10.0, 10.0), (20.0, 10.0), (20.0, 10.0), (10.0, 10.0)]
    raster.fill_polygon(transparent, sliver, RED)
    assert transparent[15:, :, 3].max() == 0.0


def test_paint_requires_color(transparent):
    with pytest.raises(ValueError, match="color_rgb"):
        raster.fill_polygon(transparent, SQUARE, None)


# ============================================================================
# TEST SUITE 2: Erase confinement
# ============================================================================

def test_erase_clears_only_inside_quad(transparent):
    raster.fill_polygon(transparent, SQUARE, BLACK)
    inner = [(15.0, 15.0), (25.0, 15.0), (25.0, 25.0), (15.0, 25.0)]
    assert raster.fill_polygon(transparent, inner, None, erase=True)

    assert transparent[20, 20, 3] == 0.0
    assert transparent[12, 12, 3] == pytest.approx(1.0)
    assert transparent[28, 20, 3] == pytest.approx(1.0)


def test_erase_leaves_colour_channels(opaque_black):
    opaque_black[..., 0] = 0.5
    raster.fill_polygon(opaque_black, SQUARE, None, erase=True)
    assert opaque_black[20, 20, 3] == 0.0
    assert opaque_black[20, 20, 0] == pytest.approx(0.5)


# ============================================================================
# TEST SUITE 3: Lines and discs
# ============================================================================

def test_stroke_line_width_and_round_caps(opaque_black):
    assert raster.stroke_line(opaque_black, (20.0, 20.0), (45.0, 20.0), 10.0, RED)
    assert np.allclose(opaque_black[20, 30, :3], RED)
    assert np.allclose(opaque_black[30, 30, :3], BLACK)
    # Cap extends past the start point
    assert np.allclose(opaque_black[20, 17, :3], RED, atol=1e-3)
    assert np.allclose(opaque_black[20, 5, :3], BLACK)


def test_fill_disc_diameter(opaque_black):
    assert raster.fill_disc(opaque_black, (20.0, 20.0), 10.0, RED)
    assert np.allclose(opaque_black[20, 20, :3], RED)
    assert np.allclose(opaque_black[20, 27, :3], BLACK)
    assert np.allclose(opaque_black[27, 20, :3], BLACK)


def test_disc_off_buffer_is_noop(opaque_black):
    before = opaque_black.copy()
    assert not raster.fill_disc(opaque_black, (-100.0, -100.0), 10.0, RED)
    assert np.array_equal(opaque_black, before)


# ============================================================================
# TEST SUITE 4: Blend arithmetic
# ============================================================================

def test_blend_paint_over_semi_transparent():
    pixels = np.zeros((1, 1, 4), dtype=np.float32)
    pixels[0, 0] = [1.0, 0.0, 0.0, 0.5]
    region = (slice(0, 1), slice(0, 1))
    raster.blend_paint(pixels, region, np.full((1, 1), 0.5, dtype=np.float32), BLUE)

    assert pixels[0, 0, 3] == pytest.approx(0.75)
    assert pixels[0, 0, 0] == pytest.approx(1.0 / 3.0, abs=1e-6)
    assert pixels[0, 0, 2] == pytest.approx(2.0 / 3.0, abs=1e-6)


def test_blend_paint_zero_coverage_on_transparent_stays_transparent():
    pixels = np.zeros((2, 2, 4), dtype=np.float32)
    raster.blend_paint(pixels, (slice(0, 2), slice(0, 2)), np.zeros((2, 2), dtype=np.float32), RED)
    assert not pixels.any()


def test_blend_erase_scales_alpha():
    pixels = np.ones((1, 2, 4), dtype=np.float32)
    raster.blend_erase(pixels, (slice(0, 1), slice(0, 2)), np.array([[0.25, 1.0]], dtype=np.float32))
    assert pixels[0, 0, 3] == pytest.approx(0.75)
    assert pixels[0, 1, 3] == 0.0
