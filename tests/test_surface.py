"""Tests for drawing buffers and the buffer lifecycle.

Test suites:
1. DrawingBuffer construction and clear
2. Lifecycle transitions (create, resize, reset)
3. Content preservation across resize
"""

import numpy as np
import pytest

from src.canvas import raster
from src.canvas.surface import BufferLifecycle, DrawingBuffer

RED = np.array([1.0, 0.0, 0.0], dtype=np.float32)


# ============================================================================
# TEST SUITE 1: DrawingBuffer
# ============================================================================

def test_transparent_buffer_starts_empty():
    buf = DrawingBuffer(30, 20)
    assert buf.pixels.shape == (20, 30, 4)
    assert buf.pixels.dtype == np.float32
    assert buf.size == (30, 20)
    assert buf.transparent
    assert not buf.pixels.any()


def test_filled_buffer_is_opaque_background():
    buf = DrawingBuffer(8, 4, fill_rgb=(0, 0, 255))
    assert not buf.transparent
    assert np.allclose(buf.pixels, [0.0, 0.0, 1.0, 1.0])


def test_clear_restores_fill():
    buf = DrawingBuffer(20, 20, fill_rgb=(0, 0, 0))
    raster.fill_disc(buf.pixels, (10.0, 10.0), 8.0, RED)
    buf.clear()
    assert np.allclose(buf.pixels, [0.0, 0.0, 0.0, 1.0])


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-5, 5)])
def test_buffer_rejects_empty_size(width, height):
    with pytest.raises(ValueError, match="positive"):
        DrawingBuffer(width, height)


# ============================================================================
# TEST SUITE 2: Lifecycle transitions
# ============================================================================

def test_reset_before_create_is_ignored():
    lifecycle = BufferLifecycle()
    assert not lifecycle.ready
    assert lifecycle.reset() is False
    assert lifecycle.buffer is None


def test_resize_before_create_creates_buffer():
    lifecycle = BufferLifecycle(fill_rgb=(0, 0, 0))
    assert lifecycle.resize(40, 30) is None
    assert lifecycle.ready
    assert lifecycle.buffer.size == (40, 30)


def test_resize_to_same_size_keeps_buffer():
    lifecycle = BufferLifecycle()
    buf = lifecycle.create(40, 30)
    assert lifecycle.resize(40, 30) is None
    assert lifecycle.buffer is buf


def test_resize_rejects_empty_size():
    lifecycle = BufferLifecycle()
    lifecycle.create(10, 10)
    with pytest.raises(ValueError):
        lifecycle.resize(0, 10)


def test_reset_clears_in_place():
    lifecycle = BufferLifecycle()
    buf = lifecycle.create(20, 20)
    raster.fill_disc(buf.pixels, (10.0, 10.0), 8.0, RED)
    assert lifecycle.reset() is True
    assert lifecycle.buffer is buf
    assert not buf.pixels.any()


# ============================================================================
# TEST SUITE 3: Content preservation across resize
# ============================================================================

def test_grow_scales_content_about_centre():
    lifecycle = BufferLifecycle(fill_rgb=(0, 0, 0))
    buf = lifecycle.create(100, 80)
    raster.fill_polygon(buf.pixels, [(30, 20), (70, 20), (70, 60), (30, 60)], RED)

    factor = lifecycle.resize(200, 160)
    new = lifecycle.buffer
    assert factor == pytest.approx(2.0)
    assert new is not buf
    assert new.size == (200, 160)
    assert np.allclose(new.pixels[80, 100], [1.0, 0.0, 0.0, 1.0], atol=1e-4)
    assert np.allclose(new.pixels[10, 10], [0.0, 0.0, 0.0, 1.0], atol=1e-4)


def test_grow_one_axis_uses_larger_ratio():
    lifecycle = BufferLifecycle()
    lifecycle.create(100, 100)
    assert lifecycle.resize(150, 50) == pytest.approx(1.5)


def test_shrink_fits_and_pads_with_fill():
    lifecycle = BufferLifecycle()
    buf = lifecycle.create(200, 100)
    buf.pixels[...] = [1.0, 0.0, 0.0, 1.0]

    factor = lifecycle.resize(100, 100)
    new = lifecycle.buffer
    assert factor == pytest.approx(0.5)
    # Content becomes 100x50, centred vertically
    assert np.allclose(new.pixels[50, 50], [1.0, 0.0, 0.0, 1.0], atol=1e-4)
    assert new.pixels[5, 50, 3] == pytest.approx(0.0, abs=1e-6)
    assert new.pixels[95, 50, 3] == pytest.approx(0.0, abs=1e-6)


def test_transparent_resize_keeps_colour_at_soft_edges():
    lifecycle = BufferLifecycle()
    buf = lifecycle.create(50, 50)
    raster.fill_disc(buf.pixels, (25.0, 25.0), 20.0, RED)
    lifecycle.resize(100, 100)
    new = lifecycle.buffer.pixels
    # Wherever anything is visible it is still pure red
    visible = new[..., 3] > 0.05
    assert visible.any()
    assert np.allclose(new[visible][:, :3], RED, atol=1e-3)
