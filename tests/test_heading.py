"""Tests for the nib heading resolver.

Test suites:
1. Stationary input (motion threshold)
2. Candidate choice (forward vs reversed, tie-break)
3. Continuity over paths (reversals, loops)
4. BrushHeading bookkeeping
"""

import math

import numpy as np
import pytest

from src.calligraphy.heading import BrushHeading, resolve_heading
from src.utils.geometry import angle_delta


# ============================================================================
# TEST SUITE 1: Stationary input
# ============================================================================

@pytest.mark.parametrize("position", [(0.0, 0.0), (0.3, 0.3), (0.5, 0.0), (0.0, -0.5)])
def test_motion_at_or_below_threshold_keeps_heading(position):
    assert resolve_heading((0.0, 0.0), position, 1.234) == 1.234


def test_jitter_never_moves_heading():
    rng = np.random.default_rng(0)
    heading = 0.7
    pos = np.array([100.0, 100.0])
    for _ in range(200):
        nxt = pos + rng.uniform(-0.3, 0.3, size=2)
        heading = resolve_heading(pos, nxt, heading)
        pos = nxt
    assert heading == 0.7


# ============================================================================
# TEST SUITE 2: Candidate choice
# ============================================================================

def test_aligned_motion_keeps_heading():
    assert resolve_heading((0.0, 0.0), (5.0, 0.0), 0.0) == pytest.approx(0.0)


def test_reversed_motion_is_equivalent_orientation():
    """Travelling backwards along the nib axis needs no rotation."""
    h = resolve_heading((0.0, 0.0), (-5.0, 0.0), 0.0)
    assert abs(h) < 1e-9


def test_perpendicular_tie_goes_to_reversed_candidate():
    # Both candidates are π/2 away; the reversed one rotates negatively
    h = resolve_heading((0.0, 0.0), (0.0, 5.0), 0.0)
    assert h == pytest.approx(-0.1 * math.pi / 2)


def test_smoothing_applies_fraction_of_delta():
    h = resolve_heading((0.0, 0.0), (1.0, 1.0), 0.0, smoothing=0.5)
    assert h == pytest.approx(0.5 * math.pi / 4)


def test_result_wrapped_into_half_open_range():
    h = resolve_heading((0.0, 0.0), (-1.0, -0.01), 3.1, smoothing=1.0)
    assert -math.pi < h <= math.pi


# ============================================================================
# TEST SUITE 3: Continuity over paths
# ============================================================================

def _walk(points, heading=0.0):
    headings = [heading]
    for prev, cur in zip(points[:-1], points[1:]):
        heading = resolve_heading(prev, cur, heading)
        headings.append(heading)
    return headings


def test_reversal_never_flips_heading():
    right = [(float(x), 0.0) for x in range(0, 80, 4)]
    left = [(float(x), 0.0) for x in range(76, -4, -4)]
    up_then_down = [(0.0, float(y)) for y in range(0, 60, 3)] + [(0.0, float(y)) for y in range(57, -3, -3)]
    for path in (right + left, up_then_down):
        headings = _walk(path)
        for a, b in zip(headings[:-1], headings[1:]):
            step = abs(angle_delta(b, a))
            assert step <= math.pi / 2 + 1e-9
            assert step <= 0.1 * math.pi / 2 + 1e-9


def test_heading_stays_wrapped_on_loops():
    t = np.linspace(0.0, 8 * math.pi, 400)
    circle = list(zip(200.0 + 100.0 * np.cos(t), 200.0 + 100.0 * np.sin(t)))
    for h in _walk(circle):
        assert -math.pi < h <= math.pi


def test_heading_converges_to_travel_axis():
    path = [(0.0, float(y)) for y in range(0, 400, 4)]
    h = _walk(path)[-1]
    # Vertical travel: ±π/2 are the same nib orientation
    assert abs(abs(h) - math.pi / 2) < 1e-3


# ============================================================================
# TEST SUITE 4: BrushHeading
# ============================================================================

def test_brush_heading_commit_tracks_previous_angle():
    heading = BrushHeading()
    heading.update((0.0, 0.0), (0.0, 5.0))
    assert heading.prev_angle == 0.0
    assert heading.angle != 0.0
    heading.commit()
    assert heading.prev_angle == heading.angle


def test_brush_heading_reset_wraps():
    heading = BrushHeading(angle=1.0, prev_angle=0.5)
    heading.reset(3 * math.pi / 2)
    assert heading.angle == pytest.approx(-math.pi / 2)
    assert heading.prev_angle == heading.angle
