"""Tests for the lag-smoothed pointer follower.

Test suites:
1. Active stepping (lerp toward target)
2. Inactive stepping (jump, first-sample re-arm)
3. Snap and frame bookkeeping
"""

import numpy as np
import pytest

from src.calligraphy.pointer import Follower


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def follower():
    """Follower resting at the origin with the default 0.3 factor."""
    return Follower.at(0.0, 0.0)


# ============================================================================
# TEST SUITE 1: Active stepping
# ============================================================================

def test_at_starts_without_motion():
    f = Follower.at(10.0, 20.0)
    assert np.allclose(f.position, [10.0, 20.0])
    assert np.allclose(f.prev_position, f.position)
    assert f.motion == 0.0
    assert f.is_first_sample


def test_active_step_moves_fraction_of_the_way(follower):
    follower.step((10.0, 0.0), active=True)
    assert np.allclose(follower.prev_position, [0.0, 0.0])
    assert np.allclose(follower.position, [3.0, 0.0])
    assert follower.motion == pytest.approx(3.0)


def test_active_steps_converge_geometrically(follower):
    for _ in range(3):
        follower.step((10.0, 0.0), active=True)
    # remaining gap shrinks by 0.7 per frame
    assert follower.position[0] == pytest.approx(10.0 * (1.0 - 0.7 ** 3))


def test_follow_factor_is_configurable():
    f = Follower.at(0.0, 0.0, follow_factor=0.5)
    f.step((0.0, 8.0), active=True)
    assert np.allclose(f.position, [0.0, 4.0])


# ============================================================================
# TEST SUITE 2: Inactive stepping
# ============================================================================

def test_inactive_step_jumps_to_target(follower):
    follower.is_first_sample = False
    follower.step((50.0, -5.0), active=False)
    assert np.allclose(follower.position, [50.0, -5.0])
    assert np.allclose(follower.prev_position, [0.0, 0.0])
    assert follower.is_first_sample
    assert not follower.active


def test_step_does_not_alias_target(follower):
    target = np.array([5.0, 5.0])
    follower.step(target, active=False)
    target[0] = 99.0
    assert follower.position[0] == 5.0


# ============================================================================
# TEST SUITE 3: Snap and frame bookkeeping
# ============================================================================

def test_end_frame_clears_first_sample_only_when_active(follower):
    follower.step((1.0, 1.0), active=False)
    follower.end_frame()
    assert follower.is_first_sample

    follower.step((2.0, 2.0), active=True)
    follower.end_frame()
    assert not follower.is_first_sample


def test_snap_places_follower_and_rearms(follower):
    follower.step((4.0, 4.0), active=True)
    follower.end_frame()
    follower.snap(100.0, 200.0)
    assert np.allclose(follower.position, [100.0, 200.0])
    assert follower.motion == 0.0
    assert follower.is_first_sample
