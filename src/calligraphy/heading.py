"""Angle continuity resolver for the calligraphic nib.

The nib is symmetric, so travelling at angle θ and at θ + π describe the
same brush orientation. Each frame the resolver picks whichever of the two
needs the shorter rotation from the current heading and moves only a small
fraction of the way there. Reversing direction therefore never flips the
brush through 180°, and sub-threshold motion never moves it at all.
"""

import math
from dataclasses import dataclass
from typing import Sequence

from src.utils import geometry


def resolve_heading(
    prev_position: Sequence[float],
    position: Sequence[float],
    heading: float,
    smoothing: float = 0.1,
    min_motion: float = 0.5
) -> float:
    """Heading after one frame of follower motion.

    Parameters
    ----------
    prev_position, position : sequence of float
        Follower position last frame and this frame (px)
    heading : float
        Current heading (radians)
    smoothing : float
        Fraction of the chosen rotation applied per frame, default 0.1
    min_motion : float
        Motion at or below this distance leaves the heading unchanged

    Returns
    -------
    float
        Updated heading wrapped into (−π, π]
    """
    dx = position[0] - prev_position[0]
    dy = position[1] - prev_position[1]
    if math.hypot(dx, dy) <= min_motion:
        return heading

    raw = math.atan2(dy, dx)
    forward = geometry.angle_delta(raw, heading)
    backward = geometry.angle_delta(raw + math.pi, heading)
    # Ties go to the reversed candidate
    chosen = forward if abs(forward) < abs(backward) else backward
    return geometry.wrap_angle(heading + chosen * smoothing)


@dataclass
class BrushHeading:
    """Nib orientation with its value at the last drawn frame.

    ``prev_angle`` only advances on commit(), i.e. at the end of an active
    frame, so the first quad of a new stroke starts from where the nib was
    actually drawn last.
    """
    angle: float = 0.0
    prev_angle: float = 0.0
    smoothing: float = 0.1
    min_motion: float = 0.5

    def update(self, prev_position: Sequence[float], position: Sequence[float]) -> float:
        self.angle = resolve_heading(prev_position, position, self.angle,
                                     self.smoothing, self.min_motion)
        return self.angle

    def commit(self) -> None:
        self.prev_angle = self.angle

    def reset(self, angle: float = 0.0) -> None:
        self.angle = geometry.wrap_angle(angle)
        self.prev_angle = self.angle
