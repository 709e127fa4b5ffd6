"""Pointer smoother: the lag-filtered follower that drives the brush.

Each frame the follower moves a fixed fraction of the way toward the raw
pointer target while the pointer is engaged, and jumps straight to it while
it isn't. The jump keeps an idle follower glued to the pointer, so the next
press never sweeps a stroke in from a stale position.
"""

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from src.utils import geometry


@dataclass
class Follower:
    """Lag-smoothed pointer position.

    Attributes
    ----------
    position : np.ndarray
        Filtered position this frame, shape (2,)
    prev_position : np.ndarray
        Filtered position last frame, shape (2,)
    active : bool
        Pointer engaged (pressed or touching) this frame
    is_first_sample : bool
        True until one active frame has completed; suppresses the
        zero-length segment at the start of a stroke
    follow_factor : float
        Lerp factor toward the target per active frame (0.3: higher is
        snappier, lower is laggier)
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(2))
    prev_position: np.ndarray = field(default_factory=lambda: np.zeros(2))
    active: bool = False
    is_first_sample: bool = True
    follow_factor: float = 0.3

    @classmethod
    def at(cls, x: float, y: float, follow_factor: float = 0.3) -> 'Follower':
        """Follower resting at (x, y)."""
        start = np.array([x, y], dtype=np.float64)
        return cls(position=start, prev_position=start.copy(), follow_factor=follow_factor)

    def step(self, target: Sequence[float], active: bool) -> None:
        """Advance one frame toward ``target``."""
        self.prev_position = self.position.copy()
        self.active = bool(active)
        if self.active:
            self.position = geometry.lerp(self.position, target, self.follow_factor)
        else:
            self.position = np.array(target, dtype=np.float64)
            self.is_first_sample = True

    def snap(self, x: float, y: float) -> None:
        """Place the follower at (x, y) with no motion and re-arm the first sample."""
        self.position = np.array([x, y], dtype=np.float64)
        self.prev_position = self.position.copy()
        self.is_first_sample = True

    def end_frame(self) -> None:
        """Close an active frame: later frames of this stroke may draw."""
        if self.active:
            self.is_first_sample = False

    @property
    def motion(self) -> float:
        """Distance travelled during the last step (px)."""
        return geometry.distance(self.prev_position, self.position)
