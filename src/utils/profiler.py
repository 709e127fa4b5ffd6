"""Frame-time measurement for the painting loop.

Provides:
    - timer(): time one block, report to a callback or DEBUG log
    - TimerAccumulator: running count / mean / worst / percentile over
      many blocks, e.g. one sample per update() call

A frame has to fit inside the display interval (16.7 ms at 60 Hz), so replay
runs report the worst frame alongside the mean. Plain perf_counter, nothing
heavier, so measuring doesn't distort what is measured.
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Dict, List, Optional

import numpy as np

logger = logging.getLogger(__name__)


@contextmanager
def timer(name: str, sink: Optional[Callable[[str, float], None]] = None):
    """Time the enclosed block.

    Parameters
    ----------
    name : str
        Label passed to the sink or written to the log
    sink : callable, optional
        ``sink(name, seconds)``; without one the duration is logged at DEBUG

    Examples
    --------
    >>> with timer("export"):
    ...     frame = tool.export_frame()
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        seconds = time.perf_counter() - t0
        if sink is None:
            logger.debug(f"{name}: {seconds * 1000.0:.2f} ms")
        else:
            sink(name, seconds)


class TimerAccumulator:
    """Collects one duration per measured block.

    Attributes
    ----------
    name : str
        Label used in summaries
    samples : list of float
        Every recorded duration (seconds), in order
    total_time, max_time : float
        Sum and worst of the samples (seconds)

    Examples
    --------
    >>> frame_timer = TimerAccumulator("frame")
    >>> for _ in range(100):
    ...     with frame_timer.measure():
    ...         tool.update()
    >>> frame_timer.summary()["mean_ms"]
    """

    def __init__(self, name: str):
        self.name = name
        self.samples: List[float] = []
        self.total_time = 0.0
        self.max_time = 0.0

    @property
    def count(self) -> int:
        return len(self.samples)

    def add(self, seconds: float) -> None:
        self.samples.append(seconds)
        self.total_time += seconds
        if seconds > self.max_time:
            self.max_time = seconds

    @contextmanager
    def measure(self):
        """Record the duration of the enclosed block as one sample."""
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.add(time.perf_counter() - t0)

    def mean(self) -> float:
        """Mean sample in seconds; 0.0 before the first sample."""
        if not self.samples:
            return 0.0
        return self.total_time / len(self.samples)

    def percentile(self, q: float) -> float:
        """q-th percentile (0-100) of the samples in seconds; 0.0 if empty."""
        if not self.samples:
            return 0.0
        return float(np.percentile(self.samples, q))

    def summary(self) -> Dict[str, float]:
        """Count plus mean / p95 / max in milliseconds, rounded for reports."""
        return {
            'count': self.count,
            'mean_ms': round(self.mean() * 1000.0, 3),
            'p95_ms': round(self.percentile(95.0) * 1000.0, 3),
            'max_ms': round(self.max_time * 1000.0, 3),
        }

    def __repr__(self) -> str:
        return f"TimerAccumulator({self.name}, n={self.count}, mean={self.mean() * 1000.0:.2f}ms)"
