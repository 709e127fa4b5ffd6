"""Calligraphy tool: smoothed pointer, rotating multi-bristle nib.

Modules:
    - pointer: Follower (lag-filtered pointer position)
    - heading: resolve_heading / BrushHeading (shortest-rotation nib angle)
    - compositor: SegmentCompositor (per-section quads, paint or erase)
    - tool: CalligraphyTool (the session the host drives)

Invariants:
    - Heading wrapped into (−π, π]; frozen while motion ≤ min_motion
    - No quad on inactive frames, on the first sample of a stroke, or on
      sub-threshold motion
    - The persistent buffer starts fully transparent
"""

from .compositor import BrushSections, SegmentCompositor
from .heading import BrushHeading, resolve_heading
from .pointer import Follower
from .tool import CalligraphyTool

__all__ = [
    'BrushHeading',
    'BrushSections',
    'CalligraphyTool',
    'Follower',
    'SegmentCompositor',
    'resolve_heading',
]
