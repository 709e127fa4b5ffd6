"""Replay recorded pointer sessions through a painting tool.

Stands in for the host event loop: each SessionEvent becomes the matching
session call, and every "frame" event runs one update(). Used by
scripts/replay_session.py and by the end-to-end tests.

Usage:
    from src import replay
    from src.utils import validators

    script = validators.load_session_script("configs/session_example.v1.yaml")
    tool = replay.build_tool(script)
    replay.run(tool, script.events)
    frame = tool.export_frame()
"""

import logging
from typing import Iterable, Optional, Union

from src.calligraphy import CalligraphyTool
from src.canvas.session import PaintSession
from src.grid_paint import GridPaintTool
from src.utils.logging_config import log_context
from src.utils.profiler import TimerAccumulator
from src.utils.validators import SessionEvent, SessionScriptV1, ToolsConfigV1

logger = logging.getLogger(__name__)

# Filename prefix each tool's save button uses
EXPORT_PREFIX = {
    'calligraphy': 'DOT',
    'grid': 'IMG',
}


def build_tool(
    script: SessionScriptV1,
    tools_cfg: Optional[ToolsConfigV1] = None
) -> Union[CalligraphyTool, GridPaintTool]:
    """Create and set up the tool a session script targets."""
    tools_cfg = tools_cfg or ToolsConfigV1()
    if script.tool == 'calligraphy':
        tool = CalligraphyTool(tools_cfg.calligraphy)
    else:
        tool = GridPaintTool(tools_cfg.grid)
    tool.setup(script.width, script.height)
    return tool


def apply_event(tool: PaintSession, event: SessionEvent, frame_timer: Optional[TimerAccumulator] = None) -> None:
    """Dispatch one recorded event to the session."""
    if event.type == 'press':
        tool.on_pointer_active(event.x, event.y)
    elif event.type == 'move':
        tool.on_pointer_move(event.x, event.y)
    elif event.type == 'release':
        tool.on_pointer_release()
    elif event.type == 'frame':
        for _ in range(event.repeat):
            with log_context(frame=tool.frame_count):
                if frame_timer is not None:
                    with frame_timer.measure():
                        tool.update()
                else:
                    tool.update()
    elif event.type == 'color':
        tool.set_active_color(event.index)
    elif event.type == 'size':
        tool.set_brush_length(event.value)
    elif event.type == 'reset':
        tool.reset_canvas()
    elif event.type == 'resize':
        tool.on_resize(event.width, event.height)
    else:
        raise ValueError(f"Unknown event type: {event.type}")


def run(
    tool: PaintSession,
    events: Iterable[SessionEvent],
    frame_timer: Optional[TimerAccumulator] = None
) -> int:
    """Replay events in order; returns the number of events applied."""
    count = 0
    for event in events:
        apply_event(tool, event, frame_timer)
        count += 1
    logger.debug(f"Replayed {count} events, {tool.frame_count} frames")
    return count
