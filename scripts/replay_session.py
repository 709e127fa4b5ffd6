#!/usr/bin/env python3
"""Replay a recorded pointer session and save the resulting frame.

CLI tool that drives either painting tool through a session.v1 YAML script
(press / move / release / frame / color / size / reset / resize events),
reports per-frame cost, and writes the exported frame as PNG under the
same timestamped name the tool's save button would use.

Usage:
    # Example grid session with default tool settings
    python scripts/replay_session.py --session configs/session_example.v1.yaml --output_dir outputs/replay

    # Custom tool settings, verbose, JSON log file
    python scripts/replay_session.py --session my_session.yaml \
        --tools_config configs/tools.v1.yaml --output_dir outputs/replay \
        --log_file outputs/logs/replay.log --verbose

Outputs:
    - <DOT|IMG>_<timestamp>.png: exported visible frame
    - <same name>.yaml: replay metadata (tool, size, frames, frame and export timings)
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src import replay
from src.utils import fs, logging_config, validators
from src.utils.profiler import TimerAccumulator, timer


def parse_args():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Replay a pointer session through a painting tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--session', type=str, required=True,
                        help='Path to session.v1 YAML script')
    parser.add_argument('--tools_config', type=str, default=None,
                        help='Path to tools.v1 YAML (defaults built in if omitted)')
    parser.add_argument('--output_dir', type=str, default='outputs/replay',
                        help='Directory for the exported frame')
    parser.add_argument('--touch', action='store_true',
                        help='Grid tool: use touch-device cell sizes')
    parser.add_argument('--log_file', type=str, default=None,
                        help='Optional JSON log file')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable DEBUG logging')
    return parser.parse_args()


def main():
    """Main entry point."""
    args = parse_args()

    log_level = "DEBUG" if args.verbose else "INFO"
    logging_config.setup_logging(log_level=log_level, log_file=args.log_file, json=bool(args.log_file),
                                 quiet_libs=["PIL"], context={"app": "replay"})
    logging_config.install_excepthook()
    logger = logging_config.get_logger(__name__)

    script = validators.load_session_script(args.session)
    if args.tools_config:
        tools_cfg = validators.load_tools_config(args.tools_config)
    else:
        tools_cfg = validators.ToolsConfigV1()
    if args.touch:
        tools_cfg.grid.touch = True

    logging_config.push_context(tool=script.tool)
    logger.info(f"Replaying {len(script.events)} events on a {script.width}x{script.height} canvas")

    tool = replay.build_tool(script, tools_cfg)
    frame_timer = TimerAccumulator("frame")
    replay.run(tool, script.events, frame_timer)

    timings = {}
    with timer("export", sink=timings.__setitem__):
        frame = tool.export_frame()
    output_dir = fs.ensure_dir(args.output_dir)
    out_path = output_dir / fs.timestamped_filename(replay.EXPORT_PREFIX[script.tool])
    fs.atomic_save_image(frame, out_path)

    fs.atomic_yaml_dump({
        'tool': script.tool,
        'size': list(tool.size),
        'events': len(script.events),
        'frames': tool.frame_count,
        'frame_time': frame_timer.summary(),
        'export_ms': round(timings["export"] * 1000.0, 3),
    }, out_path.with_suffix('.yaml'))

    logger.info(f"Saved {out_path} ({tool.frame_count} frames, mean {frame_timer.mean() * 1000.0:.2f} ms/frame)")
    logging_config.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
