"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config validation (validators)
    - Palettes and colour compositing (color)
    - Planar geometry for brush motion (geometry)
    - Atomic I/O and YAML (fs)
    - Frame timing (profiler)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (canvas, calligraphy,
grid_paint).

Convenience imports:
    from src.utils import fs, color, geometry, validators
    from src.utils.logging_config import setup_logging, get_logger
"""

from . import color
from . import fs
from . import geometry
from . import logging_config
from . import profiler
from . import validators

from .logging_config import get_logger, log_context, push_context, setup_logging

__all__ = [
    'color',
    'fs',
    'geometry',
    'logging_config',
    'profiler',
    'validators',
    'setup_logging',
    'get_logger',
    'push_context',
    'log_context',
]
