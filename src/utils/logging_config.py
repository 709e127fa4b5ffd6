"""Logging setup shared by the painting sessions and the host scripts.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed once, by whichever entry point owns the process (a script's
main(), a test fixture), through setup_logging().

Output:
    console  2026-10-19T13:45:12.345Z | INFO     | tool=grid | Grid regenerated
    JSON     {"t": "2026-10-19T13:45:12.345+00:00", "lvl": "INFO", "tool": "grid", "msg": "..."}

Context fields (tool, frame, ...) live in a contextvar and are appended to
every record formatted while they are set:

    push_context(tool="calligraphy")
    with log_context(frame=120):
        logger.debug("Brush length: 250 px")

Calling setup_logging() again replaces the handlers it installed before
instead of stacking new ones.
"""

import contextvars
import json
import logging
import logging.handlers
import os
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

_fields: contextvars.ContextVar = contextvars.ContextVar('log_fields', default={})

_configured = False

_LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
_RESET = '\033[0m'


class ContextFormatter(logging.Formatter):
    """Formats records as a console line or a JSON object, plus context fields.

    Parameters
    ----------
    fmt_mode : str
        "human" or "json"
    use_color : bool
        Colour the level name; only honoured when stderr is a terminal
    tz : str
        "UTC" or "local" timestamps
    """

    def __init__(self, fmt_mode: str = "human", use_color: bool = True, tz: str = "UTC"):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"fmt_mode must be 'human' or 'json', got {fmt_mode}")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()
        self.tz = tz

    def _timestamp(self, record: logging.LogRecord) -> datetime:
        if self.tz == "UTC":
            return datetime.fromtimestamp(record.created, tz=timezone.utc)
        return datetime.fromtimestamp(record.created)

    def format(self, record: logging.LogRecord) -> str:
        fields = _fields.get()
        ts = self._timestamp(record)
        if self.fmt_mode == "json":
            payload = {
                't': ts.isoformat(timespec='milliseconds'),
                'lvl': record.levelname,
                'name': record.name,
                'pid': os.getpid(),
                **fields,
                'msg': record.getMessage(),
            }
            if record.exc_info:
                payload['exc'] = self.formatException(record.exc_info)
            return json.dumps(payload, default=str)

        level = f"{record.levelname:8s}"
        if self.use_color:
            level = _LEVEL_COLORS.get(record.levelname, '') + level + _RESET
        stamp = ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + ('Z' if self.tz == "UTC" else '')
        columns = [stamp, level]
        if fields:
            columns.append(' '.join(f"{k}={v}" for k, v in fields.items()))
        columns.append(record.getMessage())
        line = ' | '.join(columns)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    rotate: Optional[Dict[str, Any]] = None,
    tz: str = "UTC",
    capture_warnings: bool = True,
    quiet_libs: Optional[List[str]] = None,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Install console and/or file handlers on the root logger.

    Parameters
    ----------
    log_level : str
        Root level name ("DEBUG" ... "CRITICAL")
    log_file : str, optional
        Also log to this file (parent directories are created)
    json : bool
        File handler writes JSON lines instead of console lines
    color : bool
        Coloured level names on the console
    to_stderr : bool
        Install the console handler
    rotate : dict, optional
        File rotation, ``{"mode": "size", "max_bytes": ..., "backup_count": ...}``
        or ``{"mode": "time", "when": "D", "interval": 1, "backup_count": ...}``
    tz : str
        "UTC" (default) or "local"
    capture_warnings : bool
        Route ``warnings.warn`` through logging
    quiet_libs : list of str, optional
        Third-party loggers held at WARNING (e.g. ["PIL"])
    context : dict, optional
        Fields pushed onto the log context right away

    Returns
    -------
    dict
        ``{"handlers": [...]}``, the handlers just installed
    """
    global _configured

    root = logging.getLogger()
    if _configured:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(getattr(logging, log_level.upper()))

    installed = []
    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter("human", color, tz))
        installed.append(console)
    if log_file:
        installed.append(_create_file_handler(log_file, rotate, json, tz))
    for handler in installed:
        root.addHandler(handler)

    for name in quiet_libs or []:
        logging.getLogger(name).setLevel(logging.WARNING)
    if capture_warnings:
        logging.captureWarnings(True)
    if context:
        push_context(**context)

    _configured = True
    return {'handlers': installed}


def _create_file_handler(
    log_file: str,
    rotate: Optional[Dict[str, Any]],
    json_format: bool,
    tz: str
) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    mode = (rotate or {}).get('mode')
    if rotate is None:
        handler = logging.FileHandler(path)
    elif mode in (None, 'size'):
        handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=rotate.get('max_bytes', 10_000_000), backupCount=rotate.get('backup_count', 5)
        )
    elif mode == 'time':
        handler = logging.handlers.TimedRotatingFileHandler(
            path, when=rotate.get('when', 'D'), interval=rotate.get('interval', 1),
            backupCount=rotate.get('backup_count', 7)
        )
    else:
        raise ValueError(f"Unknown rotation mode: {mode}. Use 'size' or 'time'.")

    handler.setFormatter(ContextFormatter("json" if json_format else "human", use_color=False, tz=tz))
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def push_context(**fields) -> None:
    """Attach fields to every record logged from now on (in this context)."""
    _fields.set({**_fields.get(), **fields})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Drop the named fields, or all of them when keys is None."""
    if keys is None:
        _fields.set({})
        return
    remaining = dict(_fields.get())
    for key in keys:
        remaining.pop(key, None)
    _fields.set(remaining)


@contextmanager
def log_context(**fields):
    """Scoped push_context(): previous fields are restored on exit."""
    token = _fields.set({**_fields.get(), **fields})
    try:
        yield
    finally:
        _fields.reset(token)


def install_excepthook() -> None:
    """Send uncaught exceptions (Ctrl+C aside) to the root logger as CRITICAL."""
    def _log_uncaught(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger(__name__).critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = _log_uncaught


def shutdown() -> None:
    """Flush and close every handler; the last call of a script's main()."""
    logging.shutdown()
