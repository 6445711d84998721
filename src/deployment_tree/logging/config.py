"""Structured logging configuration using structlog.

Everything goes through the stdlib bridge: structlog events are handed to
``ProcessorFormatter`` and rendered per handler. The console handler writes to
stderr at the level picked by ``--verbose``/``--debug``. The optional file
handler keeps a rotating JSON log of every DEBUG event.
"""

from __future__ import annotations

import contextlib
import logging
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

LOG_DIR = Path.home() / ".local" / "state" / "deployment-tree"
LOG_FILE = LOG_DIR / "deployment-tree.log"
MAX_LOG_SIZE = 5 * 1024 * 1024
BACKUP_COUNT = 3
RETENTION_DAYS = 14

_HANDLER_MARKER = "_deployment_tree_handler"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _level_for(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    return logging.INFO if verbose else logging.WARNING


def _formatter(renderer: structlog.types.Processor) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer, foreign_pre_chain=_shared_processors()
    )


def _console_handler(level: int, json_output: bool, debug: bool) -> logging.Handler:
    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=debug),
        )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_formatter(renderer))
    return handler


def _cleanup_old_logs() -> None:
    """Delete rotated log files not modified within RETENTION_DAYS."""
    if not LOG_DIR.exists():
        return
    cutoff = time.time() - RETENTION_DAYS * 86400
    for path in LOG_DIR.glob(f"{LOG_FILE.name}*"):
        with contextlib.suppress(OSError):
            if path.stat().st_mtime < cutoff:
                path.unlink()


def _file_handler() -> logging.Handler | None:
    """Rotating JSON file handler, or None when the log directory is unwritable."""
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None

    _cleanup_old_logs()
    handler = RotatingFileHandler(LOG_FILE, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
    return handler


def _install(handlers: list[logging.Handler]) -> None:
    """Swap the handlers added by an earlier call for ``handlers``."""
    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if not getattr(h, _HANDLER_MARKER, False)]
    root.setLevel(logging.DEBUG)
    for handler in handlers:
        setattr(handler, _HANDLER_MARKER, True)
        root.addHandler(handler)


def configure_logging(
    verbose: bool = False,
    debug: bool = False,
    json_output: bool = False,
    log_file: bool = True,
) -> None:
    """Configure structured logging for the application.

    Console logs go to stderr so they never interleave with the rendered
    tree on stdout. File logs are stored at
    ~/.local/state/deployment-tree/deployment-tree.log with rotation.

    Args:
        verbose: Enable verbose (INFO level) output.
        debug: Enable debug mode (DEBUG level).
        json_output: Output console logs in JSON format.
        log_file: Also write JSON logs to the rotating log file.
    """
    level = _level_for(verbose, debug)
    handlers = [_console_handler(level, json_output, debug)]
    if log_file and (file_handler := _file_handler()) is not None:
        handlers.append(file_handler)

    # The file handler wants DEBUG, so structlog must not drop events first.
    min_level = min(h.level for h in handlers)
    structlog.configure(
        processors=[*_shared_processors(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _install(handlers)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a logger, optionally with context already bound."""
    logger: structlog.BoundLogger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
