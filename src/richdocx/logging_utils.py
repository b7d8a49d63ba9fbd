#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/logging_utils.py
"""Logging setup for the richdocx command-line tool.

Library modules only create module-level loggers; handlers are installed
here, once, by the entry point.
"""

from __future__ import annotations

import logging
import sys

PLAIN_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(log_level: int | str) -> int:
    """Turn a level name or number into a logging level, defaulting to INFO."""
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def _console_handler(use_rich: bool, trace_mode: bool) -> logging.Handler:
    if use_rich:
        from rich.console import Console
        from rich.logging import RichHandler

        return RichHandler(console=Console(stderr=True), show_path=trace_mode, show_time=trace_mode)

    handler = logging.StreamHandler(sys.stderr)
    if trace_mode:
        handler.setFormatter(logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    return handler


def configure_logging(
    log_level: int | str,
    log_file: str | None = None,
    trace_mode: bool = False,
    use_rich: bool = False,
) -> logging.Logger:
    """Configure root logging handlers for the command-line tool.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "INFO").
    log_file : str, optional
        Path to a log file that receives a copy of every record.
    trace_mode : bool, default False
        Include timestamps and logger names.
    use_rich : bool, default False
        Route console output through ``rich.logging.RichHandler``.

    Returns
    -------
    logging.Logger
        The configured root logger.

    """
    level = resolve_log_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console = _console_handler(use_rich, trace_mode)
    console.setLevel(level)
    root_logger.addHandler(console)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT))
            root_logger.addHandler(file_handler)
            root_logger.debug("Logging to file: %s", log_file)

    return root_logger
