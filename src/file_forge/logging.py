from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

_LOGGING_CONFIGURED = False


def setup_logging(
    filename: str | Path | None = None,
    *,
    debug: bool = False,
    force: bool = False,
) -> structlog.BoundLogger:
    """Set up structured logging for the file_forge package.

    The first call wins unless `force` is set, so the CLI can reconfigure
    the module-level logger once it knows about `--log-file` and `--debug`.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        debug: Lower the threshold to DEBUG (INFO otherwise).
        force: Replace an existing configuration.

    Returns:
        A structlog logger instance configured for the file_forge package.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if not _LOGGING_CONFIGURED or force:
        level = logging.DEBUG if debug else logging.INFO
        handlers: list[logging.Handler] = []
        if filename:
            handlers.append(logging.FileHandler(str(filename), encoding="utf-8"))
        else:
            handlers.append(logging.StreamHandler(sys.stderr))

        logging.basicConfig(
            level=level,
            handlers=handlers,
            format="%(message)s",
            force=True,
        )
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=False,
        )
        _LOGGING_CONFIGURED = True

    return structlog.get_logger("file_forge")


logger = setup_logging()
