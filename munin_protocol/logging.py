"""
Logging setup for the decoder and its shell

Grammar and handler modules log structured events (request_parsed,
response_rejected, session_node_set, ...) through structlog. This module
routes them into stdlib logging as JSON lines. Output goes to stderr, and
to log_dir/<component>.log as well when log_to_file is set, so a
library user that embeds the handler writes no files by default.
"""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

import structlog
import structlog.stdlib

from munin_protocol.config import Settings, get_settings

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _build_file_handler(component: str, log_dir: Path) -> RotatingFileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"{component}.log"
    handler = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=5)
    handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
    return handler


def setup_logging(
    component: str = "munin_protocol",
    level: Optional[int] = None,
    config: Optional[Settings] = None,
) -> None:
    """
    Configure structlog + stdlib logging for a component.

    Args:
        component: Name of the log file when file logging is enabled
        level: Explicit stdlib level; defaults to config.log_level
        config: Settings override; defaults to get_settings()
    """
    config = config or get_settings()
    if level is None:
        level = logging.getLevelName(config.log_level)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if config.log_to_file:
        handlers.append(_build_file_handler(component, config.log_dir))

    logging.basicConfig(level=level, handlers=handlers, format=_DEFAULT_FORMAT, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.getLogger(__name__).info("logging_initialized", extra={"component": component})
