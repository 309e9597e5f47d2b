"""Logging setup for texture export."""

import logging
import logging.handlers
import os
import threading
from typing import List, Optional

logger = logging.getLogger("texture_export")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 3

_lock = threading.Lock()


def _resolve_level(level: str) -> int:
    numeric = getattr(logging, str(level).upper(), None)
    if isinstance(numeric, int):
        return numeric
    print(f"Warning: Invalid log level '{level}', defaulting to INFO")
    return logging.INFO


def _file_handler(log_file: str) -> logging.Handler:
    os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _logs_to(target: logging.Logger, log_file: str) -> bool:
    wanted = os.path.abspath(log_file)
    return any(
        getattr(h, "baseFilename", None) == wanted for h in target.handlers
    )


def setup_logging(level: str = "INFO", log_file: Optional[str] = None,
                  force: bool = False):
    """Configure logging for an export run.

    Standalone (no root handlers, or ``force``): installs a stream handler
    and an optional rotating file handler on the root logger.

    Embedded (the host already configured the root logger): only the
    ``texture_export`` logger is touched. Its level is set and the file
    handler is attached to it once.
    """
    with _lock:
        numeric = _resolve_level(level)
        root = logging.getLogger()
        if force or not root.handlers:
            handlers: List[logging.Handler] = [logging.StreamHandler()]
            if log_file:
                handlers.append(_file_handler(log_file))
            logging.basicConfig(level=numeric, format=LOG_FORMAT,
                                handlers=handlers, force=force)
            return

        logger.setLevel(numeric)
        if log_file and not _logs_to(logger, log_file):
            logger.addHandler(_file_handler(log_file))
            logger.info("Logging to %s", log_file)
