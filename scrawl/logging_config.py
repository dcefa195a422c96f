"""
Logging configuration for scrawl.

Quiet by default; --verbose (or SCRAWL_VERBOSE=1) turns on debug output.
"""

import logging
import os
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path

OPS_LOG_FILENAME = "scrawl-ops.log"

# Current ops log handler, replaced when a different store is opened
_ops_handler: RotatingFileHandler | None = None


def configure_quiet_mode(quiet: bool = True):
    """
    Configure logging to suppress verbose output.

    Args:
        quiet: If True, only warnings and errors reach stderr.
    """
    if quiet:
        warnings.filterwarnings("ignore")
        logging.getLogger("scrawl").setLevel(logging.WARNING)


def enable_debug_mode():
    """Enable debug-level logging to stderr."""
    warnings.filterwarnings("default")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Add stderr handler if not already present
    if not any(isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
               for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S"
        ))
        root_logger.addHandler(handler)

    logging.getLogger("scrawl").setLevel(logging.DEBUG)


def configure_ops_log(store_path) -> RotatingFileHandler:
    """Configure a persistent operations log for a store.

    Writes to {store_path}/scrawl-ops.log using a rotating file handler
    (1MB max, 3 backups). Always active regardless of --verbose.
    The log file name never parses as an entry, so it is invisible to listings.
    """
    global _ops_handler

    log_path = Path(store_path) / OPS_LOG_FILENAME
    scrawl_logger = logging.getLogger("scrawl")

    if _ops_handler is not None:
        if _ops_handler.baseFilename == os.path.abspath(log_path):
            return _ops_handler
        close_ops_log()

    handler = RotatingFileHandler(
        str(log_path),
        maxBytes=1_000_000,
        backupCount=3,
    )
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    scrawl_logger.addHandler(handler)
    # Ensure scrawl logger allows INFO through even in quiet mode
    if scrawl_logger.level == logging.NOTSET or scrawl_logger.level > logging.INFO:
        scrawl_logger.setLevel(logging.INFO)

    _ops_handler = handler
    return handler


def close_ops_log() -> None:
    """Detach and close the ops log handler, if any."""
    global _ops_handler
    if _ops_handler is not None:
        logging.getLogger("scrawl").removeHandler(_ops_handler)
        _ops_handler.close()
        _ops_handler = None
