"""
Error types and error logging for scrawl.

Each error carries the CLI exit code it maps to. Unexpected exceptions
are logged with full stack traces while users see a clean message.
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path


class ScrawlError(Exception):
    """Base class for errors reported to the user."""
    exit_code = 1


class SetupError(ScrawlError):
    """Store directory cannot be created or written, or config is invalid."""
    exit_code = 1


class ArgumentError(ScrawlError):
    """Malformed ID, tag, duration, time bound or index."""
    exit_code = 2


class NotFoundError(ScrawlError):
    """Index outside the filtered set."""
    exit_code = 2


class EmptyResultError(NotFoundError):
    """No entries matched the filter."""


class ContentError(ScrawlError):
    """Entry content could not be produced, encrypted, decrypted or written."""
    exit_code = 3


def _error_log_path() -> Path:
    """Resolve error log path, respecting SCRAWL_DIR."""
    store = os.environ.get("SCRAWL_DIR")
    if store:
        return Path(store) / "scrawl-errors.log"
    return Path.home() / ".scrawl" / "scrawl-errors.log"


def log_exception(exc: Exception, context: str = "") -> Path:
    """
    Log exception with full traceback to file.

    Args:
        exc: The exception that occurred
        context: Optional context string (e.g., command name)

    Returns:
        Path to the error log file
    """
    log_path = _error_log_path()
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"[{timestamp}]")
            if context:
                f.write(f" {context}")
            f.write("\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    except OSError:
        pass  # Can't write error log, don't crash over it
    return log_path
