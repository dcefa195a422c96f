"""
Interactive editor provider backed by click.

click resolves the program from $VISUAL, then $EDITOR, then a
platform default.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from ..errors import ContentError

logger = logging.getLogger(__name__)


class ClickEditor:
    """Launches an external editor on a file and waits for it to exit."""

    def __init__(self, editor: Optional[str] = None):
        self.editor = editor

    def edit(self, path: Path) -> None:
        logger.debug("Editing %s with %s", path, self.editor or "default editor")
        try:
            click.edit(filename=str(path), editor=self.editor)
        except click.ClickException as e:
            raise ContentError(f"Editor failed on {path}: {e.format_message()}") from e
