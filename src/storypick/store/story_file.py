"""The .story state file holding the currently selected story."""

import logging
import os
import tempfile
from pathlib import Path

from ..models import Chosen, SelectionResult

logger = logging.getLogger(__name__)

STORY_FILENAME = ".story"
STORY_PREFIX = "story_id="


class WriteError(Exception):
    """The story file could not be written."""

    pass


class StoryFile:
    """Selected story key persisted in the working tree root."""

    def __init__(self, root_path: str | Path | None = None):
        """Initialize the story file.

        Args:
            root_path: Working tree root. Defaults to current directory.
        """
        self.root = Path(root_path) if root_path else Path.cwd()
        self.path = self.root / STORY_FILENAME

    def persist(self, result: SelectionResult) -> None:
        """Record a selection, replacing whatever was stored before.

        Nothing is written when no story was chosen.

        Raises:
            WriteError: If the file cannot be written
        """
        if not isinstance(result, Chosen):
            logger.debug("No story chosen; leaving %s untouched", self.path)
            return

        try:
            self._write_atomic(f"{STORY_PREFIX}{result.key}")
        except OSError as e:
            raise WriteError(f"Could not write {self.path}: {e}") from e
        logger.debug("Stored story %s in %s", result.key, self.path)

    def _write_atomic(self, content: str) -> None:
        """Write to a temp file first, then rename over the target."""
        fd, temp_path = tempfile.mkstemp(dir=self.root, prefix=".tmp_", suffix=".story")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(content)
            os.replace(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def read(self) -> str | None:
        """Return the stored story key, or None if there is none."""
        try:
            content = self.path.read_text().strip()
        except FileNotFoundError:
            return None
        if not content.startswith(STORY_PREFIX):
            return None
        return content[len(STORY_PREFIX):] or None

    def clear(self) -> bool:
        """Delete the story file. Returns True if it existed."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True
