"""Local state: configuration and the selected story."""

from .config_store import ConfigStore
from .story_file import StoryFile, WriteError

__all__ = ["ConfigStore", "StoryFile", "WriteError"]
