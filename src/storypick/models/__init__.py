"""Data models for storypick."""

from .task import Task
from .category import Category
from .selection import Chosen, NoneChosen, SelectionResult
from .config import SourceConfig, SourceKind, StorypickConfig, ConfigError

__all__ = [
    "Task",
    "Category",
    "Chosen",
    "NoneChosen",
    "SelectionResult",
    "SourceConfig",
    "SourceKind",
    "StorypickConfig",
    "ConfigError",
]
