"""Terminal interaction: progress spinner and story selection."""

from .progress import CancelHandle, ProgressIndicator
from .selector import SelectionError, TerminalSelector

__all__ = ["CancelHandle", "ProgressIndicator", "SelectionError", "TerminalSelector"]
