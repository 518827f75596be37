"""storypick - pick the story you are working on from your issue trackers."""

__version__ = "0.1.0"
