"""Status buckets that stories are picked from."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import SourceConfig


class Category(Enum):
    """Category (board column) values."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    DONE = "done"

    @property
    def label(self) -> str:
        """Human readable name, also the default Jira status name."""
        return _STATUS_NAMES[self]

    @classmethod
    def parse(cls, text: str) -> Category:
        """Parse a category from a config value, member name or free spelling.

        Accepts "in_progress", "IN_PROGRESS", "in progress" and "in-progress".

        Raises:
            ValueError: If the text names no category
        """
        normalized = text.strip().lower().replace("-", "_").replace(" ", "_")
        for category in cls:
            if category.value == normalized:
                return category
        choices = ", ".join(c.value for c in cls)
        raise ValueError(f"Unknown category '{text}'. Choose one of: {choices}")

    def query_value(self, config: SourceConfig) -> str | None:
        """Map this category to the value a source filters its issues by.

        An explicit ``columns`` entry on the source wins. Sources that filter by
        status name fall back to the built-in names; status-id sources have no
        fallback and return None.
        """
        configured = config.columns.get(self.value)
        if configured:
            return configured
        if config.kind.filters_by_status_name:
            return _STATUS_NAMES[self]
        return None


_STATUS_NAMES = {
    Category.TODO: "To Do",
    Category.IN_PROGRESS: "In Progress",
    Category.IN_REVIEW: "In Review",
    Category.DONE: "Done",
}
