"""Task model for storypick."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Task:
    """A remote work item normalized for selection."""

    key: str  # e.g., "PT-123"
    title: str
    priority: int = 0  # higher is more urgent
    href: str | None = field(default=None, compare=False)
    source: str | None = field(default=None, compare=False)

    def sort_key(self) -> tuple[int, str]:
        """Merge order: priority descending, then key ascending."""
        return (-self.priority, self.key)

    def format_display(self) -> str:
        """Format task for display."""
        return f"{self.key} - {self.title}"

