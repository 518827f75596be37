"""Remote issue sources."""

from ..models import Category, SourceConfig, SourceKind, Task
from .base import (
    FetchError,
    RemoteSource,
    SourceAuthenticationError,
    SourceDecodeError,
    SourceStatusError,
    SourceTimeoutError,
    SourceTransportError,
)
from .freshrelease import FreshreleaseSource
from .jira import JiraSource

SOURCE_TYPES: dict[SourceKind, type[RemoteSource]] = {
    SourceKind.FRESHRELEASE: FreshreleaseSource,
    SourceKind.JIRA: JiraSource,
}


def open_source(config: SourceConfig, timeout: float | None = 30.0) -> RemoteSource:
    """Create the source matching ``config.kind``. Use with ``async with``."""
    return SOURCE_TYPES[config.kind](config, timeout=timeout)


async def fetch_tasks(
    config: SourceConfig, category: Category, timeout: float | None = 30.0
) -> list[Task]:
    """Fetch the tasks in ``category`` from one configured source."""
    async with open_source(config, timeout=timeout) as source:
        return await source.fetch(category)


__all__ = [
    "FetchError",
    "RemoteSource",
    "SourceAuthenticationError",
    "SourceDecodeError",
    "SourceStatusError",
    "SourceTimeoutError",
    "SourceTransportError",
    "FreshreleaseSource",
    "JiraSource",
    "SOURCE_TYPES",
    "open_source",
    "fetch_tasks",
]
