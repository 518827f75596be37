"""Concurrent fan-out over all configured sources."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from ..models import Category, SourceConfig, Task
from ..sources import FetchError, SourceTimeoutError, fetch_tasks

logger = logging.getLogger(__name__)

Fetcher = Callable[[SourceConfig, Category, float | None], Awaitable[list[Task]]]


@dataclass(frozen=True)
class SourceFailure:
    """A source that was dropped from the merge, and why."""

    source: str
    error: FetchError


@dataclass
class Aggregation:
    """Merged tasks plus a report of the sources that failed."""

    tasks: list[Task] = field(default_factory=list)
    failures: list[SourceFailure] = field(default_factory=list)
    succeeded: int = 0

    @property
    def all_failed(self) -> bool:
        """True when there were sources and none of them answered."""
        return bool(self.failures) and self.succeeded == 0


def merge(results: list[list[Task]]) -> list[Task]:
    """Flatten per-source task lists into merge order.

    The result depends only on the tasks, never on which source finished
    first: priority descending, then key ascending.
    """
    flat = [task for tasks in results for task in tasks]
    return sorted(flat, key=Task.sort_key)


async def _fetch_slot(
    fetcher: Fetcher,
    config: SourceConfig,
    category: Category,
    timeout: float | None,
) -> list[Task]:
    if timeout is None:
        return await fetcher(config, category, None)
    try:
        return await asyncio.wait_for(fetcher(config, category, timeout), timeout)
    except asyncio.TimeoutError:
        raise SourceTimeoutError(
            f"Timeout: source '{config.name}' gave no answer within {timeout:g}s"
        ) from None


async def collect(
    sources: list[SourceConfig],
    category: Category,
    *,
    timeout: float | None = None,
    fetcher: Fetcher = fetch_tasks,
) -> Aggregation:
    """Query every source concurrently and merge what comes back.

    All fetches are awaited before merging. A source that raises FetchError
    is logged and reported in ``failures``; it never aborts the others.

    Args:
        sources: Source configurations, one fetch each
        category: Column to request from every source
        timeout: Per-source limit in seconds, None for no limit
        fetcher: Coroutine performing one fetch (injectable for tests)

    Returns:
        Aggregation with the merged tasks and the failed sources
    """
    outcomes = await asyncio.gather(
        *(_fetch_slot(fetcher, config, category, timeout) for config in sources),
        return_exceptions=True,
    )

    aggregation = Aggregation()
    results: list[list[Task]] = []
    for config, outcome in zip(sources, outcomes):
        if isinstance(outcome, FetchError):
            logger.warning("Skipping source %s: %s", config.name, outcome)
            aggregation.failures.append(SourceFailure(config.name, outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append(outcome)
            aggregation.succeeded += 1

    aggregation.tasks = merge(results)

    if aggregation.all_failed:
        logger.warning("All %d source(s) failed; no stories to choose from", len(sources))

    return aggregation


async def aggregate(
    sources: list[SourceConfig],
    category: Category,
    *,
    timeout: float | None = None,
    fetcher: Fetcher = fetch_tasks,
) -> list[Task]:
    """Merged tasks from every source that answered; failures are dropped."""
    aggregation = await collect(sources, category, timeout=timeout, fetcher=fetcher)
    return aggregation.tasks
