"""Fetch, choose and remember a story."""

import asyncio
import logging

from .aggregate import Aggregation, collect
from .models import Category, SelectionResult, StorypickConfig
from .store import StoryFile
from .ui import ProgressIndicator, TerminalSelector

logger = logging.getLogger(__name__)


def fetch_all(
    config: StorypickConfig,
    category: Category,
    indicator: ProgressIndicator | None = None,
    timeout: float | None = None,
) -> Aggregation:
    """Collect tasks from every configured source while the spinner runs.

    The spinner is cancelled exactly once, whether or not collection succeeds.
    """
    if timeout is None:
        timeout = config.timeout

    handle = indicator.start() if indicator is not None else None
    try:
        return asyncio.run(collect(config.sources, category, timeout=timeout))
    finally:
        if handle is not None:
            handle.cancel()


def run_pick(
    config: StorypickConfig,
    category: Category,
    *,
    selector: TerminalSelector,
    story_file: StoryFile,
    indicator: ProgressIndicator | None = None,
    timeout: float | None = None,
) -> SelectionResult:
    """Run the whole pick flow and persist the result.

    Raises:
        SelectionError: If the user never gave a valid answer
        WriteError: If the story file could not be written
    """
    aggregation = fetch_all(config, category, indicator=indicator, timeout=timeout)
    logger.debug(
        "Merged %d task(s) from %d source(s), %d failed",
        len(aggregation.tasks),
        aggregation.succeeded,
        len(aggregation.failures),
    )

    result = selector.select(aggregation.tasks)
    story_file.persist(result)
    return result
