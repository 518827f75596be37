"""Logging configuration for the storypick CLI."""

import logging
import sys


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr.

    Call this once, before the first log call. Warnings from failed sources
    are always shown; ``verbose`` adds request-level DEBUG output.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.captureWarnings(True)
