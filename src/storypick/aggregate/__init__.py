"""Aggregation of tasks across sources."""

from .aggregator import Aggregation, SourceFailure, aggregate, collect, merge

__all__ = ["Aggregation", "SourceFailure", "aggregate", "collect", "merge"]
