"""Outcome of the interactive selection."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Chosen:
    """The user picked the task with this key."""

    key: str


@dataclass(frozen=True)
class NoneChosen:
    """The user picked nothing (cancelled, or nothing to pick from)."""


SelectionResult = Chosen | NoneChosen
