"""Interactive single-choice prompt over the merged task list."""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TextIO

from ..models import Chosen, NoneChosen, SelectionResult, Task


class SelectionError(Exception):
    """The user kept giving answers that name no task."""

    pass


class TerminalSelector:
    """Numbered menu read from the terminal."""

    def __init__(
        self,
        input_fn: Callable[[str], str] | None = None,
        output: TextIO | None = None,
        max_attempts: int = 3,
    ):
        self.input_fn = input_fn if input_fn is not None else input
        self.output = output if output is not None else sys.stdout
        self.max_attempts = max_attempts

    def _print(self, text: str = "") -> None:
        print(text, file=self.output)

    def render(self, tasks: list[Task]) -> list[str]:
        """Menu lines, numbered from 1, in the order given."""
        width = len(str(len(tasks)))
        return [
            f"  {n:>{width}}) {task.format_display()}"
            for n, task in enumerate(tasks, start=1)
        ]

    def select(self, tasks: list[Task]) -> SelectionResult:
        """Ask the user to pick one task.

        Returns:
            Chosen with the task key, or NoneChosen when the list is empty or
            the user cancels (empty answer, EOF, Ctrl-C)

        Raises:
            SelectionError: After ``max_attempts`` invalid answers
        """
        if not tasks:
            self._print("No stories found.")
            return NoneChosen()

        for line in self.render(tasks):
            self._print(line)

        prompt = f"Select a story [1-{len(tasks)}, Enter to cancel]: "
        for _ in range(self.max_attempts):
            try:
                answer = self.input_fn(prompt).strip()
            except (EOFError, KeyboardInterrupt):
                self._print()
                return NoneChosen()

            if not answer:
                return NoneChosen()

            if answer.isdigit() and 1 <= int(answer) <= len(tasks):
                return Chosen(tasks[int(answer) - 1].key)

            self._print(f"'{answer}' is not a number between 1 and {len(tasks)}.")

        raise SelectionError(f"No valid choice after {self.max_attempts} attempts")
