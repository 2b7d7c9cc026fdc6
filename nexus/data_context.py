"""Data context: the outlet through which a module publishes its readings."""

from __future__ import annotations

import sys
from collections.abc import Callable

from .channels import Sender, ValueChannel, VectorChannel


class DataContext(Sender):
    """Publishes text and channel records; it does not schedule tasks."""

    def __init__(self) -> None:
        print("  Start DataContext ", file=sys.stderr)

    def send(self, message: str | VectorChannel | ValueChannel) -> None:
        if isinstance(message, str):
            print(f"  DataContext -->>  {message}", file=sys.stderr)
        else:
            super().send(message)

    def add_task(self, task: Callable[[], None]) -> None:
        """Accept a task; a data context never runs tasks, so it is dropped."""