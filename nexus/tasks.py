"""Sub-tasks of a module and the registry that holds them by id."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol

from .channels import Sender
from .logger import Logger

Params = dict[str, Any]


class SupportsInjection(Protocol):
    """Anything that can hand out a logger and a data context."""

    def create_logger(self) -> Logger: ...

    def create_data_context(self) -> Sender: ...


class UnderTask(ABC):
    """A unit of work that a module registers and its core wires up."""

    def __init__(self) -> None:
        self.logger: Logger | None = None
        self.data_context: Sender | None = None

    def inject(self, injector: SupportsInjection) -> None:
        """Take the logger and data context from ``injector``."""
        self.logger = injector.create_logger()
        self.data_context = injector.create_data_context()

    @property
    @abstractmethod
    def id(self) -> int:
        """Key under which the task is registered."""

    @abstractmethod
    def start(self) -> None:
        """Begin work."""

    @abstractmethod
    def stop(self) -> None:
        """End work."""

    @abstractmethod
    def pause(self) -> None:
        """Suspend work."""

    @abstractmethod
    def set_params(self, params: Params) -> None:
        """Replace the task's parameters."""

    @abstractmethod
    def get(self, ind: int = -1) -> Params:
        """Current parameters together with the task's readings."""


class FactoryUnderTask:
    """Tasks keyed by their id, kept in key order."""

    def __init__(self) -> None:
        self._tasks: dict[int, UnderTask] = {}

    def register_under_task(self, task: UnderTask | None) -> None:
        """Add ``task`` or replace the one with the same id; ``None`` is ignored."""
        if task is None:
            return
        self._tasks[task.id] = task

    def get_keys(self) -> list[int]:
        return sorted(self._tasks)

    def remove_by_key(self, key: int) -> bool:
        """Remove the task with ``key``; report whether there was one."""
        return self._tasks.pop(key, None) is not None

    def get(self, key: int) -> UnderTask | None:
        return self._tasks.get(key)

    def inject_to_all_modules(self, injector: SupportsInjection) -> None:
        """Hand ``injector`` to every registered task, in key order."""
        for key in sorted(self._tasks):
            self._tasks[key].inject(injector)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, key: object) -> bool:
        return key in self._tasks