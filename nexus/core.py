"""Module core: wires dependencies into sub-tasks and runs queued work."""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable

from .channels import LoggerChannel, LoggerLevel, Sender, ValueChannel, VectorChannel
from .data_context import DataContext
from .logger import Logger, ModuleLogger
from .tasks import FactoryUnderTask


class Injector:
    """Hands out one logger named after the module and one data context."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._logger: Logger | None = None
        self._data_context: DataContext | None = None

    def create_logger(self) -> Logger:
        if self._logger is None:
            self._logger = ModuleLogger(self.name)
        return self._logger

    def create_data_context(self) -> DataContext:
        if self._data_context is None:
            self._data_context = DataContext()
        return self._data_context


_STARTUP_MESSAGES = (
    LoggerChannel(1, "CudaModule", " Time max!!! ", LoggerLevel.WARNING),
    LoggerChannel(2, "Nexus.Core", "Start sensor", LoggerLevel.INFO),
    LoggerChannel(3, "Logger", "Error inicial", LoggerLevel.ERROR),
)


class Core(Sender):
    """Builds the module's dependencies, injects them into its tasks and
    runs the queued task callables."""

    def __init__(self, name_module: str, factory_under_task: FactoryUnderTask | None) -> None:
        print("  Start Core ", file=sys.stderr)
        self.name_module = name_module
        self.running = False
        self._tasks: list[Callable[[], None]] = []
        self._lock = threading.Lock()

        self.injector = Injector(name_module)
        self.logger = self.injector.create_logger()
        self.data_context = self.injector.create_data_context()

        if factory_under_task is not None:
            factory_under_task.inject_to_all_modules(self.injector)

        for message in _STARTUP_MESSAGES:
            self.logger.log(message)

    def send(self, message: str | VectorChannel | ValueChannel) -> None:
        if isinstance(message, str):
            print(f"  Core send -->> {message}", file=sys.stderr)
            return
        if isinstance(message, VectorChannel):
            print("  Core send -->> IVectorChannel", file=sys.stderr)
        elif isinstance(message, ValueChannel):
            print("  Core send -->> IValueChannel", file=sys.stderr)
        super().send(message)

    def start(self) -> None:
        """Run every queued task in the order it was added."""
        print("  Core start ", file=sys.stderr)
        with self._lock:
            self.running = True
            tasks = list(self._tasks)
        for task in tasks:
            if task is not None:
                task()

    def stop(self) -> None:
        """Mark the core as no longer running."""
        print("  Core stop -->> ", file=sys.stderr)
        with self._lock:
            self.running = False

    def add_task(self, task: Callable[[], None]) -> None:
        with self._lock:
            self._tasks.append(task)