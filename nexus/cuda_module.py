"""GPU monitoring module: its sub-tasks, a temperature sensor and the module itself."""

from __future__ import annotations

import sys

from .channels import LoggerChannel, LoggerLevel, Sender, VectorChannel
from .core import Core
from .logger import Logger
from .tasks import FactoryUnderTask, Params, UnderTask

MODULE_NAME = "CUDA"


def _log_di_test(task: UnderTask, name: str) -> None:
    if task.logger is None:
        raise RuntimeError(f"{name} has no logger injected")
    task.logger.log(LoggerChannel(1, name, " Di  test!!! ", LoggerLevel.WARNING))


class TemperatureTask(UnderTask):
    """Reports core temperatures."""

    def __init__(self, task_id: int) -> None:
        super().__init__()
        self._id = task_id
        self.params: Params = {}
        self.running = False
        self.paused = False

    @property
    def id(self) -> int:
        return self._id

    def start(self) -> None:
        self.running = True
        self.paused = False

    def stop(self) -> None:
        self.running = False
        self.paused = False

    def pause(self) -> None:
        """Mark the task as paused; start resumes it."""
        self.paused = True

    def set_params(self, params: Params) -> None:
        self.params = dict(params)

    def get(self, ind: int = -1) -> Params:
        result = dict(self.params)
        result["temperature"] = [70.1, 71.3, 72.0]
        return result

    def test_di(self) -> None:
        """Log a check message through the injected logger."""
        _log_di_test(self, "TemperatureTask")


class ActiveCoresTask(UnderTask):
    """Reports the number of active cores."""

    def __init__(self, task_id: int) -> None:
        super().__init__()
        self._id = task_id
        self.params: Params = {}
        self.running = False
        self.paused = False

    @property
    def id(self) -> int:
        return self._id

    def start(self) -> None:
        self.running = True
        self.paused = False

    def stop(self) -> None:
        self.running = False
        self.paused = False

    def pause(self) -> None:
        """Mark the task as paused; start resumes it."""
        self.paused = True

    def set_params(self, params: Params) -> None:
        self.params = dict(params)

    def get(self, ind: int = -1) -> Params:
        result = dict(self.params)
        result["cores"] = 3840
        return result

    def test_di(self) -> None:
        """Log a check message through the injected logger."""
        _log_di_test(self, "ActiveCoresTask")


class TempSensor:
    """Polls the temperature, logs it and publishes it."""

    def __init__(self, logger: Logger, data_context: Sender) -> None:
        self.logger = logger
        self.data_context = data_context

    def poll(self) -> VectorChannel:
        temperature = self._temperature()
        channel = VectorChannel(0, [temperature])
        self.logger.log(
            LoggerChannel(0, "TempSensor", f"Temperature: {temperature:f}", LoggerLevel.INFO)
        )
        self.data_context.send(channel)
        return channel

    @staticmethod
    def _temperature() -> float:
        return 42.5


class CudaModule:
    """Registers the module's tasks and builds its core."""

    def __init__(self) -> None:
        print("  Start CudaModule ", file=sys.stderr)
        self.name = MODULE_NAME
        self.factory = FactoryUnderTask()
        self.factory.register_under_task(TemperatureTask(0))
        self.factory.register_under_task(ActiveCoresTask(1))
        self.core = Core(self.name, self.factory)