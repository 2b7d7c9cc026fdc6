"""Channel records, enumerations and the base sender interface."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, IntEnum


class TypeBlockMemory(Enum):
    """Direction of a shared-memory block."""

    READ = "read"
    WRITE = "write"


class ServerClient(Enum):
    """Side of a shared-memory exchange."""

    SERVER = "server"
    CLIENT = "client"


class LoggerLevel(IntEnum):
    """Severity of a log record; values match the wire format."""

    ERROR = -1
    INFO = 0
    WARNING = 1


@dataclass
class ReceivedData:
    """Raw bytes read from a channel together with their metadata."""

    data: bytes = b""
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class LoggerChannel:
    id: int
    module: str
    log: str
    code: LoggerLevel


@dataclass
class VectorChannel:
    id: int
    values: list[float] = field(default_factory=list)


@dataclass
class ValueChannel:
    id: int
    value: float


@dataclass
class DateTimeVariableChannel:
    id: int
    date_time: str
    variable: float


@dataclass
class MatrixChannel:
    """Matrix of ``i`` by ``j`` elements stored in row order in ``values``."""

    id: int
    i: int
    j: int
    values: list[float] = field(default_factory=list)


@dataclass
class RecResultChannel:
    id: int
    n_fft: int
    m_channel: int
    time_fft: float
    time_load_data: float
    time_waite_data: float


class Sender(ABC):
    """Something that accepts text and channel records and queues tasks."""

    def send(self, message: str | VectorChannel | ValueChannel) -> None:
        """Report the outgoing message on standard error."""
        if isinstance(message, str):
            line = f"  ISend  -> {message}"
        elif isinstance(message, (VectorChannel, ValueChannel)):
            line = "  ISend -> IVectorChannel "
        else:
            raise TypeError(f"cannot send object of type {type(message).__name__}")
        print(line, file=sys.stderr)

    @abstractmethod
    def add_task(self, task: Callable[[], None]) -> None:
        """Queue a task for later execution."""