"""Record types exchanged over shared memory and their MessagePack form."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

import msgpack

from .channels import (
    DateTimeVariableChannel,
    LoggerChannel,
    LoggerLevel,
    MatrixChannel,
    RecResultChannel,
    ValueChannel,
    VectorChannel,
)


class DataTypeId(IntEnum):
    """Identifier of the record type carried in a payload."""

    LOGGER = 0
    DATE_TIME_VARIABLE = 1
    VECTOR = 2
    MATRIX = 3
    REC_RESULT = 4
    DT_RECORD = 5
    VALUE = 6


@dataclass
class DtRecord:
    id: int
    date_time: str
    dt_records: list[RecResultChannel] = field(default_factory=list)


_PACKABLE = (
    LoggerChannel,
    VectorChannel,
    ValueChannel,
    DateTimeVariableChannel,
    MatrixChannel,
    RecResultChannel,
    DtRecord,
)


def _to_wire(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [_to_wire(getattr(value, f.name)) for f in dataclasses.fields(value)]
    if isinstance(value, (list, tuple)):
        return [_to_wire(item) for item in value]
    return value


def pack_items(items: Iterable[Any]) -> bytes:
    """Serialise records as a MessagePack array of field arrays."""
    wire = []
    for item in items:
        if not isinstance(item, _PACKABLE):
            raise TypeError(f"cannot pack object of type {type(item).__name__}")
        wire.append(_to_wire(item))
    return msgpack.packb(wire, use_bin_type=True)


def _logger(fields: list) -> LoggerChannel:
    id_, module, log, code = fields
    return LoggerChannel(id_, module, log, LoggerLevel(code))


def _vector(fields: list) -> VectorChannel:
    id_, values = fields
    return VectorChannel(id_, list(values))


def _matrix(fields: list) -> MatrixChannel:
    id_, i, j, values = fields
    return MatrixChannel(id_, i, j, list(values))


def _dt_record(fields: list) -> DtRecord:
    id_, date_time, records = fields
    return DtRecord(id_, date_time, [RecResultChannel(*record) for record in records])


_DECODERS: dict[DataTypeId, Callable[[list], Any]] = {
    DataTypeId.LOGGER: _logger,
    DataTypeId.DATE_TIME_VARIABLE: lambda fields: DateTimeVariableChannel(*fields),
    DataTypeId.VECTOR: _vector,
    DataTypeId.MATRIX: _matrix,
    DataTypeId.REC_RESULT: lambda fields: RecResultChannel(*fields),
    DataTypeId.DT_RECORD: _dt_record,
    DataTypeId.VALUE: lambda fields: ValueChannel(*fields),
}


def unpack_items(type_id: int, payload: bytes) -> list[Any]:
    """Decode a payload of the given type; raise ValueError if it is malformed."""
    try:
        kind = DataTypeId(type_id)
    except ValueError:
        raise ValueError(f"unknown data type id: {type_id}") from None
    decode = _DECODERS[kind]
    try:
        wire = msgpack.unpackb(payload, raw=False)
        if not isinstance(wire, list):
            raise ValueError("payload is not an array")
        return [decode(fields) for fields in wire]
    except (ValueError, TypeError, msgpack.exceptions.UnpackException) as exc:
        raise ValueError(f"cannot decode {kind.name} payload: {exc}") from exc