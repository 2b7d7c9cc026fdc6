import threading
import time
import uuid

import pytest

from nexus.channels import (
    DateTimeVariableChannel,
    LoggerChannel,
    LoggerLevel,
    MatrixChannel,
    RecResultChannel,
    ServerClient,
    TypeBlockMemory,
    ValueChannel,
    VectorChannel,
)
from nexus.handler import MemoryDataHandler
from nexus.memory_base import MemoryBase
from nexus.memory_processor import MemoryProcessor
from nexus.shared_types import DataTypeId, DtRecord, pack_items


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class _Recorder(MemoryDataHandler):
    def __init__(self):
        self.calls = []
        self.event = threading.Event()

    def _record(self, kind, data):
        self.calls.append((kind, list(data)))
        self.event.set()

    def on_ack_received(self):
        self._record("ack", [])

    def on_logger_data(self, data):
        self._record("logger", data)

    def on_vector_data(self, data):
        self._record("vector", data)

    def on_value_data(self, data):
        self._record("value", data)

    def on_date_time_variable_data(self, data):
        self._record("date_time_variable", data)

    def on_matrix_data(self, data):
        self._record("matrix", data)

    def on_rec_result_data(self, data):
        self._record("rec_result", data)

    def on_dt_record_data(self, data):
        self._record("dt_record", data)


@pytest.fixture
def name():
    return "p" + uuid.uuid4().hex[:8]


@pytest.fixture
def opened():
    items = []
    yield items
    for item in items:
        item.close()


@pytest.fixture
def server(name, opened):
    recorder = _Recorder()
    processor = MemoryProcessor(name, ServerClient.SERVER, recorder)
    opened.append(processor)
    return processor, recorder


@pytest.fixture
def feeder(name, opened, server):
    writer = MemoryBase(name + "Read", TypeBlockMemory.WRITE, 1024)
    opened.append(writer)
    return writer


def _collect_err(capsys, text):
    seen = []

    def check():
        seen.append(capsys.readouterr().err)
        return text in "".join(seen)

    return check


def test_handler_required(name):
    with pytest.raises(ValueError):
        MemoryProcessor(name, ServerClient.SERVER, None)


_REC = RecResultChannel(6, 1024, 4, 0.5, 0.25, 0.125)


@pytest.mark.parametrize(
    "type_id, items, kind",
    [
        (DataTypeId.LOGGER, [LoggerChannel(1, "Core", "started", LoggerLevel.INFO)], "logger"),
        (DataTypeId.VECTOR, [VectorChannel(2, [1.5, 2.5])], "vector"),
        (DataTypeId.VALUE, [ValueChannel(3, 4.5)], "value"),
        (
            DataTypeId.DATE_TIME_VARIABLE,
            [DateTimeVariableChannel(4, "2024-01-01 00:00:00", 0.5)],
            "date_time_variable",
        ),
        (DataTypeId.MATRIX, [MatrixChannel(5, 2, 2, [1.0, 2.0, 3.0, 4.0])], "matrix"),
        (DataTypeId.REC_RESULT, [_REC], "rec_result"),
        (DataTypeId.DT_RECORD, [DtRecord(7, "2024-01-01", [_REC])], "dt_record"),
    ],
)
def test_records_round_trip(name, opened, server, type_id, items, kind):
    _, recorder = server
    client = MemoryProcessor(name, ServerClient.CLIENT, MemoryDataHandler())
    opened.append(client)
    client.send_data(type_id, items)
    assert recorder.event.wait(5)
    assert recorder.calls[0] == (kind, items)
    assert _wait_for(lambda: client.check_write_channel() == {})


def test_send_data_metadata(name, opened):
    client = MemoryProcessor(name, ServerClient.CLIENT, MemoryDataHandler())
    opened.append(client)
    items = [VectorChannel(1, [1.0, 2.0])]
    client.send_data(DataTypeId.VECTOR, items)
    assert client.check_write_channel() == {
        "type": str(int(DataTypeId.VECTOR)),
        "size": str(len(pack_items(items))),
    }


def test_send_empty_writes_nothing(name, opened):
    client = MemoryProcessor(name, ServerClient.CLIENT, MemoryDataHandler())
    opened.append(client)
    client.send_data(DataTypeId.VALUE, [])
    assert client.check_write_channel() == {}


def test_ack_dispatched_and_not_cleared(server, feeder):
    _, recorder = server
    feeder.set_command_control({"command": "ok"})
    assert recorder.event.wait(5)
    assert recorder.calls == [("ack", [])]
    assert feeder.get_command_control() == {"command": "ok"}


def test_unknown_type_reported_and_cleared(server, feeder, capsys):
    _, recorder = server
    payload = pack_items([ValueChannel(1, 2.0)])
    feeder.write_data(payload, {"type": "99", "size": str(len(payload))})
    assert _wait_for(lambda: feeder.get_command_control() == {})
    assert _wait_for(_collect_err(capsys, "unknown type ID: 99"))
    assert recorder.calls == []


def test_malformed_payload_reported_and_cleared(server, feeder, capsys):
    _, recorder = server
    feeder.write_data(b"\xc1", {"type": "2", "size": "1"})
    assert _wait_for(lambda: feeder.get_command_control() == {})
    assert _wait_for(_collect_err(capsys, "Deserialization error"))
    assert recorder.calls == []


def test_missing_type_not_cleared(server, feeder, capsys):
    _, recorder = server
    feeder.write_data(b"abc", {"size": "3"})
    assert _wait_for(_collect_err(capsys, "without 'type' ID"))
    assert feeder.get_command_control() == {"size": "3"}
    assert recorder.calls == []


def test_clear_read_channel_empties_peer_write(name, opened, server):
    processor, _ = server
    client = MemoryProcessor(name, ServerClient.CLIENT, MemoryDataHandler())
    opened.append(client)
    client.close()
    opened.remove(client)
    feeder = MemoryBase(name + "Read", TypeBlockMemory.WRITE, 1024)
    opened.append(feeder)
    feeder.set_command_control({"command": "ok"})
    processor.clear_read_channel()
    assert feeder.get_command_control() == {}