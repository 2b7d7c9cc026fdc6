"""Typed record exchange over a shared-memory link."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Any

import msgpack

from .channels import ReceivedData, ServerClient
from .handler import MemoryDataHandler
from .memory_nome import MemoryNome
from .shared_types import DataTypeId, pack_items, unpack_items

_HANDLER_METHODS = {
    DataTypeId.LOGGER: "on_logger_data",
    DataTypeId.VECTOR: "on_vector_data",
    DataTypeId.VALUE: "on_value_data",
    DataTypeId.DATE_TIME_VARIABLE: "on_date_time_variable_data",
    DataTypeId.MATRIX: "on_matrix_data",
    DataTypeId.REC_RESULT: "on_rec_result_data",
    DataTypeId.DT_RECORD: "on_dt_record_data",
}


class MemoryProcessor:
    """Serialises outgoing records and dispatches incoming ones to a handler."""

    def __init__(self, name: str, role: ServerClient, handler: MemoryDataHandler | None) -> None:
        if handler is None:
            raise ValueError("handler cannot be None")
        self._handler = handler
        self._nome = MemoryNome(name, role, self._on_raw_data_received)

    def __enter__(self) -> MemoryProcessor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def send_data(self, type_id: DataTypeId, data: Sequence[Any]) -> None:
        """Pack records and write them to the outgoing channel; empty input is ignored."""
        if not data:
            return
        payload = pack_items(data)
        metadata = {"type": str(int(type_id)), "size": str(len(payload))}
        self._nome.write_data_to_memory(payload, metadata)

    def check_write_channel(self) -> dict[str, str]:
        return self._nome.check_write_channel_control()

    def clear_read_channel(self) -> None:
        self._nome.clear_read_channel_control()

    def close(self) -> None:
        self._nome.close()

    def _on_raw_data_received(self, received: ReceivedData) -> None:
        metadata = received.metadata
        if metadata.get("command") == "ok":
            self._handler.on_ack_received()
            return

        type_text = metadata.get("type")
        if type_text is None:
            print("[MemoryProcessor] Received data without 'type' ID in metadata.", file=sys.stderr)
            return

        try:
            type_id = int(type_text)
            try:
                kind = DataTypeId(type_id)
            except ValueError:
                msgpack.unpackb(received.data, raw=False)
                print(
                    f"[MemoryProcessor] Received data with unknown type ID: {type_id}",
                    file=sys.stderr,
                )
            else:
                items = unpack_items(kind, received.data)
                getattr(self._handler, _HANDLER_METHODS[kind])(items)
        except Exception as exc:
            print(f"[MemoryProcessor] Deserialization error: {exc}", file=sys.stderr)

        if metadata:
            print("[MemoryProcessor] Data processed, clearing the read control block...")
            self.clear_read_channel()