"""A pair of shared-memory channels, one for reading and one for writing."""

from __future__ import annotations

import sys
from collections.abc import Mapping

from .channels import ServerClient, TypeBlockMemory
from .memory_base import Callback, MemoryBase

DEFAULT_DATA_SIZE = 64 * 1024


class MemoryNome:
    """Duplex link: the server reads ``<name>Read`` and writes ``<name>Write``;
    the client does the opposite."""

    def __init__(self, name_memory: str, role: ServerClient, callback: Callback | None) -> None:
        if role is ServerClient.SERVER:
            read_name = name_memory + "Read"
            write_name = name_memory + "Write"
            label = "Server"
        else:
            read_name = name_memory + "Write"
            write_name = name_memory + "Read"
            label = "Client"
        print(f"[MemoryNome {label}] Reading from: {read_name}, Writing to: {write_name}")

        self._read = MemoryBase(read_name, TypeBlockMemory.READ, DEFAULT_DATA_SIZE, callback)
        try:
            self._write = MemoryBase(write_name, TypeBlockMemory.WRITE, DEFAULT_DATA_SIZE, None)
        except BaseException:
            self._read.close()
            raise

    def __enter__(self) -> MemoryNome:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def write_data_to_memory(self, data: bytes, metadata: Mapping[str, str]) -> None:
        """Write to the outgoing channel; failures are reported, not raised."""
        try:
            self._write.write_data(data, metadata)
        except (ValueError, OSError) as exc:
            print(f"Error writing data in MemoryNome: {exc}", file=sys.stderr)

    def check_write_channel_control(self) -> dict[str, str]:
        """Metadata still on the outgoing channel; empty once the peer consumed it."""
        return self._write.get_command_control()

    def clear_read_channel_control(self) -> None:
        """Mark the incoming channel's data as processed."""
        self._read.clear_command_control()

    def close(self) -> None:
        self._read.close()
        self._write.close()