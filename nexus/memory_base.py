"""Named shared-memory channel: a data block plus a signalled control block."""

from __future__ import annotations

import struct
import sys
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from multiprocessing import shared_memory

from .channels import ReceivedData, TypeBlockMemory

CONTROL_SIZE = 8 * 1024

Callback = Callable[[ReceivedData], None]

# The control segment starts with a signal counter; the metadata text follows it.
_COUNTER = struct.Struct("<Q")
_TEXT_OFFSET = _COUNTER.size
_POLL_INTERVAL = 0.01


@dataclass
class _Segment:
    shm: shared_memory.SharedMemory
    owner: bool
    refs: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock)


_registry: dict[str, _Segment] = {}
_registry_lock = threading.Lock()


def _open_segment(name: str, size: int) -> _Segment:
    with _registry_lock:
        segment = _registry.get(name)
        if segment is None:
            try:
                shm = shared_memory.SharedMemory(name=name, create=True, size=size)
                owner = True
            except FileExistsError:
                shm = shared_memory.SharedMemory(name=name)
                owner = False
            segment = _Segment(shm, owner)
            _registry[name] = segment
        segment.refs += 1
        return segment


def _close_segment(name: str) -> None:
    with _registry_lock:
        segment = _registry.get(name)
        if segment is None:
            return
        segment.refs -= 1
        if segment.refs > 0:
            return
        del _registry[name]
        segment.shm.close()
        if segment.owner:
            try:
                segment.shm.unlink()
            except FileNotFoundError:
                pass


def parse_control_string(text: str | None) -> dict[str, str]:
    """Parse ``key=value;`` pairs; segments without ``=`` are ignored."""
    metadata: dict[str, str] = {}
    if text is None:
        return metadata
    for segment in text.split(";"):
        if not segment:
            continue
        key, sep, value = segment.partition("=")
        if sep:
            metadata[key] = value
    return metadata


def format_control_string(metadata: Mapping[str, str]) -> str:
    """Render metadata as ``key=value;`` pairs in key order."""
    return "".join(f"{key}={value};" for key, value in sorted(metadata.items()))


class MemoryBase:
    """One named channel in shared memory.

    A reading channel with a callback watches the control block in a
    background thread and hands every signalled update to the callback.
    """

    def __init__(
        self,
        name_memory: str,
        type_block_memory: TypeBlockMemory,
        data_segment_size: int,
        callback: Callback | None = None,
    ) -> None:
        if data_segment_size <= 0:
            raise ValueError("data segment size must be positive")
        self.name = name_memory
        self.block_type = type_block_memory
        self.data_segment_size = data_segment_size
        self._callback = callback
        self._control_name = name_memory + "Control"
        self._closed = False
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

        self._control = _open_segment(self._control_name, _TEXT_OFFSET + CONTROL_SIZE)
        try:
            self._data = _open_segment(name_memory, data_segment_size)
        except BaseException:
            _close_segment(self._control_name)
            raise

        self._seen = self._counter()
        if type_block_memory is TypeBlockMemory.READ and callback is not None:
            self._thread = threading.Thread(
                target=self._event_loop, name=f"memory-{name_memory}", daemon=True
            )
            self._thread.start()

    def __enter__(self) -> MemoryBase:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def write_data(self, data: bytes, metadata: Mapping[str, str]) -> None:
        """Store ``data`` in the data block, then publish ``metadata``."""
        payload = bytes(data)
        if len(payload) > self.data_segment_size:
            raise ValueError("data size exceeds the allocated memory segment size")
        buf = self._data.shm.buf
        buf[: self.data_segment_size] = bytes(self.data_segment_size)
        buf[: len(payload)] = payload
        self.set_command_control(metadata)

    def get_command_control(self) -> dict[str, str]:
        """Read the metadata currently in the control block."""
        raw = bytes(self._control.shm.buf[_TEXT_OFFSET : _TEXT_OFFSET + CONTROL_SIZE])
        text = raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")
        return parse_control_string(text)

    def set_command_control(self, metadata: Mapping[str, str]) -> None:
        """Write metadata to the control block and signal the reader."""
        encoded = format_control_string(metadata).encode("utf-8")
        if len(encoded) + 1 > CONTROL_SIZE:
            raise ValueError("metadata exceed the size of the control buffer")
        self._write_control(encoded)

    def clear_command_control(self) -> None:
        """Empty the control block and signal the reader."""
        print("[MemoryBase] Clearing control memory...")
        self._write_control(b"")
        print("[MemoryBase] Memory cleared. Signal sent.")

    def close(self) -> None:
        """Stop the watcher thread and release the shared segments."""
        if self._closed:
            return
        self._closed = True
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        _close_segment(self._control_name)
        _close_segment(self.name)

    def _write_control(self, encoded: bytes) -> None:
        buf = self._control.shm.buf
        with self._control.lock:
            buf[_TEXT_OFFSET : _TEXT_OFFSET + CONTROL_SIZE] = bytes(CONTROL_SIZE)
            buf[_TEXT_OFFSET : _TEXT_OFFSET + len(encoded)] = encoded
            _COUNTER.pack_into(buf, 0, (self._counter() + 1) % (1 << 64))

    def _counter(self) -> int:
        return _COUNTER.unpack_from(self._control.shm.buf, 0)[0]

    def _event_loop(self) -> None:
        while not self._stop.wait(_POLL_INTERVAL):
            current = self._counter()
            if current == self._seen:
                continue
            self._seen = current
            if self._stop.is_set():
                break
            metadata = self.get_command_control()
            if not metadata:
                self._notify(ReceivedData(b"", metadata))
                continue
            self._notify(ReceivedData(self._read_data(metadata.get("size")), metadata))

    def _read_data(self, size_text: str | None) -> bytes:
        if size_text is None:
            return b""
        try:
            size = int(size_text)
        except ValueError:
            print(f"Error: invalid data size {size_text!r}", file=sys.stderr)
            return b""
        if size <= 0:
            return b""
        if size > self.data_segment_size:
            print(f"Error: cannot map data of size {size}", file=sys.stderr)
            return b""
        return bytes(self._data.shm.buf[:size])

    def _notify(self, received: ReceivedData) -> None:
        if self._callback is None:
            return
        try:
            self._callback(received)
        except Exception as exc:  # keep watching after a failing callback
            print(f"[MemoryBase] Callback error: {exc}", file=sys.stderr)