# nexus

A small modular core for measurement tasks, plus a shared-memory link that
exchanges typed records between a server and a client.

## Modules

- `nexus.channels` holds the record dataclasses `LoggerChannel`, `VectorChannel`,
  `ValueChannel`, `DateTimeVariableChannel`, `MatrixChannel`, `RecResultChannel`
  and `ReceivedData`. It also holds the enums `LoggerLevel` (`ERROR = -1`,
  `INFO = 0`, `WARNING = 1`), `ServerClient` and `TypeBlockMemory`, and the
  abstract `Sender` class.
- `nexus.shared_types` holds the `DataTypeId` numbering (`LOGGER = 0` to
  `VALUE = 6`) and the `DtRecord` record. Its `pack_items(items)` function
  encodes records as a MessagePack array of field arrays, and
  `unpack_items(type_id, payload)` decodes them. `unpack_items` raises
  `ValueError` for an unknown type id or a malformed payload.
- `nexus.handler` defines `MemoryDataHandler`, with one `on_*` callback per
  record type and `on_ack_received`. Each default callback prints a notice and
  adds the record count to the `unhandled` counter under the record kind.
- `nexus.logger` contains:
  - the abstract `Logger`;
  - `level_name(code)`, which returns `"ERROR"`, `"INFO"`, `"WARNING"` or
    `"UNKNOWN"`;
  - `format_message(message)`, which renders a line such as
    `[ID:1][CudaModule][WARNING] text`;
  - `ModuleLogger(name)`, which writes those lines to standard output through a
    `logging` logger of that name.
- `nexus.memory_base` contains:
  - `MemoryBase`, one named channel: a data segment plus a control segment that
    holds `key=value;` metadata and a signal counter;
  - `parse_control_string` and `format_control_string`.

  A reading channel with a callback polls for signals in a background thread
  and passes a `ReceivedData` to the callback. The control block holds at most
  8 KiB of metadata. Data larger than the segment raises `ValueError`.
- `nexus.memory_nome` defines `MemoryNome(name, role, callback)`, which pairs two
  channels:

  | Role   | Reads from   | Writes to    |
  |--------|--------------|--------------|
  | server | `<name>Read`  | `<name>Write` |
  | client | `<name>Write` | `<name>Read`  |

  Each data segment is 64 KiB. Write errors are printed, not raised.
- `nexus.memory_processor` defines `MemoryProcessor(name, role, handler)`.
  - `send_data(type_id, records)` packs the records and writes them with `type`
    and `size` metadata. An empty list is ignored.
  - Incoming metadata `command=ok` calls `on_ack_received`.
  - Other incoming data is decoded and passed to the matching handler callback.
    The read control block is then cleared.
  - `check_write_channel()` returns the metadata still on the outgoing channel.
    It returns an empty dict once the peer has processed it.
- `nexus.tasks` defines the abstract `UnderTask` and `FactoryUnderTask`.
  - `UnderTask` has `id`, `start`, `stop`, `pause`, `set_params`, `get` and
    `inject`.
  - `FactoryUnderTask` is a registry keyed by task id, with
    `register_under_task`, `get_keys`, `get`, `remove_by_key` and
    `inject_to_all_modules`.
- `nexus.data_context` defines `DataContext`, a `Sender` that reports what it is
  sent on standard error.
- `nexus.core` defines `Injector` and `Core`.
  - `Injector(name)` hands out one `ModuleLogger` and one `DataContext`.
  - `Core(name, factory)` injects them into every registered task and logs three
    start-up messages.
  - `Core` queues callables with `add_task` and runs them in order with
    `start`.
- `nexus.cuda_module` defines:
  - `TemperatureTask`, which reports the fixed readings `[70.1, 71.3, 72.0]`
    under `"temperature"`;
  - `ActiveCoresTask`, which reports `3840` under `"cores"`;
  - `TempSensor`, whose `poll()` logs and sends a `VectorChannel` with `42.5`;
  - `CudaModule`, which registers the two tasks and builds a `Core` named
    `"CUDA"`.
- `nexus.app` provides `main()`, which builds a `CudaModule`.

## Installation

```
pip install .
```

## Command line

```
nexus-app
```

This builds a `CudaModule`, injects the logger into its tasks and prints the
start-up log. It then exits with status 0.

## Example

```python
import time

from nexus.channels import ServerClient, ValueChannel
from nexus.handler import MemoryDataHandler
from nexus.memory_processor import MemoryProcessor
from nexus.shared_types import DataTypeId


class Printer(MemoryDataHandler):
    def on_value_data(self, data):
        for item in data:
            print(item.id, item.value)


with MemoryProcessor("Exchange", ServerClient.SERVER, Printer()) as server, \
        MemoryProcessor("Exchange", ServerClient.CLIENT, Printer()) as client:
    client.send_data(DataTypeId.VALUE, [ValueChannel(1, 3.5)])
    time.sleep(0.1)  # the server's watcher thread polls for new data
    print(client.check_write_channel())  # {} once the server has processed it
```

## Limitations

- No hardware is queried. The temperature and core-count tasks and
  `TempSensor` return fixed sample values.
- `nexus-app` only builds the module and logs its start-up. It does not
  start the tasks, run a polling loop or exchange data.
- The shared-memory channels use `multiprocessing.shared_memory`, and the
  reader polls a signal counter rather than waiting on an operating-system
  event.

## Tests

```
pip install .[test]
pytest
```