"""Receiver interface for records arriving over shared memory."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from .channels import (
    DateTimeVariableChannel,
    LoggerChannel,
    MatrixChannel,
    RecResultChannel,
    ValueChannel,
    VectorChannel,
)
from .shared_types import DtRecord


class MemoryDataHandler:
    """Override the callbacks of interest.

    The defaults report the arrival and count it in ``unhandled``, keyed by
    the kind of record, so that records nobody handled can be seen later.
    """

    @property
    def unhandled(self) -> Counter:
        """Records received by callbacks that were not overridden, by kind."""
        return vars(self).setdefault("_unhandled", Counter())

    def _not_overridden(self, kind: str, data: Sequence) -> None:
        self.unhandled[kind] += len(data)
        print(
            f"[IMemoryDataHandler] Received {kind} data, but the handler is not "
            f"overridden. Count: {len(data)}"
        )

    def on_ack_received(self) -> None:
        self.unhandled["ACK"] += 1
        print("[IMemoryDataHandler] Received acknowledgement (ACK), but the handler is not overridden.")

    def on_logger_data(self, data: Sequence[LoggerChannel]) -> None:
        self._not_overridden("Logger", data)

    def on_vector_data(self, data: Sequence[VectorChannel]) -> None:
        self._not_overridden("CudaVector", data)

    def on_value_data(self, data: Sequence[ValueChannel]) -> None:
        self._not_overridden("CudaValue", data)

    def on_date_time_variable_data(self, data: Sequence[DateTimeVariableChannel]) -> None:
        self._not_overridden("CudaDateTimeVariable", data)

    def on_matrix_data(self, data: Sequence[MatrixChannel]) -> None:
        self._not_overridden("CudaMatrix", data)

    def on_rec_result_data(self, data: Sequence[RecResultChannel]) -> None:
        self._not_overridden("RecResult", data)

    def on_dt_record_data(self, data: Sequence[DtRecord]) -> None:
        self._not_overridden("CudaDtRecord", data)