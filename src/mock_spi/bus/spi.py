"""SPI bus: controller side of the wire, with chip-select framing."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass

from .device import SpiDevice

# Byte clocked out by the controller when it only wants to read
DUMMY_BYTE = 0x00


@dataclass(frozen=True)
class Write:
    """Clock out ``data``; responses are discarded."""

    data: bytes


@dataclass(frozen=True)
class Read:
    """Clock out ``length`` dummy bytes and keep the responses."""

    length: int


@dataclass(frozen=True)
class Transfer:
    """Full-duplex: clock out ``data`` and keep the responses."""

    data: bytes


Operation = Write | Read | Transfer


@dataclass(frozen=True)
class TraceEntry:
    """One bus event.

    ``kind`` is "xfer" for a clocked byte (``mosi``/``miso`` set),
    "end" for chip-select deassertion, or "reset" for a device reset.
    """

    kind: str
    mosi: int | None = None
    miso: int | None = None


def _check_byte(value: int) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Byte value out of range: {value}")
    return value


class SpiBus:
    """Drives a single SpiDevice the way an SPI controller would.

    Bytes can only be exchanged while chip select is asserted.
    Deasserting chip select ends the device's transaction. Every
    exchange is recorded in a bounded trace for inspection.
    """

    def __init__(self, device: SpiDevice, trace_depth: int = 256) -> None:
        self.device = device
        self._selected: bool = False
        self.trace: deque[TraceEntry] = deque(maxlen=trace_depth)

    @property
    def selected(self) -> bool:
        """True while chip select is asserted."""
        return self._selected

    def select(self) -> None:
        """Assert chip select."""
        self._selected = True

    def deselect(self) -> None:
        """Deassert chip select, ending the device's transaction.

        No-op if chip select is not asserted.
        """
        if not self._selected:
            return
        self._selected = False
        self.device.end_transaction()
        self.trace.append(TraceEntry("end"))

    def exchange(self, data: int) -> int:
        """Clock one byte out and return the byte clocked in.

        Raises:
            RuntimeError: If chip select is not asserted.
            ValueError: If data is not a byte value.
        """
        if not self._selected:
            raise RuntimeError("Chip select not asserted")
        response = self.device.transfer(_check_byte(data))
        self.trace.append(TraceEntry("xfer", mosi=data, miso=response))
        return response

    def transaction(self, operations: Iterable[Operation]) -> list[bytes]:
        """Run operations inside one chip-select frame.

        Chip select is asserted before the first operation and deasserted
        after the last, also when an operation raises.

        Args:
            operations: Write, Read and Transfer operations, in bus order.

        Returns:
            One bytes object per operation: the responses for Read and
            Transfer, empty for Write.
        """
        results: list[bytes] = []
        self.select()
        try:
            for op in operations:
                if isinstance(op, Write):
                    for b in op.data:
                        self.exchange(b)
                    results.append(b"")
                elif isinstance(op, Read):
                    results.append(bytes(self.exchange(DUMMY_BYTE) for _ in range(op.length)))
                elif isinstance(op, Transfer):
                    results.append(bytes(self.exchange(b) for b in op.data))
                else:
                    raise TypeError(f"Unknown bus operation: {op!r}")
        finally:
            self.deselect()
        return results

    def transfer(self, data: bytes) -> bytes:
        """Full-duplex transfer of ``data`` in its own transaction."""
        return self.transaction([Transfer(bytes(data))])[0]

    def write(self, data: bytes) -> None:
        """Write ``data`` in its own transaction, discarding responses."""
        self.transaction([Write(bytes(data))])

    def reset(self) -> None:
        """Drop chip select and reset the device."""
        self._selected = False
        self.device.reset()
        self.trace.append(TraceEntry("reset"))
