"""Controller-side driver for the mock SPI peripheral."""

from __future__ import annotations

from ..bus.spi import SpiBus, Transfer, Write
from ..peripheral.state import Command

# Longest echo payload a single transaction carries
MAX_ECHO_LEN = 255


def _check_byte(name: str, value: int) -> None:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must be a byte value, got {value}")


class MockSpiDriver:
    """Speaks the echo / write-register / read-register protocol over a bus.

    Each call is one chip-select frame. Echo responses lag the payload by
    one transfer, so ``echo`` clocks one extra dummy byte to drain the
    last payload byte before ending the transaction.
    """

    def __init__(self, bus: SpiBus) -> None:
        self._bus = bus

    def into_inner(self) -> SpiBus:
        """Return the underlying bus."""
        return self._bus

    def echo(self, data: bytes) -> bytes:
        """Send ``data`` through the echo command and return what came back.

        Wire layout: opcode, payload, one drain byte. The response to the
        opcode and to the first payload byte carry no data, so the echoed
        payload is responses[2:len(data) + 2].

        Raises:
            ValueError: If data is longer than MAX_ECHO_LEN.
        """
        if not data:
            return b""
        if len(data) > MAX_ECHO_LEN:
            raise ValueError(f"Echo payload too long: {len(data)} > {MAX_ECHO_LEN}")
        wire = bytes([Command.ECHO]) + bytes(data) + b"\x00"
        rx = self._bus.transaction([Transfer(wire)])[0]
        return rx[2:len(data) + 2]

    def write_reg(self, addr: int, value: int) -> None:
        """Write ``value`` to register ``addr``."""
        _check_byte("addr", addr)
        _check_byte("value", value)
        self._bus.transaction([Write(bytes([Command.WRITE_REG, addr, value]))])

    def read_reg(self, addr: int) -> int:
        """Read register ``addr``.

        The value arrives on the third transfer (after opcode and address);
        out-of-range addresses read as 0xFF.
        """
        _check_byte("addr", addr)
        rx = self._bus.transaction([Transfer(bytes([Command.READ_REG, addr, 0x00]))])[0]
        return rx[2]
