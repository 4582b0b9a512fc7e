"""Base protocol for devices on the SPI bus."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class SpiDevice(Protocol):
    """Protocol for byte-at-a-time SPI peripherals.

    The SpiBus clocks one byte per ``transfer`` call while chip select
    is asserted and calls ``end_transaction`` when it is deasserted.
    """

    def transfer(self, data: int) -> int:
        """Exchange one byte: return the device's response to ``data``."""
        ...

    def end_transaction(self) -> None:
        """Chip select deasserted: abandon the current transaction."""
        ...

    def reset(self) -> None:
        """Power-on reset."""
        ...
