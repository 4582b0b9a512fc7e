"""Bus console controller: state management and command processing."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

from ..bus.spi import SpiBus
from ..driver.mock_spi import MAX_ECHO_LEN, MockSpiDriver
from ..peripheral.mock import MockSpiPeripheral
from ..peripheral.mock import logger as peripheral_logger
from ..peripheral.registers import REGISTER_FILE_SIZE


@dataclass
class ConsoleState:
    """Mutable state for a bus console session.

    Holds the bus and peripheral, the previous register snapshot for
    change tracking, captured peripheral log lines, and the status message.
    """

    bus: SpiBus
    peripheral: MockSpiPeripheral
    prev_regs: list[int] = field(default_factory=lambda: [0] * REGISTER_FILE_SIZE)
    log_lines: deque[str] = field(default_factory=lambda: deque(maxlen=64))
    message: str = "Ready. Type 'h' for help, 'q' to quit."

    @property
    def driver(self) -> MockSpiDriver:
        return MockSpiDriver(self.bus)


def make_console_state(trace_depth: int = 256) -> ConsoleState:
    """Build a peripheral and bus whose log output is captured by the console.

    Captured messages are also forwarded to the peripheral logger so
    ``-v`` keeps working while the console is open.
    """
    log_lines: deque[str] = deque(maxlen=64)

    def _capture(level: int, msg: str) -> None:
        log_lines.append(f"{logging.getLevelName(level)}: {msg}")
        peripheral_logger.log(level, msg)

    peripheral = MockSpiPeripheral(log_fn=_capture)
    bus = SpiBus(peripheral, trace_depth=trace_depth)
    return ConsoleState(bus=bus, peripheral=peripheral, log_lines=log_lines)


HELP_TEXT = (
    "x <hex> [<hex> ...]   — clock raw bytes (asserts CS)\n"
    "e, end                — deassert CS (end transaction)\n"
    "reset                 — power-on reset of the peripheral\n"
    "w <addr> <value>      — write register (hex)\n"
    "r <addr>              — read register (hex)\n"
    "echo <hex> [...]      — echo bytes through the device\n"
    "h, help               — show this help\n"
    "q, quit               — exit the console"
)


def _parse_bytes(args: list[str]) -> list[int] | None:
    """Parse hex byte arguments. Returns None if any is invalid."""
    values: list[int] = []
    for arg in args:
        try:
            value = int(arg, 16)
        except ValueError:
            return None
        if not 0 <= value <= 0xFF:
            return None
        values.append(value)
    return values


def _format_bytes(data: bytes | list[int]) -> str:
    return " ".join(f"{b:02X}" for b in data)


def process_command(state: ConsoleState, cmd: str) -> bool:
    """Parse and execute a console command.

    Supported commands:
        x <hex>...        -- clock raw bytes with CS asserted
        e, end            -- deassert CS
        reset             -- reset the peripheral
        w <addr> <value>  -- write a register through the driver
        r <addr>          -- read a register through the driver
        echo <hex>...     -- echo bytes through the driver
        h, help           -- show command help
        q, quit           -- exit the console

    Args:
        state: The current console state (modified in place).
        cmd: The raw command string from the user.

    Returns:
        True to continue the console loop, False to quit.
    """
    parts = cmd.strip().split()
    if not parts:
        state.message = HELP_TEXT
        return True

    verb = parts[0].lower()
    args = parts[1:]

    if verb in ("q", "quit"):
        return False

    if verb in ("h", "help"):
        state.message = HELP_TEXT
        return True

    if verb in ("e", "end"):
        state.prev_regs = state.peripheral.registers.snapshot()
        state.bus.deselect()
        state.message = "Chip select deasserted."
        return True

    if verb == "reset":
        state.prev_regs = state.peripheral.registers.snapshot()
        state.bus.reset()
        state.message = "Peripheral reset."
        return True

    if verb not in ("x", "w", "r", "echo"):
        state.message = f"Unknown command: {verb}\n\n{HELP_TEXT}"
        return True

    values = _parse_bytes(args)
    if values is None:
        state.message = f"Invalid byte value in: {' '.join(args)}"
        return True

    if verb == "x":
        if not values:
            state.message = "Usage: x <hex> [<hex> ...]"
            return True
        state.prev_regs = state.peripheral.registers.snapshot()
        state.bus.select()
        rx = [state.bus.exchange(b) for b in values]
        state.message = f"Sent {_format_bytes(values)}  received {_format_bytes(rx)}"

    elif verb == "w":
        if len(values) != 2:
            state.message = "Usage: w <addr> <value>"
            return True
        state.prev_regs = state.peripheral.registers.snapshot()
        state.bus.deselect()
        state.driver.write_reg(values[0], values[1])
        state.message = f"Wrote 0x{values[1]:02X} to register 0x{values[0]:02X}"

    elif verb == "r":
        if len(values) != 1:
            state.message = "Usage: r <addr>"
            return True
        state.prev_regs = state.peripheral.registers.snapshot()
        state.bus.deselect()
        value = state.driver.read_reg(values[0])
        state.message = f"Register 0x{values[0]:02X} = 0x{value:02X}"

    elif verb == "echo":
        if not values:
            state.message = "Usage: echo <hex> [<hex> ...]"
            return True
        if len(values) > MAX_ECHO_LEN:
            state.message = f"Echo payload too long: {len(values)} bytes (max {MAX_ECHO_LEN})"
            return True
        state.prev_regs = state.peripheral.registers.snapshot()
        state.bus.deselect()
        rx = state.driver.echo(bytes(values))
        state.message = f"Echo sent {_format_bytes(values)}, got back {_format_bytes(rx)}"

    return True
