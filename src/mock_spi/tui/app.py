"""TUI application: interactive bus console using Rich."""

from __future__ import annotations

import readline  # noqa: F401  # pyright: ignore[reportUnusedImport]
import sys

from rich.console import Console
from rich.layout import Layout
from rich.panel import Panel

from ..peripheral.state import EchoPayload, Error, ReadRegValue, WriteRegValue
from .console import ConsoleState, make_console_state, process_command
from .registers import format_registers
from .trace import format_trace


def format_peripheral_state(state: ConsoleState) -> str:
    """Describe the peripheral's transaction state and chip select line."""
    current = state.peripheral.state
    lines = [
        f"State:   {type(current).__name__}",
        f"Command: {current.command.name}",
    ]
    if isinstance(current, (WriteRegValue, ReadRegValue)):
        lines.append(f"Address: 0x{current.addr:02X}")
    elif isinstance(current, EchoPayload):
        pending = " ".join(f"{b:02X}" for b in current.queue)
        lines.append(f"Echo queue: [{pending}]")
    elif isinstance(current, Error):
        lines.append(f"[bold red]Bad opcode: 0x{current.opcode:02X}[/bold red]")
    lines.append(f"CS:      {'asserted' if state.bus.selected else 'idle'}")
    return "\n".join(lines)


def render_console(state: ConsoleState) -> Layout:
    """Build the Rich Layout with all console panels.

    Layout structure:
        +------------------+------------------+
        |   Registers      |                  |
        +------------------+   Bus Trace      |
        |   Peripheral     |                  |
        +------------------+------------------+
        |   Log (full width)                  |
        +-------------------------------------+
        |   Status bar (full width)           |
        +-------------------------------------+

    Args:
        state: The current console state.

    Returns:
        A Rich Layout object ready for display.
    """
    layout = Layout()

    msg_lines = state.message.count("\n") + 1
    status_height = 2 + 1 + msg_lines

    layout.split_column(
        Layout(name="top", ratio=3),
        Layout(name="log", ratio=1),
        Layout(name="status", size=status_height),
    )

    layout["top"].split_row(
        Layout(name="left_col", ratio=1),
        Layout(name="trace", ratio=1),
    )

    layout["left_col"].split_column(
        Layout(name="registers", ratio=1),
        Layout(name="peripheral", ratio=1),
    )

    reg_text = format_registers(state.peripheral.registers, state.prev_regs)
    layout["registers"].update(Panel(reg_text, title="Registers"))

    layout["peripheral"].update(Panel(format_peripheral_state(state), title="Peripheral"))

    layout["trace"].update(Panel(format_trace(state.bus.trace), title="Bus Trace"))

    # Show last 8 log lines
    log_lines = list(state.log_lines)[-8:]
    layout["log"].update(Panel("\n".join(log_lines), title="Log"))

    xfers = sum(1 for e in state.bus.trace if e.kind == "xfer")
    status_text = (
        f"State: {type(state.peripheral.state).__name__}  |  "
        f"Traced transfers: {xfers}\n"
        f"{state.message}"
    )
    layout["status"].update(Panel(status_text, title="Status"))

    return layout


def run_console() -> None:
    """Launch the interactive bus console and enter the command loop."""
    state = make_console_state()
    console = Console()

    def _render(st: ConsoleState) -> None:
        console.clear()
        console.print(render_console(st))

    _render(state)

    while True:
        try:
            cmd = input("spi> ")
        except (EOFError, KeyboardInterrupt):
            console.print("\nExiting console.")
            break

        if not process_command(state, cmd):
            console.print("Exiting console.")
            break

        _render(state)

    sys.exit(0)
