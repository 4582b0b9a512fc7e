"""TUI bus trace panel: recent transfers and chip-select frames."""

from __future__ import annotations

from collections.abc import Iterable

from ..bus.spi import TraceEntry


def format_trace(entries: Iterable[TraceEntry], num_rows: int = 16) -> str:
    """Format the most recent bus events, oldest first.

    Transfers render as ``MOSI 0xNN -> MISO 0xNN``; chip-select
    deassertion and device resets render as separator lines.

    Args:
        entries: Bus trace, oldest first.
        num_rows: Maximum number of events to show.

    Returns:
        A multi-line string, or "(no traffic)" if the trace is empty.
    """
    recent = list(entries)[-num_rows:]
    if not recent:
        return "(no traffic)"

    lines: list[str] = []
    for entry in recent:
        if entry.kind == "xfer":
            lines.append(f"MOSI 0x{entry.mosi:02X} -> MISO 0x{entry.miso:02X}")
        elif entry.kind == "end":
            lines.append("---- CS deasserted ----")
        else:
            lines.append("==== device reset ====")
    return "\n".join(lines)
