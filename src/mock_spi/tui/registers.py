"""TUI register display: the 16-entry register file with change highlighting."""

from __future__ import annotations

from ..peripheral.registers import REGISTER_FILE_SIZE, RegisterFile


def format_registers(regs: RegisterFile, prev_values: list[int] | None = None) -> str:
    """Format the register file as a 4x4 grid.

    Each entry shows the register address and its hex value. Registers
    whose values changed since ``prev_values`` are wrapped in Rich markup
    ``[bold yellow]...[/bold yellow]``.

    Args:
        regs: The peripheral's register file.
        prev_values: Optional list of 16 previous values. If None, no
            highlighting is applied.

    Returns:
        A string with Rich markup suitable for display in a Rich Panel.
    """
    lines: list[str] = []
    cols = 4
    rows = REGISTER_FILE_SIZE // cols

    for row in range(rows):
        parts: list[str] = []
        for col in range(cols):
            addr = row * cols + col
            val = regs.read(addr)
            entry = f"r{addr:X}: 0x{val:02X}"
            if prev_values is not None and val != prev_values[addr]:
                entry = f"[bold yellow]{entry}[/bold yellow]"
            parts.append(entry)
        lines.append("  ".join(parts))

    return "\n".join(lines)
