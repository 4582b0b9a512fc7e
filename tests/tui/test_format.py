"""Tests for the register and trace panel formatters."""

from mock_spi.bus.spi import TraceEntry
from mock_spi.peripheral.registers import RegisterFile
from mock_spi.tui.registers import format_registers
from mock_spi.tui.trace import format_trace


class TestFormatRegisters:
    def test_four_rows(self) -> None:
        text = format_registers(RegisterFile())
        lines = text.split("\n")
        assert len(lines) == 4
        assert lines[0].startswith("r0: 0x00")
        assert "rF: 0x00" in lines[3]

    def test_shows_values(self) -> None:
        rf = RegisterFile()
        rf.write(0x0A, 0xBE)
        assert "rA: 0xBE" in format_registers(rf)

    def test_highlights_changes(self) -> None:
        rf = RegisterFile()
        prev = rf.snapshot()
        rf.write(5, 0x01)
        text = format_registers(rf, prev)
        assert "[bold yellow]r5: 0x01[/bold yellow]" in text
        assert text.count("[bold yellow]") == 1

    def test_no_highlight_without_previous(self) -> None:
        rf = RegisterFile()
        rf.write(5, 0x01)
        assert "[bold yellow]" not in format_registers(rf)


class TestFormatTrace:
    def test_empty(self) -> None:
        assert format_trace([]) == "(no traffic)"

    def test_entries(self) -> None:
        text = format_trace([
            TraceEntry("xfer", mosi=0x01, miso=0x00),
            TraceEntry("end"),
            TraceEntry("reset"),
        ])
        lines = text.split("\n")
        assert lines[0] == "MOSI 0x01 -> MISO 0x00"
        assert "CS deasserted" in lines[1]
        assert "reset" in lines[2]

    def test_keeps_most_recent(self) -> None:
        entries = [TraceEntry("xfer", mosi=i, miso=0) for i in range(20)]
        lines = format_trace(entries, num_rows=3).split("\n")
        assert lines == [
            "MOSI 0x11 -> MISO 0x00",
            "MOSI 0x12 -> MISO 0x00",
            "MOSI 0x13 -> MISO 0x00",
        ]
