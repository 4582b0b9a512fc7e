"""Tests for the bus console controller."""

from mock_spi.driver.mock_spi import MAX_ECHO_LEN
from mock_spi.peripheral.state import EchoPayload, Error, Idle, ReadRegValue
from mock_spi.tui.console import HELP_TEXT, make_console_state, process_command


class TestRawTransfers:
    def test_x_clocks_bytes_with_cs_asserted(self) -> None:
        state = make_console_state()
        assert process_command(state, "x 01 aa bb") is True
        assert state.bus.selected
        assert isinstance(state.peripheral.state, EchoPayload)
        assert "received 00 00 AA" in state.message

    def test_x_spans_commands_until_end(self) -> None:
        state = make_console_state()
        process_command(state, "x 03 05")
        process_command(state, "x 00")
        assert isinstance(state.peripheral.state, ReadRegValue)
        process_command(state, "e")
        assert isinstance(state.peripheral.state, Idle)
        assert not state.bus.selected

    def test_x_without_bytes(self) -> None:
        state = make_console_state()
        process_command(state, "x")
        assert "Usage" in state.message

    def test_invalid_hex(self) -> None:
        state = make_console_state()
        process_command(state, "x zz")
        assert "Invalid byte" in state.message
        assert len(state.bus.trace) == 0

    def test_value_too_large(self) -> None:
        state = make_console_state()
        process_command(state, "x 100")
        assert "Invalid byte" in state.message

    def test_bad_opcode_is_logged(self) -> None:
        state = make_console_state()
        process_command(state, "x 42")
        assert isinstance(state.peripheral.state, Error)
        assert any("ERROR" in line and "0x42" in line for line in state.log_lines)


class TestDriverCommands:
    def test_write_and_read(self) -> None:
        state = make_console_state()
        process_command(state, "w 3 ab")
        assert state.peripheral.registers.read(3) == 0xAB
        process_command(state, "r 3")
        assert state.message == "Register 0x03 = 0xAB"

    def test_write_tracks_previous_registers(self) -> None:
        state = make_console_state()
        process_command(state, "w 1 11")
        process_command(state, "w 1 22")
        assert state.prev_regs[1] == 0x11

    def test_driver_command_ends_open_transaction(self) -> None:
        """A half-finished raw transaction doesn't corrupt driver commands."""
        state = make_console_state()
        process_command(state, "x 42")
        process_command(state, "r 0")
        assert state.message == "Register 0x00 = 0x00"

    def test_echo(self) -> None:
        state = make_console_state()
        process_command(state, "echo 11 22 33")
        assert state.message == "Echo sent 11 22 33, got back 11 22 33"

    def test_usage_messages(self) -> None:
        state = make_console_state()
        process_command(state, "w 1")
        assert "Usage: w" in state.message
        process_command(state, "r")
        assert "Usage: r" in state.message
        process_command(state, "echo")
        assert "Usage: echo" in state.message

    def test_echo_too_long(self) -> None:
        """An oversized echo payload is reported, not raised, and nothing is sent."""
        state = make_console_state()
        assert process_command(state, "echo " + " ".join(["11"] * (MAX_ECHO_LEN + 1))) is True
        assert state.message == f"Echo payload too long: {MAX_ECHO_LEN + 1} bytes (max {MAX_ECHO_LEN})"
        assert not state.bus.trace
        assert isinstance(state.peripheral.state, Idle)


class TestSessionCommands:
    def test_reset(self) -> None:
        state = make_console_state()
        process_command(state, "w 0 ff")
        process_command(state, "reset")
        assert state.peripheral.registers.read(0) == 0
        assert state.prev_regs[0] == 0xFF

    def test_help(self) -> None:
        state = make_console_state()
        process_command(state, "help")
        assert state.message == HELP_TEXT

    def test_empty_shows_help(self) -> None:
        state = make_console_state()
        process_command(state, "   ")
        assert state.message == HELP_TEXT

    def test_unknown(self) -> None:
        state = make_console_state()
        assert process_command(state, "frobnicate") is True
        assert "Unknown command: frobnicate" in state.message

    def test_quit(self) -> None:
        state = make_console_state()
        assert process_command(state, "q") is False
        assert process_command(state, "quit") is False
