"""Tests for the transaction state variants."""

from mock_spi.peripheral.state import (
    IDLE,
    Command,
    EchoPayload,
    Error,
    Idle,
    ReadRegAddr,
    ReadRegValue,
    WriteRegAddr,
    WriteRegValue,
)


class TestCommandOfState:
    """Each variant reports the command it belongs to."""

    def test_idle(self) -> None:
        assert IDLE.command == Command.NONE
        assert IDLE == Idle()

    def test_echo(self) -> None:
        assert EchoPayload().command == Command.ECHO

    def test_write(self) -> None:
        assert WriteRegAddr().command == Command.WRITE_REG
        assert WriteRegValue(addr=3).command == Command.WRITE_REG

    def test_read(self) -> None:
        assert ReadRegAddr().command == Command.READ_REG
        assert ReadRegValue(addr=3).command == Command.READ_REG

    def test_error(self) -> None:
        assert Error(opcode=0x42).command == Command.NONE


class TestCommandValues:
    def test_opcode_bytes(self) -> None:
        assert Command.ECHO == 0x01
        assert Command.WRITE_REG == 0x02
        assert Command.READ_REG == 0x03

    def test_echo_queues_are_independent(self) -> None:
        """Each echo transaction gets its own queue."""
        a = EchoPayload()
        b = EchoPayload()
        a.queue.append(1)
        assert list(b.queue) == []
