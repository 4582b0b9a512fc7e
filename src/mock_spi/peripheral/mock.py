"""Mock SPI peripheral: command/response state machine behind a byte bus."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from .registers import SENTINEL, RegisterFile
from .state import (
    IDLE,
    Command,
    EchoPayload,
    Error,
    Idle,
    ReadRegAddr,
    ReadRegValue,
    State,
    WriteRegAddr,
    WriteRegValue,
)

logger = logging.getLogger(__name__)

LogFn = Callable[[int, str], None]

# Response byte for every transfer that has nothing to report
_NO_DATA = 0x00


class MockSpiPeripheral:
    """Byte-at-a-time SPI peripheral with a 16-byte register file.

    A controller clocks one byte in per ``transfer`` call and gets one
    byte back. The first byte after end-of-transaction is an opcode:

    - 0x01 echo:  payload bytes come back one transfer late
    - 0x02 write: address byte, then value byte
    - 0x03 read:  address byte, then the register value on every
      further transfer until end-of-transaction
    - other:      the device answers 0xFF until end-of-transaction

    Protocol errors never raise. They are reported through ``log_fn``,
    which receives a ``logging`` level and a message. By default
    messages go to this module's logger.
    """

    def __init__(self, log_fn: LogFn | None = None) -> None:
        self._log_fn: LogFn = log_fn if log_fn is not None else logger.log
        self._lock = threading.Lock()
        self.registers = RegisterFile()
        self._state: State = IDLE
        self.reset()

    @property
    def state(self) -> State:
        """Current transaction state."""
        return self._state

    @property
    def command(self) -> Command:
        """Command selected by the in-progress transaction."""
        return self._state.command

    @property
    def echo_pending(self) -> tuple[int, ...]:
        """Bytes queued for echo, oldest first."""
        with self._lock:
            state = self._state
            if isinstance(state, EchoPayload):
                return tuple(state.queue)
            return ()

    def transfer(self, data: int) -> int:
        """Clock one byte in and return the byte clocked out.

        ``log_fn`` is called only after the new state is committed.

        Args:
            data: Byte sent by the controller (masked to 8 bits).

        Returns:
            The response byte for this transfer.
        """
        data &= 0xFF
        log: list[tuple[int, str]] = []
        with self._lock:
            response, self._state = self._step(self._state, data, log)
        self._emit(log)
        return response

    def _step(
        self, state: State, data: int, log: list[tuple[int, str]],
    ) -> tuple[int, State]:
        """Compute (response, next_state) for one transfer.

        Messages are appended to ``log`` instead of being emitted.
        """
        if isinstance(state, Idle):
            return _NO_DATA, self._decode_command(data, log)

        if isinstance(state, EchoPayload):
            response = state.queue.popleft() if state.queue else _NO_DATA
            state.queue.append(data)
            log.append((logging.DEBUG, f"Echo: received 0x{data:02X}, returning 0x{response:02X}"))
            return response, state

        if isinstance(state, WriteRegAddr):
            log.append((logging.DEBUG, f"WriteReg: address = 0x{data:02X}"))
            return _NO_DATA, WriteRegValue(addr=data)

        if isinstance(state, WriteRegValue):
            if self.registers.in_range(state.addr):
                self.registers.write(state.addr, data)
                log.append((logging.DEBUG, f"WriteReg: registers[0x{state.addr:02X}] = 0x{data:02X}"))
            else:
                log.append((
                    logging.ERROR,
                    f"WriteReg: address 0x{state.addr:02X} out of range "
                    f"(max 0x{len(self.registers) - 1:02X})",
                ))
            return _NO_DATA, IDLE

        if isinstance(state, ReadRegAddr):
            log.append((logging.DEBUG, f"ReadReg: address = 0x{data:02X}"))
            return _NO_DATA, ReadRegValue(addr=data)

        if isinstance(state, ReadRegValue):
            if self.registers.in_range(state.addr):
                response = self.registers.read(state.addr)
                log.append((
                    logging.DEBUG,
                    f"ReadReg: returning registers[0x{state.addr:02X}] = 0x{response:02X}",
                ))
            else:
                log.append((logging.ERROR, f"ReadReg: address 0x{state.addr:02X} out of range"))
                response = SENTINEL
            return response, state

        # Error: stuck until end of transaction
        return SENTINEL, state

    @staticmethod
    def _decode_command(opcode: int, log: list[tuple[int, str]]) -> State:
        """Select the next state from an opcode byte received while idle."""
        if opcode == Command.ECHO:
            return EchoPayload()
        if opcode == Command.WRITE_REG:
            return WriteRegAddr()
        if opcode == Command.READ_REG:
            return ReadRegAddr()
        log.append((logging.ERROR, f"Unknown command byte 0x{opcode:02X}"))
        return Error(opcode=opcode)

    def end_transaction(self) -> None:
        """Return to idle, dropping any half-finished command.

        Models chip-select deassertion. Register contents are kept.
        Bytes still sitting in the echo queue are discarded: a controller
        that wants the last echoed byte must clock one extra transfer
        before ending the transaction.
        """
        with self._lock:
            previous = self._state
            self._state = IDLE
        self._emit([(
            logging.DEBUG,
            f"FinishTransmission() - was in state {type(previous).__name__}, "
            f"command {previous.command.name}",
        )])

    def reset(self) -> None:
        """Power-on reset: idle state and all registers zeroed."""
        with self._lock:
            self._state = IDLE
            self.registers.clear()
        self._emit([(logging.DEBUG, "Peripheral reset")])

    def _emit(self, log: list[tuple[int, str]]) -> None:
        for level, msg in log:
            self._log_fn(level, "[MockSpiPeripheral] " + msg)
