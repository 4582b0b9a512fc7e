"""Transaction state: one variant per protocol state.

Each variant carries only the scratch data that is meaningful while the
machine is in that state, so a stale address from a previous command can
never leak into the next one.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum


class Command(IntEnum):
    """Opcode byte that starts a transaction."""

    NONE = 0x00
    ECHO = 0x01
    WRITE_REG = 0x02
    READ_REG = 0x03


@dataclass(frozen=True)
class Idle:
    """Waiting for an opcode byte."""

    command = Command.NONE


@dataclass
class EchoPayload:
    """Echoing payload bytes back one transfer late."""

    queue: deque[int] = field(default_factory=deque)
    command = Command.ECHO


@dataclass(frozen=True)
class WriteRegAddr:
    """Next byte is the register address to write."""

    command = Command.WRITE_REG


@dataclass(frozen=True)
class WriteRegValue:
    """Next byte is the value for ``addr``."""

    addr: int
    command = Command.WRITE_REG


@dataclass(frozen=True)
class ReadRegAddr:
    """Next byte is the register address to read."""

    command = Command.READ_REG


@dataclass(frozen=True)
class ReadRegValue:
    """Every further transfer returns the value at ``addr``."""

    addr: int
    command = Command.READ_REG


@dataclass(frozen=True)
class Error:
    """Unknown opcode received. Terminal until end of transaction or reset."""

    opcode: int
    command = Command.NONE


State = Idle | EchoPayload | WriteRegAddr | WriteRegValue | ReadRegAddr | ReadRegValue | Error

IDLE = Idle()
