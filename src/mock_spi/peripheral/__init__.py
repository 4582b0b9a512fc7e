"""Mock SPI peripheral module."""

from .mock import LogFn, MockSpiPeripheral
from .registers import REGISTER_FILE_SIZE, SENTINEL, RegisterFile
from .state import (
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

__all__ = [
    "Command",
    "EchoPayload",
    "Error",
    "Idle",
    "LogFn",
    "MockSpiPeripheral",
    "REGISTER_FILE_SIZE",
    "ReadRegAddr",
    "ReadRegValue",
    "RegisterFile",
    "SENTINEL",
    "State",
    "WriteRegAddr",
    "WriteRegValue",
]
