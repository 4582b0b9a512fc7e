"""Shared fixtures for peripheral tests."""

import pytest

from mock_spi.peripheral.mock import MockSpiPeripheral


@pytest.fixture
def log_records():
    """List that collects (level, message) pairs from the peripheral."""
    return []


@pytest.fixture
def make_peripheral(log_records):
    """Factory fixture: returns a function that creates a fresh peripheral."""
    def _make() -> MockSpiPeripheral:
        return MockSpiPeripheral(log_fn=lambda level, msg: log_records.append((level, msg)))
    return _make


@pytest.fixture
def xfer():
    """Clock a sequence of bytes, return the list of responses."""
    def _xfer(dev: MockSpiPeripheral, *data: int) -> list[int]:
        return [dev.transfer(b) for b in data]
    return _xfer
