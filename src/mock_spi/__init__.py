"""Deterministic SPI peripheral emulator."""

__version__ = "0.1.0"
