#!/usr/bin/env python3
"""Peripheral performance profiler.

Runs micro-benchmarks of the transfer hot path and the driver-level
commands, reporting throughput.

Usage:
    uv run python scripts/bench.py                 # all benchmarks
    uv run python scripts/bench.py echo            # matching benchmarks only
    uv run python scripts/bench.py --cprofile echo # cProfile dump
"""

from __future__ import annotations

import argparse
import cProfile
import io
import pstats
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

# Add project to path so we can import without installing
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from mock_spi.bus.spi import SpiBus
from mock_spi.driver.mock_spi import MockSpiDriver
from mock_spi.peripheral.mock import MockSpiPeripheral

MICRO_N = 200_000


def _quiet_peripheral() -> MockSpiPeripheral:
    """Peripheral whose log output is dropped, keeping logging handlers out of the timings."""
    return MockSpiPeripheral(log_fn=lambda level, msg: None)


def bench_transfer_echo(n: int = MICRO_N) -> dict[str, Any]:
    """Benchmark peripheral.transfer() in the echo state."""
    dev = _quiet_peripheral()
    dev.transfer(0x01)
    start = time.perf_counter()
    for i in range(n):
        dev.transfer(i & 0xFF)
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


def bench_transfer_read(n: int = MICRO_N) -> dict[str, Any]:
    """Benchmark peripheral.transfer() in the sticky read state."""
    dev = _quiet_peripheral()
    dev.transfer(0x03)
    dev.transfer(0x05)
    start = time.perf_counter()
    for _ in range(n):
        dev.transfer(0x00)
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


def bench_bus_exchange(n: int = MICRO_N) -> dict[str, Any]:
    """Benchmark bus.exchange() (adds CS check and tracing)."""
    bus = SpiBus(_quiet_peripheral())
    bus.select()
    bus.exchange(0x01)
    start = time.perf_counter()
    for i in range(n):
        bus.exchange(i & 0xFF)
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


def bench_driver_write_read(n: int = MICRO_N // 10) -> dict[str, Any]:
    """Benchmark a driver write_reg + read_reg pair."""
    drv = MockSpiDriver(SpiBus(_quiet_peripheral()))
    start = time.perf_counter()
    for i in range(n):
        drv.write_reg(i & 0x0F, i & 0xFF)
        drv.read_reg(i & 0x0F)
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


def bench_driver_echo(n: int = MICRO_N // 100) -> dict[str, Any]:
    """Benchmark a 64-byte driver echo."""
    drv = MockSpiDriver(SpiBus(_quiet_peripheral()))
    payload = bytes(range(64))
    start = time.perf_counter()
    for _ in range(n):
        drv.echo(payload)
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


# (name, benchmark)
BENCHMARKS: list[tuple[str, Callable[[], dict[str, Any]]]] = [
    ("transfer (echo)", bench_transfer_echo),
    ("transfer (read)", bench_transfer_read),
    ("bus.exchange", bench_bus_exchange),
    ("driver write+read", bench_driver_write_read),
    ("driver echo x64", bench_driver_echo),
]


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------

def fmt_rate(ops: float) -> str:
    """Format operations per second."""
    if ops >= 1_000_000:
        return f"{ops / 1_000_000:.2f}M"
    if ops >= 1_000:
        return f"{ops / 1_000:.1f}K"
    return f"{ops:.0f}"


def print_micro_result(name: str, result: dict[str, Any]) -> None:
    """Print results for a micro-benchmark."""
    print(f"  {name:<20} {result['elapsed']:7.3f}s  "
          f"{fmt_rate(result['ops_per_sec']):>8}/s  "
          f"({result['ops']:,} ops)")


def print_cprofile_report(stats: pstats.Stats, top_n: int = 25) -> None:
    """Print a cProfile report focused on the hot path."""
    stream = io.StringIO()
    stats.stream = stream
    stats.sort_stats("tottime")
    stats.print_stats(top_n)
    print(stream.getvalue())


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="Profile the mock SPI peripheral")
    parser.add_argument("benchmark", nargs="?", default=None,
                        help="Run matching benchmarks only (substring match)")
    parser.add_argument("--cprofile", action="store_true",
                        help="Run under cProfile and print hot functions")
    args = parser.parse_args()

    if args.benchmark:
        selected = [(n, fn) for n, fn in BENCHMARKS
                    if args.benchmark.lower() in n.lower()]
        if not selected:
            print(f"No benchmark matching '{args.benchmark}'")
            print(f"Available: {', '.join(n for n, _ in BENCHMARKS)}")
            sys.exit(1)
    else:
        selected = BENCHMARKS

    print("Micro-benchmarks")
    print("-" * 65)
    for name, fn in selected:
        if args.cprofile:
            print(f"\ncProfile: {name}")
            print("=" * 65)
            pr = cProfile.Profile()
            pr.enable()
            fn()
            pr.disable()
            print_cprofile_report(pstats.Stats(pr))
        else:
            print_micro_result(name, fn())
    print()


if __name__ == "__main__":
    main()
