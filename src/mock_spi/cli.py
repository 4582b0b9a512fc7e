"""Command-line interface for the mock SPI peripheral."""

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from .bus.spi import SpiBus
from .driver.mock_spi import MockSpiDriver
from .peripheral.mock import MockSpiPeripheral
from .tui.console import make_console_state, process_command

# Self-test values (register write/read-back and echo payload)
DEMO_REG_ADDR = 0x03
DEMO_REG_VALUE = 0xAB
DEMO_ECHO = bytes([0x11, 0x22, 0x33])


def _hex(data: bytes) -> str:
    return "[" + " ".join(f"{b:02X}" for b in data) + "]"


def _setup_logging(verbose: bool) -> None:
    """Route peripheral log output through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def main() -> None:
    """Entry point for the mock SPI CLI."""
    parser = argparse.ArgumentParser(description="Mock SPI peripheral")
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every transfer (peripheral log level DEBUG)",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("demo", help="Run the driver self-test against the peripheral")

    run_parser = sub.add_parser("run", help="Run console commands from a script file")
    run_parser.add_argument("script", help="Path to a file of console commands")

    sub.add_parser("console", help="Interactive bus console")

    args = parser.parse_args()
    _setup_logging(args.verbose)

    if args.command == "demo":
        sys.exit(run_demo())
    elif args.command == "run":
        run_script(args.script)
    elif args.command == "console":
        from .tui import run_console
        run_console()
    else:
        parser.print_help()
        sys.exit(1)


def run_demo() -> int:
    """Write/read-back and echo self-test through the driver.

    Returns:
        0 if every check passed, 1 otherwise.
    """
    dev = MockSpiDriver(SpiBus(MockSpiPeripheral()))
    failed = False

    dev.write_reg(DEMO_REG_ADDR, DEMO_REG_VALUE)
    value = dev.read_reg(DEMO_REG_ADDR)
    if value == DEMO_REG_VALUE:
        print(
            f"[PASS] write_reg / read_reg: wrote 0x{DEMO_REG_VALUE:02X}, "
            f"read back 0x{value:02X}"
        )
    else:
        print(f"[FAIL] read_reg: expected 0x{DEMO_REG_VALUE:02X}, got 0x{value:02X}")
        failed = True

    echoed = dev.echo(DEMO_ECHO)
    verdict = "[PASS]" if echoed == DEMO_ECHO else "[FAIL]"
    print(f"echo sent {_hex(DEMO_ECHO)}, got back {_hex(echoed)} {verdict}")
    failed = failed or echoed != DEMO_ECHO

    print("All tests finished.")
    return 1 if failed else 0


def run_script(path: str) -> None:
    """Feed each command line of a script file to the bus console.

    Blank lines and lines starting with '#' are skipped. The console's
    message after each command is printed. A 'q' line stops early.

    Args:
        path: Path to the script file.
    """
    try:
        with open(path) as f:
            lines = f.read().splitlines()
    except OSError as e:
        print(f"Error: cannot read '{path}': {e}", file=sys.stderr)
        sys.exit(1)

    state = make_console_state()
    for line in lines:
        cmd = line.strip()
        if not cmd or cmd.startswith("#"):
            continue
        if not process_command(state, cmd):
            break
        print(f"> {cmd}")
        print(state.message)
