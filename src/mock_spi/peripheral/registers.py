"""Register file: 16 x 8-bit peripheral registers."""

REGISTER_FILE_SIZE = 16
SENTINEL = 0xFF


class RegisterFile:
    """16 byte-wide registers addressed 0x00-0x0F.

    Out-of-range reads return the 0xFF sentinel. Out-of-range writes
    are the caller's problem: ``write`` only accepts valid addresses.
    """

    def __init__(self) -> None:
        self._regs: list[int] = [0] * REGISTER_FILE_SIZE

    @staticmethod
    def in_range(addr: int) -> bool:
        """True if addr names a register."""
        return 0 <= addr < REGISTER_FILE_SIZE

    def read(self, addr: int) -> int:
        """Read register value. Out-of-range addresses return SENTINEL."""
        if not self.in_range(addr):
            return SENTINEL
        return self._regs[addr]

    def write(self, addr: int, value: int) -> None:
        """Write register value. Value masked to 8 bits.

        Raises:
            IndexError: If addr is outside 0x00-0x0F.
        """
        if not self.in_range(addr):
            raise IndexError(f"Register address 0x{addr:02X} out of range")
        self._regs[addr] = value & 0xFF

    def clear(self) -> None:
        """Zero every register."""
        for i in range(REGISTER_FILE_SIZE):
            self._regs[i] = 0

    def snapshot(self) -> list[int]:
        """Return a copy of all 16 register values."""
        return list(self._regs)

    def __len__(self) -> int:
        return REGISTER_FILE_SIZE
