"""The memory bus seen by the CPU, and a flat 64 KiB implementation of it."""

from typing import Protocol, runtime_checkable

ADDRESS_SPACE = 0x10000
IF_ADDRESS = 0xFF0F
IE_ADDRESS = 0xFFFF


@runtime_checkable
class Bus(Protocol):
    """What the CPU needs from the memory it runs against."""

    def read_byte(self, address: int) -> int: ...

    def write_byte(self, address: int, value: int) -> None: ...

    def read_word(self, address: int) -> int: ...

    def write_word(self, address: int, value: int) -> None: ...

    def interrupt_enable(self) -> int: ...

    def interrupt_flag(self) -> int: ...

    def set_interrupt_flag(self, value: int) -> None: ...

    def step(self, clock_cycles: int) -> int: ...


class FlatMemory:
    """A plain 64 KiB address space with no banking or memory-mapped devices.

    The interrupt enable register lives at 0xFFFF and the interrupt flag
    register at 0xFF0F, as on the real machine.
    """

    def __init__(self, data: bytes = b"") -> None:
        if len(data) > ADDRESS_SPACE:
            raise ValueError(
                f"initial data of {len(data)} bytes does not fit in 64 KiB"
            )
        self._memory = bytearray(ADDRESS_SPACE)
        self._memory[: len(data)] = data

    def read_byte(self, address: int) -> int:
        return self._memory[address & 0xFFFF]

    def write_byte(self, address: int, value: int) -> None:
        self._memory[address & 0xFFFF] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read a little-endian word; the address wraps around at 0xFFFF."""
        low = self.read_byte(address)
        high = self.read_byte(address + 1)
        return (high << 8) | low

    def write_word(self, address: int, value: int) -> None:
        """Write a little-endian word; the address wraps around at 0xFFFF."""
        self.write_byte(address, value & 0xFF)
        self.write_byte(address + 1, (value >> 8) & 0xFF)

    def interrupt_enable(self) -> int:
        return self.read_byte(IE_ADDRESS)

    def interrupt_flag(self) -> int:
        return self.read_byte(IF_ADDRESS)

    def set_interrupt_flag(self, value: int) -> None:
        self.write_byte(IF_ADDRESS, value)

    def step(self, clock_cycles: int) -> int:
        """Advance the (absent) devices; the elapsed clock cycles are returned."""
        return clock_cycles