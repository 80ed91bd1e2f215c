"""Register file of the Game Boy CPU."""

from dataclasses import dataclass

Z_FLAG = 0x80
N_FLAG = 0x40
H_FLAG = 0x20
C_FLAG = 0x10


@dataclass
class Registers:
    """The 8-bit registers, stack pointer and program counter."""

    a: int = 0
    f: int = 0
    b: int = 0
    c: int = 0
    d: int = 0
    e: int = 0
    h: int = 0
    l: int = 0  # noqa: E741
    sp: int = 0
    pc: int = 0

    def flag(self, mask: int) -> bool:
        """Return whether any of the flags in ``mask`` is set in F."""
        return (self.f & mask) != 0

    def set_flag(self, mask: int, value: bool) -> None:
        """Set or clear every flag in ``mask``."""
        if value:
            self.f = (self.f | mask) & 0xFF
        else:
            self.f &= ~mask & 0xFF

    @staticmethod
    def _split(value: int) -> tuple[int, int]:
        value &= 0xFFFF
        return value >> 8, value & 0xFF

    def af(self) -> int:
        return (self.a << 8) | self.f

    def bc(self) -> int:
        return (self.b << 8) | self.c

    def de(self) -> int:
        return (self.d << 8) | self.e

    def hl(self) -> int:
        return (self.h << 8) | self.l

    def set_af(self, value: int) -> None:
        self.a, self.f = self._split(value)

    def set_bc(self, value: int) -> None:
        self.b, self.c = self._split(value)

    def set_de(self, value: int) -> None:
        self.d, self.e = self._split(value)

    def set_hl(self, value: int) -> None:
        self.h, self.l = self._split(value)