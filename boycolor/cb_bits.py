"""Bit test, reset and set instructions of the CB-prefixed opcode page (0x40-0xFF)."""

from boycolor.bus import Bus
from boycolor.cb_shift import (
    MEMORY_CYCLES,
    REGISTER_CYCLES,
    REGISTER_OPERANDS,
    execute_shift,
)
from boycolor.registers import H_FLAG, N_FLAG, Z_FLAG, Registers

# BIT b, (HL) only reads memory, so it is cheaper than a read-modify-write.
BIT_MEMORY_CYCLES = 3


def _check_index(index: int) -> None:
    if not 0 <= index <= 7:
        raise ValueError(f"bit index {index} is outside 0-7")


def bit(regs: Registers, index: int, v: int) -> None:
    """Set Z if bit ``index`` of ``v`` is clear; N is cleared, H set, C kept."""
    _check_index(index)
    regs.set_flag(N_FLAG, False)
    regs.set_flag(H_FLAG, True)
    regs.set_flag(Z_FLAG, v & (1 << index) == 0)


def res(index: int, v: int) -> int:
    """Return ``v`` with bit ``index`` cleared."""
    _check_index(index)
    return v & ~(1 << index) & 0xFF


def set_bit(index: int, v: int) -> int:
    """Return ``v`` with bit ``index`` set."""
    _check_index(index)
    return (v | (1 << index)) & 0xFF


def execute_cb(regs: Registers, bus: Bus, opcode: int) -> int:
    """Run any CB-prefixed opcode and return the machine cycles it took."""
    if not 0x00 <= opcode <= 0xFF:
        raise ValueError(f"0x{opcode:X} is not a byte-sized CB opcode")
    if opcode < 0x40:
        return execute_shift(regs, bus, opcode)

    group = opcode >> 6
    index = (opcode >> 3) & 0x07
    target = REGISTER_OPERANDS[opcode & 0x07]

    if group == 1:
        if target is None:
            bit(regs, index, bus.read_byte(regs.hl()))
            return BIT_MEMORY_CYCLES
        bit(regs, index, getattr(regs, target))
        return REGISTER_CYCLES

    operation = res if group == 2 else set_bit
    if target is None:
        address = regs.hl()
        bus.write_byte(address, operation(index, bus.read_byte(address)))
        return MEMORY_CYCLES
    setattr(regs, target, operation(index, getattr(regs, target)))
    return REGISTER_CYCLES