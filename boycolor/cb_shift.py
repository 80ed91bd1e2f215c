"""Rotate, shift and swap instructions of the CB-prefixed opcode page (0x00-0x3F)."""

from collections.abc import Callable

from boycolor import alu
from boycolor.bus import Bus
from boycolor.registers import C_FLAG, Z_FLAG, Registers

# Operand selected by the low three bits of a CB opcode; None stands for (HL).
REGISTER_OPERANDS: tuple[str | None, ...] = ("b", "c", "d", "e", "h", "l", None, "a")

REGISTER_CYCLES = 2
MEMORY_CYCLES = 4


def _shifted(regs: Registers, result: int, carry: bool) -> int:
    result &= 0xFF
    regs.f = 0
    regs.set_flag(Z_FLAG, result == 0)
    regs.set_flag(C_FLAG, carry)
    return result


def sla(regs: Registers, v: int) -> int:
    """Shift left into the carry flag; bit 0 becomes 0."""
    return _shifted(regs, v << 1, (v & 0x80) == 0x80)


def sra(regs: Registers, v: int) -> int:
    """Shift right into the carry flag, keeping bit 7 (the sign)."""
    return _shifted(regs, (v >> 1) | (v & 0x80), (v & 0x01) == 0x01)


def srl(regs: Registers, v: int) -> int:
    """Shift right into the carry flag; bit 7 becomes 0."""
    return _shifted(regs, v >> 1, (v & 0x01) == 0x01)


def swap(regs: Registers, v: int) -> int:
    """Swap the nibbles of ``v``; N, H and C are cleared and Z is set on zero."""
    result = ((v & 0x0F) << 4) | ((v >> 4) & 0x0F)
    regs.f = Z_FLAG if result == 0 else 0
    return result


_OPERATIONS: tuple[Callable[[Registers, int], int], ...] = (
    alu.rlc,
    alu.rrc,
    alu.rl,
    alu.rr,
    sla,
    sra,
    swap,
    srl,
)


def execute_shift(regs: Registers, bus: Bus, opcode: int) -> int:
    """Run a CB-prefixed rotate/shift/swap opcode and return its machine cycles."""
    if not 0x00 <= opcode <= 0x3F:
        raise ValueError(f"0xCB{opcode:02X} is not a rotate, shift or swap opcode")
    operation = _OPERATIONS[opcode >> 3]
    target = REGISTER_OPERANDS[opcode & 0x07]
    if target is None:
        address = regs.hl()
        bus.write_byte(address, operation(regs, bus.read_byte(address)))
        return MEMORY_CYCLES
    setattr(regs, target, operation(regs, getattr(regs, target)))
    return REGISTER_CYCLES