"""Arithmetic and logic operations of the CPU, acting on the register file."""

from boycolor.registers import C_FLAG, H_FLAG, N_FLAG, Z_FLAG, Registers


def add16(regs: Registers, a: int, b: int) -> int:
    """Add two 16-bit values, updating N, H and C; Z is left untouched."""
    r = a + b
    regs.set_flag(N_FLAG, False)
    regs.set_flag(H_FLAG, (a & 0x0FFF) + (b & 0x0FFF) > 0x0FFF)
    regs.set_flag(C_FLAG, r > 0xFFFF)
    return r & 0xFFFF


def add16_signed(regs: Registers, a: int, s: int) -> int:
    """Add a signed byte to a 16-bit value; flags come from the low byte."""
    signed = ((s & 0xFF) ^ 0x80) - 0x80
    b = signed & 0xFFFF
    regs.set_flag(Z_FLAG | N_FLAG, False)
    regs.set_flag(H_FLAG, (a & 0x000F) + (b & 0x000F) > 0x000F)
    regs.set_flag(C_FLAG, (a & 0x00FF) + (b & 0x00FF) > 0x00FF)
    return (a + b) & 0xFFFF


def add(regs: Registers, b: int, with_carry: bool) -> None:
    """Add ``b`` (and the carry if ``with_carry``) to register A."""
    a = regs.a
    c = 1 if with_carry and regs.flag(C_FLAG) else 0
    r = a + b + c
    regs.set_flag(Z_FLAG, r & 0xFF == 0)
    regs.set_flag(N_FLAG, False)
    regs.set_flag(H_FLAG, (a & 0x0F) + (b & 0x0F) + c > 0x0F)
    regs.set_flag(C_FLAG, r > 0xFF)
    regs.a = r & 0xFF


def sub(regs: Registers, b: int, with_carry: bool) -> None:
    """Subtract ``b`` (and the carry if ``with_carry``) from register A."""
    a = regs.a
    c = 1 if with_carry and regs.flag(C_FLAG) else 0
    r = (a - b - c) & 0xFF
    regs.set_flag(Z_FLAG, r == 0)
    regs.set_flag(N_FLAG, True)
    regs.set_flag(H_FLAG, (a & 0x0F) < (b & 0x0F) + c)
    regs.set_flag(C_FLAG, a < b + c)
    regs.a = r


def and_(regs: Registers, b: int) -> None:
    """Logical AND against register A."""
    r = regs.a & b
    regs.f = H_FLAG | (Z_FLAG if r == 0 else 0)
    regs.a = r


def or_(regs: Registers, b: int) -> None:
    """Logical OR against register A."""
    r = (regs.a | b) & 0xFF
    regs.f = Z_FLAG if r == 0 else 0
    regs.a = r


def xor(regs: Registers, b: int) -> None:
    """Logical XOR against register A."""
    r = (regs.a ^ b) & 0xFF
    regs.f = Z_FLAG if r == 0 else 0
    regs.a = r


def cp(regs: Registers, b: int) -> None:
    """Compare ``b`` with register A, setting the flags as a subtraction would."""
    a = regs.a
    sub(regs, b, False)
    regs.a = a


def _rotated(regs: Registers, result: int, carry: bool) -> int:
    result &= 0xFF
    regs.f = 0
    regs.set_flag(Z_FLAG, result == 0)
    regs.set_flag(C_FLAG, carry)
    return result


def rl(regs: Registers, v: int) -> int:
    """Rotate left through the carry flag."""
    carry = (v & 0x80) == 0x80
    return _rotated(regs, (v << 1) | (0x01 if regs.flag(C_FLAG) else 0x00), carry)


def rlc(regs: Registers, v: int) -> int:
    """Rotate left, bit 7 going both to bit 0 and to the carry flag."""
    carry = (v & 0x80) == 0x80
    return _rotated(regs, (v << 1) | (0x01 if carry else 0x00), carry)


def rr(regs: Registers, v: int) -> int:
    """Rotate right through the carry flag."""
    carry = (v & 0x01) == 0x01
    return _rotated(regs, (v >> 1) | (0x80 if regs.flag(C_FLAG) else 0x00), carry)


def rrc(regs: Registers, v: int) -> int:
    """Rotate right, bit 0 going both to bit 7 and to the carry flag."""
    carry = (v & 0x01) == 0x01
    return _rotated(regs, (v >> 1) | (0x80 if carry else 0x00), carry)