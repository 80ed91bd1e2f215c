"""Emulation of the Sharp LR35902 processor of the Game Boy."""

import logging
from collections.abc import Callable

from boycolor import alu
from boycolor.bus import Bus
from boycolor.cb_bits import execute_cb
from boycolor.cb_shift import REGISTER_OPERANDS
from boycolor.registers import C_FLAG, H_FLAG, N_FLAG, Z_FLAG, Registers

logger = logging.getLogger(__name__)

CPU_CLOCK_SPEED = 4_194_304
"""The CPU clock speed of the original Game Boy, in Hz."""

# Interrupt vectors in order of priority: V-Blank, LCD STAT, timer, serial, joypad.
INTERRUPT_VECTORS = (0x40, 0x48, 0x50, 0x58, 0x60)

# Register pairs selected by bits 4-5 of arithmetic/load opcodes and of PUSH/POP.
ARITHMETIC_PAIRS = ("bc", "de", "hl", "sp")
STACK_PAIRS = ("bc", "de", "hl", "af")

_HL_OPERAND = 6

_POST_BIOS_IO = (
    (0xFF10, 0x80),
    (0xFF11, 0xBF),
    (0xFF12, 0xF3),
    (0xFF14, 0xBF),
    (0xFF16, 0x3F),
    (0xFF19, 0xBF),
    (0xFF1A, 0x7F),
    (0xFF1B, 0xFF),
    (0xFF1C, 0x9F),
    (0xFF1E, 0xBF),
    (0xFF20, 0xFF),
    (0xFF23, 0xBF),
    (0xFF24, 0x77),
    (0xFF25, 0xF3),
    (0xFF26, 0xF1),
    (0xFF40, 0x91),
    (0xFF47, 0xFC),
    (0xFF48, 0xFF),
    (0xFF49, 0xFF),
)


def _signed(b: int) -> int:
    return ((b & 0xFF) ^ 0x80) - 0x80


class Cpu:
    """CPU state and instruction execution over a memory bus."""

    def __init__(self, mem: Bus) -> None:
        self.mem = mem
        self.regs = Registers()
        self.halted = False
        self.ime = True
        self.if_reg_before_halt = 0x00
        self.opcode = 0x00
        self._cycles = 0

    def cycles(self) -> int:
        """Machine cycles spent executing instructions since creation."""
        return self._cycles

    def post_bios(self) -> None:
        """Put the CPU and I/O registers in the state the boot ROM leaves them."""
        self.regs.set_af(0x01B0)
        self.regs.set_bc(0x0013)
        self.regs.set_de(0x00D8)
        self.regs.set_hl(0x014D)
        self.regs.pc = 0x100
        self.regs.sp = 0xFFFE
        for address, value in _POST_BIOS_IO:
            self.mem.write_byte(address, value)

    def step(self) -> int:
        """Advance the machine by one instruction; return the clock cycles spent."""
        return self.mem.step(self._cpu_step() * 4)

    def execute(self, opcode: int) -> int:
        """Run an already fetched opcode and return its machine cycles."""
        if not 0x00 <= opcode <= 0xFF:
            raise ValueError(f"0x{opcode:X} is not a byte-sized opcode")
        self.opcode = opcode
        return _DISPATCH[opcode](self)

    def call_cb(self) -> int:
        """Fetch and run the opcode following a 0xCB prefix."""
        self.opcode = self._fetch_byte()
        return execute_cb(self.regs, self.mem, self.opcode)

    def _cpu_step(self) -> int:
        if self.halted:
            if self.if_reg_before_halt != self.mem.interrupt_flag():
                self.halted = False
            return 1
        spent = self._handle_interrupt()
        if spent:
            return spent
        spent = self.execute(self._fetch_byte())
        self._cycles += spent
        return spent

    def _handle_interrupt(self) -> int:
        if not self.ime:
            return 0
        if_reg = self.mem.interrupt_flag()
        pending = self.mem.interrupt_enable() & if_reg
        if pending == 0:
            return 0
        for bit, vector in enumerate(INTERRUPT_VECTORS):
            if pending & (1 << bit):
                self.mem.set_interrupt_flag(if_reg & ~(1 << bit) & 0xFF)
                self.ime = False
                self._call(vector)
                break
        return 4

    def _opcode_unknown(self) -> int:
        logger.warning("CPU : unknown opcode 0x%02X ; halting", self.opcode)
        self.halted = True
        return 0

    # --- helpers ---

    def _fetch_byte(self) -> int:
        b = self.mem.read_byte(self.regs.pc)
        self.regs.pc = (self.regs.pc + 1) & 0xFFFF
        return b

    def _fetch_word(self) -> int:
        w = self.mem.read_word(self.regs.pc)
        self.regs.pc = (self.regs.pc + 2) & 0xFFFF
        return w

    def _push(self, value: int) -> None:
        self.regs.sp = (self.regs.sp - 2) & 0xFFFF
        self.mem.write_word(self.regs.sp, value)

    def _pop(self) -> int:
        value = self.mem.read_word(self.regs.sp)
        self.regs.sp = (self.regs.sp + 2) & 0xFFFF
        return value

    def _call(self, address: int) -> None:
        self._push(self.regs.pc)
        self.regs.pc = address

    def _jr(self, b: int) -> int:
        self.regs.pc = (self.regs.pc + _signed(b)) & 0xFFFF
        return 3

    def _operand(self, index: int) -> int:
        name = REGISTER_OPERANDS[index]
        if name is None:
            return self.mem.read_byte(self.regs.hl())
        return getattr(self.regs, name)

    def _set_operand(self, index: int, value: int) -> None:
        name = REGISTER_OPERANDS[index]
        if name is None:
            self.mem.write_byte(self.regs.hl(), value)
        else:
            setattr(self.regs, name, value & 0xFF)

    def _pair(self, name: str) -> int:
        if name == "sp":
            return self.regs.sp
        return getattr(self.regs, name)()

    def _set_pair(self, name: str, value: int) -> None:
        value &= 0xFFFF
        if name == "sp":
            self.regs.sp = value
        elif name == "af":
            self.regs.set_af(value & 0xFFF0)
        else:
            getattr(self.regs, f"set_{name}")(value)

    def _condition(self, index: int) -> bool:
        z = self.regs.flag(Z_FLAG)
        c = self.regs.flag(C_FLAG)
        return (not z, z, not c, c)[index]

    def _inc8(self, v: int) -> int:
        r = (v + 1) & 0xFF
        self.regs.set_flag(Z_FLAG, r == 0)
        self.regs.set_flag(N_FLAG, False)
        self.regs.set_flag(H_FLAG, (v & 0x0F) == 0x0F)
        return r

    def _dec8(self, v: int) -> int:
        r = (v - 1) & 0xFF
        self.regs.set_flag(Z_FLAG, r == 0)
        self.regs.set_flag(N_FLAG, True)
        self.regs.set_flag(H_FLAG, (v & 0x0F) == 0x00)
        return r

    def _daa(self) -> None:
        regs = self.regs
        a = regs.a
        carry = regs.flag(C_FLAG)
        adjust = 0
        if not regs.flag(N_FLAG):
            if regs.flag(H_FLAG) or (a & 0x0F) > 0x09:
                adjust |= 0x06
            if carry or a > 0x99:
                adjust |= 0x60
                carry = True
            a = (a + adjust) & 0xFF
        else:
            if regs.flag(H_FLAG):
                adjust |= 0x06
            if carry:
                adjust |= 0x60
            a = (a - adjust) & 0xFF
        regs.a = a
        regs.set_flag(Z_FLAG, a == 0)
        regs.set_flag(H_FLAG, False)
        regs.set_flag(C_FLAG, carry)


Instruction = Callable[[Cpu], int]

_ALU_OPERATIONS: tuple[Callable[[Registers, int], None], ...] = (
    lambda regs, v: alu.add(regs, v, False),
    lambda regs, v: alu.add(regs, v, True),
    lambda regs, v: alu.sub(regs, v, False),
    lambda regs, v: alu.sub(regs, v, True),
    alu.and_,
    alu.xor,
    alu.or_,
    alu.cp,
)

_ACCUMULATOR_ROTATIONS: tuple[Callable[[Registers, int], int], ...] = (
    alu.rlc,
    alu.rrc,
    alu.rl,
    alu.rr,
)


def _ld_pair_nn(name: str) -> Instruction:
    def run(cpu: Cpu) -> int:
        cpu._set_pair(name, cpu._fetch_word())
        return 3

    return run


def _inc_pair(name: str, delta: int) -> Instruction:
    def run(cpu: Cpu) -> int:
        cpu._set_pair(name, cpu._pair(name) + delta)
        return 2

    return run


def _add_hl(name: str) -> Instruction:
    def run(cpu: Cpu) -> int:
        cpu.regs.set_hl(alu.add16(cpu.regs, cpu.regs.hl(), cpu._pair(name)))
        return 2

    return run


def _push(name: str) -> Instruction:
    def run(cpu: Cpu) -> int:
        cpu._push(cpu._pair(name))
        return 4

    return run


def _pop(name: str) -> Instruction:
    def run(cpu: Cpu) -> int:
        cpu._set_pair(name, cpu._pop())
        return 3

    return run


def _inc_operand(index: int, delta: int) -> Instruction:
    cycles = 3 if index == _HL_OPERAND else 1

    def run(cpu: Cpu) -> int:
        v = cpu._operand(index)
        cpu._set_operand(index, cpu._inc8(v) if delta > 0 else cpu._dec8(v))
        return cycles

    return run


def _ld_operand_n(index: int) -> Instruction:
    cycles = 3 if index == _HL_OPERAND else 2

    def run(cpu: Cpu) -> int:
        cpu._set_operand(index, cpu._fetch_byte())
        return cycles

    return run


def _ld_operands(dst: int, src: int) -> Instruction:
    cycles = 2 if _HL_OPERAND in (dst, src) else 1

    def run(cpu: Cpu) -> int:
        cpu._set_operand(dst, cpu._operand(src))
        return cycles

    return run


def _alu_operand(operation: Callable[[Registers, int], None], index: int) -> Instruction:
    cycles = 2 if index == _HL_OPERAND else 1

    def run(cpu: Cpu) -> int:
        operation(cpu.regs, cpu._operand(index))
        return cycles

    return run


def _alu_immediate(operation: Callable[[Registers, int], None]) -> Instruction:
    def run(cpu: Cpu) -> int:
        operation(cpu.regs, cpu._fetch_byte())
        return 2

    return run


def _rotate_a(rotation: Callable[[Registers, int], int]) -> Instruction:
    def run(cpu: Cpu) -> int:
        cpu.regs.a = rotation(cpu.regs, cpu.regs.a)
        cpu.regs.set_flag(Z_FLAG, False)
        return 1

    return run


def _jr_cond(cond: int) -> Instruction:
    def run(cpu: Cpu) -> int:
        b = cpu._fetch_byte()
        return cpu._jr(b) if cpu._condition(cond) else 2

    return run


def _jp_cond(cond: int) -> Instruction:
    def run(cpu: Cpu) -> int:
        address = cpu._fetch_word()
        if cpu._condition(cond):
            cpu.regs.pc = address
            return 4
        return 3

    return run


def _call_cond(cond: int) -> Instruction:
    def run(cpu: Cpu) -> int:
        address = cpu._fetch_word()
        if cpu._condition(cond):
            cpu._call(address)
            return 6
        return 3

    return run


def _ret_cond(cond: int) -> Instruction:
    def run(cpu: Cpu) -> int:
        if cpu._condition(cond):
            cpu.regs.pc = cpu._pop()
            return 5
        return 2

    return run


def _rst(vector: int) -> Instruction:
    def run(cpu: Cpu) -> int:
        cpu._call(vector)
        return 4

    return run


def _store_a(pair: str, delta: int = 0) -> Instruction:
    def run(cpu: Cpu) -> int:
        address = cpu._pair(pair)
        cpu.mem.write_byte(address, cpu.regs.a)
        if delta:
            cpu._set_pair(pair, address + delta)
        return 2

    return run


def _load_a(pair: str, delta: int = 0) -> Instruction:
    def run(cpu: Cpu) -> int:
        address = cpu._pair(pair)
        cpu.regs.a = cpu.mem.read_byte(address)
        if delta:
            cpu._set_pair(pair, address + delta)
        return 2

    return run


def _nop(cpu: Cpu) -> int:
    return 1


def _ld_nnm_sp(cpu: Cpu) -> int:
    cpu.mem.write_word(cpu._fetch_word(), cpu.regs.sp)
    return 5


def _stop(cpu: Cpu) -> int:
    cpu._fetch_byte()
    cpu.if_reg_before_halt = cpu.mem.interrupt_flag()
    cpu.halted = True
    return 1


def _halt(cpu: Cpu) -> int:
    cpu.if_reg_before_halt = cpu.mem.interrupt_flag()
    cpu.halted = True
    return 1


def _jr_n(cpu: Cpu) -> int:
    return cpu._jr(cpu._fetch_byte())


def _daa(cpu: Cpu) -> int:
    cpu._daa()
    return 1


def _cpl(cpu: Cpu) -> int:
    cpu.regs.a = ~cpu.regs.a & 0xFF
    cpu.regs.set_flag(N_FLAG | H_FLAG, True)
    return 1


def _scf(cpu: Cpu) -> int:
    cpu.regs.set_flag(N_FLAG | H_FLAG, False)
    cpu.regs.set_flag(C_FLAG, True)
    return 1


def _ccf(cpu: Cpu) -> int:
    carry = cpu.regs.flag(C_FLAG)
    cpu.regs.set_flag(N_FLAG | H_FLAG, False)
    cpu.regs.set_flag(C_FLAG, not carry)
    return 1


def _jp_nn(cpu: Cpu) -> int:
    cpu.regs.pc = cpu._fetch_word()
    return 4


def _jp_hl(cpu: Cpu) -> int:
    cpu.regs.pc = cpu.regs.hl()
    return 1


def _call_nn(cpu: Cpu) -> int:
    cpu._call(cpu._fetch_word())
    return 6


def _ret(cpu: Cpu) -> int:
    cpu.regs.pc = cpu._pop()
    return 4


def _reti(cpu: Cpu) -> int:
    cpu.regs.pc = cpu._pop()
    cpu.ime = True
    return 4


def _call_cb(cpu: Cpu) -> int:
    return cpu.call_cb()


def _ldh_n_a(cpu: Cpu) -> int:
    cpu.mem.write_byte(0xFF00 + cpu._fetch_byte(), cpu.regs.a)
    return 3


def _ldh_a_n(cpu: Cpu) -> int:
    cpu.regs.a = cpu.mem.read_byte(0xFF00 + cpu._fetch_byte())
    return 3


def _ldh_c_a(cpu: Cpu) -> int:
    cpu.mem.write_byte(0xFF00 + cpu.regs.c, cpu.regs.a)
    return 2


def _ldh_a_c(cpu: Cpu) -> int:
    cpu.regs.a = cpu.mem.read_byte(0xFF00 + cpu.regs.c)
    return 2


def _add_sp_n(cpu: Cpu) -> int:
    cpu.regs.sp = alu.add16_signed(cpu.regs, cpu.regs.sp, cpu._fetch_byte())
    return 4


def _ldhl_sp_n(cpu: Cpu) -> int:
    cpu.regs.set_hl(alu.add16_signed(cpu.regs, cpu.regs.sp, cpu._fetch_byte()))
    return 3


def _ld_sp_hl(cpu: Cpu) -> int:
    cpu.regs.sp = cpu.regs.hl()
    return 2


def _ld_nnm_a(cpu: Cpu) -> int:
    cpu.mem.write_byte(cpu._fetch_word(), cpu.regs.a)
    return 4


def _ld_a_nnm(cpu: Cpu) -> int:
    cpu.regs.a = cpu.mem.read_byte(cpu._fetch_word())
    return 4


def _di(cpu: Cpu) -> int:
    cpu.ime = False
    return 1


def _ei(cpu: Cpu) -> int:
    cpu.ime = True
    return 1


def _build_dispatch() -> list[Instruction]:
    table: list[Instruction] = [Cpu._opcode_unknown] * 256

    for i, name in enumerate(ARITHMETIC_PAIRS):
        table[0x01 + 16 * i] = _ld_pair_nn(name)
        table[0x03 + 16 * i] = _inc_pair(name, 1)
        table[0x09 + 16 * i] = _add_hl(name)
        table[0x0B + 16 * i] = _inc_pair(name, -1)
    for i, name in enumerate(STACK_PAIRS):
        table[0xC1 + 16 * i] = _pop(name)
        table[0xC5 + 16 * i] = _push(name)

    for index in range(8):
        table[0x04 + 8 * index] = _inc_operand(index, 1)
        table[0x05 + 8 * index] = _inc_operand(index, -1)
        table[0x06 + 8 * index] = _ld_operand_n(index)
        for src in range(8):
            table[0x40 + 8 * index + src] = _ld_operands(index, src)
        table[0xC7 + 8 * index] = _rst(8 * index)

    for op_index, operation in enumerate(_ALU_OPERATIONS):
        for src in range(8):
            table[0x80 + 8 * op_index + src] = _alu_operand(operation, src)
        table[0xC6 + 8 * op_index] = _alu_immediate(operation)

    for i, rotation in enumerate(_ACCUMULATOR_ROTATIONS):
        table[0x07 + 8 * i] = _rotate_a(rotation)

    for cond in range(4):
        table[0x20 + 8 * cond] = _jr_cond(cond)
        table[0xC0 + 8 * cond] = _ret_cond(cond)
        table[0xC2 + 8 * cond] = _jp_cond(cond)
        table[0xC4 + 8 * cond] = _call_cond(cond)

    table[0x00] = _nop
    table[0x02] = _store_a("bc")
    table[0x08] = _ld_nnm_sp
    table[0x0A] = _load_a("bc")
    table[0x10] = _stop
    table[0x12] = _store_a("de")
    table[0x18] = _jr_n
    table[0x1A] = _load_a("de")
    table[0x22] = _store_a("hl", 1)
    table[0x27] = _daa
    table[0x2A] = _load_a("hl", 1)
    table[0x2F] = _cpl
    table[0x32] = _store_a("hl", -1)
    table[0x37] = _scf
    table[0x3A] = _load_a("hl", -1)
    table[0x3F] = _ccf
    table[0x76] = _halt
    table[0xC3] = _jp_nn
    table[0xC9] = _ret
    table[0xCB] = _call_cb
    table[0xCD] = _call_nn
    table[0xD9] = _reti
    table[0xE0] = _ldh_n_a
    table[0xE2] = _ldh_c_a
    table[0xE8] = _add_sp_n
    table[0xE9] = _jp_hl
    table[0xEA] = _ld_nnm_a
    table[0xF0] = _ldh_a_n
    table[0xF2] = _ldh_a_c
    table[0xF3] = _di
    table[0xF8] = _ldhl_sp_n
    table[0xF9] = _ld_sp_hl
    table[0xFA] = _ld_a_nnm
    table[0xFB] = _ei

    for unknown in (0xD3, 0xDB, 0xDD, 0xE3, 0xE4, 0xEB, 0xEC, 0xED, 0xF4, 0xFC, 0xFD):
        table[unknown] = Cpu._opcode_unknown
    return table


_DISPATCH = _build_dispatch()