import itertools

import pytest

from boycolor.bus import FlatMemory
from boycolor.cb_bits import bit, execute_cb, res, set_bit
from boycolor.registers import C_FLAG, H_FLAG, N_FLAG, Z_FLAG, Registers

REGISTER_CODES = {"b": 0, "c": 1, "d": 2, "e": 3, "h": 4, "l": 5, "a": 7}
BITS = range(8)
REG_CASES = list(itertools.product(BITS, REGISTER_CODES.items()))


def _machine():
    return Registers(), FlatMemory()


@pytest.mark.parametrize("index, reg", REG_CASES)
def test_bit_register(index, reg):
    name, code = reg
    opcode = 0x40 | (index << 3) | code

    regs, bus = _machine()
    regs.set_flag(N_FLAG, True)
    setattr(regs, name, 1 << index)
    assert execute_cb(regs, bus, opcode) == 2
    assert regs.f == H_FLAG

    regs, bus = _machine()
    regs.set_flag(N_FLAG, True)
    setattr(regs, name, 0)
    assert execute_cb(regs, bus, opcode) == 2
    assert regs.f == Z_FLAG | H_FLAG


@pytest.mark.parametrize(
    "opcode, index",
    [(0x46, 0), (0x4E, 1), (0x56, 2), (0x5E, 3), (0x66, 4), (0x6E, 5), (0x76, 6), (0x7E, 7)],
)
def test_bit_hlm(opcode, index):
    regs, bus = _machine()
    regs.set_flag(N_FLAG, True)
    regs.set_hl(0x3B7F)
    bus.write_byte(0x3B7F, 1 << index)
    assert execute_cb(regs, bus, opcode) == 3
    assert regs.f == H_FLAG

    regs, bus = _machine()
    regs.set_flag(N_FLAG, True)
    regs.set_hl(0x3B7F)
    bus.write_byte(0x3B7F, 0)
    assert execute_cb(regs, bus, opcode) == 3
    assert regs.f == Z_FLAG | H_FLAG


def test_bit_keeps_carry():
    regs = Registers(f=C_FLAG | N_FLAG)
    bit(regs, 3, 0x00)
    assert regs.f == Z_FLAG | H_FLAG | C_FLAG


@pytest.mark.parametrize("index, reg", REG_CASES)
def test_res_register(index, reg):
    name, code = reg
    opcode = 0x80 | (index << 3) | code

    regs, bus = _machine()
    setattr(regs, name, 1 << index)
    assert execute_cb(regs, bus, opcode) == 2
    assert getattr(regs, name) == 0

    regs, bus = _machine()
    setattr(regs, name, 0xFF)
    assert execute_cb(regs, bus, opcode) == 2
    assert getattr(regs, name) == 0xFF ^ (1 << index)


@pytest.mark.parametrize(
    "opcode, index",
    [(0x86, 0), (0x8E, 1), (0x96, 2), (0x9E, 3), (0xA6, 4), (0xAE, 5), (0xB6, 6), (0xBE, 7)],
)
def test_res_hlm(opcode, index):
    regs, bus = _machine()
    regs.set_hl(0xB9E2)
    bus.write_byte(0xB9E2, 1 << index)
    assert execute_cb(regs, bus, opcode) == 4
    assert bus.read_byte(0xB9E2) == 0

    regs, bus = _machine()
    regs.set_hl(0xB9E2)
    bus.write_byte(0xB9E2, 0xFF)
    assert execute_cb(regs, bus, opcode) == 4
    assert bus.read_byte(0xB9E2) == 0xFF ^ (1 << index)


@pytest.mark.parametrize("index, reg", REG_CASES)
def test_set_register(index, reg):
    name, code = reg
    opcode = 0xC0 | (index << 3) | code
    regs, bus = _machine()
    assert execute_cb(regs, bus, opcode) == 2
    assert getattr(regs, name) == 1 << index


@pytest.mark.parametrize(
    "opcode, index",
    [(0xC6, 0), (0xCE, 1), (0xD6, 2), (0xDE, 3), (0xE6, 4), (0xEE, 5), (0xF6, 6), (0xFE, 7)],
)
def test_set_hlm(opcode, index):
    regs, bus = _machine()
    regs.set_hl(0xCF3A)
    assert execute_cb(regs, bus, opcode) == 4
    assert bus.read_byte(0xCF3A) == 1 << index


def test_set_and_res_leave_flags_alone():
    regs, bus = _machine()
    regs.f = Z_FLAG | C_FLAG
    execute_cb(regs, bus, 0xC7)
    execute_cb(regs, bus, 0x80)
    assert regs.f == Z_FLAG | C_FLAG
    assert regs.a == 0x01


def test_res_and_set_values():
    assert res(7, 0xFF) == 0x7F
    assert res(0, 0x00) == 0x00
    assert set_bit(4, 0x00) == 0x10
    assert set_bit(0, 0xFF) == 0xFF


@pytest.mark.parametrize("index", [-1, 8])
def test_bad_bit_index(index):
    with pytest.raises(ValueError):
        res(index, 0)
    with pytest.raises(ValueError):
        set_bit(index, 0)
    with pytest.raises(ValueError):
        bit(Registers(), index, 0)


def test_shift_page_is_delegated():
    regs, bus = _machine()
    regs.f = N_FLAG | H_FLAG | C_FLAG
    regs.b = 0b_0010_0101
    assert execute_cb(regs, bus, 0x10) == 2
    assert regs.b == 0b_0100_1011
    assert regs.f == 0


def test_swap_hlm_through_cb_page():
    regs, bus = _machine()
    regs.f = Z_FLAG | N_FLAG | H_FLAG | C_FLAG
    regs.set_hl(0x29DA)
    bus.write_byte(0x29DA, 0b_0110_1100)
    assert execute_cb(regs, bus, 0x36) == 4
    assert bus.read_byte(0x29DA) == 0b_1100_0110
    assert regs.f == 0


@pytest.mark.parametrize("opcode", [-1, 0x100])
def test_out_of_range_opcode(opcode):
    regs, bus = _machine()
    with pytest.raises(ValueError):
        execute_cb(regs, bus, opcode)