import pytest

from boycolor import alu
from boycolor.registers import C_FLAG, H_FLAG, N_FLAG, Z_FLAG, Registers


@pytest.mark.parametrize(
    "a, b, expected_a, expected_f",
    [
        (0x02, 0x05, 0x07, 0),
        (0x0E, 0x08, 0x16, H_FLAG),
        (0x80, 0x80, 0x00, Z_FLAG | C_FLAG),
        (0xCC, 0x88, 0x54, H_FLAG | C_FLAG),
    ],
)
def test_add(a, b, expected_a, expected_f):
    regs = Registers(a=a, f=N_FLAG)
    alu.add(regs, b, False)
    assert regs.a == expected_a
    assert regs.f == expected_f


def test_add_with_carry_uses_flag_only_when_requested():
    regs = Registers(a=0x02, f=C_FLAG)
    alu.add(regs, 0x05, False)
    plain = regs.a
    regs = Registers(a=0x02, f=C_FLAG)
    alu.add(regs, 0x05, True)
    assert regs.a == plain + 1


def test_sub_of_self_is_zero():
    regs = Registers(a=0x9A)
    alu.sub(regs, 0x9A, False)
    assert regs.a == 0
    assert regs.f == Z_FLAG | N_FLAG


def test_sub_then_add_round_trip():
    for a, b in [(0x10, 0x01), (0x05, 0x80), (0xFF, 0xFF), (0x00, 0x01)]:
        regs = Registers(a=a)
        alu.sub(regs, b, False)
        assert regs.flag(N_FLAG)
        assert regs.flag(C_FLAG) == (a < b)
        alu.add(regs, b, False)
        assert regs.a == a


def test_sub_with_carry_borrows_one_more():
    regs = Registers(a=0x20, f=C_FLAG)
    alu.sub(regs, 0x10, True)
    borrowed = regs.a
    regs = Registers(a=0x20, f=C_FLAG)
    alu.sub(regs, 0x10, False)
    assert borrowed == regs.a - 1


def test_cp_keeps_a_and_sets_flags_like_sub():
    regs = Registers(a=0x3C)
    alu.cp(regs, 0x3C)
    assert regs.a == 0x3C
    assert regs.f == Z_FLAG | N_FLAG
    regs2 = Registers(a=0x3C)
    alu.sub(regs2, 0x40, False)
    regs3 = Registers(a=0x3C)
    alu.cp(regs3, 0x40)
    assert regs3.f == regs2.f
    assert regs3.a == 0x3C


@pytest.mark.parametrize(
    "a, b, expected_a, expected_f",
    [
        (0b0101_1101, 0b1100_0111, 0b0100_0101, H_FLAG),
        (0b0101_1101, 0, 0, Z_FLAG | H_FLAG),
    ],
)
def test_and(a, b, expected_a, expected_f):
    regs = Registers(a=a, f=N_FLAG | C_FLAG)
    alu.and_(regs, b)
    assert regs.a == expected_a
    assert regs.f == expected_f


@pytest.mark.parametrize(
    "a, b, expected_a, expected_f",
    [
        (0b0101_1101, 0b1100_0111, 0b1101_1111, 0),
        (0, 0, 0, Z_FLAG),
    ],
)
def test_or(a, b, expected_a, expected_f):
    regs = Registers(a=a, f=N_FLAG | H_FLAG | C_FLAG)
    alu.or_(regs, b)
    assert regs.a == expected_a
    assert regs.f == expected_f


@pytest.mark.parametrize(
    "a, b, expected_a, expected_f",
    [
        (0b0101_1101, 0b1100_0111, 0b1001_1010, 0),
        (0b0101_1101, 0b0101_1101, 0, Z_FLAG),
    ],
)
def test_xor(a, b, expected_a, expected_f):
    regs = Registers(a=a, f=N_FLAG | H_FLAG | C_FLAG)
    alu.xor(regs, b)
    assert regs.a == expected_a
    assert regs.f == expected_f


def test_rl():
    regs = Registers(f=N_FLAG | H_FLAG | C_FLAG)
    assert alu.rl(regs, 0b0010_0101) == 0b0100_1011
    assert regs.f == 0
    regs = Registers(f=N_FLAG | H_FLAG)
    assert alu.rl(regs, 0b1000_0000) == 0
    assert regs.f == Z_FLAG | C_FLAG


def test_rlc():
    regs = Registers(f=N_FLAG | H_FLAG)
    assert alu.rlc(regs, 0b1010_0101) == 0b0100_1011
    assert regs.f == C_FLAG
    regs = Registers(f=N_FLAG | H_FLAG)
    assert alu.rlc(regs, 0) == 0
    assert regs.f == Z_FLAG


def test_rr():
    regs = Registers(f=N_FLAG | H_FLAG | C_FLAG)
    assert alu.rr(regs, 0b1010_0100) == 0b1101_0010
    assert regs.f == 0
    regs = Registers(f=N_FLAG | H_FLAG)
    assert alu.rr(regs, 0b0000_0001) == 0
    assert regs.f == Z_FLAG | C_FLAG


def test_rrc():
    regs = Registers(f=N_FLAG | H_FLAG)
    assert alu.rrc(regs, 0b1010_0101) == 0b1101_0010
    assert regs.f == C_FLAG
    regs = Registers(f=N_FLAG | H_FLAG)
    assert alu.rrc(regs, 0) == 0
    assert regs.f == Z_FLAG


def test_rlc_then_rrc_round_trip():
    for v in range(256):
        regs = Registers()
        assert alu.rrc(regs, alu.rlc(regs, v)) == v


def test_rl_then_rr_round_trip_through_carry():
    for v in range(256):
        regs = Registers()
        rotated = alu.rl(regs, v)
        assert alu.rr(regs, rotated) == v


def test_add16_keeps_zero_flag_and_wraps():
    regs = Registers(f=Z_FLAG | N_FLAG)
    result = alu.add16(regs, 0xFFFF, 0x0001)
    assert result == 0
    assert regs.flag(Z_FLAG)
    assert not regs.flag(N_FLAG)
    assert regs.flag(C_FLAG)
    assert regs.flag(H_FLAG)


def test_add16_no_carry():
    regs = Registers(f=C_FLAG | H_FLAG)
    assert alu.add16(regs, 0x1000, 0x0234) == 0x1234
    assert regs.f == 0


def test_add16_signed_negative_and_positive():
    regs = Registers(f=Z_FLAG | N_FLAG)
    assert alu.add16_signed(regs, 0xFFFE, -2) == 0xFFFC
    assert not regs.flag(Z_FLAG)
    assert not regs.flag(N_FLAG)
    regs = Registers()
    assert alu.add16_signed(regs, 0xFFFC, 2) == 0xFFFE


def test_add16_signed_accepts_unsigned_byte_form():
    regs_signed = Registers()
    regs_byte = Registers()
    assert alu.add16_signed(regs_signed, 0x1234, -4) == alu.add16_signed(
        regs_byte, 0x1234, 0xFC
    )
    assert regs_signed.f == regs_byte.f