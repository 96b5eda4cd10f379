"""Tests for the 8XYN register-to-register instructions."""

import pytest
from chipcore import execute, Fault
from conftest import set_registers


class TestLogicOps:
    """8XY0-8XY3 combine VX and VY bitwise."""

    @pytest.mark.parametrize("word,vx,vy,expected", [
        (0x8120, 0x42, 0x99, 0x99),  # SET
        (0x8121, 0xF0, 0x0F, 0xFF),  # OR
        (0x8122, 0xF0, 0xF1, 0xF0),  # AND
        (0x8123, 0xFF, 0xF0, 0x0F),  # XOR
    ])
    def test_result(self, fresh_state, word, vx, vy, expected):
        state = set_registers(fresh_state, V1=vx, V2=vy)

        state = execute(state, word)

        assert state.V[1] == expected
        assert state.V[2] == vy

    @pytest.mark.parametrize("word", [0x8121, 0x8122, 0x8123])
    def test_vf_untouched_by_default(self, fresh_state, word):
        state = set_registers(fresh_state, V1=0x0C, V2=0x0A, VF=0x07)

        state = execute(state, word)

        assert state.V[15] == 0x07

    @pytest.mark.parametrize("word", [0x8121, 0x8122, 0x8123])
    def test_vf_reset_with_cosmac_quirks(self, legacy_state, word):
        state = set_registers(legacy_state, V1=0x0C, V2=0x0A, VF=0x07)

        state = execute(state, word)

        assert state.V[15] == 0

    def test_set_does_not_reset_vf(self, legacy_state):
        state = set_registers(legacy_state, V1=0x0C, V2=0x0A, VF=0x07)

        state = execute(state, 0x8120)

        assert state.V[15] == 0x07


class TestArithmetic:
    """8XY4, 8XY5 and 8XY7 write a carry or no-borrow flag to VF."""

    @pytest.mark.parametrize("word,vx,vy,result,flag", [
        (0x8124, 0x10, 0x20, 0x30, 0),  # ADD, no carry
        (0x8124, 0xFF, 0x01, 0x00, 1),  # ADD, carry
        (0x8125, 0x30, 0x10, 0x20, 1),  # SUB VX-VY
        (0x8125, 0x10, 0x30, 0xE0, 0),  # SUB VX-VY, borrow
        (0x8125, 0x42, 0x42, 0x00, 1),  # SUB of equal operands
        (0x8127, 0x10, 0x30, 0x20, 1),  # SUBN VY-VX
        (0x8127, 0xFF, 0x64, 0x65, 0),  # SUBN VY-VX, borrow
    ])
    def test_result_and_flag(self, fresh_state, word, vx, vy, result, flag):
        state = set_registers(fresh_state, V1=vx, V2=vy)

        state = execute(state, word)

        assert state.V[1] == result
        assert state.V[15] == flag

    @pytest.mark.parametrize("vx,vy", [(0, 0), (200, 55), (200, 56), (255, 255), (1, 254), (128, 128)])
    def test_carry_iff_sum_exceeds_255(self, fresh_state, vx, vy):
        state = set_registers(fresh_state, V3=vx, V4=vy)

        state = execute(state, 0x8344)

        assert state.V[3] == (vx + vy) % 256
        assert state.V[15] == int(vx + vy > 255)


class TestShifts:
    """8XY6/8XYE shift VX in place, or VY into VX with the COSMAC quirk."""

    @pytest.mark.parametrize("word,value,result,flag", [
        (0x8126, 0b0000_0100, 0b0000_0010, 0),
        (0x8126, 0b0000_0101, 0b0000_0010, 1),
        (0x812E, 0b1000_0001, 0b0000_0010, 1),
        (0x812E, 0b0100_0000, 0b1000_0000, 0),
    ])
    def test_shift_vx_in_place(self, fresh_state, word, value, result, flag):
        state = set_registers(fresh_state, V1=value, V2=0xFF)

        state = execute(state, word)

        assert state.V[1] == result
        assert state.V[2] == 0xFF
        assert state.V[15] == flag

    def test_shift_right_reads_vy_with_quirk(self, legacy_state):
        state = set_registers(legacy_state, V5=0x08, V6=0x03)

        state = execute(state, 0x8566)

        assert state.V[5] == 0x01
        assert state.V[6] == 0x03
        assert state.V[15] == 1

    def test_shift_left_reads_vy_with_quirk(self, legacy_state):
        state = set_registers(legacy_state, V5=0b1001_1111)

        state = execute(state, 0x845E)

        assert state.V[4] == 0b0011_1110
        assert state.V[5] == 0b1001_1111
        assert state.V[15] == 1


class TestEdgeCases:
    """Unassigned variants and register aliasing."""

    @pytest.mark.parametrize("n", [0x8, 0x9, 0xA, 0xB, 0xC, 0xD, 0xF])
    def test_unassigned_variant_is_unknown(self, fresh_state, n):
        state = set_registers(fresh_state, V1=0x42, V2=0x99)

        state = execute(state, 0x8120 | n)

        assert state.fault == Fault.UNKNOWN_OPCODE
        assert state.V[1] == 0x42

    def test_same_register_operands(self, fresh_state):
        state = execute(set_registers(fresh_state, V5=0xAA), 0x8553)
        assert state.V[5] == 0

        state = execute(set_registers(state, V5=0x80), 0x8554)
        assert state.V[5] == 0
        assert state.V[15] == 1

    def test_vf_as_source(self, fresh_state):
        state = set_registers(fresh_state, VF=0x42, V1=0x10)

        state = execute(state, 0x81F4)

        assert state.V[1] == 0x52
        assert state.V[15] == 0

    def test_flag_wins_when_vf_is_destination(self, fresh_state):
        """8FY4 - The carry overwrites the sum stored in VF."""
        state = set_registers(fresh_state, VF=0xFF, V1=0x02)

        state = execute(state, 0x8F14)

        assert state.V[15] == 1
