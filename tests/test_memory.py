"""Tests for memory accessors, ROM loading and register/index instructions."""

import jax.numpy as jnp
import pytest

from chipcore import execute, load_rom, PROGRAM_START, RomTooLarge
from chipcore.constants import FONT_DATA, FONT_START, MEMORY_SIZE, ROM_CAPACITY
from chipcore.memory import in_bounds, load_font, read_byte, write_byte, read_masked, write_masked
from conftest import set_registers


class TestRegisterInstructions:
    """Test 6XNN, 7XNN, ANNN and CXNN."""

    def test_set_register(self, fresh_state):
        """6XNN - Set VX = NN."""
        state = execute(fresh_state, 0x6A42)

        assert state.V[0xA] == 0x42

    def test_add_immediate_wraps(self, fresh_state):
        """7XNN - Add wraps at 256."""
        state = set_registers(fresh_state, V2=0xFE)

        state = execute(state, 0x7203)

        assert state.V[2] == 0x01

    def test_add_immediate_leaves_vf(self, fresh_state):
        """7XNN - Carry never reaches VF."""
        state = set_registers(fresh_state, V2=0xFF, VF=0x05)

        state = execute(state, 0x72FF)

        assert state.V[2] == 0xFE
        assert state.V[15] == 0x05

    def test_set_index(self, fresh_state):
        """ANNN - Set I = NNN."""
        state = execute(fresh_state, 0xA123)

        assert state.I == 0x123

    def test_random_masked(self, fresh_state):
        """CXNN - Result is always a subset of NN."""
        state = fresh_state
        for _ in range(20):
            state = execute(state, 0xC30F)
            assert (int(state.V[3]) & ~0x0F) == 0

    def test_random_zero_mask(self, fresh_state):
        state = set_registers(fresh_state, V3=0xFF)

        state = execute(state, 0xC300)

        assert state.V[3] == 0

    def test_random_advances_rng(self, fresh_state):
        state = execute(fresh_state, 0xC3FF)

        assert not jnp.array_equal(state.rng, fresh_state.rng)


class TestAccessors:
    """Test bounds-checked and masked accessors."""

    def test_in_bounds(self):
        assert in_bounds(0)
        assert in_bounds(MEMORY_SIZE - 1)
        assert not in_bounds(MEMORY_SIZE)
        assert in_bounds(MEMORY_SIZE - 3, 3)
        assert not in_bounds(MEMORY_SIZE - 2, 3)

    def test_read_write_byte(self, fresh_state):
        memory, valid = write_byte(fresh_state.memory, 0x300, 0xAB)
        assert valid

        value, valid = read_byte(memory, 0x300)
        assert valid
        assert value == 0xAB

    def test_out_of_range_access_is_flagged(self, fresh_state):
        memory, valid = write_byte(fresh_state.memory, MEMORY_SIZE, 0xAB)
        assert not valid
        assert jnp.array_equal(memory, fresh_state.memory)

        _, valid = read_byte(fresh_state.memory, MEMORY_SIZE + 10)
        assert not valid

    def test_masked_access_wraps(self, fresh_state):
        memory = write_masked(fresh_state.memory, 0x1005, 0x77)

        assert memory[0x005] == 0x77
        assert read_masked(memory, 0x2005) == 0x77


class TestFont:
    """Test the built-in glyphs."""

    def test_load_font(self):
        memory = load_font(jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))

        assert [int(b) for b in memory[FONT_START:FONT_START + len(FONT_DATA)]] == list(FONT_DATA)
        assert not jnp.any(memory[:FONT_START])

    def test_fresh_state_has_font(self, fresh_state):
        assert jnp.array_equal(fresh_state.memory, load_font(jnp.zeros_like(fresh_state.memory)))


class TestRomLoading:
    """Test loading ROM images."""

    def test_load_rom(self, fresh_state):
        state = load_rom(fresh_state, bytes([0x12, 0x34, 0x56]))

        assert state.memory[PROGRAM_START] == 0x12
        assert state.memory[PROGRAM_START + 1] == 0x34
        assert state.memory[PROGRAM_START + 2] == 0x56
        assert state.pc == PROGRAM_START

    def test_empty_rom(self, fresh_state):
        state = load_rom(fresh_state, b"")

        assert jnp.array_equal(state.memory, fresh_state.memory)

    def test_rom_filling_memory(self, fresh_state):
        rom = bytes([0xAA]) * ROM_CAPACITY

        state = load_rom(fresh_state, rom)

        assert ROM_CAPACITY == MEMORY_SIZE - PROGRAM_START
        assert state.memory[MEMORY_SIZE - 1] == 0xAA

    def test_rom_too_large(self, fresh_state):
        with pytest.raises(RomTooLarge) as exc_info:
            load_rom(fresh_state, bytes(ROM_CAPACITY + 1))

        assert exc_info.value.size == ROM_CAPACITY + 1
        assert exc_info.value.capacity == ROM_CAPACITY
