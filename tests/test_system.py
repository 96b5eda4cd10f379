"""Tests for 0x0xxx instructions and unknown opcodes."""

import jax.numpy as jnp
from chipcore import execute, Fault


class TestSystemInstructions:
    """Test SYS, CLS and RET."""

    def test_sys_is_ignored(self, fresh_state):
        """0NNN - Machine code routines are not executed."""
        state = execute(fresh_state, 0x0123)

        assert state.pc == fresh_state.pc
        assert state.fault == Fault.NONE
        assert jnp.array_equal(state.V, fresh_state.V)

    def test_clear_screen_leaves_registers(self, fresh_state):
        state = fresh_state.replace(display=jnp.ones_like(fresh_state.display))

        state = execute(state, 0x00E0)

        assert not jnp.any(state.display)
        assert state.pc == fresh_state.pc

    def test_return_on_empty_stack_faults(self, fresh_state):
        state = execute(fresh_state, 0x00EE)

        assert state.fault == Fault.STACK_UNDERFLOW
        assert state.pc == fresh_state.pc

    def test_return_on_empty_stack_permissive(self, permissive_state):
        state = execute(permissive_state, 0x00EE)

        assert state.fault == Fault.NONE
        assert state.pc == permissive_state.pc
        assert state.stack.pointer == 0


class TestUnknownOpcodes:
    """Test words that match no instruction."""

    def test_unknown_opcode_faults(self, fresh_state):
        for word in (0x5121, 0x8008, 0xE000, 0xF0FF, 0xFFFF):
            state = execute(fresh_state, word)
            assert state.fault == Fault.UNKNOWN_OPCODE, f"0x{word:04X}"

    def test_unknown_opcode_permissive(self, permissive_state):
        state = execute(permissive_state, 0xFFFF)

        assert state.fault == Fault.NONE
        assert state.pc == permissive_state.pc

    def test_first_fault_is_kept(self, fresh_state):
        state = execute(fresh_state, 0x00EE)
        state = execute(state, 0xFFFF)

        assert state.fault == Fault.STACK_UNDERFLOW
