"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipcore.state import EmulatorState
from chipcore.decode import DecodedInstruction
from chipcore.constants import ADDRESS_MASK, FLAG_REGISTER, FONT_GLYPH_SIZE, FONT_START, NUM_REGISTERS
from chipcore.errors import Fault
from chipcore.memory import in_bounds, read_masked, write_masked

_register_indices = jnp.arange(NUM_REGISTERS)


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register."""
    new_i = jnp.astype(state.I, jnp.int32) + jnp.astype(state.V[instruction.x], jnp.int32)
    if not state.quirks.index_overflow_sets_vf:
        return state.replace(I=jnp.astype(new_i & 0xFFFF, jnp.uint16))

    overflow_flag = jnp.astype(new_i > ADDRESS_MASK, jnp.uint8)
    return state.replace(
        I=jnp.astype(new_i & ADDRESS_MASK, jnp.uint16),
        V=state.V.at[FLAG_REGISTER].set(overflow_flag)
    )


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    The core enters the blocked-on-key state with PC back on this instruction; the
    next cycles poll the keypad instead of fetching.
    """
    return state.replace(
        waiting_for_key=jnp.ones((), dtype=jnp.bool_),
        key_register=jnp.astype(instruction.x, jnp.uint8),
        pc=state.pc - 2,
    )


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for the low nibble of VX."""
    digit = jnp.astype(state.V[instruction.x] & 0xF, jnp.uint16)
    return state.replace(I=jnp.astype(FONT_START + digit * FONT_GLYPH_SIZE, jnp.uint16))


def _index_addresses(state: EmulatorState, count: int) -> jnp.ndarray:
    return jnp.astype(state.I, jnp.int32) + jnp.arange(count)


def _check_index_range(state: EmulatorState, new_state: EmulatorState, length) -> EmulatorState:
    if state.quirks.permissive:
        return new_state
    return new_state.raise_fault(~in_bounds(state.I, length), Fault.MEMORY_OUT_OF_BOUNDS, state.I)


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    new_memory = write_masked(state.memory, _index_addresses(state, 3), digits)
    return _check_index_range(state, state.replace(memory=new_memory), 3)


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    if state.quirks.load_store_increments_index:
        return jnp.astype(state.I + instruction.x + 1, jnp.uint16)
    return state.I


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask = _register_indices <= instruction.x
    addresses = _index_addresses(state, NUM_REGISTERS)
    current_memory_values = read_masked(state.memory, addresses)
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    new_memory = write_masked(state.memory, addresses, new_memory_values)

    new_state = state.replace(memory=new_memory, I=_advance_index(state, instruction))
    return _check_index_range(state, new_state, jnp.astype(instruction.x, jnp.int32) + 1)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask = _register_indices <= instruction.x
    memory_values = read_masked(state.memory, _index_addresses(state, NUM_REGISTERS))
    new_V = jnp.where(register_mask, memory_values, state.V)

    new_state = state.replace(V=new_V, I=_advance_index(state, instruction))
    return _check_index_range(state, new_state, jnp.astype(instruction.x, jnp.int32) + 1)
