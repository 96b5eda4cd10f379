"""Main CHIP-8 emulator execution engine."""

from os import PathLike
from typing import Union

import jax
import jax.lax
import jax.numpy as jnp
from chipcore.state import EmulatorState, create_state
from chipcore.decode import Op, decode
from chipcore.errors import Fault
from chipcore.keypad import first_pressed
from chipcore.memory import load, read_byte
from chipcore.quirks import Quirks
from chipcore.instructions.system import execute_sys, execute_clear_screen, execute_return, execute_unknown
from chipcore.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chipcore.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub, execute_alu_shift_right, execute_alu_subn, execute_alu_shift_left
)
from chipcore.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipcore.instructions.display import execute_display
from chipcore.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

HANDLERS = {
    Op.UNKNOWN: execute_unknown,
    Op.SYS: execute_sys,
    Op.CLEAR_SCREEN: execute_clear_screen,
    Op.RETURN: execute_return,
    Op.JUMP: execute_jump,
    Op.CALL: execute_call,
    Op.SKIP_EQ_IMM: execute_skip_if_equal_immediate,
    Op.SKIP_NE_IMM: execute_skip_if_not_equal_immediate,
    Op.SKIP_EQ_REG: execute_skip_if_equal_register,
    Op.SET_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    Op.SET_REG: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REG: execute_alu_add,
    Op.SUB: execute_alu_sub,
    Op.SHIFT_RIGHT: execute_alu_shift_right,
    Op.SUBN: execute_alu_subn,
    Op.SHIFT_LEFT: execute_alu_shift_left,
    Op.SKIP_NE_REG: execute_skip_if_not_equal_register,
    Op.SET_INDEX: execute_set_index,
    Op.JUMP_OFFSET: execute_jump_with_offset,
    Op.RANDOM: execute_random,
    Op.DRAW: execute_display,
    Op.SKIP_KEY: execute_skip_if_key,
    Op.SKIP_NOT_KEY: execute_skip_if_not_key,
    Op.GET_DELAY: execute_get_delay_timer,
    Op.WAIT_KEY: execute_wait_for_key,
    Op.SET_DELAY: execute_set_delay_timer,
    Op.SET_SOUND: execute_set_sound_timer,
    Op.ADD_INDEX: execute_add_to_index,
    Op.FONT_CHARACTER: execute_font_character,
    Op.BCD: execute_bcd_conversion,
    Op.STORE_REGISTERS: execute_store_registers,
    Op.LOAD_REGISTERS: execute_load_registers,
}

# Branch order of the dispatch switch follows the Op values
_DISPATCH = [HANDLERS[op] for op in sorted(Op)]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    PC is expected to already point past the instruction. Faults are recorded in the
    returned state but not rolled back; ``cycle`` takes care of that.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.op, _DISPATCH, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance PC by 2.

    An instruction not wholly inside memory records a MEMORY_OUT_OF_BOUNDS fault at
    its first invalid byte.
    """
    pc = jnp.astype(state.pc, jnp.int32)
    high, high_valid = read_byte(state.memory, pc)
    low, low_valid = read_byte(state.memory, pc + 1)
    bad_address = jnp.where(high_valid, pc + 1, pc)
    state = state.raise_fault(~(high_valid & low_valid), Fault.MEMORY_OUT_OF_BOUNDS, bad_address)
    return state.replace(pc=state.pc + 2), _pack_u16(high, low)


def _halt(before: EmulatorState, after: EmulatorState, instruction) -> EmulatorState:
    """Discard the failed instruction's effects, keeping only the fault record."""
    return before.replace(
        fault=after.fault,
        fault_pc=before.pc,
        fault_word=jnp.astype(instruction, jnp.uint16),
        fault_address=after.fault_address,
    )


def _poll_keypad(state: EmulatorState) -> EmulatorState:
    key, any_pressed = first_pressed(state)

    def resume(state):
        return state.replace(
            V=state.V.at[state.key_register].set(key),
            waiting_for_key=jnp.zeros((), dtype=jnp.bool_),
            pc=state.pc + 2,
        )

    return jax.lax.cond(any_pressed, resume, lambda state: state, state)


def _run_instruction(state: EmulatorState) -> EmulatorState:
    before = state
    state, instruction = fetch(state)
    state = jax.lax.cond(state.halted, lambda s, i: s, execute, state, instruction)
    return jax.lax.cond(state.halted, lambda: _halt(before, state, instruction), lambda: state)


def cycle(state: EmulatorState) -> EmulatorState:
    """Run one emulated cycle: nothing when halted, a keypad poll when blocked on a
    key, otherwise fetch, decode and execute one instruction."""
    return jax.lax.cond(
        state.halted,
        lambda s: s,
        lambda s: jax.lax.cond(s.waiting_for_key, _poll_keypad, _run_instruction, s),
        state,
    )


@jax.jit
def run_cycles(state: EmulatorState, n) -> EmulatorState:
    """Run ``n`` cycles. A halted core stays halted, so later cycles are no-ops.

    ``n`` is traced, so one compiled loop serves every cycle count.
    """
    return jax.lax.fori_loop(0, n, lambda _, s: cycle(s), state)


jit_cycle = jax.jit(cycle)


def load_rom(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200.

    Raises:
        RomTooLarge: the ROM does not fit in memory.
    """
    return state.replace(memory=load(state.memory, bytes(rom_data)))


def load_rom_file(state: EmulatorState, filename: Union[str, PathLike]) -> EmulatorState:
    """Load a ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_rom(state, rom_data)


def reset(rom_data: bytes, rng: jax.random.PRNGKey = jax.random.PRNGKey(0), quirks: Quirks = Quirks()) -> EmulatorState:
    """Fresh state with the font and ``rom_data`` loaded."""
    return load_rom(create_state(rng, quirks=quirks), rom_data)
