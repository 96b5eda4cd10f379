"""CHIP-8 system instructions (0x0xxx) and the unknown-opcode handler."""

import jax.numpy as jnp
from chipcore.state import EmulatorState
from chipcore.decode import DecodedInstruction
from chipcore.errors import Fault
from chipcore.stack import pop
from chipcore import display


def execute_sys(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Call machine code routine, ignored by modern interpreters."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=display.clear(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address, underflow = pop(state.stack)
    state = state.replace(stack=stack, pc=jnp.where(underflow, state.pc, address))
    if state.quirks.permissive:
        return state
    return state.raise_fault(underflow, Fault.STACK_UNDERFLOW)


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Undecodable word, a no-op in permissive mode."""
    if state.quirks.permissive:
        return state
    return state.raise_fault(True, Fault.UNKNOWN_OPCODE)
