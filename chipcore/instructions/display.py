"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipcore.state import EmulatorState
from chipcore.decode import DecodedInstruction
from chipcore.constants import FLAG_REGISTER, MAX_SPRITE_HEIGHT
from chipcore.errors import Fault
from chipcore.memory import in_bounds, read_masked
from chipcore import display

_row_offsets = jnp.arange(MAX_SPRITE_HEIGHT, dtype=jnp.uint32)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    height = instruction.n
    addresses = jnp.astype(state.I, jnp.uint32) + _row_offsets
    # Rows past N are read but never drawn; only the first N must be addressable
    rows = read_masked(state.memory, addresses)

    new_display, collision = display.draw_sprite(
        state.display,
        state.V[instruction.x],
        state.V[instruction.y],
        rows,
        height,
        clip=state.quirks.clip_sprites,
    )
    new_state = state.replace(
        display=new_display,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
    )
    if state.quirks.permissive:
        return new_state

    valid = (height == 0) | in_bounds(state.I, jnp.maximum(jnp.astype(height, jnp.int32), 1))
    return new_state.raise_fault(~valid, Fault.MEMORY_OUT_OF_BOUNDS, state.I)
