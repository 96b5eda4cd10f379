"""CHIP-8 delay and sound timers."""

import jax.numpy as jnp
from chipcore.state import EmulatorState


def _decrement(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


def tick(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, holding each at zero once reached."""
    return state.replace(
        delay_timer=_decrement(state.delay_timer),
        sound_timer=_decrement(state.sound_timer),
    )


def sound_active(state: EmulatorState) -> jnp.ndarray:
    """Whether a tone should currently be playing."""
    return state.sound_timer > 0
