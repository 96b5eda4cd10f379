"""CHIP-8 keypad state."""

import jax.numpy as jnp
from chipcore.constants import NUM_KEYS
from chipcore.state import EmulatorState


def set_key(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Record a press or release of ``key`` (0x0-0xF)."""
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index must be in 0-{NUM_KEYS - 1}, got {key}")
    return state.replace(keypad=state.keypad.at[key].set(pressed))


def release_all(state: EmulatorState) -> EmulatorState:
    return state.replace(keypad=jnp.zeros(NUM_KEYS, dtype=jnp.bool_))


def is_pressed(state: EmulatorState, key) -> jnp.ndarray:
    return state.keypad[jnp.astype(key, jnp.uint8) & 0xF]


def first_pressed(state: EmulatorState) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Lowest pressed key index and whether any key is pressed at all."""
    return jnp.astype(jnp.argmax(state.keypad), jnp.uint8), jnp.any(state.keypad)
