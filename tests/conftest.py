"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chipcore import create_state, Interpreter, Quirks


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def legacy_state():
    """Provide a fresh state with COSMAC VIP quirks."""
    return create_state(quirks=Quirks.cosmac())


@pytest.fixture
def permissive_state():
    """Provide a fresh state in permissive mode."""
    return create_state(quirks=Quirks(permissive=True))


def make_interpreter(*words, **kwargs):
    """Interpreter running a ROM assembled from 16-bit instruction words."""
    rom = b"".join(word.to_bytes(2, "big") for word in words)
    return Interpreter(rom, **kwargs)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Set registers by name, e.g. ``set_registers(state, V1=0x10, VF=1)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def set_index(state, address):
    """Point I at ``address``, keeping the register's uint16 dtype."""
    return state.replace(I=jnp.uint16(address))
