"""CHIP-8 memory operations.

Accessors return an ``in_bounds`` flag alongside their result instead of raising, so
they can run inside compiled code; the caller turns a false flag into a
``MemoryOutOfBounds`` fault.
"""

import jax.numpy as jnp

from chipcore.constants import ADDRESS_MASK, FONT_DATA, FONT_START, MEMORY_SIZE, PROGRAM_START, ROM_CAPACITY
from chipcore.errors import RomTooLarge


def in_bounds(address, length=1) -> jnp.ndarray:
    """Check that ``length`` bytes starting at ``address`` lie inside memory."""
    last = jnp.astype(address, jnp.int32) + (length - 1)
    return last < MEMORY_SIZE


def read_byte(memory: jnp.ndarray, address) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Read one byte. The value is meaningless when ``in_bounds`` is false."""
    valid = in_bounds(address)
    safe_address = jnp.where(valid, jnp.astype(address, jnp.uint32), 0)
    return memory[safe_address], valid


def write_byte(memory: jnp.ndarray, address, value) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Write one byte. Memory is returned unchanged when ``in_bounds`` is false."""
    valid = in_bounds(address)
    safe_address = jnp.where(valid, jnp.astype(address, jnp.uint32), 0)
    current = memory[safe_address]
    new_value = jnp.where(valid, jnp.astype(value, jnp.uint8), current)
    return memory.at[safe_address].set(new_value), valid


def read_masked(memory: jnp.ndarray, address) -> jnp.ndarray:
    """Read one byte with the address wrapped to 12 bits."""
    return memory[jnp.astype(address, jnp.uint32) & ADDRESS_MASK]


def write_masked(memory: jnp.ndarray, address, value) -> jnp.ndarray:
    """Write one byte with the address wrapped to 12 bits."""
    return memory.at[jnp.astype(address, jnp.uint32) & ADDRESS_MASK].set(jnp.astype(value, jnp.uint8))


def load_font(memory: jnp.ndarray) -> jnp.ndarray:
    return memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(jnp.array(FONT_DATA, dtype=jnp.uint8))


def load(memory: jnp.ndarray, rom_data: bytes) -> jnp.ndarray:
    """Copy ROM bytes into memory starting at 0x200.

    Raises:
        RomTooLarge: the ROM does not fit; memory is left untouched.
    """
    if len(rom_data) > ROM_CAPACITY:
        raise RomTooLarge(len(rom_data), ROM_CAPACITY)
    if not rom_data:
        return memory
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    return memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
