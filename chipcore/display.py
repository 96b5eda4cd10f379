"""CHIP-8 monochrome display buffer."""

import jax.numpy as jnp

from chipcore.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, MAX_SPRITE_HEIGHT

# Row/column offsets of every pixel a sprite can cover
_rows = jnp.arange(MAX_SPRITE_HEIGHT)[:, None]
_cols = jnp.arange(SPRITE_WIDTH)[None, :]


def clear(display: jnp.ndarray) -> jnp.ndarray:
    """Turn every pixel off."""
    return jnp.zeros_like(display)


def draw_sprite(
    display: jnp.ndarray,
    x,
    y,
    rows: jnp.ndarray,
    height,
    clip: bool = False,
) -> tuple[jnp.ndarray, jnp.ndarray]:
    """XOR a sprite onto the display.

    Args:
        display: Boolean array of shape (64, 32) indexed ``[x, y]``
        x: Horizontal position, taken modulo the screen width
        y: Vertical position, taken modulo the screen height
        rows: Sprite bytes, one per row, most significant bit leftmost. Only the
            first ``height`` entries are drawn.
        height: Number of rows to draw (0-15)
        clip: Drop pixels past the right/bottom edge instead of wrapping them

    Returns:
        Tuple of the new display and the collision flag, true iff at least one
        pixel that was on has been turned off.
    """
    rows = jnp.asarray(rows, dtype=jnp.uint8)
    rows = jnp.pad(rows, (0, MAX_SPRITE_HEIGHT - rows.shape[0]))

    origin_x = jnp.astype(x, jnp.int32) % SCREEN_WIDTH
    origin_y = jnp.astype(y, jnp.int32) % SCREEN_HEIGHT
    pixel_x = origin_x + _cols
    pixel_y = origin_y + _rows

    bits = ((rows[:, None] >> (SPRITE_WIDTH - 1 - _cols)) & 1).astype(jnp.bool_)
    bits = bits & (_rows < height)
    if clip:
        bits = bits & (pixel_x < SCREEN_WIDTH) & (pixel_y < SCREEN_HEIGHT)

    # A sprite is smaller than the screen, so wrapped positions never coincide
    sprite = jnp.zeros_like(display).at[pixel_x % SCREEN_WIDTH, pixel_y % SCREEN_HEIGHT].set(bits)

    collision = jnp.any(display & sprite)
    return display ^ sprite, collision
