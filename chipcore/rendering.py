"""Framebuffer conversions for host front-ends: RGB frames for a window, text for a terminal."""

from typing import Tuple

import numpy as np

Color = Tuple[int, int, int]

# name -> (on, off)
COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
}


def display_to_rgb(
    display,
    scale: int = 8,
    on_color: Color = COLOR_SCHEMES["classic"][0],
    off_color: Color = COLOR_SCHEMES["classic"][1],
) -> np.ndarray:
    """Turn the ``[x, y]`` boolean framebuffer into an image.

    Returns:
        uint8 array of shape (32 * scale, 64 * scale, 3), rows first
    """
    lit = np.asarray(display, dtype=np.bool_).T[..., None]
    frame = np.where(lit, np.array(on_color, dtype=np.uint8), np.array(off_color, dtype=np.uint8))
    if scale > 1:
        frame = frame.repeat(scale, axis=0).repeat(scale, axis=1)
    return frame


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Look up the ``(on_color, off_color)`` pair called ``scheme``."""
    try:
        return COLOR_SCHEMES[scheme]
    except KeyError:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}"
        ) from None


def display_to_text(display, on: str = "█", off: str = " ") -> str:
    """Render the display as one line of characters per pixel row."""
    pixels = np.asarray(display, dtype=np.bool_).T
    return "\n".join("".join(on if pixel else off for pixel in row) for row in pixels)
