"""CHIP-8 interpreter package."""

from chipcore.state import EmulatorState, create_state
from chipcore.emulator import execute, fetch, cycle, run_cycles, load_rom, load_rom_file, reset
from chipcore.decode import DecodedInstruction, Op, decode
from chipcore.quirks import Quirks
from chipcore.errors import (
    Fault, Chip8Error, RomTooLarge, StackOverflow, StackUnderflow, UnknownOpcode, MemoryOutOfBounds,
)
from chipcore.interpreter import Interpreter, Status, StepResult
from chipcore.constants import *
from chipcore.rendering import display_to_rgb, display_to_text, create_color_scheme

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "cycle",
    "run_cycles",
    "load_rom",
    "load_rom_file",
    "reset",
    "DecodedInstruction",
    "Op",
    "decode",
    "Quirks",
    "Fault",
    "Chip8Error",
    "RomTooLarge",
    "StackOverflow",
    "StackUnderflow",
    "UnknownOpcode",
    "MemoryOutOfBounds",
    "Interpreter",
    "Status",
    "StepResult",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "display_to_rgb",
    "display_to_text",
    "create_color_scheme",
]
