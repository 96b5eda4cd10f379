"""CHIP-8 instruction decoding."""

from enum import IntEnum

import jax.numpy as jnp
from chex import dataclass


class Op(IntEnum):
    """Every instruction shape of the base CHIP-8 set."""
    UNKNOWN = 0
    SYS = 1                 # 0NNN
    CLEAR_SCREEN = 2        # 00E0
    RETURN = 3              # 00EE
    JUMP = 4                # 1NNN
    CALL = 5                # 2NNN
    SKIP_EQ_IMM = 6         # 3XNN
    SKIP_NE_IMM = 7         # 4XNN
    SKIP_EQ_REG = 8         # 5XY0
    SET_IMM = 9             # 6XNN
    ADD_IMM = 10            # 7XNN
    SET_REG = 11            # 8XY0
    OR = 12                 # 8XY1
    AND = 13                # 8XY2
    XOR = 14                # 8XY3
    ADD_REG = 15            # 8XY4
    SUB = 16                # 8XY5
    SHIFT_RIGHT = 17        # 8XY6
    SUBN = 18               # 8XY7
    SHIFT_LEFT = 19         # 8XYE
    SKIP_NE_REG = 20        # 9XY0
    SET_INDEX = 21          # ANNN
    JUMP_OFFSET = 22        # BNNN
    RANDOM = 23             # CXNN
    DRAW = 24               # DXYN
    SKIP_KEY = 25           # EX9E
    SKIP_NOT_KEY = 26       # EXA1
    GET_DELAY = 27          # FX07
    WAIT_KEY = 28           # FX0A
    SET_DELAY = 29          # FX15
    SET_SOUND = 30          # FX18
    ADD_INDEX = 31          # FX1E
    FONT_CHARACTER = 32     # FX29
    BCD = 33                # FX33
    STORE_REGISTERS = 34    # FX55
    LOAD_REGISTERS = 35     # FX65


# (mask, pattern, op), first match wins
PATTERNS = [
    (0xFFFF, 0x00E0, Op.CLEAR_SCREEN),
    (0xFFFF, 0x00EE, Op.RETURN),
    (0xF000, 0x0000, Op.SYS),
    (0xF000, 0x1000, Op.JUMP),
    (0xF000, 0x2000, Op.CALL),
    (0xF000, 0x3000, Op.SKIP_EQ_IMM),
    (0xF000, 0x4000, Op.SKIP_NE_IMM),
    (0xF00F, 0x5000, Op.SKIP_EQ_REG),
    (0xF000, 0x6000, Op.SET_IMM),
    (0xF000, 0x7000, Op.ADD_IMM),
    (0xF00F, 0x8000, Op.SET_REG),
    (0xF00F, 0x8001, Op.OR),
    (0xF00F, 0x8002, Op.AND),
    (0xF00F, 0x8003, Op.XOR),
    (0xF00F, 0x8004, Op.ADD_REG),
    (0xF00F, 0x8005, Op.SUB),
    (0xF00F, 0x8006, Op.SHIFT_RIGHT),
    (0xF00F, 0x8007, Op.SUBN),
    (0xF00F, 0x800E, Op.SHIFT_LEFT),
    (0xF00F, 0x9000, Op.SKIP_NE_REG),
    (0xF000, 0xA000, Op.SET_INDEX),
    (0xF000, 0xB000, Op.JUMP_OFFSET),
    (0xF000, 0xC000, Op.RANDOM),
    (0xF000, 0xD000, Op.DRAW),
    (0xF0FF, 0xE09E, Op.SKIP_KEY),
    (0xF0FF, 0xE0A1, Op.SKIP_NOT_KEY),
    (0xF0FF, 0xF007, Op.GET_DELAY),
    (0xF0FF, 0xF00A, Op.WAIT_KEY),
    (0xF0FF, 0xF015, Op.SET_DELAY),
    (0xF0FF, 0xF018, Op.SET_SOUND),
    (0xF0FF, 0xF01E, Op.ADD_INDEX),
    (0xF0FF, 0xF029, Op.FONT_CHARACTER),
    (0xF0FF, 0xF033, Op.BCD),
    (0xF0FF, 0xF055, Op.STORE_REGISTERS),
    (0xF0FF, 0xF065, Op.LOAD_REGISTERS),
]

_MASKS = jnp.array([mask for mask, _, _ in PATTERNS], dtype=jnp.uint16)
_VALUES = jnp.array([value for _, value, _ in PATTERNS], dtype=jnp.uint16)
_OPS = jnp.array([int(op) for _, _, op in PATTERNS], dtype=jnp.int32)


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: int      # Op value
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def classify(instruction) -> jnp.ndarray:
    """Map a raw instruction word to its ``Op`` value (``Op.UNKNOWN`` if none matches)."""
    word = jnp.astype(instruction, jnp.uint16)
    matches = (word & _MASKS) == _VALUES
    return jnp.where(jnp.any(matches), _OPS[jnp.argmax(matches)], int(Op.UNKNOWN))


def decode(instruction) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = jnp.astype(instruction, jnp.uint16)
    return DecodedInstruction(
        raw=instruction,
        op=classify(instruction),
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
