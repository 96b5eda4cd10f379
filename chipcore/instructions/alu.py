"""CHIP-8 ALU operations (8xxx).

Each operation returns the new VX and the VF flag, or ``None`` when VF is left alone.
The flag is written after the result, so it wins when X is F.
"""

import jax.numpy as jnp
from chipcore.state import EmulatorState
from chipcore.decode import DecodedInstruction
from chipcore.constants import FLAG_REGISTER


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    not_borrow = jnp.astype(vx >= vy, jnp.uint8)
    result = (jnp.astype(vx, jnp.int32) - jnp.astype(vy, jnp.int32)) & 0xFF
    return jnp.astype(result, jnp.uint8), not_borrow


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    return alu_sub_xy(vy, vx)


def alu_shift_right(value):
    """8XY6 - Shift right by one, VF = shifted-out bit."""
    shifted_bit = jnp.astype(value & 1, jnp.uint8)
    return jnp.astype(value >> 1, jnp.uint8), shifted_bit


def alu_shift_left(value):
    """8XYE - Shift left by one, VF = shifted-out bit."""
    shifted_bit = jnp.astype((value & 0x80) >> 7, jnp.uint8)
    return jnp.astype((jnp.astype(value, jnp.int32) << 1) & 0xFF, jnp.uint8), shifted_bit


def _write_result(state: EmulatorState, instruction: DecodedInstruction, result, flag) -> EmulatorState:
    new_V = state.V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
    if flag is not None:
        new_V = new_V.at[FLAG_REGISTER].set(jnp.astype(flag, jnp.uint8))
    return state.replace(V=new_V)


def make_alu_instruction(operation, logic: bool = False):
    """Factory for two-operand ALU instructions."""
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        result, flag = operation(state.V[instruction.x], state.V[instruction.y])
        if logic and state.quirks.logic_resets_vf:
            flag = 0
        return _write_result(state, instruction, result, flag)
    return alu_instruction


def make_shift_instruction(operation):
    """Factory for shift instructions, honouring the ``shift_uses_vy`` quirk."""
    def shift_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        source = instruction.y if state.quirks.shift_uses_vy else instruction.x
        result, flag = operation(state.V[source])
        return _write_result(state, instruction, result, flag)
    return shift_instruction


execute_alu_set = make_alu_instruction(alu_set)
execute_alu_or = make_alu_instruction(alu_or, logic=True)
execute_alu_and = make_alu_instruction(alu_and, logic=True)
execute_alu_xor = make_alu_instruction(alu_xor, logic=True)
execute_alu_add = make_alu_instruction(alu_add)
execute_alu_sub = make_alu_instruction(alu_sub_xy)
execute_alu_subn = make_alu_instruction(alu_sub_yx)
execute_alu_shift_right = make_shift_instruction(alu_shift_right)
execute_alu_shift_left = make_shift_instruction(alu_shift_left)
