"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chipcore.constants import STACK_SIZE
from chipcore.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack, unmasked. On overflow the stack is returned unchanged."""
    overflow = stack.pointer >= STACK_SIZE
    slot = jnp.minimum(stack.pointer, STACK_SIZE - 1)
    address = jnp.astype(address, jnp.uint16)
    new_data = stack.data.at[slot].set(jnp.where(overflow, stack.data[slot], address))
    new_pointer = jnp.where(overflow, stack.pointer, stack.pointer + 1)
    return stack.replace(data=new_data, pointer=jnp.astype(new_pointer, jnp.uint8)), overflow


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack. On underflow the stack is returned unchanged."""
    underflow = stack.pointer == 0
    new_pointer = jnp.where(underflow, stack.pointer, stack.pointer - 1)
    new_pointer = jnp.astype(new_pointer, jnp.uint8)
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(jnp.where(underflow, popped_address, 0))
    return stack.replace(data=new_data, pointer=new_pointer), popped_address, underflow


def depth(stack: StackState) -> int:
    return int(stack.pointer)
