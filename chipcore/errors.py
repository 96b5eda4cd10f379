"""Fault codes and exceptions raised or reported by the interpreter."""

from enum import IntEnum
from typing import Optional


class Fault(IntEnum):
    """Fault code stored in the emulator state. Anything but NONE halts the core."""
    NONE = 0
    STACK_OVERFLOW = 1
    STACK_UNDERFLOW = 2
    UNKNOWN_OPCODE = 3
    MEMORY_OUT_OF_BOUNDS = 4


class Chip8Error(Exception):
    """Base class for every condition surfaced by the interpreter."""
    fault = Fault.NONE


class RomTooLarge(Chip8Error):
    """ROM does not fit between the program start and the end of memory."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"ROM is {size} bytes, only {capacity} bytes available")


class StackOverflow(Chip8Error):
    fault = Fault.STACK_OVERFLOW

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"Stack overflow on call at 0x{pc:03X}")


class StackUnderflow(Chip8Error):
    fault = Fault.STACK_UNDERFLOW

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"Stack underflow on return at 0x{pc:03X}")


class UnknownOpcode(Chip8Error):
    fault = Fault.UNKNOWN_OPCODE

    def __init__(self, word: int, pc: int):
        self.word = word
        self.pc = pc
        super().__init__(f"Unknown opcode 0x{word:04X} at 0x{pc:03X}")


class MemoryOutOfBounds(Chip8Error):
    fault = Fault.MEMORY_OUT_OF_BOUNDS

    def __init__(self, address: int, pc: int):
        self.address = address
        self.pc = pc
        super().__init__(f"Memory access out of bounds at 0x{address:04X} (pc=0x{pc:03X})")


def error_from_state(state) -> Optional[Chip8Error]:
    """Rebuild the exception describing the fault recorded in ``state``, if any."""
    fault = Fault(int(state.fault))
    pc = int(state.fault_pc)

    if fault == Fault.NONE:
        return None
    if fault == Fault.STACK_OVERFLOW:
        return StackOverflow(pc)
    if fault == Fault.STACK_UNDERFLOW:
        return StackUnderflow(pc)
    if fault == Fault.UNKNOWN_OPCODE:
        return UnknownOpcode(int(state.fault_word), pc)
    return MemoryOutOfBounds(int(state.fault_address), pc)
