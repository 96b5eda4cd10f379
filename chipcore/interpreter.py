"""Host-facing CHIP-8 interpreter core.

Wraps the functional emulator state behind the contract a host loop drives: one
``step()`` per emulated cycle, ``tick_timers()`` at 60 Hz, ``set_key()`` for input
and read-only views of the display and registers.
"""

from enum import Enum
from typing import NamedTuple, Optional

import jax
import numpy as np

from chipcore import emulator, keypad, timers
from chipcore.errors import Chip8Error, error_from_state
from chipcore.logging import EmulatorLogger
from chipcore.quirks import Quirks
from chipcore.stack import depth
from chipcore.state import EmulatorState, create_state


class Status(Enum):
    RUNNING = "running"
    WAITING = "waiting"    # blocked on FX0A until a key is pressed
    HALTED = "halted"


class StepResult(NamedTuple):
    """Outcome of a cycle: the core status and, when halted, the condition that halted it."""
    status: Status
    error: Optional[Chip8Error] = None

    @property
    def halted(self) -> bool:
        return self.status is Status.HALTED

    def raise_for_status(self) -> "StepResult":
        """Raise the halting condition, if any; return self otherwise."""
        if self.error is not None:
            raise self.error
        return self


class Interpreter:
    """Stateful CHIP-8 interpreter for one emulation session.

    Args:
        rom: ROM bytes to load at 0x200, or None for an empty program
        quirks: Behaviour switches for ambiguous instructions
        seed: Seed for the CXNN random generator
        logger: Logger for ROM loads and halts; a quiet default is used when omitted
    """

    def __init__(
        self,
        rom: Optional[bytes] = None,
        quirks: Quirks = Quirks(),
        seed: int = 0,
        logger: Optional[EmulatorLogger] = None,
    ):
        self.quirks = quirks
        self.seed = seed
        self.logger = logger or EmulatorLogger(log_level="WARNING")
        self.state: EmulatorState = create_state(jax.random.PRNGKey(seed), quirks=quirks)
        self._result = StepResult(Status.RUNNING)
        if rom is not None:
            self.reset(rom)

    @classmethod
    def from_file(cls, path, **kwargs) -> "Interpreter":
        with open(path, "rb") as f:
            rom = f.read()
        interpreter = cls(**kwargs)
        interpreter.reset(rom, name=str(path))
        return interpreter

    def reset(self, rom: bytes, name: str = "<rom>") -> None:
        """Reinitialize every register, timer, the stack and the display, then load ``rom``.

        Raises:
            RomTooLarge: the ROM does not fit; the current session is left untouched.
        """
        state = emulator.reset(rom, jax.random.PRNGKey(self.seed), quirks=self.quirks)
        self.state = state
        self._result = StepResult(Status.RUNNING)
        self.logger.log_rom_loaded(name, len(rom))

    def _update_result(self) -> StepResult:
        if bool(self.state.halted):
            if not self._result.halted:
                self._result = StepResult(Status.HALTED, error_from_state(self.state))
                self.logger.log_halt(self._result.error)
        elif bool(self.state.waiting_for_key):
            self._result = StepResult(Status.WAITING)
        else:
            self._result = StepResult(Status.RUNNING)
        return self._result

    def step(self) -> StepResult:
        """Execute exactly one cycle, or one keypad poll while blocked on a key."""
        if self._result.halted:
            return self._result
        self.state = emulator.jit_cycle(self.state)
        return self._update_result()

    def run(self, cycles: int) -> StepResult:
        """Execute ``cycles`` cycles as one compiled batch. Stops doing work once halted."""
        if self._result.halted or cycles <= 0:
            return self._result
        self.state = emulator.run_cycles(self.state, cycles)
        return self._update_result()

    def tick_timers(self) -> None:
        """Count the delay and sound timers down by one (call at 60 Hz)."""
        self.state = timers.tick(self.state)

    def set_key(self, key: int, pressed: bool) -> None:
        self.state = keypad.set_key(self.state, key, pressed)

    def release_all_keys(self) -> None:
        self.state = keypad.release_all(self.state)

    @property
    def status(self) -> StepResult:
        return self._result

    @property
    def halted(self) -> bool:
        return self._result.halted

    @property
    def waiting_for_key(self) -> bool:
        return bool(self.state.waiting_for_key)

    @property
    def display(self) -> np.ndarray:
        """Snapshot of the framebuffer, shape (64, 32), indexed ``[x, y]``."""
        return np.array(self.state.display, dtype=np.bool_)

    @property
    def registers(self) -> list[int]:
        return [int(v) for v in self.state.V]

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def stack_depth(self) -> int:
        return depth(self.state.stack)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def sound_active(self) -> bool:
        return bool(timers.sound_active(self.state))
