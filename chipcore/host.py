"""Host-side scheduling of instruction cycles and timer ticks.

Instruction throughput and the 60 Hz timer clock are two independent rates. The
host loop measures elapsed wall-clock time and asks the ``Scheduler`` how many
cycles and how many timer ticks are owed.
"""

import time
from typing import Optional

from chipcore.constants import DEFAULT_INSTRUCTIONS_PER_SECOND, TIMER_HZ
from chipcore.interpreter import Interpreter, StepResult
from chipcore.logging import EmulatorLogger, build_progress_bar


class Scheduler:
    """Converts elapsed time into whole cycles and timer ticks, carrying remainders.

    Args:
        instructions_per_second: Emulated CPU rate
        timer_hz: Timer decrement rate, 60 on original hardware
        max_catch_up: Longest span (seconds) caught up in one call, so that a stalled
            host does not run a huge burst afterwards
    """

    def __init__(
        self,
        instructions_per_second: float = DEFAULT_INSTRUCTIONS_PER_SECOND,
        timer_hz: float = TIMER_HZ,
        max_catch_up: float = 0.25,
    ):
        if instructions_per_second <= 0 or timer_hz <= 0:
            raise ValueError("Rates must be positive")
        self.instructions_per_second = instructions_per_second
        self.timer_hz = timer_hz
        self.max_catch_up = max_catch_up
        self._cycle_budget = 0.0
        self._tick_budget = 0.0

    def advance(self, elapsed: float) -> tuple[int, int]:
        """Account for ``elapsed`` seconds and return ``(cycles, ticks)`` now due."""
        elapsed = min(max(elapsed, 0.0), self.max_catch_up)
        self._cycle_budget += elapsed * self.instructions_per_second
        self._tick_budget += elapsed * self.timer_hz

        cycles = int(self._cycle_budget)
        ticks = int(self._tick_budget)
        self._cycle_budget -= cycles
        self._tick_budget -= ticks
        return cycles, ticks

    def reset(self):
        self._cycle_budget = 0.0
        self._tick_budget = 0.0


def run_frame(interpreter: Interpreter, cycles: int, ticks: int) -> StepResult:
    """Run the cycles owed for one host frame, then the timer ticks owed."""
    result = interpreter.run(cycles) if cycles > 0 else interpreter.status
    for _ in range(ticks):
        interpreter.tick_timers()
    return result


def run_headless(
    interpreter: Interpreter,
    cycles: int,
    instructions_per_second: float = DEFAULT_INSTRUCTIONS_PER_SECOND,
    timer_hz: float = TIMER_HZ,
    progress: bool = False,
    logger: Optional[EmulatorLogger] = None,
) -> StepResult:
    """Run ``cycles`` cycles as fast as possible, in emulated time.

    Timers are ticked as if the cycles had executed at ``instructions_per_second``,
    so game timing matches a real-time run. Stops at the first halt.
    """
    scheduler = Scheduler(instructions_per_second, timer_hz, max_catch_up=float("inf"))
    frame_seconds = 1.0 / timer_hz
    executed = 0
    ticks_run = 0
    result = interpreter.status
    start = time.time()

    with build_progress_bar(cycles, disable=not progress) as bar:
        while executed < cycles and not result.halted:
            frame_cycles, frame_ticks = scheduler.advance(frame_seconds)
            frame_cycles = min(frame_cycles, cycles - executed)
            result = run_frame(interpreter, frame_cycles, frame_ticks)
            executed += frame_cycles
            ticks_run += frame_ticks
            bar.update(frame_cycles)

    if logger is not None:
        logger.log_stats(executed, ticks_run, time.time() - start)
    return result
