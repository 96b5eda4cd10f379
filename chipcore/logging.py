"""Console logging for emulation sessions.

Levelled, coloured console output with elapsed-time stamps, an ``EmulatorLogger``
with session-specific messages, and a tqdm progress bar for headless runs.
"""

import time
import sys
from typing import Any, Dict, Optional

from tqdm import tqdm

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# ANSI colour per level, in LEVELS order
_LEVEL_COLORS = ("\033[36m", "\033[32m", "\033[33m", "\033[31m", "\033[35m")
_RESET = "\033[0m"


class ConsoleLogger:
    """Console logger filtering by level.

    Colours are only used when stdout is a terminal.
    """

    def __init__(
        self,
        name: str = "chipcore",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.use_colors = use_colors and getattr(sys.stdout, "isatty", lambda: False)()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def enabled_for(self, level: str) -> bool:
        return LEVELS.index(level.upper()) >= LEVELS.index(self.log_level)

    def _format_message(self, level: str, message: str) -> str:
        prefix = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{_LEVEL_COLORS[LEVELS.index(level)]}{tag}{_RESET}"
        return f"{prefix}{tag}[{self.name}] {message}"

    def log(self, level: str, message: str):
        level = level.upper()
        if self.enabled_for(level):
            print(self._format_message(level, message), flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger for interpreter sessions."""

    def __init__(self, name: str = "chipcore", **kwargs):
        super().__init__(name, **kwargs)

    def log_session_start(self, config: Dict[str, Any]):
        """Log the session configuration."""
        self.info("=" * 60)
        self.info("Starting CHIP-8 session with configuration:")
        for key, value in config.items():
            if isinstance(value, dict):
                self.info(f"  {key}:")
                for sub_key, sub_value in value.items():
                    self.info(f"    {sub_key}: {sub_value}")
            else:
                self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_rom_loaded(self, name: str, size: int):
        self.info(f"Loaded {name} ({size} bytes)")

    def log_halt(self, error: Optional[Exception]):
        """Log the condition that halted the core."""
        if error is None:
            self.warning("Core halted")
        else:
            self.error(f"Core halted: {type(error).__name__}: {error}")

    def log_stats(self, cycles: int, ticks: int, elapsed: float):
        """Log throughput figures for a finished run."""
        rate = cycles / elapsed if elapsed > 0 else 0.0
        self.info(
            f"Executed {cycles:,} cycles and {ticks:,} timer ticks in {elapsed:.2f}s "
            f"({rate:,.0f} cycles/s)"
        )


def build_progress_bar(total: int, desc: Optional[str] = None, disable: bool = False, **kwargs) -> tqdm:
    """Build a tqdm progress bar counting emulated cycles."""
    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)
    if desc is None:
        desc = f"Emulating ({total:,} cycles)"
    return tqdm(total=total, desc=desc, unit="cycle", disable=disable, **kwargs)
