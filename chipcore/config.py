"""Session configuration.

Defaults mirror ``conf/config.yaml`` (the hydra config used by ``main.py``); the
helpers here merge overrides onto them, validate the result and build the
``Quirks`` it describes.
"""

from typing import Any, Mapping, Optional, Union

from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from chipcore.constants import DEFAULT_INSTRUCTIONS_PER_SECOND, TIMER_HZ
from chipcore.logging import LEVELS
from chipcore.quirks import PRESETS, Quirks

QUIRK_FLAGS = (
    "shift_uses_vy",
    "index_overflow_sets_vf",
    "load_store_increments_index",
    "jump_uses_vx",
    "logic_resets_vf",
    "clip_sprites",
    "permissive",
)

DEFAULT_CONFIG = {
    "rom": None,
    "seed": 0,
    "instructions_per_second": DEFAULT_INSTRUCTIONS_PER_SECOND,
    "timer_hz": TIMER_HZ,
    "log_level": "INFO",
    "quirks": {"preset": "modern", **{flag: None for flag in QUIRK_FLAGS}, "permissive": False},
    "display": {"scale": 10, "color_scheme": "classic"},
    "audio": {"enabled": True, "frequency": 400, "volume": 0.25},
    "headless": {"enabled": False, "cycles": 10000, "progress": True},
}


class ConfigError(ValueError):
    """Invalid session configuration."""


def load_config(overrides: Optional[Union[Mapping[str, Any], DictConfig]] = None) -> DictConfig:
    """Merge ``overrides`` onto the defaults and validate the result.

    Raises:
        ConfigError: unknown keys or values, or non-positive rates.
    """
    base = OmegaConf.create(DEFAULT_CONFIG)
    OmegaConf.set_struct(base, True)
    try:
        cfg = OmegaConf.merge(base, overrides or {})
    except OmegaConfBaseException as e:
        raise ConfigError(str(e)) from e

    if cfg.instructions_per_second <= 0:
        raise ConfigError("instructions_per_second must be positive")
    if cfg.timer_hz <= 0:
        raise ConfigError("timer_hz must be positive")
    if str(cfg.log_level).upper() not in LEVELS:
        raise ConfigError(f"Unknown log level '{cfg.log_level}'. Available: {list(LEVELS)}")
    if cfg.quirks.preset not in PRESETS:
        raise ConfigError(f"Unknown quirk preset '{cfg.quirks.preset}'. Available: {list(PRESETS)}")
    return cfg


def quirks_from_config(cfg: DictConfig) -> Quirks:
    """Build the preset named in ``cfg.quirks`` with every explicitly set flag applied."""
    overrides = {
        flag: bool(cfg.quirks[flag])
        for flag in QUIRK_FLAGS
        if cfg.quirks[flag] is not None
    }
    return PRESETS[cfg.quirks.preset](**overrides)
