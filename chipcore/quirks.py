"""Behaviour switches for instructions whose semantics differ between interpreters."""

from flax.struct import dataclass


@dataclass(frozen=True)
class Quirks:
    """Static quirk configuration carried by the emulator state.

    The defaults follow the convention used by most modern emulators.

    Attributes:
        shift_uses_vy: 8XY6/8XYE shift VY and store the result in VX.
        index_overflow_sets_vf: FX1E sets VF when I + VX leaves the 12-bit range.
        load_store_increments_index: FX55/FX65 leave I pointing past the last register.
        jump_uses_vx: BXNN jumps to XNN + VX instead of NNN + V0.
        logic_resets_vf: 8XY1/8XY2/8XY3 reset VF to 0.
        clip_sprites: DXYN clips sprites at the screen edge instead of wrapping them.
        permissive: unknown opcodes become no-ops, stack errors are clamped and
            index-relative memory access wraps at 12 bits instead of halting.
    """
    shift_uses_vy: bool = False
    index_overflow_sets_vf: bool = False
    load_store_increments_index: bool = False
    jump_uses_vx: bool = False
    logic_resets_vf: bool = False
    clip_sprites: bool = False
    permissive: bool = False

    @classmethod
    def modern(cls, **overrides) -> "Quirks":
        return cls(**overrides)

    @classmethod
    def cosmac(cls, **overrides) -> "Quirks":
        """Original COSMAC VIP interpreter behaviour."""
        values = dict(
            shift_uses_vy=True,
            load_store_increments_index=True,
            logic_resets_vf=True,
            clip_sprites=True,
        )
        values.update(overrides)
        return cls(**values)


PRESETS = {
    "modern": Quirks.modern,
    "cosmac": Quirks.cosmac,
}
