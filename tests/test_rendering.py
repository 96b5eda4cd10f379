"""Tests for display rendering and console logging."""

import io

import numpy as np
import pytest
from chipcore import display_to_rgb, display_to_text, create_color_scheme
from chipcore.logging import ConsoleLogger, EmulatorLogger, build_progress_bar


def _checker_display():
    display = np.zeros((64, 32), dtype=bool)
    display[0, 0] = True
    display[63, 31] = True
    return display


class TestRendering:
    """Test conversions of the framebuffer."""

    def test_rgb_shape_and_orientation(self):
        frame = display_to_rgb(_checker_display(), scale=1)

        assert frame.shape == (32, 64, 3)
        assert frame.dtype == np.uint8
        assert tuple(frame[0, 0]) == (0, 255, 0)
        assert tuple(frame[31, 63]) == (0, 255, 0)
        assert tuple(frame[0, 63]) == (0, 0, 0)

    def test_rgb_scaling(self):
        frame = display_to_rgb(_checker_display(), scale=4, on_color=(1, 2, 3))

        assert frame.shape == (128, 256, 3)
        assert tuple(frame[3, 3]) == (1, 2, 3)
        assert tuple(frame[4, 4]) == (0, 0, 0)

    def test_color_schemes(self):
        on, off = create_color_scheme("amber")

        assert on == (255, 176, 0)
        assert off == (0, 0, 0)

    def test_unknown_color_scheme(self):
        with pytest.raises(ValueError):
            create_color_scheme("sepia")

    def test_text(self):
        text = display_to_text(_checker_display(), on="#", off=".")
        lines = text.split("\n")

        assert len(lines) == 32
        assert all(len(line) == 64 for line in lines)
        assert lines[0] == "#" + "." * 63
        assert lines[31] == "." * 63 + "#"


class TestLogging:
    """Test level filtering and session messages."""

    def test_level_filtering(self, capsys):
        logger = ConsoleLogger(log_level="WARNING", use_colors=False, show_timestamps=False)

        logger.info("hidden")
        logger.error("shown")

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "[   ERROR][chipcore] shown" in out

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            ConsoleLogger(log_level="LOUD")

    def test_session_start_lists_nested_config(self, capsys):
        logger = EmulatorLogger(use_colors=False)

        logger.log_session_start({"rom": "pong.ch8", "quirks": {"preset": "cosmac"}})

        out = capsys.readouterr().out
        assert "rom: pong.ch8" in out
        assert "preset: cosmac" in out

    def test_halt_logged_as_error(self, capsys):
        logger = EmulatorLogger(log_level="ERROR", use_colors=False)

        logger.log_halt(RuntimeError("boom"))

        assert "Core halted: RuntimeError: boom" in capsys.readouterr().out

    def test_progress_bar(self):
        with build_progress_bar(10, file=io.StringIO()) as bar:
            bar.update(10)

        assert bar.n == 10
        assert bar.unit == "cycle"
