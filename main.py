"""
Interactive CHIP-8 front-end: pygame window, keyboard input and sound timer tone.

    python main.py rom=games/PONG.ch8 instructions_per_second=700 quirks.preset=cosmac
    python main.py rom=games/PONG.ch8 headless.enabled=true headless.cycles=50000
"""

import time

import hydra
import numpy as np
import pygame
from omegaconf import DictConfig, OmegaConf

from chipcore.config import load_config, quirks_from_config
from chipcore.host import Scheduler, run_frame, run_headless
from chipcore.interpreter import Interpreter
from chipcore.logging import EmulatorLogger
from chipcore.rendering import create_color_scheme, display_to_rgb, display_to_text
from chipcore.constants import SCREEN_WIDTH, SCREEN_HEIGHT

# Hex keypad laid out on the left side of a QWERTY keyboard:
# 1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

SAMPLE_RATE = 44100


def build_tone(frequency: float, volume: float, sample_rate: int = SAMPLE_RATE) -> pygame.mixer.Sound:
    """One second of square wave, looped while the sound timer runs."""
    t = np.arange(sample_rate) / sample_rate
    wave = np.where(np.sin(2 * np.pi * frequency * t) >= 0, 1.0, -1.0)
    samples = (wave * volume * 32767).astype(np.int16)
    return pygame.sndarray.make_sound(samples)


def run_emulator(cfg: DictConfig, interpreter: Interpreter, logger: EmulatorLogger):
    """Main emulator loop."""
    scale = cfg.display.scale
    on_color, off_color = create_color_scheme(cfg.display.color_scheme)

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption("CHIP-8")
    clock = pygame.time.Clock()

    tone = None
    if cfg.audio.enabled:
        pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        tone = build_tone(cfg.audio.frequency, cfg.audio.volume)
    playing = False

    scheduler = Scheduler(cfg.instructions_per_second, cfg.timer_hz)
    total_cycles = 0
    total_ticks = 0
    start_time = time.time()
    last_time = start_time
    running = True
    paused = False

    logger.info("Controls: ESC=Quit, P=Pause, F5=Reset")

    while running:
        clock.tick(60)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                    logger.info("Paused" if paused else "Resumed")
                elif event.key == pygame.K_F5:
                    interpreter.reset(read_rom(cfg), name=cfg.rom)
                    scheduler.reset()
                elif event.key in KEY_MAP:
                    interpreter.set_key(KEY_MAP[event.key], True)
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    interpreter.set_key(KEY_MAP[event.key], False)

        now = time.time()
        elapsed, last_time = now - last_time, now

        if not paused and not interpreter.halted:
            cycles, ticks = scheduler.advance(elapsed)
            result = run_frame(interpreter, cycles, ticks)
            total_cycles += cycles
            total_ticks += ticks
            if result.halted:
                print(display_to_text(interpreter.display))

        if tone is not None:
            if interpreter.sound_active and not playing:
                tone.play(loops=-1)
                playing = True
            elif not interpreter.sound_active and playing:
                tone.stop()
                playing = False

        frame = display_to_rgb(interpreter.display, scale, on_color, off_color)
        pygame.surfarray.blit_array(screen, frame.swapaxes(0, 1))
        pygame.display.flip()

    logger.log_stats(total_cycles, total_ticks, time.time() - start_time)
    pygame.quit()


def read_rom(cfg: DictConfig) -> bytes:
    with open(cfg.rom, "rb") as f:
        return f.read()


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    cfg = load_config(cfg)
    if cfg.rom is None:
        raise SystemExit("Usage: python main.py rom=<path to .ch8 file>")

    logger = EmulatorLogger(log_level=cfg.log_level)
    logger.log_session_start(OmegaConf.to_container(cfg))

    interpreter = Interpreter(quirks=quirks_from_config(cfg), seed=cfg.seed, logger=logger)
    interpreter.reset(read_rom(cfg), name=cfg.rom)

    if cfg.headless.enabled:
        result = run_headless(
            interpreter,
            cfg.headless.cycles,
            instructions_per_second=cfg.instructions_per_second,
            timer_hz=cfg.timer_hz,
            progress=cfg.headless.progress,
            logger=logger,
        )
        print(display_to_text(interpreter.display))
        logger.info(f"Final status: {result.status.value}")
        return

    run_emulator(cfg, interpreter, logger)


if __name__ == "__main__":
    main()
