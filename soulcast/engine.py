"""The engine: window, frame loop, timing and the player entry point."""

from __future__ import annotations

import argparse
import os
import sys
import time
from enum import Enum
from typing import Any, Protocol

from .audio import AudioDevice, SoundChip
from .drawing import PPU, SCREEN_XSIZE, SCREEN_YSIZE
from .input import InputState
from .palette import PaletteBanks
from .testgame import TestGame

REFRESH_RATE = 60
DEFAULT_WORKING_DIRECTORY = "D:/Soulcast/test/Sandbox/Data"
WINDOW_TITLE = "Soulcast"

_RGB565_MASKS = (0xF800, 0x07E0, 0x001F, 0)


class EngineState(Enum):
    """What the frame loop does each tick."""

    MAINGAME = 0
    EXITGAME = 1
    PAUSE = 2
    WAIT = 3


class Game(Protocol):
    def update(self) -> None: ...

    def render(self) -> None: ...


class SoulcastEngine:
    """Owns the screen, the sound chip, the input state and the frame loop.

    A headless engine opens no window and no audio device; its input comes
    from ``key_state`` and ``mouse_pos``.
    """

    def __init__(self, headless: bool = False) -> None:
        self.headless = headless

        self.initialized = False
        self.running = False
        self.mode = EngineState.MAINGAME

        self.borderless = False
        self.vsync = False

        self.scaling_mode = 0
        self.window_scale = 4
        self.refresh_rate = REFRESH_RATE
        self.screen_refresh_rate = REFRESH_RATE
        self.target_refresh_rate = REFRESH_RATE

        self.game_speed = 1
        self.frame_step = False
        self.paused = False

        self.sound_chip = SoundChip()
        self.palettes = PaletteBanks()
        self.ppu = PPU(self.palettes)
        self.input = InputState()
        self.audio = AudioDevice(self.sound_chip)

        self.key_state: Any = {}
        self.mouse_pos: tuple[float, float] = (0, 0)

        self.window = None
        self._screen = None

    def init(self, working_directory: str | os.PathLike = DEFAULT_WORKING_DIRECTORY) -> bool:
        """Enter the data directory and bring up every subsystem.

        Returns False if the directory does not exist or no window could be made.
        """
        if not os.path.exists(working_directory):
            return False
        os.chdir(working_directory)

        self.initialized = True
        self.running = True
        self.mode = EngineState.MAINGAME

        if not self.headless and not self._open_window():
            self.running = False
            return False

        self.ppu.release()  # a fresh, zeroed frame buffer
        if not self.headless:
            self.audio.init()
        self.input.init()
        self.ppu.init()
        return True

    def _open_window(self) -> bool:
        import pygame

        os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
        flags = pygame.RESIZABLE
        if self.borderless:
            flags |= pygame.NOFRAME
        try:
            pygame.display.init()
            self.window = pygame.display.set_mode(
                (SCREEN_XSIZE * self.window_scale, SCREEN_YSIZE * self.window_scale), flags
            )
            pygame.display.set_caption(WINDOW_TITLE)
        except pygame.error as exc:
            print(f"ERROR: Failed to create window!\nError Message: {exc}", file=sys.stderr)
            return False
        self._screen = pygame.Surface((self.ppu.width, self.ppu.height), 0, 16, _RGB565_MASKS)
        return True

    def _read_input(self) -> tuple[Any, tuple[float, float]]:
        if self.headless or self.window is None:
            return self.key_state, self.mouse_pos
        import pygame

        return pygame.key.get_pressed(), pygame.mouse.get_pos()

    def step(self, game: Game) -> None:
        """Run one frame: events, ``game_speed`` game ticks, then present."""
        self.running = self.process_events()

        for _ in range(self.game_speed):
            key_state, mouse = self._read_input()
            self.input.process(key_state, mouse)

            if not self.paused or self.frame_step:
                if self.mode is EngineState.MAINGAME:
                    game.update()
                    game.render()
                elif self.mode is EngineState.EXITGAME:
                    self.running = False

        self.present()
        self.frame_step = False

    def run(self, game: Game) -> None:
        """Step frames at ``refresh_rate`` until the engine stops, then release it."""
        period = 1.0 / self.refresh_rate
        next_frame = time.perf_counter()

        while self.running:
            if not self.vsync:
                now = time.perf_counter()
                if now < next_frame:
                    time.sleep(next_frame - now)
                    continue
                next_frame = now + period
            self.step(game)

        self.release()

    def present(self) -> None:
        """Show the frame buffer in the window, integer-scaled and centred."""
        if self.headless or self.window is None or self._screen is None:
            return
        import pygame

        data = self.ppu.frame_buffer.tobytes()
        row = self.ppu.width * 2
        pitch = self._screen.get_pitch()
        proxy = self._screen.get_buffer()
        if pitch == row:
            proxy.write(data, 0)
        else:
            for y in range(self.ppu.height):
                proxy.write(data[y * row:(y + 1) * row], y * pitch)
        del proxy

        window = pygame.display.get_surface()
        window.fill((0, 0, 0))
        win_w, win_h = window.get_size()
        scale = max(1, min(win_w // self.ppu.width, win_h // self.ppu.height))
        size = (self.ppu.width * scale, self.ppu.height * scale)
        scaled = pygame.transform.scale(self._screen, size)
        window.blit(scaled, ((win_w - size[0]) // 2, (win_h - size[1]) // 2))
        pygame.display.flip()

    def release(self) -> None:
        """Shut down every subsystem and close the window."""
        self.ppu.release()
        self.input.release()
        if not self.headless:
            import pygame

            self.audio.release()
            pygame.display.quit()
            pygame.quit()
        self.window = None
        self._screen = None
        self.initialized = False

    def process_events(self) -> bool:
        """Drain window events; False once the user asked to quit."""
        if self.headless or self.window is None:
            return True
        import pygame

        for event in pygame.event.get():
            if event.type in (pygame.QUIT, pygame.APP_TERMINATING):
                self.mode = EngineState.EXITGAME
                return False
        return True


def main(argv: list[str] | None = None) -> int:
    """Start the player in a data directory and run the game."""
    parser = argparse.ArgumentParser(prog="soulcast", description="Run the Soulcast player.")
    parser.add_argument("data_dir", nargs="?", default=DEFAULT_WORKING_DIRECTORY,
                        help="directory holding the game data")
    args = parser.parse_args(argv)

    engine = SoulcastEngine()
    if not engine.init(args.data_dir):
        print(f"soulcast: cannot start in {args.data_dir}", file=sys.stderr)
        return 1

    try:
        game = TestGame(engine)
    except Exception:
        engine.release()
        raise
    engine.run(game)
    return 0


if __name__ == "__main__":
    sys.exit(main())