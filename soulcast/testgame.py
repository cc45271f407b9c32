"""A sample game: scrolling backgrounds, a sprite and a PCM wavetable toy."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from .audio import PCMChannel, load_4bit_pcm_file
from .drawing import SCREEN_YSIZE
from .input import InputButtons
from .sprite import Image, Sprite

logger = logging.getLogger(__name__)

CLEAR_COLOR = 9
ACCELERATION = 0.02
SPEED_SCALE = 6.0


def pcm_sample_path(index: int) -> str:
    """Relative path of a programmable-wave sample, numbered from two digits."""
    return f"SoundFX/programmable_wave_samples/{index:02d}.pcm"


@dataclass
class Entity(ABC):
    """Something in the game world that updates and draws itself each frame."""

    entity_index: int = 0
    x: int = 0
    y: int = 0

    @abstractmethod
    def update(self) -> None:
        """Advance one frame."""

    @abstractmethod
    def render(self) -> None:
        """Draw the entity."""


@dataclass
class PlayerEntity(Entity):
    """The player; it only counts the frames it has been updated and drawn."""

    updates: int = 0
    renders: int = 0

    def update(self) -> None:
        """Count one updated frame."""
        self.updates += 1

    def render(self) -> None:
        """Count one drawn frame."""
        self.renders += 1


class TestGame:
    """Scrolls two backgrounds under a sprite and plays PCM samples.

    Left and right scroll and change the mosaic size; up and down step
    through the wave samples; the mouse height sets the sample pitch.
    """

    __test__ = False

    def __init__(self, engine: Any, root: Union[str, os.PathLike] = ".") -> None:
        self.engine = engine
        self.root = Path(root)

        self.pos_x = 0.0
        self.pos_y = 0.0
        self.speed = 0.0
        self.camera = (0, 0)
        self.file_test = 0
        self.mosaic = 1

        self.foreground = Image()
        self.foreground.load(self.root / "Sprites/switch.png")
        self.background = Image()
        self.background.load(self.root / "Sprites/palacebg.png")
        self.player_image = Image()
        self.player_image.load(self.root / "Sprites/mario.png")

        palettes = engine.palettes
        palettes.load_bank(0, self.root / "Palettes/switch.pal")
        palettes.load_bank(1, self.root / "Palettes/palacebg.pal")
        palettes.load_bank(2, self.root / "Palettes/mario.pal")

        self.sprite = Sprite(image=self.player_image)

    def _load_sample(self, index: int) -> None:
        path = self.root / pcm_sample_path(index)
        try:
            channel = load_4bit_pcm_file(path)
        except OSError:
            logger.error("Failed to open 4-bit PCM file: %s", path)
            channel = PCMChannel()
        self.engine.sound_chip.pcm = channel
        logger.info("Loading sample %s", pcm_sample_path(index))

    def update(self) -> None:
        """Apply one frame of input."""
        inp = self.engine.input

        if inp.is_button_down(InputButtons.RIGHT):
            self.speed += ACCELERATION
        elif self.speed > 0.0:
            self.speed -= ACCELERATION

        if inp.is_button_down(InputButtons.LEFT):
            self.speed -= ACCELERATION
        elif self.speed < 0.0:
            self.speed += ACCELERATION

        self.pos_x += SPEED_SCALE * self.speed
        self.camera = (int(self.pos_x), int(self.pos_y))

        if inp.is_button_pressed(InputButtons.DOWN):
            self.file_test -= 1
            self._load_sample(self.file_test)
        if inp.is_button_pressed(InputButtons.UP):
            self.file_test += 1
            self._load_sample(self.file_test)
        if inp.is_button_pressed(InputButtons.LEFT):
            self.mosaic -= 1
        if inp.is_button_pressed(InputButtons.RIGHT):
            self.mosaic += 1

        mouse_freq = -(inp.mouse_y - SCREEN_YSIZE * self.engine.window_scale)
        self.engine.audio.set_pcm_freq(mouse_freq)
        self.engine.audio.set_pcm_pan(0.0)

    def render(self) -> None:
        """Draw the scene into the frame buffer."""
        ppu = self.engine.ppu
        palettes = self.engine.palettes

        ppu.clear_screen(CLEAR_COLOR)
        ppu.set_screen_position(-self.camera[0], -self.camera[1])

        palettes.set_active(1)
        ppu.draw_background(self.background, 0, 192)

        palettes.set_active(0)
        ppu.draw_background(self.foreground, 0, 184)

        palettes.set_active(2)
        ppu.draw_sprite(self.sprite, 64, 168)

        ppu.apply_mosaic_effect(self.mosaic)