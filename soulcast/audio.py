"""A small sound chip: PCM wavetable, pulse and noise channels, and output."""

from __future__ import annotations

import logging
import math
import os
import struct
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

logger = logging.getLogger(__name__)

SFX_COUNT = 0x100
CHANNEL_COUNT = 0x10
AUDIO_FREQUENCY = 44100
AUDIO_CHANNELS = 4
PCM_CHANNEL_SNAPSHOTS = 32


class WaveType(Enum):
    SQUARE = 0
    SINE = 1
    PULSE_WAVE = 2
    TRIANGLE = 3
    NOISE = 4


class ChannelType(Enum):
    PULSE = 0
    PCM = 1
    NOISE = 2


class AudioInterpolation(Enum):
    NONE = 0  # nearest neighbour
    GAUSSIAN = 1
    HERMITE = 2


def _silence() -> list[int]:
    return [0] * PCM_CHANNEL_SNAPSHOTS


@dataclass
class PCMChannel:
    """A 32-step wavetable of 4-bit samples, played with equal-power panning."""

    data: list[int] = field(default_factory=_silence)
    empty: bool = True
    phase: float = 0.0
    frequency: float = 440.0
    sample_rate: float = float(AUDIO_FREQUENCY)
    pan: float = 0.0  # -1 left, 0 centre, +1 right

    def __post_init__(self) -> None:
        if len(self.data) != PCM_CHANNEL_SNAPSHOTS:
            raise ValueError(f"PCM data must hold {PCM_CHANNEL_SNAPSHOTS} samples")

    def generate_sample(self) -> tuple[float, float]:
        """Produce the next (left, right) sample and advance the phase."""
        if self.empty:
            return 0.0, 0.0
        value = self.data[int(self.phase) % PCM_CHANNEL_SNAPSHOTS]
        sample = (value / 15.0) * 2.0 - 1.0
        left = sample * math.sqrt((1.0 - self.pan) * 0.5)
        right = sample * math.sqrt((1.0 + self.pan) * 0.5)
        self.phase += self.frequency * 32.0 / self.sample_rate
        if self.phase >= 32.0:
            self.phase -= 32.0
        return left, right


@dataclass
class PulseChannel:
    """Square wave with a variable duty cycle."""

    phase: float = 0.0
    freq: float = 440.0
    duty: float = 0.5
    sample_rate: float = 44100.0

    def generate_sample(self) -> float:
        sample = 0.8 if math.fmod(self.phase, 1.0) < self.duty else -0.8
        self.phase += self.freq / self.sample_rate
        return sample


@dataclass
class NoiseChannel:
    """32-bit xorshift noise."""

    lfsr: int = 0xACE1

    def generate_sample(self) -> float:
        value = self.lfsr
        value ^= value >> 7
        value = (value ^ (value << 9)) & 0xFFFFFFFF
        value ^= value >> 13
        self.lfsr = value
        return 0.7 if value & 1 else -0.7


def _clip(value: float) -> float:
    return max(-1.0, min(1.0, value))


@dataclass
class SoundChip:
    """All the channels the mixer draws from."""

    pulse1: PulseChannel = field(default_factory=PulseChannel)
    pulse2: PulseChannel = field(default_factory=PulseChannel)
    pcm: PCMChannel = field(default_factory=PCMChannel)
    noise: NoiseChannel = field(default_factory=NoiseChannel)

    def render(self, frames: int) -> list[tuple[float, float]]:
        """Mix ``frames`` stereo frames, each channel clipped to [-1, 1]."""
        out = []
        for _ in range(frames):
            left, right = self.pcm.generate_sample()
            out.append((_clip(left), _clip(right)))
        return out


def load_4bit_pcm_file(path: Union[str, os.PathLike]) -> PCMChannel:
    """Load 32 packed 4-bit samples, high nibble first, into a PCM channel."""
    with open(path, "rb") as handle:
        raw = handle.read(PCM_CHANNEL_SNAPSHOTS // 2)
    samples = [nibble for byte in raw for nibble in (byte >> 4, byte & 0x0F)]
    if len(samples) != PCM_CHANNEL_SNAPSHOTS:
        logger.warning("expected %d 4-bit samples, got %d",
                       PCM_CHANNEL_SNAPSHOTS, len(samples))
    channel = PCMChannel()
    channel.data[:len(samples)] = samples
    channel.empty = False
    return channel


class AudioDevice:
    """Plays a sound chip through the pygame mixer from a feeder thread."""

    def __init__(self, sound_chip: SoundChip | None = None,
                 chunk_frames: int = 1024) -> None:
        self.sound_chip = sound_chip if sound_chip is not None else SoundChip()
        self._chunk_frames = chunk_frames
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._channel = None
        self._format: tuple[int, int, int] | None = None

    def init(self) -> None:
        """Open the default playback device and start streaming."""
        import pygame

        if self._thread is not None:
            return
        try:
            pygame.mixer.init(frequency=AUDIO_FREQUENCY, size=32, channels=2,
                              buffer=self._chunk_frames)
        except pygame.error as exc:
            raise RuntimeError(str(exc)) from exc
        spec = pygame.mixer.get_init()
        if spec is None:
            raise RuntimeError("audio mixer failed to start")
        self._format = spec
        self._channel = pygame.mixer.Channel(0)
        self._stop.clear()
        self._thread = threading.Thread(target=self._feed, daemon=True)
        self._thread.start()

    def release(self) -> None:
        """Stop streaming and close the device."""
        import pygame

        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self._channel = None
        if pygame.mixer.get_init() is not None:
            pygame.mixer.quit()

    def set_pcm_freq(self, freq: float) -> None:
        self.sound_chip.pcm.frequency = freq

    def set_pcm_pan(self, pan: float) -> None:
        self.sound_chip.pcm.pan = pan

    def _encode(self, frames: list[tuple[float, float]]) -> bytes:
        _, size, channels = self._format
        values: list[float] = []
        for left, right in frames:
            if channels == 1:
                values.append((left + right) / 2)
            else:
                values.extend((left, right))
                values.extend([0.0] * (channels - 2))
        if size == 32:
            return struct.pack(f"={len(values)}f", *values)
        if abs(size) == 16:
            return struct.pack(f"={len(values)}h", *(int(v * 32767) for v in values))
        raise RuntimeError(f"unsupported mixer sample size {size}")

    def _feed(self) -> None:
        import pygame

        pause = self._chunk_frames / AUDIO_FREQUENCY / 4
        while not self._stop.is_set():
            if self._channel.get_queue() is None:
                chunk = self._encode(self.sound_chip.render(self._chunk_frames))
                sound = pygame.mixer.Sound(buffer=chunk)
                if self._channel.get_busy():
                    self._channel.queue(sound)
                else:
                    self._channel.play(sound)
            else:
                self._stop.wait(pause)