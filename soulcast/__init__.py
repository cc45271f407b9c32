"""A small retro-style 2D game engine: palette-based software renderer, PCM sound chip and streams."""

__version__ = "0.1.0"