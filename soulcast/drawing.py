"""Software picture unit: an RGB565 frame buffer drawn through palette banks."""

from __future__ import annotations

from array import array

from .palette import PaletteBanks
from .sprite import Image, Sprite

SCREEN_XSIZE = 320
SCREEN_YSIZE = 240


def _tdiv(a: int, b: int) -> int:
    """Integer division truncated toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


class PPU:
    """Draws palette-indexed graphics into a 16-bit RGB565 frame buffer."""

    def __init__(self, palettes: PaletteBanks | None = None,
                 width: int = SCREEN_XSIZE, height: int = SCREEN_YSIZE) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("screen size must be positive")
        self.palettes = palettes if palettes is not None else PaletteBanks()
        self.width = width
        self.height = height
        self.frame_buffer = array("H", [0]) * (width * height)
        self.screen_relative = False
        self.init()

    def init(self) -> None:
        """Reset the pitch, the clip rectangle and the screen position."""
        self.pitch = self.width
        self.clip_x1 = 0
        self.clip_x2 = self.width
        self.clip_y1 = 0
        self.clip_y2 = self.height
        self.position = (0, 0)

    def release(self) -> None:
        """Blank the frame buffer and reset the screen state."""
        self.frame_buffer = array("H", [0]) * (self.width * self.height)
        self.init()

    def _packed_palette(self) -> list[int]:
        return [entry.packed() for entry in self.palettes.active()]

    def _color(self, color_index: int) -> int:
        return self.palettes.active()[color_index & 0xFF].packed()

    def _clipped(self, x: int, y: int) -> bool:
        return (x < self.clip_x1 or y < self.clip_y1
                or x >= self.clip_x2 or y >= self.clip_y2)

    def clear_screen(self, color_index: int) -> None:
        """Fill the whole frame buffer with one palette colour."""
        color = self._color(color_index)
        self.frame_buffer = array("H", [color]) * (self.width * self.height)

    def get_pixel(self, x: int, y: int) -> int:
        """The RGB565 value at (x, y), or 0 outside the clip rectangle."""
        if self._clipped(x, y):
            return 0
        return self.frame_buffer[x + y * self.pitch]

    def set_pixel(self, x: int, y: int, color_index: int) -> None:
        """Set one pixel to a palette colour; ignored outside the clip rectangle."""
        if self._clipped(x, y):
            return
        self.frame_buffer[x + y * self.pitch] = self._color(color_index)

    def get_screen_position(self) -> tuple[int, int]:
        return self.position

    def set_screen_position(self, x: int, y: int) -> None:
        self.position = (x, y)

    def draw_rectangle(self, x: int, y: int, width: int, height: int,
                       color_index: int) -> None:
        """Fill a rectangle, clipped to the clip rectangle."""
        color = self._color(color_index)
        if width + x > self.clip_x2:
            width = self.clip_x2 - x
        if x < self.clip_x1:
            width += x - self.clip_x1
            x = self.clip_x1
        if height + y > self.clip_y2:
            height = self.clip_y2 - y
        if y < self.clip_y1:
            height += y - self.clip_y1
            y = self.clip_y1
        if width <= 0 or height <= 0:
            return
        fill = array("H", [color]) * width
        for row in range(y, y + height):
            start = x + row * self.pitch
            self.frame_buffer[start:start + width] = fill

    def _outcode(self, x: int, y: int, initial: bool) -> int:
        code = 0
        if (x >= self.clip_x2) if initial else (x > self.clip_x2):
            code = 2
        elif x < self.clip_x1:
            code = 1
        if (y >= self.clip_y2) if initial else (y > self.clip_y2):
            code |= 8
        elif y < self.clip_y1:
            code |= 4
        return code

    def draw_line(self, x1: int, y1: int, x2: int, y2: int,
                  color_index: int) -> None:
        """Draw a clipped line between two points."""
        color = self._color(color_index)
        dx1, dy1, dx2, dy2 = x1, y1, x2, y2
        f1 = self._outcode(dx1, dy1, True)
        f2 = self._outcode(dx2, dy2, True)

        while f1 or f2:
            if f1 & f2:
                return
            cur = f1 if f1 else f2
            x = y = 0
            if cur & 8:
                div = (dy2 - dy1) or 1
                x = dx1 + ((dx2 - dx1) * _tdiv((self.clip_y2 - dy1) << 8, div) >> 8)
                y = self.clip_y2
            elif cur & 4:
                div = (dy2 - dy1) or 1
                x = dx1 + ((dx2 - dx1) * _tdiv((self.clip_y1 - dy1) << 8, div) >> 8)
                y = self.clip_y1
            elif cur & 2:
                div = (dx2 - dx1) or 1
                x = self.clip_x2
                y = dy1 + ((dy2 - dy1) * _tdiv((self.clip_x2 - dx1) << 8, div) >> 8)
            elif cur & 1:
                div = (dx2 - dx1) or 1
                x = self.clip_x1
                y = dy1 + ((dy2 - dy1) * _tdiv((self.clip_x1 - dx1) << 8, div) >> 8)
            if cur == f1:
                dx1, dy1 = x, y
                f1 = self._outcode(x, y, False)
            else:
                dx2, dy2 = x, y
                f2 = self._outcode(x, y, False)

        def clamp(value: int, lo: int, hi: int) -> int:
            return hi if value > hi else (lo if value < lo else value)

        dx1 = clamp(dx1, self.clip_x1, self.clip_x2)
        dy1 = clamp(dy1, self.clip_y1, self.clip_y2)
        dx2 = clamp(dx2, self.clip_x1, self.clip_x2)
        dy2 = clamp(dy2, self.clip_y1, self.clip_y2)

        size_x = abs(dx2 - dx1)
        size_y = abs(dy2 - dy1)
        step_max = size_y
        h_size = (-size_y >> 2) if size_x <= size_y else (size_x >> 2)

        if dx2 < dx1:
            dx1, dx2 = dx2, dx1
            dy1, dy2 = dy2, dy1

        buffer = self.frame_buffer
        limit = len(buffer)

        def plot(px: int, py: int) -> None:
            index = px + py * self.pitch
            if 0 <= index < limit:
                buffer[index] = color

        if dy1 > dy2:
            while dx1 < dx2 or dy1 >= dy2:
                plot(dx1, dy1)
                if h_size > -size_x:
                    h_size -= step_max
                    dx1 += 1
                if h_size < step_max:
                    dy1 -= 1
                    h_size += size_x
        else:
            while True:
                plot(dx1, dy1)
                if not (dx1 < dx2 or dy1 < dy2):
                    break
                if h_size > -size_x:
                    h_size -= step_max
                    dx1 += 1
                if h_size < step_max:
                    h_size += size_x
                    dy1 += 1

    def draw_background(self, image: Image, x: int, y: int) -> None:
        """Tile ``image`` across the screen from the top row, wrapping at its edges.

        Index 0 is transparent.
        """
        bitmap_width = int(image.width)
        bitmap_height = int(image.height)
        draw_width = min(bitmap_width, self.clip_x2)
        draw_height = min(bitmap_height, self.clip_y2)

        if not self.screen_relative:
            x -= self.position[0]
            y -= self.position[1]

        if draw_width <= 0 or draw_height <= 0:
            return

        spr_x = x % bitmap_width
        spr_y = y % bitmap_height
        src_pitch = image.pitch or bitmap_width
        colors = self._packed_palette()
        pixels = image.pixels
        buffer = self.frame_buffer
        limit = len(buffer)

        dst = 0
        tx1, tx2 = 0, self.clip_x2
        for nscan in range(draw_height):
            ypos = (spr_y + nscan) % bitmap_height
            xpos = spr_x % bitmap_width
            col = tx1
            while col < tx2:
                end = min(col + bitmap_width - xpos, tx2)
                width = end - col
                src = ypos * src_pitch + xpos
                for offset, index in enumerate(pixels[src:src + width]):
                    target = dst + offset
                    if index and target < limit:
                        buffer[target] = colors[index]
                col += width
                dst += width
                xpos = 0

    def draw_sprite(self, sprite: Sprite, x: int, y: int) -> None:
        """Draw the sprite's whole image at (x, y); index 0 is transparent."""
        texture = sprite.image
        if texture is None:
            return

        if not self.screen_relative:
            x += self.position[0]
            y += self.position[1]

        spr_x = spr_y = 0
        width = texture.width
        height = texture.height

        if width + x > self.clip_x2:
            width = self.clip_x2 - x
        if x < self.clip_x1:
            val = x - self.clip_x1
            spr_x -= val
            width += val
            x = self.clip_x1
        if height + y > self.clip_y2:
            height = self.clip_y2 - y
        if y < self.clip_y1:
            val = y - self.clip_y1
            spr_y -= val
            height += val
            y = self.clip_y1
        if width <= 0 or height <= 0:
            return

        colors = self._packed_palette()
        pixels = texture.pixels
        buffer = self.frame_buffer
        for row in range(height):
            src = spr_x + texture.width * (spr_y + row)
            dst = x + self.pitch * (y + row)
            for offset, index in enumerate(pixels[src:src + width]):
                if index:
                    buffer[dst + offset] = colors[index]

    def apply_mosaic_effect(self, size: int) -> None:
        """Replace each size-by-size block with its top-left pixel."""
        if size <= 1:
            return
        buffer = self.frame_buffer
        for by in range(0, self.height, size):
            for bx in range(0, self.width, size):
                color = buffer[by * self.width + bx]
                run = min(size, self.width - bx)
                fill = array("H", [color]) * run
                for py in range(by, min(by + size, self.height)):
                    start = py * self.width + bx
                    buffer[start:start + run] = fill