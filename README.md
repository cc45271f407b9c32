# soulcast

A small retro-style 2D game engine. It draws into a 320×240 RGB565 frame
buffer through eight palette banks of 256 colours each. It tiles wrapping
backgrounds and draws clipped sprites from indexed PNG images. Sound comes
from a small sound chip that plays a 32-step wavetable of 4-bit PCM samples.

## Installing

```
pip install .
```

Install the `test` extra to run the tests:

```
pip install .[test]
pytest
```

## Running

```
soulcast path/to/data
```

The engine first changes into the data directory. If no directory is given,
it uses a built-in default path. If the directory does not exist, or no
window can be opened, the command prints an error and exits with status 1.

The directory must hold:

- `Sprites/switch.png`, `Sprites/palacebg.png` and `Sprites/mario.png`:
  indexed-colour PNG images.
- `Palettes/switch.pal`, `Palettes/palacebg.pal` and `Palettes/mario.pal`:
  JASC-PAL palettes.
- `SoundFX/programmable_wave_samples/NN.pcm`: 16-byte files, each holding
  32 packed 4-bit samples.

The bundled test game (`soulcast.testgame.TestGame`) scrolls two backgrounds
under a sprite. The controls are:

- Holding left or right accelerates the camera. Pressing left or right also
  shrinks or grows the mosaic block size.
- Pressing up or down loads the next or previous PCM sample.
- The height of the mouse in the window sets the PCM playback frequency.

## Modules

- `soulcast.mathutil`: `clamp`, `lerp`, `approach`, `map_range`,
  `clamped_map`, `repeat`, `angle_diff`, `angle_lerp`, `sign`, `mod`. It also
  has the `Endian` enum and the helpers `is_endian` and `swap_endian`.
- `soulcast.stream`: the `Stream` base class and three streams:
  - `MemoryStream` works over a caller-owned buffer; it is read-only over
    `bytes`.
  - `BufferStream` works over a buffer that grows as it is written.
  - `FileStream` is a context manager over a binary file.

  Every stream can `read`, `write`, `pipe`, `read_string` and `read_line`. It
  also reads and writes 8–64-bit integers and 32/64-bit floats in either byte
  order. Reading past the end raises `EOFError`.
- `soulcast.filesystem`:
  - `File` and `FileMode`. `File.open` returns `None` when the file cannot be
    opened.
  - Directory helpers: `create_directory`, `directory_exists`,
    `delete_directory`, `enumerate_directory` and `explore_directory`.
  - Lexical path helpers: `normalize`, `join`, `get_file_name`,
    `get_path_after` and others.
  - `set_clipboard`, `get_clipboard` and `open_url`.
- `soulcast.palette`: `PaletteEntry`, whose `packed()` returns the colour as
  RGB565, and `PaletteBanks`, which can load, activate, rotate and set
  colours. `load_jasc_palette` reads a JASC-PAL file and raises
  `PaletteError` on bad input.
- `soulcast.sprite`: `Image`, which loads indexed PNG files and raises
  `ImageError` for anything else, plus `Sprite`, `Animator` and
  `bytes_per_pixel`.
- `soulcast.drawing`: `PPU`, the software renderer. It can clear the screen,
  get and set pixels, and draw rectangles, lines, wrapping backgrounds and
  sprites. It also has a mosaic effect. Palette index 0 is transparent in
  backgrounds and sprites.
- `soulcast.audio`: the channels `PCMChannel`, `PulseChannel` and
  `NoiseChannel`, and `SoundChip`. `AudioDevice` streams the chip through the
  pygame mixer. `load_4bit_pcm_file` reads a sample file.
- `soulcast.input`: `InputState` tracks held and just-pressed `InputButtons`
  from a key-state lookup and a mouse position.
- `soulcast.scene`: `Scene`, `SceneObject` and `BackgroundLayer`.
- `soulcast.engine`: `SoulcastEngine` and `main`. `SoulcastEngine` owns the
  window, PPU, palettes, input and audio. Its `step` runs one frame and its
  `run` keeps the frame rate. An engine created with `headless=True` opens no
  window and no audio device, and takes its input from `key_state` and
  `mouse_pos`.

## Examples

```python
from soulcast.stream import BufferStream
from soulcast.mathutil import Endian

buf = BufferStream()
buf.write_uint16(0x1234, Endian.BIG)
buf.seek(0)
assert buf.read_uint16(Endian.BIG) == 0x1234
```

```python
from soulcast.drawing import PPU
from soulcast.palette import PaletteEntry

ppu = PPU()
ppu.palettes.set_color(0, 1, PaletteEntry(255, 0, 0))
ppu.set_pixel(0, 0, 1)
assert ppu.get_pixel(0, 0) == 0xF800
```

## What it does not do

- `SoundChip.render` mixes only the PCM channel. The pulse and noise channels
  generate samples but are not heard.
- Input comes from the keyboard (the arrow keys) and the mouse only. There is
  no gamepad support.
- `Scene.render_objects` returns the objects in drawing order but draws
  nothing itself.
- There is no circle drawing and no editor or asset tooling. The only game
  is the bundled test game.