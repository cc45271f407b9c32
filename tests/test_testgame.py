import pytest
from PIL import Image as PILImage

from soulcast.drawing import SCREEN_YSIZE
from soulcast.engine import SoulcastEngine
from soulcast.input import InputButtons
from soulcast.palette import PaletteEntry, PaletteError
from soulcast.testgame import Entity, PlayerEntity, TestGame, pcm_sample_path


def _png(path, size, index):
    path.parent.mkdir(parents=True, exist_ok=True)
    img = PILImage.new("P", size, index)
    img.putpalette([v for i in range(256) for v in (i, i, i)])
    img.save(path)


def _pal(path, colors):
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = ["JASC-PAL", "0100", str(len(colors))]
    lines += [f"{r} {g} {b}" for r, g, b in colors]
    path.write_text("\n".join(lines) + "\n")


BANK0 = [(i * 10, i * 5, i * 3) for i in range(16)]
BANK2 = [(0, 0, 0), (200, 100, 50)]


@pytest.fixture
def game_dir(tmp_path):
    _png(tmp_path / "Sprites/switch.png", (4, 4), 0)
    _png(tmp_path / "Sprites/palacebg.png", (4, 4), 0)
    _png(tmp_path / "Sprites/mario.png", (2, 2), 1)
    _pal(tmp_path / "Palettes/switch.pal", BANK0)
    _pal(tmp_path / "Palettes/palacebg.pal", BANK0)
    _pal(tmp_path / "Palettes/mario.pal", BANK2)
    return tmp_path


@pytest.fixture
def engine():
    return SoulcastEngine(headless=True)


def test_pcm_sample_path_pads_to_two_digits():
    assert pcm_sample_path(3) == "SoundFX/programmable_wave_samples/03.pcm"
    assert pcm_sample_path(12).endswith("/12.pcm")
    assert pcm_sample_path(-1).endswith("/-1.pcm")


def test_entity_is_abstract():
    with pytest.raises(TypeError):
        Entity()


def test_player_entity_keeps_its_fields():
    player = PlayerEntity(x=3, y=4)
    player.update()
    player.render()
    assert (player.entity_index, player.x, player.y) == (0, 3, 4)


def test_missing_palette_raises(game_dir, engine):
    (game_dir / "Palettes/mario.pal").unlink()
    with pytest.raises(PaletteError):
        TestGame(engine, game_dir)


def test_constructor_loads_banks_and_sprite(game_dir, engine):
    game = TestGame(engine, game_dir)
    assert engine.palettes.banks[2][1] == PaletteEntry(*BANK2[1])
    assert game.sprite.image is game.player_image
    assert (game.player_image.width, game.player_image.height) == (2, 2)


def test_holding_right_accelerates_and_moves_camera(game_dir, engine):
    game = TestGame(engine, game_dir)
    engine.input.buttons[InputButtons.RIGHT].set_held()
    for _ in range(10):
        game.update()
    assert game.speed > 0
    assert game.pos_x > 0
    assert game.camera == (int(game.pos_x), 0)

    before = game.speed
    engine.input.buttons[InputButtons.RIGHT].set_released()
    game.update()
    assert game.speed < before


def test_pressing_left_and_right_changes_mosaic(game_dir, engine):
    game = TestGame(engine, game_dir)
    engine.input.buttons[InputButtons.LEFT].set_held()
    game.update()
    assert game.mosaic == 0
    engine.input.buttons[InputButtons.LEFT].set_released()
    engine.input.buttons[InputButtons.RIGHT].set_held()
    game.update()
    assert game.mosaic == 1


def test_pressing_up_loads_next_sample(game_dir, engine):
    sample = game_dir / pcm_sample_path(1)
    sample.parent.mkdir(parents=True)
    sample.write_bytes(bytes([0xF0, 0x5A]) * 8)
    game = TestGame(engine, game_dir)
    engine.input.buttons[InputButtons.UP].set_held()
    game.update()
    assert game.file_test == 1
    pcm = engine.sound_chip.pcm
    assert pcm.empty is False
    assert pcm.data[:4] == [0xF, 0x0, 0x5, 0xA]


def test_missing_sample_leaves_silent_channel(game_dir, engine):
    game = TestGame(engine, game_dir)
    engine.input.buttons[InputButtons.DOWN].set_held()
    game.update()
    assert game.file_test == -1
    assert engine.sound_chip.pcm.empty is True


def test_mouse_height_sets_pcm_pitch(game_dir, engine):
    game = TestGame(engine, game_dir)
    engine.sound_chip.pcm.pan = 0.5
    engine.input.mouse_y = 100
    game.update()
    assert engine.sound_chip.pcm.frequency == SCREEN_YSIZE * engine.window_scale - 100
    assert engine.sound_chip.pcm.pan == 0.0


def test_render_draws_sprite_over_cleared_screen(game_dir, engine):
    game = TestGame(engine, game_dir)
    game.render()
    ppu = engine.ppu
    assert ppu.get_pixel(0, 0) == PaletteEntry(*BANK0[9]).packed()
    assert ppu.get_pixel(64, 168) == PaletteEntry(*BANK2[1]).packed()
    assert ppu.get_pixel(65, 169) == PaletteEntry(*BANK2[1]).packed()
    assert engine.palettes.active_bank == 2