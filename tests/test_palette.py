import pytest

from soulcast.palette import (
    PALETTE_BANK_COUNT,
    PALETTE_BANK_SIZE,
    PaletteBanks,
    PaletteEntry,
    PaletteError,
    load_jasc_palette,
    rgb888_to_rgb565,
)


def write_pal(path, colors, header="JASC-PAL", version="0100", count=None):
    lines = [header, version, str(len(colors) if count is None else count)]
    lines += [f"{r} {g} {b}" for r, g, b in colors]
    path.write_text("\n".join(lines) + "\n")
    return path


COLORS = [(10, 20, 30), (255, 0, 128), (7, 8, 9), (200, 100, 50)]


@pytest.mark.parametrize(
    "rgb, expected",
    [((255, 255, 255), 0xFFFF), ((255, 0, 0), 0xF800), ((0, 0, 255), 0x001F)],
)
def test_packed_pins_rgb565(rgb, expected):
    assert PaletteEntry(*rgb).packed() == expected


def test_packed_matches_rgb888_conversion():
    for r in range(0, 256, 17):
        for g in range(0, 256, 15):
            for b in (0, 3, 8, 100, 255):
                assert PaletteEntry(r, g, b).packed() == rgb888_to_rgb565(r, g, b)


def test_load_round_trip(tmp_path):
    path = write_pal(tmp_path / "a.pal", COLORS)
    assert load_jasc_palette(path) == [PaletteEntry(*c) for c in COLORS]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"header": "JASC-PALX"},
        {"version": "0200"},
        {"count": "many"},
        {"count": 10},
        {"count": -1},
    ],
)
def test_load_errors(tmp_path, kwargs):
    path = write_pal(tmp_path / "bad.pal", COLORS, **kwargs)
    with pytest.raises(PaletteError):
        load_jasc_palette(path)


def test_bad_color_line(tmp_path):
    path = tmp_path / "bad.pal"
    path.write_text("JASC-PAL\n0100\n2\n1 2 3\nred green\n")
    with pytest.raises(PaletteError, match="Invalid color format"):
        load_jasc_palette(path)


def test_missing_file(tmp_path):
    with pytest.raises(PaletteError, match="Failed to open file"):
        load_jasc_palette(tmp_path / "nope.pal")


def test_load_bank_pads_with_black(tmp_path):
    banks = PaletteBanks()
    banks.load_bank(3, write_pal(tmp_path / "a.pal", COLORS))
    bank = banks.banks[3]
    assert len(bank) == PALETTE_BANK_SIZE
    assert bank[: len(COLORS)] == [PaletteEntry(*c) for c in COLORS]
    assert all(c == PaletteEntry(0, 0, 0) for c in bank[len(COLORS):])


def test_load_bank_truncates(tmp_path):
    colors = [(i % 256, (i * 3) % 256, 1) for i in range(PALETTE_BANK_SIZE + 20)]
    banks = PaletteBanks()
    banks.load_bank(0, write_pal(tmp_path / "big.pal", colors))
    assert len(banks.banks[0]) == PALETTE_BANK_SIZE
    assert banks.banks[0][-1] == PaletteEntry(*colors[PALETTE_BANK_SIZE - 1])


def test_set_active(tmp_path):
    banks = PaletteBanks()
    banks.load_bank(2, write_pal(tmp_path / "a.pal", COLORS))
    banks.set_active(2)
    assert banks.active() is banks.banks[2]
    with pytest.raises(IndexError):
        banks.set_active(PALETTE_BANK_COUNT)


def _numbered(banks):
    for i in range(PALETTE_BANK_SIZE):
        banks.set_color(0, i, PaletteEntry(i, i, i))
    return list(banks.banks[0])


def test_rotate_right():
    banks = PaletteBanks()
    before = _numbered(banks)
    banks.rotate(0, 2, 5, True)
    after = banks.banks[0]
    assert after[2:6] == [before[5], before[2], before[3], before[4]]
    assert after[:2] == before[:2]
    assert after[6:] == before[6:]


def test_rotate_left():
    banks = PaletteBanks()
    before = _numbered(banks)
    banks.rotate(0, 2, 5, False)
    assert banks.banks[0][2:6] == [before[3], before[4], before[5], before[2]]


def test_rotate_right_then_left_is_identity():
    banks = PaletteBanks()
    before = _numbered(banks)
    banks.rotate(0, 10, 40, True)
    banks.rotate(0, 10, 40, False)
    assert banks.banks[0] == before


def test_rotate_rel_matches_rotate():
    first, second = PaletteBanks(), PaletteBanks()
    _numbered(first)
    _numbered(second)
    first.rotate_rel(0, 4, 6, True)
    second.rotate(0, 4, 9, True)
    assert first.banks[0] == second.banks[0]


def test_set_color_out_of_range():
    banks = PaletteBanks()
    with pytest.raises(IndexError):
        banks.set_color(0, PALETTE_BANK_SIZE, PaletteEntry(1, 2, 3))