"""
Tests for atlas compositing and texture resampling
"""
import numpy as np
import pytest
from PIL import Image

from atlasmith.exceptions import GridInvariantError
from atlasmith.texturing import (
    AtlasRole,
    GridLayout,
    SourceTexture,
    TextureEntry,
    apply_tint,
    compose_atlas,
    compose_diffuse,
    compose_normal,
    plan_grid,
    resample,
)

WHITE = (255, 255, 255, 255)
FLAT = (128, 128, 255, 255)


def _solid(color, size=16, name="tex"):
    return SourceTexture(name, Image.new('RGBA', (size, size), color))


def _cell(atlas, layout, row, col):
    left, top, right, bottom = layout.cell_box(row, col)
    return atlas.pixels[top:bottom, left:right]


class TestDiffuseAtlas:
    """Test diffuse compositing"""

    def test_tint_multiplies_rgb_only(self):
        """Mid-gray tinted pure red composites to half red, alpha untouched"""
        entry = TextureEntry(
            diffuse=_solid((128, 128, 128, 255), size=64),
            tint_enabled=True,
            tint=(1.0, 0.0, 0.0, 1.0),
        )
        layout = plan_grid(1, [(64, 64)], 512, 0)
        atlas = compose_diffuse([entry], layout)

        assert atlas.role is AtlasRole.DIFFUSE
        assert atlas.size == (64, 64)
        assert np.all(atlas.pixels == np.array((128, 0, 0, 255), dtype=np.uint8))

    def test_tint_ignored_when_disabled(self):
        entry = TextureEntry(
            diffuse=_solid((128, 128, 128, 255)),
            tint_enabled=False,
            tint=(1.0, 0.0, 0.0, 1.0),
        )
        layout = GridLayout(rows=1, columns=1, cell_size=16)
        atlas = compose_diffuse([entry], layout)
        assert np.all(atlas.pixels == np.array((128, 128, 128, 255), dtype=np.uint8))

    def test_waste_cells_and_padding_are_white(self):
        """Unoccupied cells and padding rings read back as opaque white"""
        colors = [(200, 0, 0, 255), (0, 200, 0, 255), (0, 0, 200, 255), (10, 20, 30, 255), (90, 90, 90, 255)]
        entries = [TextureEntry(diffuse=_solid(c, name=f"t{i}")) for i, c in enumerate(colors)]
        layout = GridLayout(rows=3, columns=2, cell_size=16, padding=1)
        atlas = compose_diffuse(entries, layout)

        assert atlas.size == (36, 54)
        for index, color in enumerate(colors):
            row, col = layout.cell_for(index)
            assert np.all(_cell(atlas, layout, row, col) == np.array(color, dtype=np.uint8))

        assert np.all(_cell(atlas, layout, 2, 1) == np.array(WHITE, dtype=np.uint8))

        left, top, right, bottom = layout.cell_box(0, 0)
        assert tuple(atlas.pixels[top - 1, left]) == WHITE
        assert tuple(atlas.pixels[bottom, left]) == WHITE
        assert tuple(atlas.pixels[top, left - 1]) == WHITE

    def test_row_zero_is_bottom_of_image(self):
        """Texture space is bottom-up, so entry 0 lands in the bottom row of the buffer"""
        entries = [TextureEntry(diffuse=_solid((255, 0, 0, 255), name="a")),
                   TextureEntry(diffuse=_solid((0, 0, 255, 255), name="b"))]
        layout = GridLayout(rows=2, columns=1, cell_size=16)
        atlas = compose_diffuse(entries, layout)

        assert tuple(atlas.pixels[-1, 0]) == (255, 0, 0, 255)
        assert tuple(atlas.pixels[0, 0]) == (0, 0, 255, 255)

    def test_source_orientation_preserved(self):
        """The top of a source image stays the top of its cell"""
        img = Image.new('RGBA', (16, 16), (0, 0, 255, 255))
        img.paste((255, 0, 0, 255), (0, 0, 16, 8))
        entry = TextureEntry(diffuse=SourceTexture("split", img))
        layout = GridLayout(rows=1, columns=1, cell_size=16)
        atlas = compose_diffuse([entry], layout)

        assert np.array_equal(atlas.pixels, np.array(img))

    def test_resizes_to_cell(self):
        """Larger sources are resampled down to the cell size"""
        entry = TextureEntry(diffuse=_solid((40, 80, 120, 255), size=64))
        layout = GridLayout(rows=1, columns=1, cell_size=16, padding=2)
        atlas = compose_diffuse([entry], layout)

        assert atlas.size == (20, 20)
        assert np.all(_cell(atlas, layout, 0, 0) == np.array((40, 80, 120, 255), dtype=np.uint8))

    def test_threaded_matches_serial(self):
        """Worker pool output is identical to the serial pass"""
        entries = [
            TextureEntry(diffuse=_solid((i * 20, 255 - i * 20, 7, 255), size=32, name=f"t{i}"))
            for i in range(7)
        ]
        layout = plan_grid(len(entries), [(32, 32)] * len(entries), 128, 1)
        serial = compose_diffuse(entries, layout)
        threaded = compose_diffuse(entries, layout, max_workers=4)

        assert np.array_equal(serial.pixels, threaded.pixels)

    def test_too_many_entries_raises(self):
        entries = [TextureEntry(diffuse=_solid(WHITE, name=f"t{i}")) for i in range(3)]
        layout = GridLayout(rows=1, columns=2, cell_size=16)
        with pytest.raises(GridInvariantError):
            compose_diffuse(entries, layout)

    def test_to_image(self):
        entry = TextureEntry(diffuse=_solid((1, 2, 3, 255)))
        layout = GridLayout(rows=1, columns=1, cell_size=16, padding=1)
        image = compose_diffuse([entry], layout).to_image()

        assert image.mode == 'RGBA'
        assert image.size == (18, 18)
        assert image.getpixel((1, 1)) == (1, 2, 3, 255)
        assert image.getpixel((0, 0)) == WHITE


class TestNormalAtlas:
    """Test normal compositing"""

    def test_background_and_missing_normals_are_flat(self):
        """Waste cells and entries without a normal map both read as the flat normal"""
        normal = _solid((200, 100, 50, 255), name="bumpy")
        entries = [
            TextureEntry(diffuse=_solid(WHITE, name="a"), normal=normal),
            TextureEntry(diffuse=_solid(WHITE, name="b")),
            TextureEntry(diffuse=_solid(WHITE, name="c")),
        ]
        layout = GridLayout(rows=2, columns=2, cell_size=16, padding=1)
        atlas = compose_normal(entries, layout)

        assert atlas.role is AtlasRole.NORMAL
        assert np.all(_cell(atlas, layout, 0, 0) == np.array((200, 100, 50, 255), dtype=np.uint8))
        assert np.all(_cell(atlas, layout, 0, 1) == np.array(FLAT, dtype=np.uint8))
        assert np.all(_cell(atlas, layout, 1, 1) == np.array(FLAT, dtype=np.uint8))
        assert tuple(atlas.pixels[0, 0]) == FLAT

    def test_tint_never_applies_to_normals(self):
        entry = TextureEntry(
            diffuse=_solid(WHITE),
            normal=_solid((128, 128, 255, 255)),
            tint_enabled=True,
            tint=(0.0, 0.0, 0.0, 1.0),
        )
        layout = GridLayout(rows=1, columns=1, cell_size=16)
        assert np.all(compose_normal([entry], layout).pixels == np.array(FLAT, dtype=np.uint8))

    def test_compose_atlas_role_dispatch(self):
        entry = TextureEntry(diffuse=_solid((9, 9, 9, 255)))
        layout = GridLayout(rows=1, columns=2, cell_size=16)
        diffuse = compose_atlas([entry], layout, AtlasRole.DIFFUSE)
        normal = compose_atlas([entry], layout, AtlasRole.NORMAL)

        assert tuple(diffuse.pixels[0, 20]) == WHITE
        assert tuple(normal.pixels[0, 20]) == FLAT


class TestSampler:
    """Test resampling and tinting helpers"""

    def test_same_size_is_copy(self):
        img = Image.new('RGB', (16, 16), (10, 20, 30))
        tile = resample(img, 16, AtlasRole.DIFFUSE)
        assert tile.shape == (16, 16, 4)
        assert tuple(tile[0, 0]) == (10, 20, 30, 255)

    def test_linear_path_keeps_vectors_under_zero_alpha(self):
        """Normal resampling is per channel, so alpha does not scale XYZ"""
        img = Image.new('RGBA', (32, 32), (128, 128, 255, 0))
        tile = resample(img, 16, AtlasRole.NORMAL)
        assert tile.shape == (16, 16, 4)
        assert np.all(tile == np.array((128, 128, 255, 0), dtype=np.uint8))

    def test_upsamples_uniform_image(self):
        img = Image.new('RGBA', (1, 1), WHITE)
        for role in AtlasRole:
            tile = resample(img, 32, role)
            assert tile.shape == (32, 32, 4)
            assert np.all(tile == 255)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            resample(Image.new('RGBA', (4, 4)), 0, AtlasRole.DIFFUSE)

    def test_apply_tint(self):
        tile = np.full((2, 2, 4), (100, 200, 50, 100), dtype=np.uint8)
        tinted = apply_tint(tile, (0.5, 1.0, 0.0, 0.25))
        assert tuple(tinted[0, 0]) == (50, 200, 0, 100)
        assert tuple(tile[0, 0]) == (100, 200, 50, 100)
