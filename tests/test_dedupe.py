"""
Tests for (texture, tint) entry deduplication
"""
import pytest
from PIL import Image

from atlasmith.texturing import SourceTexture, TextureEntry, WarningKind, dedupe_entries


def _tex(name):
    return SourceTexture(name, Image.new('RGBA', (16, 16), (255, 255, 255, 255)))


RED = (1.0, 0.0, 0.0, 1.0)


class TestDedupe:
    """Test entry collapsing"""

    def test_same_texture_and_tint_collapse(self):
        brick = _tex("brick")
        raw = [
            TextureEntry(diffuse=brick),
            TextureEntry(diffuse=brick),
            TextureEntry(diffuse=brick, tint_enabled=True, tint=RED),
        ]
        result = dedupe_entries(raw)

        assert len(result.entries) == 2
        assert result.entry_index_of == [0, 0, 1]
        assert result.warnings == []

    def test_identity_not_pixels(self):
        """Two handles with identical pixels stay separate entries"""
        result = dedupe_entries([TextureEntry(diffuse=_tex("a")), TextureEntry(diffuse=_tex("a"))])
        assert len(result.entries) == 2

    def test_first_seen_order(self):
        a, b, c = _tex("a"), _tex("b"), _tex("c")
        raw = [TextureEntry(diffuse=x) for x in (b, a, b, c, a)]
        result = dedupe_entries(raw)

        assert [e.diffuse for e in result.entries] == [b, a, c]
        assert result.entry_index_of == [0, 1, 0, 2, 1]

    def test_divergent_normal_keeps_first(self):
        """Later different normal maps warn and are ignored"""
        wall, n1, n2 = _tex("wall"), _tex("n1"), _tex("n2")
        raw = [
            TextureEntry(diffuse=wall, normal=n1),
            TextureEntry(diffuse=wall, normal=n2),
            TextureEntry(diffuse=wall, normal=n1),
            TextureEntry(diffuse=wall),
        ]
        result = dedupe_entries(raw, labels=["first", "second", "third", "fourth"])

        assert len(result.entries) == 1
        assert result.entries[0].normal is n1
        assert len(result.warnings) == 1
        assert result.warnings[0].kind == WarningKind.DIVERGENT_NORMAL
        assert result.warnings[0].subject == "second"

    def test_normal_after_none_warns(self):
        """A first-seen entry without a normal map keeps having none"""
        wall, n1 = _tex("wall"), _tex("n1")
        result = dedupe_entries([TextureEntry(diffuse=wall), TextureEntry(diffuse=wall, normal=n1)])

        assert result.entries[0].normal is None
        assert [w.kind for w in result.warnings] == [WarningKind.DIVERGENT_NORMAL]

    def test_idempotent(self):
        """Deduping the unique list again changes nothing"""
        a, b, n = _tex("a"), _tex("b"), _tex("n")
        raw = [
            TextureEntry(diffuse=a, normal=n),
            TextureEntry(diffuse=b),
            TextureEntry(diffuse=a, normal=n),
            TextureEntry(diffuse=a, tint_enabled=True, tint=RED),
            TextureEntry(diffuse=b),
        ]
        first = dedupe_entries(raw)
        again = dedupe_entries(raw)
        second = dedupe_entries(first.entries)

        assert again.entries == first.entries
        assert second.entries == first.entries
        assert second.entry_index_of == list(range(len(first.entries)))
        assert second.warnings == []

    def test_empty(self):
        result = dedupe_entries([])
        assert result.entries == []
        assert result.entry_index_of == []

    def test_labels_length_mismatch(self):
        with pytest.raises(ValueError):
            dedupe_entries([TextureEntry(diffuse=_tex("a"))], labels=[])
