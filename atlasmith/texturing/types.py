"""
Core data types shared by the atlas pipeline.

Coordinate convention:
    Pixel offsets and UVs live in texture space, origin at the BOTTOM-LEFT
    (v grows upward, like mesh UVs). Pixel buffers are stored top-down like
    any image file, so grid row 0 ends up as the bottom row of a saved PNG.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional, Sequence, Tuple

import numpy as np
from PIL import Image

# RGBA, floats in [0, 1]
Color = Tuple[float, float, float, float]

WHITE: Color = (1.0, 1.0, 1.0, 1.0)

# (0.5, 0.5, 1.0, 1.0) encoded to 8 bits: a normal pointing straight out
FLAT_NORMAL_RGBA = (128, 128, 255, 255)
OPAQUE_WHITE_RGBA = (255, 255, 255, 255)


class AtlasRole(Enum):
    """
    Which material channel an atlas holds.

    Each role carries its own background fill and resampling color space,
    chosen once per atlas.
    """
    DIFFUSE = ("diffuse", OPAQUE_WHITE_RGBA, False)
    NORMAL = ("normal", FLAT_NORMAL_RGBA, True)

    def __init__(self, label: str, background: Tuple[int, int, int, int], linear: bool):
        self.label = label
        self.background = background
        self.linear = linear


@dataclass(eq=False)
class SourceTexture:
    """
    A source image handle.

    Equality and hashing are by identity: two handles loaded from the same
    file are only "the same texture" if the loader hands out one object.
    """
    name: str
    image: Image.Image

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def __repr__(self) -> str:
        w, h = self.image.size
        return f"SourceTexture({self.name!r}, {w}x{h})"


@lru_cache(maxsize=None)
def white_texture() -> SourceTexture:
    """Shared 1x1 opaque white texture used when a material has no diffuse map."""
    return SourceTexture("white", Image.new('RGBA', (1, 1), OPAQUE_WHITE_RGBA))


def flat_normal_tile(size: int) -> np.ndarray:
    """Generate a size x size flat-normal tile."""
    tile = np.empty((size, size, 4), dtype=np.uint8)
    tile[...] = FLAT_NORMAL_RGBA
    return tile


@dataclass(frozen=True)
class TextureEntry:
    """One unit of packing: a (diffuse, tint) pair plus its normal map."""
    diffuse: SourceTexture
    normal: Optional[SourceTexture] = None
    tint_enabled: bool = False
    tint: Color = WHITE

    @property
    def key(self) -> Tuple[SourceTexture, Color]:
        return (self.diffuse, self.tint)


@dataclass
class RendererDescriptor:
    """
    What the scene hands to the engine for one renderer.

    Attributes:
        name: Renderer name, used in warnings and reports
        diffuse: Diffuse texture (None = material has no main texture)
        uvs: Per-vertex (u, v) pairs of the mesh (None = no mesh)
        tint: Material color, RGBA floats (None = no color property)
        normal: Normal map, if the material has one
        mesh_id: Identity of the mesh; renderers sharing a mesh share it.
                 Defaults to the renderer name.
    """
    name: str
    diffuse: Optional[SourceTexture] = None
    uvs: Optional[Sequence[Sequence[float]]] = None
    tint: Optional[Color] = None
    normal: Optional[SourceTexture] = None
    mesh_id: Optional[str] = None

    @property
    def mesh_key(self) -> str:
        return self.mesh_id if self.mesh_id is not None else self.name


@dataclass
class AtlasImage:
    """An RGBA atlas buffer (top-down rows) and the channel it holds."""
    role: AtlasRole
    pixels: np.ndarray

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def to_image(self) -> Image.Image:
        """Copy the buffer into a PIL image."""
        return Image.fromarray(self.pixels)


class WarningKind(str, Enum):
    DIVERGENT_NORMAL = "divergent_normal"
    TILING_UV_CLAMPED = "tiling_uv_clamped"
    MESH_SKIPPED = "mesh_skipped"
    MISSING_DIFFUSE = "missing_diffuse"


@dataclass(frozen=True)
class AtlasWarning:
    """Non-fatal condition attached to a renderer or mesh."""
    kind: WarningKind
    subject: str
    message: str

    def to_dict(self) -> dict:
        return {'kind': self.kind.value, 'subject': self.subject, 'message': self.message}
