"""
Manifest schema: a JSON description of the renderers to atlas.

Stands in for the scene/selection step. Example:

    {
      "settings": {"max_atlas_size": 1024, "padding": 2},
      "renderers": [
        {
          "name": "crate_01",
          "mesh": "crate",
          "diffuse": "textures/crate.png",
          "normal": "textures/crate_n.png",
          "tint": [1.0, 0.8, 0.8, 1.0],
          "uvs": [[0, 0], [1, 0], [1, 1], [0, 1]]
        }
      ]
    }

Paths are relative to the manifest file. Each distinct path is loaded once,
so renderers referencing the same file share one SourceTexture and
deduplicate against each other.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from atlasmith.exceptions import ManifestError
from atlasmith.schema.settings import AtlasSettings
from atlasmith.texturing.types import RendererDescriptor, SourceTexture

logger = logging.getLogger(__name__)


class RendererSpec(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str = Field(..., description="Renderer name.")
    mesh: Optional[str] = Field(None, description="Mesh identity; defaults to the renderer name.")
    diffuse: Optional[str] = Field(None, description="Diffuse texture path (None = white).")
    normal: Optional[str] = Field(None, description="Normal map path.")
    tint: Optional[List[float]] = Field(None, description="Material color, RGB or RGBA floats in [0, 1].")
    uvs: Optional[List[List[float]]] = Field(None, description="Per-vertex [u, v] pairs (None = no mesh).")

    @field_validator('tint')
    @classmethod
    def validate_tint(cls, v):
        if v is None:
            return v
        if len(v) not in (3, 4):
            raise ValueError("Tint must have 3 (RGB) or 4 (RGBA) components")
        if any(c < 0 or c > 1 for c in v):
            raise ValueError("Tint components must be in [0, 1]")
        return v if len(v) == 4 else v + [1.0]

    @field_validator('uvs')
    @classmethod
    def validate_uvs(cls, v):
        if v is not None and any(len(uv) != 2 for uv in v):
            raise ValueError("Each UV must be a [u, v] pair")
        return v


class Manifest(BaseModel):
    model_config = ConfigDict(extra='forbid')

    settings: Optional[Dict[str, Union[int, bool, None]]] = Field(None, description="AtlasSettings overrides.")
    renderers: List[RendererSpec] = Field(..., description="Renderers in scene order.")


def read_manifest(path: Union[str, Path]) -> Manifest:
    """Parse and validate a manifest file."""
    path = Path(path)
    if not path.exists():
        raise ManifestError(f"Manifest not found: {path}")

    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in {path}: {e}") from e

    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest {path}: {e}") from e


class _TextureCache:
    """Loads each resolved path once so identical paths share one handle."""

    def __init__(self, root: Path):
        self.root = root
        self._loaded: Dict[Path, SourceTexture] = {}

    def get(self, relative: str) -> SourceTexture:
        path = (self.root / relative).resolve()
        texture = self._loaded.get(path)
        if texture is None:
            if not path.exists():
                raise ManifestError(f"Texture not found: {path}")
            try:
                with Image.open(path) as img:
                    image = img.convert('RGBA')
            except (UnidentifiedImageError, OSError) as e:
                raise ManifestError(f"Cannot read texture {path}: {e}") from e
            texture = SourceTexture(name=path.stem, image=image)
            self._loaded[path] = texture
            logger.info(f"Loaded texture '{path.name}' ({image.width}x{image.height})")
        return texture


def load_manifest(
    path: Union[str, Path],
    base_settings: Optional[AtlasSettings] = None
) -> Tuple[List[RendererDescriptor], AtlasSettings]:
    """
    Read a manifest and load its textures.

    Args:
        path: Manifest JSON path
        base_settings: Defaults the manifest's settings block is applied over

    Returns:
        Tuple of (descriptors in manifest order, merged settings)

    Raises:
        ManifestError: Missing/invalid manifest or unreadable texture
    """
    path = Path(path)
    manifest = read_manifest(path)

    settings = base_settings or AtlasSettings()
    if manifest.settings:
        try:
            settings = AtlasSettings.model_validate({**settings.model_dump(), **manifest.settings})
        except ValidationError as e:
            raise ManifestError(f"Invalid settings in {path}: {e}") from e

    cache = _TextureCache(path.parent)
    descriptors = []
    for spec in manifest.renderers:
        descriptors.append(RendererDescriptor(
            name=spec.name,
            diffuse=cache.get(spec.diffuse) if spec.diffuse else None,
            uvs=spec.uvs,
            tint=tuple(spec.tint) if spec.tint is not None else None,
            normal=cache.get(spec.normal) if spec.normal else None,
            mesh_id=spec.mesh,
        ))

    logger.info(f"Loaded {len(descriptors)} renderers from {path}")
    return descriptors, settings
