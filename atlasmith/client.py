"""
Core atlasmith client API

Provides the AtlasGenerator class for packing textures into atlases and the
GenerationResult class for inspecting and saving the output.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from atlasmith.generator.engine import AtlasEngine, AtlasResult
from atlasmith.schema.manifest import load_manifest
from atlasmith.schema.settings import AtlasSettings
from atlasmith.texturing.types import RendererDescriptor

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """
    A generated atlas set with its per-mesh UV tables.

    Attributes:
        atlas: Engine output (layout, atlases, entries, assignments, warnings)
        settings: Settings the atlas was generated with
    """
    atlas: AtlasResult
    settings: AtlasSettings

    @property
    def warnings(self):
        return self.atlas.warnings

    @property
    def is_empty(self) -> bool:
        return self.atlas.is_empty

    def to_json(self) -> dict:
        """
        Describe the layout, UV remapping and warnings as plain JSON data.

        Returns:
            dict with 'layout', 'entries', 'meshes' and 'warnings'.
            'meshes' is a list in scene order; renderer names may repeat.
        """
        atlas = self.atlas
        meshes: List[dict] = []
        for assignment in atlas.assignments:
            meshes.append({
                'name': assignment.name,
                'mesh': assignment.mesh_id,
                'entry': assignment.entry_index,
                'row': assignment.row,
                'col': assignment.col,
                'clamped': assignment.clamped,
                'uvs': assignment.uvs.tolist(),
            })

        return {
            'layout': atlas.layout.to_dict() if atlas.layout else None,
            'entries': [
                {
                    'diffuse': e.diffuse.name,
                    'normal': e.normal.name if e.normal else None,
                    'tint': list(e.tint) if e.tint_enabled else None,
                }
                for e in atlas.entries
            ],
            'meshes': meshes,
            'warnings': [w.to_dict() for w in atlas.warnings],
        }

    def save(self, directory: Union[str, Path], name: str = "Atlas", overwrite: bool = False) -> List[Path]:
        """
        Write the atlases and UV table to a directory.

        Files:
            <name>_DiffuseAtlas.png, <name>_NormalAtlas.png (if built),
            <name>_uvs.json

        Args:
            directory: Output directory (created if missing)
            name: File name prefix
            overwrite: Replace existing files instead of refusing

        Returns:
            Paths written

        Raises:
            ValueError: The generation had no renderers
            FileExistsError: An output file exists and overwrite is False
        """
        if self.is_empty:
            raise ValueError("Nothing to save: the generation had no renderers")

        directory = Path(directory)
        diffuse_path = directory / f"{name}_DiffuseAtlas.png"
        normal_path = directory / f"{name}_NormalAtlas.png" if self.atlas.normal is not None else None
        uv_path = directory / f"{name}_uvs.json"

        if not overwrite:
            existing = [p for p in (diffuse_path, normal_path, uv_path) if p is not None and p.exists()]
            if existing:
                raise FileExistsError(
                    f"{existing[0]} already exists (pass overwrite=True to replace it)"
                )

        directory.mkdir(parents=True, exist_ok=True)
        written = []

        self.atlas.diffuse.to_image().save(diffuse_path, format='PNG')
        written.append(diffuse_path)

        if normal_path is not None:
            self.atlas.normal.to_image().save(normal_path, format='PNG')
            written.append(normal_path)

        with open(uv_path, 'w') as f:
            json.dump(self.to_json(), f, indent=2)
        written.append(uv_path)

        logger.info(f"Saved {len(written)} files to {directory}")
        return written


class AtlasGenerator:
    """
    Main atlasmith client for packing textures into atlases.

    Examples:
        From a manifest file:
        >>> gen = AtlasGenerator(max_atlas_size=1024)
        >>> gen.generate_from_manifest("scene.json").save("out/")

        From in-memory descriptors:
        >>> result = gen.generate(descriptors)
        >>> result.atlas.diffuse.to_image().show()
    """

    def __init__(self, settings: Optional[AtlasSettings] = None, **overrides):
        """
        Initialize the generator.

        Args:
            settings: Base settings (defaults to AtlasSettings())
            **overrides: Individual AtlasSettings fields to override
        """
        settings = settings or AtlasSettings()
        if overrides:
            settings = AtlasSettings.model_validate({**settings.model_dump(), **overrides})
        self.settings = settings

    def generate(self, descriptors: Sequence[RendererDescriptor]) -> GenerationResult:
        """
        Pack the renderers' textures and remap their UVs (in memory only).

        Raises:
            LayoutInfeasibleError: Textures do not fit within max_atlas_size
        """
        engine = AtlasEngine(self.settings)
        return GenerationResult(atlas=engine.run(descriptors), settings=self.settings)

    def generate_from_manifest(self, path: Union[str, Path], overrides: Optional[dict] = None) -> GenerationResult:
        """
        Load a manifest and generate its atlases.

        Settings precedence: generator settings < manifest settings < overrides.

        Raises:
            ManifestError: Missing/invalid manifest or texture
            LayoutInfeasibleError: Textures do not fit within max_atlas_size
        """
        descriptors, settings = load_manifest(path, base_settings=self.settings)
        if overrides:
            settings = AtlasSettings.model_validate({**settings.model_dump(), **overrides})
        engine = AtlasEngine(settings)
        return GenerationResult(atlas=engine.run(descriptors), settings=settings)
