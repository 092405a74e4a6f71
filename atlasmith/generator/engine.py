"""
Atlas generation engine

Runs the whole pipeline over a list of renderer descriptors:
dedupe -> plan grid -> composite diffuse (and normal) atlas -> remap UVs.
Pure data in, in-memory buffers and UV tables out; nothing is written to disk.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

import numpy as np

from atlasmith.schema.settings import AtlasSettings
from atlasmith.texturing.compositor import compose_diffuse, compose_normal
from atlasmith.texturing.dedupe import dedupe_entries
from atlasmith.texturing.layout import GridLayout, plan_grid
from atlasmith.texturing.types import (
    WHITE,
    AtlasImage,
    AtlasWarning,
    RendererDescriptor,
    TextureEntry,
    WarningKind,
    white_texture,
)
from atlasmith.texturing.uv_remap import as_uv_array, remap_uvs

logger = logging.getLogger(__name__)


@dataclass
class MeshAssignment:
    """Where one renderer's mesh landed in the atlas"""
    name: str                   # Renderer name
    mesh_id: str                # Mesh identity
    entry_index: int            # Index into AtlasResult.entries
    row: int
    col: int
    uvs: np.ndarray             # Remapped (N, 2) UVs
    clamped: bool = False       # Tiling UVs were clamped to [0, 1]


@dataclass
class AtlasResult:
    """Output of one generation run"""
    layout: Optional[GridLayout] = None
    diffuse: Optional[AtlasImage] = None
    normal: Optional[AtlasImage] = None
    entries: List[TextureEntry] = field(default_factory=list)
    assignments: List[MeshAssignment] = field(default_factory=list)
    warnings: List[AtlasWarning] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when there was nothing to atlas"""
        return self.layout is None

    def assignment_for(self, name: str) -> Optional[MeshAssignment]:
        """First assignment for a renderer name (names need not be unique)"""
        return next((a for a in self.assignments if a.name == name), None)

    def assignments_for(self, name: str) -> List[MeshAssignment]:
        return [a for a in self.assignments if a.name == name]

    def warnings_of(self, kind: WarningKind) -> List[AtlasWarning]:
        return [w for w in self.warnings if w.kind == kind]


class AtlasEngine:
    """
    Packs renderer textures into atlases and remaps their UVs.

    Example:
        >>> engine = AtlasEngine(AtlasSettings(max_atlas_size=1024))
        >>> result = engine.run(descriptors)
        >>> result.diffuse.to_image().save("atlas.png")
    """

    def __init__(self, settings: Optional[AtlasSettings] = None):
        self.settings = settings or AtlasSettings()

    def _entry_for(self, descriptor: RendererDescriptor, warnings: List[AtlasWarning]) -> TextureEntry:
        diffuse = descriptor.diffuse
        if diffuse is None:
            diffuse = white_texture()
            message = f"No diffuse texture found for '{descriptor.name}'. Using white texture."
            logger.warning(message)
            warnings.append(AtlasWarning(WarningKind.MISSING_DIFFUSE, descriptor.name, message))

        tint = WHITE
        if self.settings.apply_tint and descriptor.tint is not None:
            tint = tuple(float(c) for c in descriptor.tint)
            if len(tint) == 3:
                tint = tint + (1.0,)

        normal = descriptor.normal if self.settings.enable_normal_atlasing else None

        return TextureEntry(
            diffuse=diffuse,
            normal=normal,
            tint_enabled=tint != WHITE,
            tint=tint,
        )

    def run(self, descriptors: Sequence[RendererDescriptor]) -> AtlasResult:
        """
        Generate atlases for the given renderers.

        Args:
            descriptors: Renderers in scene order (order decides cell placement)

        Returns:
            AtlasResult; is_empty is True when descriptors is empty

        Raises:
            LayoutInfeasibleError: Entries do not fit within max_atlas_size
        """
        if not descriptors:
            logger.warning("No renderers to process, nothing to do")
            return AtlasResult()

        settings = self.settings
        warnings: List[AtlasWarning] = []

        raw_entries = [self._entry_for(d, warnings) for d in descriptors]
        deduped = dedupe_entries(raw_entries, labels=[d.name for d in descriptors])
        warnings.extend(deduped.warnings)
        entries = deduped.entries

        logger.info(
            f"Collected {len(descriptors)} renderers and {len(entries)} unique texture-color combos."
        )

        layout = plan_grid(
            len(entries),
            [e.diffuse.size for e in entries],
            settings.max_atlas_size,
            settings.padding,
        )

        diffuse = compose_diffuse(entries, layout, settings.max_workers)
        normal = None
        if settings.enable_normal_atlasing:
            logger.info("Creating normal atlas using the same grid.")
            normal = compose_normal(entries, layout, settings.max_workers)

        assignments: List[MeshAssignment] = []
        clamped_meshes: Set[str] = set()

        for descriptor, entry_index in zip(descriptors, deduped.entry_index_of):
            if descriptor.uvs is None or as_uv_array(descriptor.uvs).shape[0] == 0:
                reason = "has no mesh" if descriptor.uvs is None else "has an empty UV array"
                message = f"'{descriptor.name}' {reason}. Skipping UV remapping."
                logger.warning(message)
                warnings.append(AtlasWarning(WarningKind.MESH_SKIPPED, descriptor.name, message))
                continue

            row, col = layout.cell_for(entry_index)
            remapped = remap_uvs(descriptor.uvs, row, col, layout)

            mesh_key = descriptor.mesh_key
            if remapped.clamped and mesh_key not in clamped_meshes:
                clamped_meshes.add(mesh_key)
                message = f"Mesh '{mesh_key}' has UVs outside the 0-1 range; they were clamped."
                logger.warning(message)
                warnings.append(AtlasWarning(WarningKind.TILING_UV_CLAMPED, mesh_key, message))

            assignments.append(MeshAssignment(
                name=descriptor.name,
                mesh_id=mesh_key,
                entry_index=entry_index,
                row=row,
                col=col,
                uvs=remapped.uvs,
                clamped=remapped.clamped,
            ))

        logger.info(
            f"Generated {layout.width}x{layout.height} atlas for {len(entries)} entries, "
            f"remapped {len(assignments)} meshes ({len(warnings)} warnings)"
        )

        return AtlasResult(
            layout=layout,
            diffuse=diffuse,
            normal=normal,
            entries=entries,
            assignments=assignments,
            warnings=warnings,
        )
