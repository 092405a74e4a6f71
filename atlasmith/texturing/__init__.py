"""
Texture atlas packing core.

Grid layout planning, pixel compositing, UV remapping and entry deduplication.
"""
from .compositor import compose_atlas, compose_diffuse, compose_normal
from .dedupe import DedupeResult, dedupe_entries
from .layout import GridLayout, MIN_CELL_SIZE, next_power_of_2, plan_grid
from .sampler import apply_tint, resample
from .types import (
    AtlasImage,
    AtlasRole,
    AtlasWarning,
    RendererDescriptor,
    SourceTexture,
    TextureEntry,
    WarningKind,
    flat_normal_tile,
    white_texture,
)
from .uv_remap import UVRemapResult, has_tiling, remap_uvs

__all__ = [
    'compose_atlas',
    'compose_diffuse',
    'compose_normal',
    'DedupeResult',
    'dedupe_entries',
    'GridLayout',
    'MIN_CELL_SIZE',
    'next_power_of_2',
    'plan_grid',
    'apply_tint',
    'resample',
    'AtlasImage',
    'AtlasRole',
    'AtlasWarning',
    'RendererDescriptor',
    'SourceTexture',
    'TextureEntry',
    'WarningKind',
    'flat_normal_tile',
    'white_texture',
    'UVRemapResult',
    'has_tiling',
    'remap_uvs',
]
