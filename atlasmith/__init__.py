"""
atlasmith - Pack many textures into a few atlases and remap mesh UVs

Collapses independently authored diffuse (and normal) textures into a uniform
grid atlas so many materials can share one, cutting draw calls.
"""

__version__ = "0.1.0"

from atlasmith.client import AtlasGenerator, GenerationResult
from atlasmith.exceptions import AtlasError, LayoutInfeasibleError, ManifestError, GridInvariantError
from atlasmith.schema.settings import AtlasSettings

__all__ = [
    "AtlasGenerator",
    "GenerationResult",
    "AtlasSettings",
    "AtlasError",
    "LayoutInfeasibleError",
    "ManifestError",
    "GridInvariantError",
]
