"""Settings and manifest schema definitions."""
from .settings import AtlasSettings, RECOGNIZED_ATLAS_SIZES
from .manifest import Manifest, RendererSpec, load_manifest, read_manifest

__all__ = [
    "AtlasSettings",
    "RECOGNIZED_ATLAS_SIZES",
    "Manifest",
    "RendererSpec",
    "load_manifest",
    "read_manifest",
]
