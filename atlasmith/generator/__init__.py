"""Atlas generation pipeline"""

from .engine import AtlasEngine, AtlasResult, MeshAssignment

__all__ = ["AtlasEngine", "AtlasResult", "MeshAssignment"]
