"""
Generation settings.

Values consumed by the atlas engine. The engine only requires a positive
max atlas size; the recognized sizes are what texture importers offer and
anything else is logged, not rejected.
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

RECOGNIZED_ATLAS_SIZES = (256, 512, 1024, 2048, 4096)


class AtlasSettings(BaseModel):
    model_config = ConfigDict(extra='forbid')

    max_atlas_size: int = Field(2048, gt=0, description="Maximum atlas width and height in pixels.")
    padding: int = Field(1, ge=0, description="Pixel margin around each cell's content.")
    apply_tint: bool = Field(True, description="Bake material colors into the diffuse atlas.")
    enable_normal_atlasing: bool = Field(False, description="Also build a normal-map atlas on the same grid.")
    max_workers: Optional[int] = Field(None, ge=1, description="Compositing threads (None or 1 = serial).")

    @field_validator('max_atlas_size')
    @classmethod
    def note_unusual_size(cls, v):
        if v not in RECOGNIZED_ATLAS_SIZES:
            logger.info(f"Max atlas size {v} is not one of {RECOGNIZED_ATLAS_SIZES}")
        return v
