"""
Texture resampling for atlas cells.

Diffuse textures are resampled as 8-bit gamma-encoded RGBA (Pillow
premultiplies alpha for RGBA bilinear resizes, so transparent texels do not
bleed color). Normal maps hold vector data, not color: they are resampled
in linear float space one channel at a time, so alpha never scales the
encoded XYZ and no 8-bit rounding happens between filter taps.
"""

import numpy as np
from PIL import Image

from .types import AtlasRole


def resample(image: Image.Image, size: int, role: AtlasRole) -> np.ndarray:
    """
    Resample an image to exactly size x size with bilinear filtering.

    Args:
        image: Source image (any mode, any size)
        size: Target edge length in pixels
        role: Channel role; selects gamma (diffuse) or linear (normal) path

    Returns:
        uint8 array of shape (size, size, 4), top-down rows
    """
    if size <= 0:
        raise ValueError(f"Resample size must be positive, got {size}")

    if image.mode != 'RGBA':
        image = image.convert('RGBA')

    if image.size == (size, size):
        return np.array(image, dtype=np.uint8)

    if role.linear:
        return _resample_linear(image, size)

    resized = image.resize((size, size), Image.BILINEAR)
    return np.array(resized, dtype=np.uint8)


def _resample_linear(image: Image.Image, size: int) -> np.ndarray:
    source = np.asarray(image, dtype=np.float32)
    channels = []
    for c in range(4):
        plane = Image.fromarray(np.ascontiguousarray(source[..., c]))
        channels.append(np.asarray(plane.resize((size, size), Image.BILINEAR), dtype=np.float32))

    result = np.stack(channels, axis=-1)
    return np.clip(np.rint(result), 0, 255).astype(np.uint8)


def apply_tint(tile: np.ndarray, tint) -> np.ndarray:
    """Multiply RGB by the tint color component-wise; alpha is untouched."""
    tinted = tile.copy()
    rgb = tile[..., :3].astype(np.float32) * np.asarray(tint[:3], dtype=np.float32)
    tinted[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    return tinted
