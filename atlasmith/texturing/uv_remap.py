"""
UV remapping into an atlas cell.

A mesh's [0, 1] UV space is squeezed into the content rectangle of its
entry's cell:

    u' = u_start + u * (cell_size / atlas_width)
    v' = v_start + v * (cell_size / atlas_height)

Tiling UVs (anything outside [0, 1]) cannot be represented once several
textures share an atlas, so a mesh with ANY out-of-range coordinate has
ALL its coordinates clamped to [0, 1] before remapping.
"""

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from .layout import GridLayout

UVArray = Union[np.ndarray, Sequence[Sequence[float]]]


@dataclass
class UVRemapResult:
    """Remapped UVs (same length/order as the input) and whether they were clamped."""
    uvs: np.ndarray
    clamped: bool = False

    def to_list(self):
        return self.uvs.tolist()


def as_uv_array(uvs: UVArray) -> np.ndarray:
    """
    Coerce per-vertex (u, v) pairs into a float64 array of shape (N, 2).

    Raises:
        ValueError: Not (u, v) pairs, or a coordinate is NaN or infinite
    """
    array = np.asarray(uvs, dtype=np.float64)
    if array.size == 0:
        return array.reshape(0, 2)
    if array.ndim != 2 or array.shape[1] != 2:
        raise ValueError(f"UVs must be (u, v) pairs, got array of shape {array.shape}")
    if not np.all(np.isfinite(array)):
        raise ValueError("UVs must be finite numbers (found NaN or infinity)")
    return array


def has_tiling(uvs: UVArray) -> bool:
    """True if any coordinate lies outside [0, 1] on either axis."""
    array = as_uv_array(uvs)
    return bool(np.any((array < 0.0) | (array > 1.0)))


def remap_uvs(uvs: UVArray, row: int, col: int, layout: GridLayout) -> UVRemapResult:
    """
    Remap a mesh's UVs into the (row, col) cell of an atlas.

    Args:
        uvs: Per-vertex (u, v) pairs
        row: Grid row of the mesh's entry
        col: Grid column of the mesh's entry
        layout: Grid geometry used to build the atlas

    Returns:
        UVRemapResult; every output lies within
        [u_start, u_start + u_size] x [v_start, v_start + v_size]

    Raises:
        GridInvariantError: (row, col) outside the grid
        ValueError: uvs are not finite (u, v) pairs
    """
    u_start, v_start, u_size, v_size = layout.uv_rect(row, col)
    source = as_uv_array(uvs)

    clamped = has_tiling(source)
    if clamped:
        source = np.clip(source, 0.0, 1.0)

    remapped = np.empty_like(source)
    remapped[:, 0] = u_start + source[:, 0] * u_size
    remapped[:, 1] = v_start + source[:, 1] * v_size

    return UVRemapResult(uvs=remapped, clamped=clamped)
