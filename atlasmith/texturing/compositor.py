"""
Atlas compositor.

Allocates the atlas buffer, fills it with the role's background and blits
each entry's resampled tile into its cell. Cells (padding ring included)
never overlap, so entries can be blitted from a thread pool without
locking once the buffer exists.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

import numpy as np

from atlasmith.exceptions import GridInvariantError
from .layout import GridLayout
from .sampler import apply_tint, resample
from .types import AtlasImage, AtlasRole, TextureEntry, flat_normal_tile

logger = logging.getLogger(__name__)


def render_tile(entry: TextureEntry, cell_size: int, role: AtlasRole) -> np.ndarray:
    """Produce the cell_size x cell_size tile an entry contributes to an atlas."""
    if role is AtlasRole.NORMAL:
        if entry.normal is None:
            return flat_normal_tile(cell_size)
        return resample(entry.normal.image, cell_size, role)

    tile = resample(entry.diffuse.image, cell_size, role)
    if entry.tint_enabled:
        tile = apply_tint(tile, entry.tint)
    return tile


def compose_atlas(
    entries: Sequence[TextureEntry],
    layout: GridLayout,
    role: AtlasRole,
    max_workers: Optional[int] = None
) -> AtlasImage:
    """
    Composite entries into one atlas.

    Args:
        entries: Unique entries, in the order used to plan the layout
        layout: Grid geometry (entry i goes to layout.cell_for(i))
        role: DIFFUSE or NORMAL
        max_workers: Thread pool size; None or 1 blits serially

    Returns:
        AtlasImage of layout.width x layout.height
    """
    if len(entries) > layout.capacity:
        raise GridInvariantError(
            f"{len(entries)} entries do not fit a {layout.rows}x{layout.columns} grid"
        )

    pixels = np.empty((layout.height, layout.width, 4), dtype=np.uint8)
    pixels[...] = role.background

    logger.info(
        f"Creating {role.label} atlas with {layout.columns} columns and {layout.rows} rows. "
        f"Atlas size: {layout.width}x{layout.height}."
    )

    def blit(index: int) -> None:
        row, col = layout.cell_for(index)
        left, top, right, bottom = layout.cell_box(row, col)
        tile = render_tile(entries[index], layout.cell_size, role)
        if tile.shape != (layout.cell_size, layout.cell_size, 4):
            raise GridInvariantError(f"Tile shape {tile.shape} does not match cell size {layout.cell_size}")
        pixels[top:bottom, left:right] = tile

    if max_workers and max_workers > 1 and len(entries) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(blit, i) for i in range(len(entries))]
            # result() re-raises worker exceptions
            for future in futures:
                future.result()
    else:
        for i in range(len(entries)):
            blit(i)

    return AtlasImage(role=role, pixels=pixels)


def compose_diffuse(
    entries: Sequence[TextureEntry],
    layout: GridLayout,
    max_workers: Optional[int] = None
) -> AtlasImage:
    """Composite the diffuse atlas (opaque white background, tint applied)."""
    return compose_atlas(entries, layout, AtlasRole.DIFFUSE, max_workers)


def compose_normal(
    entries: Sequence[TextureEntry],
    layout: GridLayout,
    max_workers: Optional[int] = None
) -> AtlasImage:
    """Composite the normal atlas (flat-normal background, never tinted)."""
    return compose_atlas(entries, layout, AtlasRole.NORMAL, max_workers)
