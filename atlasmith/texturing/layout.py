"""
Uniform-grid atlas layout planner.

Every cell in the atlas has the same power-of-2 edge length, so compositing
is a plain blit per entry and UV remapping is the same affine transform for
every entry, parameterized only by (row, col).

Cell layout (one stride = cell_size + 2 * padding):

    +---------------------+
    |       padding       |
    |   +-------------+   |
    |   |  cell_size  |   |
    |   +-------------+   |
    |       padding       |
    +---------------------+
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from atlasmith.exceptions import GridInvariantError, LayoutInfeasibleError

logger = logging.getLogger(__name__)

MIN_CELL_SIZE = 16


def next_power_of_2(n: int) -> int:
    """Return the next power of 2 >= n."""
    if n <= 0:
        return 1
    return 2 ** math.ceil(math.log2(n))


@dataclass(frozen=True)
class GridLayout:
    """Grid geometry shared by the compositor and the UV remapper."""
    rows: int
    columns: int
    cell_size: int
    padding: int = 0

    @property
    def stride(self) -> int:
        return self.cell_size + 2 * self.padding

    @property
    def width(self) -> int:
        return self.columns * self.stride

    @property
    def height(self) -> int:
        return self.rows * self.stride

    @property
    def capacity(self) -> int:
        return self.rows * self.columns

    def cell_for(self, index: int) -> Tuple[int, int]:
        """Map a unique-entry index to its (row, col)."""
        if index < 0 or index >= self.capacity:
            raise GridInvariantError(
                f"Entry index {index} outside {self.rows}x{self.columns} grid"
            )
        return index // self.columns, index % self.columns

    def check_cell(self, row: int, col: int) -> None:
        if not (0 <= row < self.rows and 0 <= col < self.columns):
            raise GridInvariantError(
                f"Cell ({row}, {col}) outside {self.rows}x{self.columns} grid"
            )

    def cell_offset(self, row: int, col: int) -> Tuple[int, int]:
        """Texture-space (bottom-left origin) pixel offset of a cell's content."""
        self.check_cell(row, col)
        return (
            col * self.stride + self.padding,
            row * self.stride + self.padding,
        )

    def cell_box(self, row: int, col: int) -> Tuple[int, int, int, int]:
        """
        Top-down pixel box (left, top, right, bottom) of a cell's content,
        i.e. where it lives in an image buffer.
        """
        x, y = self.cell_offset(row, col)
        top = self.height - y - self.cell_size
        return x, top, x + self.cell_size, top + self.cell_size

    def uv_rect(self, row: int, col: int) -> Tuple[float, float, float, float]:
        """(u_start, v_start, u_size, v_size) of a cell as atlas fractions."""
        x, y = self.cell_offset(row, col)
        return (
            x / self.width,
            y / self.height,
            self.cell_size / self.width,
            self.cell_size / self.height,
        )

    def to_dict(self) -> dict:
        return {
            'rows': self.rows,
            'columns': self.columns,
            'cell_size': self.cell_size,
            'padding': self.padding,
            'resolution': [self.width, self.height],
        }


def _best_grid(
    entry_count: int,
    cell_size: int,
    max_atlas_size: int,
    padding: int
) -> Optional[Tuple[int, int, int]]:
    """
    Find the minimal-waste grid for one cell size.

    Returns:
        (columns, rows, waste) or None if no column count fits.
        Ties keep the first found (fewest columns); a perfect fit stops the scan.
    """
    stride = cell_size + 2 * padding
    best = None

    for columns in range(1, entry_count + 1):
        rows = math.ceil(entry_count / columns)
        if columns * stride > max_atlas_size or rows * stride > max_atlas_size:
            continue

        waste = rows * columns - entry_count
        if best is None or waste < best[2]:
            best = (columns, rows, waste)
            if waste == 0:
                break

    return best


def plan_grid(
    entry_count: int,
    native_sizes: Sequence[Tuple[int, int]],
    max_atlas_size: int,
    padding: int = 0
) -> GridLayout:
    """
    Plan the uniform cell size and row/column grid for an atlas.

    Starts at the power of 2 covering the largest native texture edge and
    halves down to MIN_CELL_SIZE, returning the first cell size with any
    fitting grid (larger cells keep more source detail).

    Args:
        entry_count: Number of unique entries to place
        native_sizes: (width, height) of each entry's source texture
        max_atlas_size: Maximum atlas width and height in pixels
        padding: Pixel margin around each cell's content

    Returns:
        GridLayout

    Raises:
        LayoutInfeasibleError: Even MIN_CELL_SIZE cells do not fit
        ValueError: Invalid arguments
    """
    if entry_count < 1:
        raise ValueError("entry_count must be >= 1")
    if not native_sizes:
        raise ValueError("native_sizes must not be empty")
    if max_atlas_size <= 0:
        raise ValueError("max_atlas_size must be positive")
    if padding < 0:
        raise ValueError("padding must be >= 0")

    largest_edge = max(max(w, h) for w, h in native_sizes)
    cell_size = max(MIN_CELL_SIZE, next_power_of_2(largest_edge))

    tried: List[int] = []
    while cell_size >= MIN_CELL_SIZE:
        tried.append(cell_size)
        found = _best_grid(entry_count, cell_size, max_atlas_size, padding)
        if found is not None:
            columns, rows, waste = found
            layout = GridLayout(rows=rows, columns=columns, cell_size=cell_size, padding=padding)
            logger.info(
                f"Optimal grid: {rows} rows x {columns} columns, cell {cell_size}px, "
                f"waste {waste}, atlas {layout.width}x{layout.height}"
            )
            return layout
        cell_size //= 2

    logger.error(f"No grid fits {entry_count} entries within {max_atlas_size}px (tried cells {tried})")
    raise LayoutInfeasibleError(entry_count, max_atlas_size, padding)
