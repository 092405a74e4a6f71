"""Custom exceptions for atlas generation"""


class AtlasError(Exception):
    """Base exception for user-correctable atlas errors"""
    pass


class LayoutInfeasibleError(AtlasError):
    """No cell size or grid fits inside the maximum atlas size"""

    def __init__(self, entry_count: int, max_atlas_size: int, padding: int):
        self.entry_count = entry_count
        self.max_atlas_size = max_atlas_size
        self.padding = padding
        super().__init__(
            f"Unable to fit {entry_count} textures into a {max_atlas_size}x{max_atlas_size} atlas "
            f"(padding {padding}). Raise the max atlas size or reduce the number of textures."
        )


class ManifestError(AtlasError):
    """Manifest could not be read, validated or resolved"""
    pass


class GridInvariantError(RuntimeError):
    """
    Internal fault: compositing and UV remapping disagree with the grid.

    Not an AtlasError on purpose, callers must not treat it as user-correctable.
    """
    pass
