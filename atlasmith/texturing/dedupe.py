"""
Entry deduplication.

Raw entries sharing a (diffuse texture, tint) key collapse into one atlas
cell. Output order is first-seen order, which decides every entry's
(row, col), so it must not change between planning, compositing and
remapping.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .types import AtlasWarning, SourceTexture, TextureEntry, WarningKind, Color

logger = logging.getLogger(__name__)


@dataclass
class DedupeResult:
    entries: List[TextureEntry]
    entry_index_of: List[int]  # raw position -> unique index
    warnings: List[AtlasWarning] = field(default_factory=list)


def dedupe_entries(
    raw_entries: Sequence[TextureEntry],
    labels: Optional[Sequence[str]] = None
) -> DedupeResult:
    """
    Collapse raw entries into unique ones.

    The first entry seen for a key decides its normal map. A later entry with
    the same key but a different normal map is reported as DIVERGENT_NORMAL and
    its normal map is ignored.

    Args:
        raw_entries: Entries in scene order
        labels: Optional names for the raw entries, used in warnings

    Returns:
        DedupeResult
    """
    if labels is not None and len(labels) != len(raw_entries):
        raise ValueError("labels must match raw_entries in length")

    index_by_key: Dict[Tuple[SourceTexture, Color], int] = {}
    entries: List[TextureEntry] = []
    entry_index_of: List[int] = []
    warnings: List[AtlasWarning] = []

    for position, raw in enumerate(raw_entries):
        label = labels[position] if labels is not None else f"entry {position}"
        index = index_by_key.get(raw.key)

        if index is None:
            index = len(entries)
            index_by_key[raw.key] = index
            entries.append(raw)
            if raw.tint_enabled:
                logger.info(f"Added new texture-color combination for '{label}'. Color: {raw.tint}")
        else:
            kept = entries[index]
            if raw.normal is not None and raw.normal is not kept.normal:
                message = (
                    f"Different normal map found for the same diffuse texture & color in '{label}'. "
                    f"Using the first encountered normal map."
                )
                logger.warning(message)
                warnings.append(AtlasWarning(WarningKind.DIVERGENT_NORMAL, label, message))

        entry_index_of.append(index)

    return DedupeResult(entries=entries, entry_index_of=entry_index_of, warnings=warnings)
