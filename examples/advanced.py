"""
atlasmith Advanced Example

Drives the engine directly from a manifest, with normal atlasing and a
thread pool, and inspects the structured warnings.
"""

import sys

from atlasmith import AtlasSettings, LayoutInfeasibleError
from atlasmith.generator import AtlasEngine
from atlasmith.schema import load_manifest

manifest_path = sys.argv[1] if len(sys.argv) > 1 else "scene.json"

descriptors, settings = load_manifest(
    manifest_path,
    base_settings=AtlasSettings(enable_normal_atlasing=True, max_workers=4),
)

try:
    result = AtlasEngine(settings).run(descriptors)
except LayoutInfeasibleError as e:
    print(f"Layout failed: {e}")
    sys.exit(1)

if result.is_empty:
    print("Nothing to do")
    sys.exit(0)

print(f"{len(result.entries)} unique entries in a {result.diffuse.width}x{result.diffuse.height} atlas")
for warning in result.warnings:
    print(f"[{warning.kind.value}] {warning.subject}: {warning.message}")

result.diffuse.to_image().save("diffuse_atlas.png")
if result.normal is not None:
    result.normal.to_image().save("normal_atlas.png")
