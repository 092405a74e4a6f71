"""
atlasmith Quick Start Example

Packs a few generated textures into one atlas and remaps a quad's UVs.
"""

from PIL import Image

from atlasmith import AtlasGenerator
from atlasmith.texturing import RendererDescriptor, SourceTexture

QUAD = [[0, 0], [1, 0], [1, 1], [0, 1]]

brick = SourceTexture("brick", Image.new('RGBA', (128, 128), (170, 74, 68, 255)))
stone = SourceTexture("stone", Image.new('RGBA', (64, 64), (128, 128, 128, 255)))

renderers = [
    RendererDescriptor("wall", diffuse=brick, uvs=QUAD),
    RendererDescriptor("floor", diffuse=stone, uvs=QUAD),
    RendererDescriptor("mossy_floor", diffuse=stone, uvs=QUAD, tint=(0.6, 0.9, 0.6, 1.0)),
]

gen = AtlasGenerator(max_atlas_size=512, padding=2)
result = gen.generate(renderers)

layout = result.atlas.layout
print(f"Grid: {layout.rows}x{layout.columns}, cell {layout.cell_size}px, atlas {layout.width}x{layout.height}")
for assignment in result.atlas.assignments:
    print(f"  {assignment.name}: cell ({assignment.row}, {assignment.col})")

result.save("output", name="Quickstart", overwrite=True)
print("✅ Saved to output/")
