#!/usr/bin/env python3
"""
Render the demo neighbourhood cost map to SVG and PNG.

This runs the full pipeline:
1. Neighbour placement around the centre postcode
2. Projection into the plot area
3. Nearest-postcode regions and the interpolated heatmap grid
4. Scene building and rendering

Usage:
    python render_sample_map.py [width] [output_dir]

Width defaults to 800 pixels and output_dir to ./sample_maps
"""

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent))

from py_ctmap.config import settings
from py_ctmap.core.interaction import HoverEnter, ToggleHeatmap
from py_ctmap.core.renderer import SpatialCostRenderer
from py_ctmap.core.sample_data import sample_tool_data
from py_ctmap.render.raster import render_png
from py_ctmap.render.svg import render_svg


def render_sample(width=800.0, output_dir="sample_maps"):
    """Render the sample map with and without the heatmap."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    data = sample_tool_data()
    print(f"\nRendering cost map for {data.postcode_meta.postcode}...")
    print(f"  Container width: {width}")
    print(f"  Neighbours: {len(data.neighboring_postcodes)}")

    renderer = SpatialCostRenderer(
        map_input=data.to_map_input(),
        container_width=width,
        grid_size=settings.grid_size,
        influence_fraction=settings.influence_fraction,
        aspect_ratio=settings.aspect_ratio,
        max_height=settings.max_map_height,
        margin=settings.margin,
    )

    rp = renderer.render_pass()
    print(f"  Viewport: {rp.viewport.width:.0f}x{rp.viewport.height:.0f}")
    print(f"  Regions: {len(rp.tessellation)}")
    print(f"  Heatmap cells: {len(rp.grid_cells)}")

    outputs = []
    scene = renderer.render()
    (output_dir / "cost_map.svg").write_text(render_svg(scene), encoding="utf-8")
    outputs.append(output_dir / "cost_map.svg")
    outputs.append(render_png(scene, output_dir / "cost_map.png"))

    # Hover the first neighbour with the heatmap hidden
    first = data.neighboring_postcodes[0].postcode if data.neighboring_postcodes else None
    renderer.dispatch(ToggleHeatmap())
    if first:
        renderer.dispatch(HoverEnter(first))
    scene = renderer.render()
    outputs.append(render_png(scene, output_dir / "cost_map_no_heatmap.png"))

    if scene.detail:
        for key, value in scene.detail.to_dict().items():
            print(f"  {key:>20}: {value}")

    for path in outputs:
        print(f"  Saved {path}")
    return outputs


if __name__ == "__main__":
    width = float(sys.argv[1]) if len(sys.argv) > 1 else settings.default_container_width
    output_dir = sys.argv[2] if len(sys.argv) > 2 else "sample_maps"
    render_sample(width, output_dir)
