"""Raster rendering of a scene description with matplotlib."""

from pathlib import Path as FilePath
from typing import Union

import matplotlib

matplotlib.use("Agg")

import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
import structlog

from ..core.scene import Circle, Line, Path, Rect, Scene, Text

logger = structlog.get_logger()

DPI = 100


def _fill(scene: Scene, fill: str):
    """Resolve a fill to (colour, alpha factor); gradients become a flat tint."""
    if fill.startswith("url(#"):
        gradient = scene.gradient(fill[len("url(#"):-1])
        if gradient is None:
            return "none", 1.0
        # Mean of a linear falloff from inner to outer opacity
        return gradient.color, (gradient.inner_opacity + gradient.outer_opacity) / 2
    return fill, 1.0


def draw_scene(scene: Scene, ax) -> None:
    """Draw every primitive of a scene onto a matplotlib axes."""
    top, _, _, left = scene.margins
    for z, p in enumerate(scene.primitives):
        if isinstance(p, Rect):
            color, alpha = _fill(scene, p.fill)
            ax.add_patch(mpatches.Rectangle(
                (left + p.x, top + p.y), p.width, p.height,
                facecolor=color, alpha=p.opacity * alpha,
                edgecolor=p.stroke or "none", linewidth=p.stroke_width, zorder=z))
        elif isinstance(p, Path):
            color, alpha = _fill(scene, p.fill)
            ax.add_patch(mpatches.Polygon(
                [(left + x, top + y) for x, y in p.vertices], closed=True,
                facecolor=color, alpha=p.opacity * alpha,
                edgecolor=p.stroke or "none", linewidth=p.stroke_width, zorder=z))
        elif isinstance(p, Circle):
            ax.add_patch(mpatches.Circle(
                (left + p.cx, top + p.cy), p.r, facecolor=p.fill, alpha=p.opacity,
                edgecolor=p.stroke or "none", linewidth=p.stroke_width, zorder=z))
        elif isinstance(p, Line):
            ax.plot([left + p.x1, left + p.x2], [top + p.y1, top + p.y2],
                    color=p.stroke, linewidth=p.stroke_width, alpha=p.opacity,
                    linestyle=(0, (4, 4)) if p.dasharray else "-", zorder=z)
        elif isinstance(p, Text):
            ha = {"middle": "center", "end": "right"}.get(p.anchor, "left")
            ax.text(left + p.x, top + p.y, p.text, ha=ha, va="center",
                    fontsize=p.font_size * 0.75, fontweight=p.font_weight,
                    color=p.fill, zorder=z)


def render_png(scene: Scene, output_path: Union[str, FilePath]) -> FilePath:
    """
    Render a scene to a PNG file the size of the scene.

    Returns:
        Path of the written file
    """
    output_path = FilePath(output_path)
    fig = plt.figure(figsize=(scene.width / DPI, scene.height / DPI), dpi=DPI)
    try:
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, scene.width)
        ax.set_ylim(scene.height, 0)
        ax.set_aspect("equal")
        ax.axis("off")
        draw_scene(scene, ax)
        fig.savefig(output_path, dpi=DPI)
    finally:
        plt.close(fig)

    logger.info("Scene rendered to PNG", path=str(output_path),
                primitives=len(scene.primitives))
    return output_path
