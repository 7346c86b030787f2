"""
Scene description: the map as an ordered list of immutable drawables.

``build_scene`` is a pure function of a render pass and the interaction
state. Adapters in ``py_ctmap.render`` turn a Scene into SVG or a raster
image; nothing here knows how drawing happens. All coordinates are in the
plot area (inside the margins).
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Tuple

from .encoding import LEGEND_ENTRIES, HEATMAP_LEGEND, band_color, marker_radius
from .interaction import DetailPanel, InteractionState, build_detail_panel
from .pipeline import RenderPass

BACKGROUND_FILL = "#f3f5f9"
BACKGROUND_STROKE = "#d8dde6"
CONNECTOR_STROKE = "#d8dde6"
CENTER_STROKE = "#2b59c3"
MARKER_STROKE = "#ffffff"
LEGEND_TEXT = "#5b6472"

HEATMAP_REGION_OPACITY = 0.4
HEATMAP_GRID_OPACITY = 0.15

# Back to front
LAYERS = (
    "background",
    "connectors",
    "heatmap-regions",
    "heatmap-grid",
    "band-regions",
    "markers",
    "labels",
    "legend",
)


@dataclass(frozen=True)
class RadialGradient:
    id: str
    color: str
    inner_opacity: float = 0.3
    outer_opacity: float = 0.0


@dataclass(frozen=True)
class Rect:
    layer: str
    x: float
    y: float
    width: float
    height: float
    fill: str
    opacity: float = 1.0
    stroke: Optional[str] = None
    stroke_width: float = 0.0
    rx: float = 0.0
    kind: str = field(default="rect", init=False)


@dataclass(frozen=True)
class Path:
    layer: str
    d: str
    vertices: Tuple[Tuple[float, float], ...]
    fill: str
    opacity: float = 1.0
    stroke: Optional[str] = None
    stroke_width: float = 0.0
    stroke_opacity: float = 1.0
    key: Optional[str] = None
    kind: str = field(default="path", init=False)


@dataclass(frozen=True)
class Circle:
    layer: str
    cx: float
    cy: float
    r: float
    fill: str
    stroke: Optional[str] = None
    stroke_width: float = 0.0
    opacity: float = 1.0
    key: Optional[str] = None
    kind: str = field(default="circle", init=False)


@dataclass(frozen=True)
class Line:
    layer: str
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    stroke_width: float = 1.0
    dasharray: Optional[str] = None
    opacity: float = 1.0
    kind: str = field(default="line", init=False)


@dataclass(frozen=True)
class Text:
    layer: str
    x: float
    y: float
    text: str
    font_size: float
    fill: str
    font_weight: str = "normal"
    anchor: str = "start"
    kind: str = field(default="text", init=False)


@dataclass(frozen=True)
class Scene:
    width: float
    height: float
    margins: Tuple[float, float, float, float]   # top, right, bottom, left
    plot_width: float
    plot_height: float
    defs: Tuple[RadialGradient, ...]
    primitives: tuple
    heatmap_visible: bool
    detail: Optional[DetailPanel] = None

    def layer(self, name: str) -> list:
        return [p for p in self.primitives if p.layer == name]

    def gradient(self, gradient_id: str) -> Optional[RadialGradient]:
        return next((g for g in self.defs if g.id == gradient_id), None)

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "margins": list(self.margins),
            "plot_width": self.plot_width,
            "plot_height": self.plot_height,
            "heatmap_visible": self.heatmap_visible,
            "heatmap_legend": [{"label": l, "color": c} for l, c in HEATMAP_LEGEND]
            if self.heatmap_visible else [],
            "defs": [asdict(g) for g in self.defs],
            "primitives": [asdict(p) for p in self.primitives],
            "detail": self.detail.to_dict() if self.detail else None,
        }


def gradient_id(postcode: str) -> str:
    return "gradient-" + re.sub(r"\s", "", postcode)


def _gradients(rp: RenderPass) -> Tuple[RadialGradient, ...]:
    defs: Dict[str, RadialGradient] = {}
    for p in rp.points:
        gid = gradient_id(p.postcode)
        defs.setdefault(gid, RadialGradient(id=gid, color=band_color(p.band)))
    return tuple(defs.values())


def _region_paths(rp: RenderPass, layer: str, fills: List[str], opacity: float,
                  stroke: Optional[str] = None, stroke_width: float = 0.0,
                  stroke_opacity: float = 1.0) -> List[Path]:
    paths = []
    for region, sp, fill in zip(rp.tessellation.regions, rp.screen_points, fills):
        if region.is_empty:
            continue
        paths.append(Path(
            layer=layer,
            d=region.svg_path(),
            vertices=tuple((float(x), float(y)) for x, y in region.vertices),
            fill=fill,
            opacity=opacity,
            stroke=stroke,
            stroke_width=stroke_width,
            stroke_opacity=stroke_opacity,
            key=sp.postcode,
        ))
    return paths


def _legend() -> list:
    items = []
    for i, (label, color) in enumerate(LEGEND_ENTRIES):
        x0, y0 = 10.0, 10.0 + i * 22
        items.append(Circle(layer="legend", cx=x0 + 8, cy=y0, r=6, fill=color,
                            stroke=MARKER_STROKE, stroke_width=1.5))
        items.append(Text(layer="legend", x=x0 + 20, y=y0, text=label, font_size=11,
                          fill=LEGEND_TEXT))
    return items


def build_scene(rp: RenderPass, state: InteractionState) -> Scene:
    """
    Turn a render pass and interaction state into a scene.

    The heatmap toggle only decides which layers appear; the geometry in the
    render pass is the same either way.
    """
    width, height = rp.viewport.inner_width, rp.viewport.inner_height
    center = rp.center
    primitives: list = [
        Rect(layer="background", x=0, y=0, width=width, height=height,
             fill=BACKGROUND_FILL, stroke=BACKGROUND_STROKE, stroke_width=1, rx=8),
    ]

    primitives.extend(
        Line(layer="connectors", x1=center.screen_x, y1=center.screen_y,
             x2=sp.screen_x, y2=sp.screen_y, stroke=CONNECTOR_STROKE,
             stroke_width=1, dasharray="4,4", opacity=0.3)
        for sp in rp.screen_points if not sp.is_center
    )

    if state.heatmap_visible:
        primitives.extend(_region_paths(
            rp, "heatmap-regions",
            [rp.color_scale(p.annual_cost_pence) for p in rp.points],
            opacity=HEATMAP_REGION_OPACITY, stroke="#ffffff", stroke_width=1,
            stroke_opacity=0.3,
        ))
        primitives.extend(
            Rect(layer="heatmap-grid", x=cell.x, y=cell.y, width=cell.size,
                 height=cell.size, fill=rp.color_scale(cell.value),
                 opacity=HEATMAP_GRID_OPACITY)
            for cell in rp.grid_cells
        )

    primitives.extend(_region_paths(
        rp, "band-regions",
        [f"url(#{gradient_id(p.postcode)})" for p in rp.points],
        opacity=0.5 if state.heatmap_visible else 1.0,
    ))

    for sp in rp.screen_points:
        hovered = state.hovered == sp.postcode
        if sp.is_center:
            stroke, stroke_width = CENTER_STROKE, (5 if hovered else 4)
        else:
            stroke, stroke_width = MARKER_STROKE, (3 if hovered else 2)
        primitives.append(Circle(
            layer="markers", cx=sp.screen_x, cy=sp.screen_y,
            r=marker_radius(sp.point, rp.radius_scale, hovered),
            fill=band_color(sp.band), stroke=stroke, stroke_width=stroke_width,
            opacity=1.0 if hovered else 0.9, key=sp.postcode,
        ))

    primitives.extend(
        Text(layer="labels", x=sp.screen_x, y=sp.screen_y, text=sp.band,
             font_size=12 if sp.is_center else 10,
             font_weight="bold" if sp.is_center else "normal",
             fill="#ffffff", anchor="middle")
        for sp in rp.screen_points
    )

    primitives.extend(_legend())

    m = rp.viewport.margins
    return Scene(
        width=rp.viewport.width,
        height=rp.viewport.height,
        margins=(m.top, m.right, m.bottom, m.left),
        plot_width=width,
        plot_height=height,
        defs=_gradients(rp),
        primitives=tuple(primitives),
        heatmap_visible=state.heatmap_visible,
        detail=build_detail_panel(state, rp.points),
    )
