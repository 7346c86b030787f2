"""SVG rendering of a scene description."""

from typing import List
from xml.sax.saxutils import escape, quoteattr

from ..core.scene import Circle, Line, Path, Rect, Scene, Text


def _num(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _stroke_attrs(stroke, width, opacity=None) -> str:
    if not stroke:
        return ' stroke="none"'
    attrs = f' stroke="{stroke}" stroke-width="{_num(width)}"'
    if opacity is not None and opacity < 1:
        attrs += f' stroke-opacity="{_num(opacity)}"'
    return attrs


def render_primitive(p) -> str:
    """SVG element for one primitive."""
    if isinstance(p, Rect):
        return (f'<rect x="{_num(p.x)}" y="{_num(p.y)}" width="{_num(p.width)}"'
                f' height="{_num(p.height)}" rx="{_num(p.rx)}" fill="{p.fill}"'
                f' opacity="{_num(p.opacity)}"{_stroke_attrs(p.stroke, p.stroke_width)}/>')
    if isinstance(p, Path):
        key = f' data-postcode={quoteattr(p.key)}' if p.key else ""
        return (f'<path d="{p.d}" fill={quoteattr(p.fill)} opacity="{_num(p.opacity)}"'
                f'{_stroke_attrs(p.stroke, p.stroke_width, p.stroke_opacity)}{key}/>')
    if isinstance(p, Circle):
        key = f' data-postcode={quoteattr(p.key)}' if p.key else ""
        return (f'<circle cx="{_num(p.cx)}" cy="{_num(p.cy)}" r="{_num(p.r)}"'
                f' fill="{p.fill}" opacity="{_num(p.opacity)}"'
                f'{_stroke_attrs(p.stroke, p.stroke_width)}{key}/>')
    if isinstance(p, Line):
        dash = f' stroke-dasharray="{p.dasharray}"' if p.dasharray else ""
        return (f'<line x1="{_num(p.x1)}" y1="{_num(p.y1)}" x2="{_num(p.x2)}"'
                f' y2="{_num(p.y2)}" stroke="{p.stroke}" stroke-width="{_num(p.stroke_width)}"'
                f'{dash} opacity="{_num(p.opacity)}"/>')
    if isinstance(p, Text):
        return (f'<text x="{_num(p.x)}" y="{_num(p.y)}" dy="0.35em"'
                f' text-anchor="{p.anchor}" font-size="{_num(p.font_size)}px"'
                f' font-weight="{p.font_weight}" fill="{p.fill}"'
                f' pointer-events="none">{escape(p.text)}</text>')
    raise TypeError(f"Cannot render primitive {p!r}")


def render_svg(scene: Scene) -> str:
    """
    Render a scene as a standalone SVG document.

    Layers become ``<g class="...">`` groups in scene order, all translated
    by the top/left margins.
    """
    top, _, _, left = scene.margins
    lines: List[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(scene.width)}"'
        f' height="{_num(scene.height)}" viewBox="0 0 {_num(scene.width)} {_num(scene.height)}">',
        "<defs>",
    ]
    for g in scene.defs:
        lines.append(f'<radialGradient id={quoteattr(g.id)}>')
        lines.append(f'<stop offset="0%" stop-color="{g.color}"'
                     f' stop-opacity="{_num(g.inner_opacity)}"/>')
        lines.append(f'<stop offset="100%" stop-color="{g.color}"'
                     f' stop-opacity="{_num(g.outer_opacity)}"/>')
        lines.append("</radialGradient>")
    lines.append("</defs>")

    lines.append(f'<g transform="translate({_num(left)},{_num(top)})">')
    current = None
    for p in scene.primitives:
        if p.layer != current:
            if current is not None:
                lines.append("</g>")
            lines.append(f'<g class="{p.layer}">')
            current = p.layer
        lines.append(render_primitive(p))
    if current is not None:
        lines.append("</g>")
    lines.append("</g>")
    lines.append("</svg>")
    return "\n".join(lines)
