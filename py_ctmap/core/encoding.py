"""
Visual encodings: band colours, the cost colour scale and marker radii.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

import matplotlib
from matplotlib.colors import to_hex

from .models import Band, GeoPoint

# Ordinal green (A) to red (H)
BAND_COLORS: Dict[str, str] = {
    "A": "#10b981",
    "B": "#34d399",
    "C": "#6ee7b7",
    "D": "#fbbf24",
    "E": "#fb923c",
    "F": "#f97316",
    "G": "#ef4444",
    "H": "#dc2626",
}
NEUTRAL_COLOR = "#9ca3af"

LEGEND_ENTRIES: List[Tuple[str, str]] = [
    ("Lower Cost (A-C)", BAND_COLORS["A"]),
    ("Medium Cost (D-E)", BAND_COLORS["D"]),
    ("Higher Cost (F-H)", BAND_COLORS["G"]),
]

HEATMAP_LEGEND: List[Tuple[str, str]] = [
    ("Low", "#009e73"),
    ("Med", "#f0e442"),
    ("High", "#d55e00"),
]

MIN_RADIUS = 8.0
MAX_RADIUS = 24.0
CENTER_RADIUS = 20.0
CENTER_HOVER_RADIUS = CENTER_RADIUS + 4
HOVER_SCALE = 1.3

HEATMAP_COLORMAP = "RdYlGn"


def band_color(band: Optional[str]) -> str:
    """Colour for a band letter; unknown bands get the neutral grey."""
    parsed = Band.parse(band)
    if parsed is None:
        return NEUTRAL_COLOR
    return BAND_COLORS[parsed.value]


def cost_extent(points: Sequence[GeoPoint]) -> Tuple[int, int]:
    """
    (min, max) annual cost over a non-empty point set.

    Raises:
        ValueError: for an empty point set
    """
    if not points:
        raise ValueError("cost_extent needs at least one point")
    costs = [p.annual_cost_pence for p in points]
    return (min(costs), max(costs))


class CostColorScale:
    """
    Sequential red-yellow-green scale with an inverted domain.

    The lowest cost maps to the green end and the highest to red. A
    zero-width domain maps every value to the middle of the colormap.
    """

    def __init__(self, min_cost: float, max_cost: float, cmap_name: str = HEATMAP_COLORMAP):
        self.min_cost = float(min_cost)
        self.max_cost = float(max_cost)
        self._cmap = matplotlib.colormaps[cmap_name]

    def position(self, cost: float) -> float:
        """Position on the colormap in [0, 1]; 1 is the green end."""
        span = self.max_cost - self.min_cost
        if span == 0:
            return 0.5
        t = (self.max_cost - float(cost)) / span
        return min(max(t, 0.0), 1.0)

    def __call__(self, cost: float) -> str:
        return to_hex(self._cmap(self.position(cost)))


class RadiusScale:
    """Square-root scale so marker area grows linearly with cost."""

    def __init__(self, min_cost: float, max_cost: float,
                 range_: Tuple[float, float] = (MIN_RADIUS, MAX_RADIUS)):
        self.min_cost = float(min_cost)
        self.max_cost = float(max_cost)
        self.range = range_

    def __call__(self, cost: float) -> float:
        lo = math.sqrt(max(self.min_cost, 0.0))
        hi = math.sqrt(max(self.max_cost, 0.0))
        r0, r1 = self.range
        if hi == lo:
            return (r0 + r1) / 2
        t = (math.sqrt(max(float(cost), 0.0)) - lo) / (hi - lo)
        return r0 + t * (r1 - r0)


def marker_radius(point: GeoPoint, scale: RadiusScale, hovered: bool = False) -> float:
    """
    Radius of a point's marker.

    The centre marker has a fixed size regardless of cost so it always
    stands out; hovering grows it by a fixed amount and other markers by 30%.
    """
    if point.is_center:
        return CENTER_HOVER_RADIUS if hovered else CENTER_RADIUS
    radius = scale(point.annual_cost_pence)
    return radius * HOVER_SCALE if hovered else radius
