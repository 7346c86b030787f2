"""
Projection of geographic coordinates into the plot area.

Longitude maps left to right, latitude maps bottom to top (screen Y is
inverted). Both axes are padded by a fraction of their range, and an axis
with no range gets a minimum span so a single point still lands in the
middle of a valid scale.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .models import GeoPoint, ScreenPoint

EXTENT_PADDING = 0.2
MIN_DEGREE_SPAN = 1e-3

DEFAULT_ASPECT_RATIO = 0.75
DEFAULT_MAX_HEIGHT = 500.0
DEFAULT_MARGIN = 20.0


@dataclass(frozen=True)
class Margins:
    top: float = DEFAULT_MARGIN
    right: float = DEFAULT_MARGIN
    bottom: float = DEFAULT_MARGIN
    left: float = DEFAULT_MARGIN


@dataclass(frozen=True)
class Viewport:
    """Outer drawing size plus margins; geometry works in the inner area."""

    width: float
    height: float
    margins: Margins = field(default_factory=Margins)

    @classmethod
    def for_container(cls, container_width: float,
                      aspect_ratio: float = DEFAULT_ASPECT_RATIO,
                      max_height: float = DEFAULT_MAX_HEIGHT,
                      margins: Optional[Margins] = None) -> "Viewport":
        """Size a viewport to its container: height = min(width * ratio, max)."""
        return cls(
            width=container_width,
            height=min(container_width * aspect_ratio, max_height),
            margins=margins or Margins(),
        )

    @property
    def inner_width(self) -> float:
        return max(self.width - self.margins.left - self.margins.right, 1.0)

    @property
    def inner_height(self) -> float:
        return max(self.height - self.margins.top - self.margins.bottom, 1.0)

    @property
    def diagonal(self) -> float:
        return float(np.hypot(self.inner_width, self.inner_height))


class LinearScale:
    """Continuous linear map from a domain interval to a range interval."""

    def __init__(self, domain: Tuple[float, float], range_: Tuple[float, float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        span = d1 - d0
        t = 0.5 if span == 0 else (value - d0) / span
        return r0 + t * (r1 - r0)


def padded_extent(values: Iterable[float], padding: float = EXTENT_PADDING,
                  min_span: float = MIN_DEGREE_SPAN) -> Tuple[float, float]:
    """
    Compute [min - pad, max + pad] for a non-empty set of values.

    A zero-width extent is widened to ``min_span`` centred on the value
    before padding is applied.
    """
    arr = np.asarray(list(values), dtype=float)
    lo, hi = float(arr.min()), float(arr.max())
    if hi - lo <= 0:
        lo -= min_span / 2
        hi += min_span / 2
    pad = (hi - lo) * padding
    return (lo - pad, hi + pad)


class Projection:
    """Maps (lat, lng) to (x, y) inside a viewport's inner area."""

    def __init__(self, lat_extent: Tuple[float, float], lng_extent: Tuple[float, float],
                 viewport: Viewport):
        self.viewport = viewport
        self.x_scale = LinearScale(lng_extent, (0.0, viewport.inner_width))
        # Highest latitude at the top
        self.y_scale = LinearScale((lat_extent[1], lat_extent[0]), (0.0, viewport.inner_height))

    def project(self, lat: float, lng: float) -> Tuple[float, float]:
        return (self.x_scale(lng), self.y_scale(lat))


def fit_projection(points: Sequence[GeoPoint], viewport: Viewport) -> Projection:
    """Build a projection that frames every point with padding."""
    return Projection(
        lat_extent=padded_extent(p.latitude for p in points),
        lng_extent=padded_extent(p.longitude for p in points),
        viewport=viewport,
    )


def project_points(points: Sequence[GeoPoint], projection: Projection) -> List[ScreenPoint]:
    screen_points = []
    for p in points:
        x, y = projection.project(p.latitude, p.longitude)
        screen_points.append(ScreenPoint(point=p, screen_x=x, screen_y=y))
    return screen_points
