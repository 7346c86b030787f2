"""
Nearest-point tessellation of the plot area.

Each site owns the part of the viewport rectangle closer to it than to any
other site. The diagram comes from scipy's Voronoi over the sites plus their
mirror images across the four viewport edges: the mirrored copies close off
every real cell exactly along the rectangle, so no cell is infinite and no
extra clipping geometry is needed. The mirrors also keep Qhull away from its
degenerate inputs (one site, two sites, collinear sites).
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import QhullError, Voronoi

logger = structlog.get_logger()

# Sites closer than this (in pixels) are treated as coincident
COINCIDENT_TOLERANCE = 1e-9
EDGE_TOLERANCE = 1e-7


def polygon_area(vertices: np.ndarray) -> float:
    """Signed area of a polygon using the shoelace formula."""
    if len(vertices) < 3:
        return 0.0
    x = vertices[:, 0]
    y = vertices[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def _on_segment(px: float, py: float, a: np.ndarray, b: np.ndarray) -> bool:
    ab = b - a
    length_sq = float(np.dot(ab, ab))
    if length_sq == 0:
        return abs(px - a[0]) <= EDGE_TOLERANCE and abs(py - a[1]) <= EDGE_TOLERANCE
    t = ((px - a[0]) * ab[0] + (py - a[1]) * ab[1]) / length_sq
    t = min(max(t, 0.0), 1.0)
    cx = a[0] + t * ab[0]
    cy = a[1] + t * ab[1]
    return (px - cx) ** 2 + (py - cy) ** 2 <= EDGE_TOLERANCE ** 2


def point_in_polygon(x: float, y: float, vertices: np.ndarray) -> bool:
    """
    Ray-casting containment test; points on an edge count as inside.

    Args:
        x, y: Point to test
        vertices: Polygon vertices, shape (k, 2), closed implicitly

    Returns:
        True if the point lies inside or on the boundary
    """
    n = len(vertices)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        a = vertices[i]
        b = vertices[j]
        if _on_segment(x, y, a, b):
            return True
        if (a[1] > y) != (b[1] > y):
            x_cross = (b[0] - a[0]) * (y - a[1]) / (b[1] - a[1]) + a[0]
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def clip_polygon_halfplane(vertices: np.ndarray, normal: Tuple[float, float],
                           offset: float) -> np.ndarray:
    """
    Sutherland-Hodgman clip keeping the part where ``normal · p <= offset``.
    """
    if len(vertices) == 0:
        return vertices

    nx, ny = normal
    kept = []
    n = len(vertices)
    for i in range(n):
        cur = vertices[i]
        nxt = vertices[(i + 1) % n]
        d_cur = nx * cur[0] + ny * cur[1] - offset
        d_nxt = nx * nxt[0] + ny * nxt[1] - offset
        if d_cur <= 0:
            kept.append(cur)
        if (d_cur < 0 < d_nxt) or (d_nxt < 0 < d_cur):
            t = d_cur / (d_cur - d_nxt)
            kept.append(cur + t * (nxt - cur))
    if not kept:
        return np.empty((0, 2))
    return np.array(kept, dtype=float)


def clip_polygon_to_rect(vertices: np.ndarray, width: float, height: float) -> np.ndarray:
    """Clip a convex polygon to [0, width] x [0, height]."""
    clipped = vertices
    for normal, offset in (((-1.0, 0.0), 0.0), ((1.0, 0.0), width),
                           ((0.0, -1.0), 0.0), ((0.0, 1.0), height)):
        clipped = clip_polygon_halfplane(clipped, normal, offset)
    return clipped


def _order_convex(vertices: np.ndarray) -> np.ndarray:
    """Order the vertices of a convex polygon by angle and drop repeats."""
    if len(vertices) < 3:
        return vertices
    center = vertices.mean(axis=0)
    angles = np.arctan2(vertices[:, 1] - center[1], vertices[:, 0] - center[0])
    ordered = vertices[np.argsort(angles)]

    deduped = [ordered[0]]
    for v in ordered[1:]:
        if np.hypot(*(v - deduped[-1])) > EDGE_TOLERANCE:
            deduped.append(v)
    if len(deduped) > 1 and np.hypot(*(deduped[0] - deduped[-1])) <= EDGE_TOLERANCE:
        deduped.pop()
    return np.array(deduped, dtype=float)


@dataclass(frozen=True)
class Region:
    """The part of the viewport owned by one site."""

    index: int
    site: Tuple[float, float]
    vertices: np.ndarray

    @property
    def is_empty(self) -> bool:
        return len(self.vertices) < 3

    @property
    def area(self) -> float:
        return abs(polygon_area(self.vertices))

    def contains(self, x: float, y: float) -> bool:
        return not self.is_empty and point_in_polygon(x, y, self.vertices)

    def svg_path(self) -> str:
        """Closed SVG path data, empty for an empty region."""
        if self.is_empty:
            return ""
        head, *rest = self.vertices
        parts = [f"M{head[0]:.3f},{head[1]:.3f}"]
        parts.extend(f"L{v[0]:.3f},{v[1]:.3f}" for v in rest)
        parts.append("Z")
        return "".join(parts)


@dataclass(frozen=True)
class Tessellation:
    """One region per input site, in input order."""

    regions: List[Region]
    width: float
    height: float

    def __len__(self) -> int:
        return len(self.regions)

    def __getitem__(self, index: int) -> Region:
        return self.regions[index]

    def find(self, x: float, y: float) -> Optional[int]:
        """
        Index of the region containing (x, y), or None outside the viewport.

        Boundary points resolve to the nearest non-empty site.
        """
        if not (0 <= x <= self.width and 0 <= y <= self.height):
            return None

        matches = [r for r in self.regions if r.contains(x, y)]
        if len(matches) == 1:
            return matches[0].index

        candidates = matches or [r for r in self.regions if not r.is_empty]
        if not candidates:
            return None
        nearest = min(candidates, key=lambda r: (r.site[0] - x) ** 2 + (r.site[1] - y) ** 2)
        return nearest.index


def mirror_sites(sites: np.ndarray, width: float, height: float) -> np.ndarray:
    """
    Reflect each site across the four viewport edges.

    Reflections that coincide with their source (a site on an edge) are
    dropped, since Qhull rejects duplicate input points.

    Args:
        sites: Unique sites inside the viewport, shape (m, 2)
        width, height: Viewport size

    Returns:
        Mirror points, shape (k, 2) with k <= 4m
    """
    x = sites[:, 0]
    y = sites[:, 1]
    mirrors = np.concatenate([
        np.column_stack([-x, y]),
        np.column_stack([2 * width - x, y]),
        np.column_stack([x, -y]),
        np.column_stack([x, 2 * height - y]),
    ])
    sources = np.tile(sites, (4, 1))
    keep = np.hypot(*(mirrors - sources).T) > COINCIDENT_TOLERANCE
    return mirrors[keep]


def _halfplane_cell(j: int, sites: np.ndarray, width: float, height: float) -> np.ndarray:
    """Cell of site j built directly from perpendicular-bisector half-planes."""
    cell = np.array([[0.0, 0.0], [width, 0.0], [width, height], [0.0, height]])
    p = sites[j]
    for k, q in enumerate(sites):
        if k == j:
            continue
        # |x - p|^2 <= |x - q|^2  <=>  2(q - p)·x <= |q|^2 - |p|^2
        normal = 2 * (q - p)
        offset = float(np.dot(q, q) - np.dot(p, p))
        cell = clip_polygon_halfplane(cell, (normal[0], normal[1]), offset)
        if len(cell) == 0:
            break
    return cell


def _collapse_coincident(sites: np.ndarray) -> Tuple[np.ndarray, List[Optional[int]]]:
    """
    Collapse coincident sites; the first occurrence owns the region.

    Returns:
        (unique sites, per-input index into unique sites or None for repeats)
    """
    unique: List[np.ndarray] = []
    slot_of: Dict[Tuple[float, float], int] = {}
    owners: List[Optional[int]] = []
    for site in sites:
        key = (round(float(site[0]), 9), round(float(site[1]), 9))
        if key in slot_of:
            owners.append(None)
            continue
        slot_of[key] = len(unique)
        owners.append(len(unique))
        unique.append(site)
    return np.array(unique, dtype=float).reshape(-1, 2), owners


def compute_tessellation(sites: Sequence[Tuple[float, float]], width: float,
                         height: float) -> Tessellation:
    """
    Partition the viewport into one nearest-site region per input site.

    Sites outside the viewport are clamped onto its edge first. Coincident
    sites keep only the first occurrence; later ones get an empty region so
    regions never overlap.

    Args:
        sites: (x, y) positions in viewport coordinates
        width: Viewport width
        height: Viewport height

    Returns:
        Tessellation with len(sites) regions
    """
    arr = np.asarray(sites, dtype=float).reshape(-1, 2)
    if len(arr) == 0:
        return Tessellation(regions=[], width=width, height=height)

    clamped = np.column_stack([np.clip(arr[:, 0], 0, width), np.clip(arr[:, 1], 0, height)])
    unique, owners = _collapse_coincident(clamped)
    cells = _voronoi_cells(unique, width, height)

    regions = []
    for i, slot in enumerate(owners):
        vertices = np.empty((0, 2)) if slot is None else cells[slot]
        regions.append(Region(index=i, site=(float(clamped[i, 0]), float(clamped[i, 1])),
                              vertices=vertices))

    logger.info("Tessellation computed", sites=len(arr), unique_sites=len(unique),
                width=width, height=height)
    return Tessellation(regions=regions, width=width, height=height)


def _voronoi_cells(unique: np.ndarray, width: float, height: float) -> List[np.ndarray]:
    """Ordered, rectangle-clipped cell polygons for unique sites."""
    m = len(unique)
    all_points = np.vstack([unique, mirror_sites(unique, width, height)])

    try:
        vor = Voronoi(all_points)
    except QhullError as e:
        logger.warning("Qhull failed, building cells from half-planes", error=str(e), sites=m)
        return [_order_convex(_halfplane_cell(j, unique, width, height)) for j in range(m)]

    cells = []
    for j in range(m):
        region = vor.regions[vor.point_region[j]]
        if -1 in region or len(region) < 3:
            # Should not happen with mirrored sites, but never leave a hole
            cell = _halfplane_cell(j, unique, width, height)
        else:
            cell = clip_polygon_to_rect(_order_convex(vor.vertices[region]), width, height)
        cells.append(_order_convex(cell))
    return cells
