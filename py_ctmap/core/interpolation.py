"""
Inverse-distance-weighted cost surface over a regular grid.

Shepard interpolation with a bounded kernel: a site at distance ``d`` from a
cell centre weighs ``(1 - d / max_distance) ** 2`` and nothing beyond
``max_distance``. The kernel is finite at d = 0 and every site has a bounded
reach. Cells with no site in reach are left out of the output entirely.
Each mean is clamped to the range of its contributing sites, so a cell with
one site in reach carries that site's exact value.

Cost is O(cells x sites); fine for a centre plus tens of neighbours.
"""

from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from .models import GridCell

logger = structlog.get_logger()

DEFAULT_GRID_SIZE = 30
DEFAULT_INFLUENCE_FRACTION = 0.3


def max_influence_distance(width: float, height: float,
                           fraction: float = DEFAULT_INFLUENCE_FRACTION) -> float:
    """Cutoff radius: a fraction of the viewport diagonal."""
    return float(np.hypot(width, height)) * fraction


def idw_weight(distance, max_distance: float):
    """
    Kernel weight for one or many distances.

    Returns ``(1 - d/max)^2`` where ``d < max`` and 0 elsewhere; works on
    scalars and numpy arrays alike.
    """
    d = np.asarray(distance, dtype=float)
    w = np.where(d < max_distance, (1.0 - d / max_distance) ** 2, 0.0)
    return float(w) if w.ndim == 0 else w


def interpolate_at(x: float, y: float, sites: np.ndarray, values: np.ndarray,
                   max_distance: float) -> Optional[float]:
    """
    Interpolated value at one position.

    Args:
        x, y: Position in viewport coordinates
        sites: Site positions, shape (n, 2)
        values: Site values, shape (n,)
        max_distance: Kernel cutoff

    Returns:
        Weighted mean of the values in reach, or None if no site is in reach
    """
    sites = np.asarray(sites, dtype=float).reshape(-1, 2)
    values = np.asarray(values, dtype=float)
    distances = np.hypot(sites[:, 0] - x, sites[:, 1] - y)
    weights = idw_weight(distances, max_distance)
    total = float(np.sum(weights))
    if total <= 0:
        return None
    return _bounded_mean(weights, values, total)


def _bounded_mean(weights: np.ndarray, values: np.ndarray, total: float) -> float:
    """Weighted mean clamped to the range of the values that carry weight."""
    contributing = values[weights > 0]
    mean = float(np.dot(weights, values) / total)
    return float(np.clip(mean, contributing.min(), contributing.max()))


def iter_grid_cells(sites: Sequence[Tuple[float, float]], values: Sequence[float],
                    width: float, height: float, grid_size: float = DEFAULT_GRID_SIZE,
                    max_distance: Optional[float] = None) -> Iterator[GridCell]:
    """
    Yield heatmap cells column by column.

    Cells start at x = 0, grid_size, ... (< width) and, within a column,
    y = 0, grid_size, ... (< height). Each cell is evaluated at its centre.

    Args:
        sites: Site positions in viewport coordinates
        values: One value per site
        width, height: Viewport size
        grid_size: Cell edge length in pixels
        max_distance: Kernel cutoff; defaults to 30% of the viewport diagonal

    Yields:
        GridCell for every cell with at least one site in reach
    """
    if grid_size <= 0:
        raise ValueError(f"grid_size must be positive, got {grid_size}")

    site_arr = np.asarray(sites, dtype=float).reshape(-1, 2)
    value_arr = np.asarray(values, dtype=float)
    if len(site_arr) != len(value_arr):
        raise ValueError("sites and values must have the same length")
    if len(site_arr) == 0:
        return

    if max_distance is None:
        max_distance = max_influence_distance(width, height)

    half = grid_size / 2
    ys = np.arange(0.0, height, grid_size)
    centers_y = ys + half

    for x in np.arange(0.0, width, grid_size):
        # Distances from every cell centre in this column to every site
        dx = (x + half) - site_arr[:, 0]
        dy = centers_y[:, None] - site_arr[None, :, 1]
        weights = idw_weight(np.sqrt(dx[None, :] ** 2 + dy ** 2), max_distance)
        totals = weights.sum(axis=1)
        for y, row, total in zip(ys, weights, totals):
            if total > 0:
                yield GridCell(x=float(x), y=float(y), size=float(grid_size),
                               value=_bounded_mean(row, value_arr, float(total)))


def interpolate_grid(sites: Sequence[Tuple[float, float]], values: Sequence[float],
                     width: float, height: float, grid_size: float = DEFAULT_GRID_SIZE,
                     max_distance: Optional[float] = None) -> List[GridCell]:
    """Materialise :func:`iter_grid_cells` into a list."""
    cells = list(iter_grid_cells(sites, values, width, height, grid_size, max_distance))
    logger.debug("Heatmap grid interpolated", cells=len(cells), sites=len(values),
                 grid_size=grid_size)
    return cells
