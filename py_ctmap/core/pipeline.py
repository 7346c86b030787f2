"""
One full geometry pass: synthesis, projection, tessellation, interpolation.

Every pass starts from the raw input; nothing is carried over between passes.
"""

import time
from dataclasses import dataclass
from typing import List, Tuple

import structlog

from .coordinates import build_point_set
from .encoding import CostColorScale, RadiusScale, cost_extent
from .interpolation import (
    DEFAULT_GRID_SIZE,
    DEFAULT_INFLUENCE_FRACTION,
    interpolate_grid,
    max_influence_distance,
)
from .models import GeoPoint, GridCell, MapInput, ScreenPoint
from .projection import Projection, Viewport, fit_projection, project_points
from .tessellation import Tessellation, compute_tessellation

logger = structlog.get_logger()


@dataclass(frozen=True)
class RenderPass:
    """All derived geometry for one render."""

    viewport: Viewport
    points: List[GeoPoint]
    projection: Projection
    screen_points: List[ScreenPoint]
    tessellation: Tessellation
    grid_cells: List[GridCell]
    color_scale: CostColorScale
    radius_scale: RadiusScale
    max_distance: float
    grid_size: float

    @property
    def center(self) -> ScreenPoint:
        return next(sp for sp in self.screen_points if sp.is_center)

    @property
    def sites(self) -> List[Tuple[float, float]]:
        return [sp.position for sp in self.screen_points]


def run_pipeline(map_input: MapInput, viewport: Viewport,
                 grid_size: float = DEFAULT_GRID_SIZE,
                 influence_fraction: float = DEFAULT_INFLUENCE_FRACTION) -> RenderPass:
    """
    Compute every derived entity for one render.

    Args:
        map_input: Centre, neighbours and the user's band and cost
        viewport: Drawing size; geometry uses its inner area
        grid_size: Heatmap cell size in pixels
        influence_fraction: Heatmap cutoff as a fraction of the inner diagonal

    Returns:
        RenderPass owning the derived points, regions and grid

    Raises:
        InvalidPointSetError: if postcodes collide
    """
    started = time.perf_counter()

    points = build_point_set(map_input)
    projection = fit_projection(points, viewport)
    screen_points = project_points(points, projection)
    sites = [sp.position for sp in screen_points]
    width, height = viewport.inner_width, viewport.inner_height

    tessellation = compute_tessellation(sites, width, height)

    max_distance = max_influence_distance(width, height, influence_fraction)
    grid_cells = interpolate_grid(
        sites,
        [p.annual_cost_pence for p in points],
        width,
        height,
        grid_size=grid_size,
        max_distance=max_distance,
    )

    low, high = cost_extent(points)

    logger.info("Render pass complete",
                center=map_input.center_postcode,
                points=len(points),
                regions=len(tessellation),
                grid_cells=len(grid_cells),
                width=viewport.width,
                height=viewport.height,
                elapsed_ms=round((time.perf_counter() - started) * 1000, 2))

    return RenderPass(
        viewport=viewport,
        points=points,
        projection=projection,
        screen_points=screen_points,
        tessellation=tessellation,
        grid_cells=grid_cells,
        color_scale=CostColorScale(low, high),
        radius_scale=RadiusScale(low, high),
        max_distance=max_distance,
        grid_size=grid_size,
    )
