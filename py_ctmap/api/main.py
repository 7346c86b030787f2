"""FastAPI main application."""

import logging
from typing import List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from ..config import settings
from ..core.exceptions import InvalidPointSetError
from ..core.interaction import HoverEnter, ToggleHeatmap
from ..core.models import MapInput, ToolData
from ..core.pipeline import RenderPass
from ..core.renderer import SpatialCostRenderer
from ..core.scene import Scene, build_scene
from ..render.svg import render_svg

# Configure logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if settings.log_format == "plain"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Council Tax Map API",
    description="Neighbourhood council-tax cost map: regions, heatmap and markers",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class MapRenderRequest(BaseModel):
    """Request to render the cost map for one postcode."""

    map_input: Optional[MapInput] = Field(None, description="Centre, neighbours and user band/cost")
    tool_data: Optional[ToolData] = Field(None, description="Full lookup response; used when map_input is absent")
    width: Optional[float] = Field(None, ge=100, le=4000, description="Container width in pixels")
    heatmap_visible: bool = Field(True, description="Show the heatmap layers")
    hovered: Optional[str] = Field(None, description="Postcode under the pointer")

    def resolve_input(self) -> MapInput:
        if self.map_input is not None:
            return self.map_input
        if self.tool_data is not None:
            return self.tool_data.to_map_input()
        raise HTTPException(status_code=422, detail="Either map_input or tool_data is required")


class HeatmapCell(BaseModel):
    x: float
    y: float
    size: float
    value: float
    color: str


class RegionInfo(BaseModel):
    postcode: str
    is_center: bool
    annual_cost_pence: int
    color: str
    vertices: List[Tuple[float, float]]


class HeatmapResponse(BaseModel):
    """Heatmap grid and region polygons in plot coordinates."""

    plot_width: float
    plot_height: float
    grid_size: float
    max_distance: float
    cells: List[HeatmapCell]
    regions: List[RegionInfo]


def _render(request: MapRenderRequest) -> Tuple[RenderPass, Scene]:
    renderer = SpatialCostRenderer(
        map_input=request.resolve_input(),
        container_width=request.width or settings.default_container_width,
        grid_size=settings.grid_size,
        influence_fraction=settings.influence_fraction,
        aspect_ratio=settings.aspect_ratio,
        max_height=settings.max_map_height,
        margin=settings.margin,
    )
    if not request.heatmap_visible:
        renderer.dispatch(ToggleHeatmap())
    if request.hovered:
        renderer.dispatch(HoverEnter(request.hovered))

    try:
        rp = renderer.render_pass()
    except InvalidPointSetError as e:
        logger.warning("Rejected point set", error=str(e))
        raise HTTPException(status_code=422, detail=e.detail)
    return rp, build_scene(rp, renderer.state)


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Council Tax Map API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/maps/scene")
async def render_scene(request: MapRenderRequest):
    """Render the map as a scene description (JSON)."""
    _, scene = _render(request)
    logger.info("Scene rendered", primitives=len(scene.primitives),
                heatmap=scene.heatmap_visible, hovered=request.hovered)
    return scene.to_dict()


@app.post("/maps/svg")
async def render_scene_svg(request: MapRenderRequest):
    """Render the map as a standalone SVG document."""
    _, scene = _render(request)
    return Response(content=render_svg(scene), media_type="image/svg+xml")


@app.post("/maps/heatmap", response_model=HeatmapResponse)
async def render_heatmap(request: MapRenderRequest):
    """Interpolated grid cells and nearest-point regions with their colours."""
    rp, _ = _render(request)
    scale = rp.color_scale
    return HeatmapResponse(
        plot_width=rp.viewport.inner_width,
        plot_height=rp.viewport.inner_height,
        grid_size=rp.grid_size,
        max_distance=rp.max_distance,
        cells=[
            HeatmapCell(x=c.x, y=c.y, size=c.size, value=c.value, color=scale(c.value))
            for c in rp.grid_cells
        ],
        regions=[
            RegionInfo(
                postcode=p.postcode,
                is_center=p.is_center,
                annual_cost_pence=p.annual_cost_pence,
                color=scale(p.annual_cost_pence),
                vertices=[(float(x), float(y)) for x, y in region.vertices],
            )
            for p, region in zip(rp.points, rp.tessellation.regions)
        ],
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
