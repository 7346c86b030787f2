"""
Spatial cost renderer: the stateful front of the pipeline.

Holds the current input, viewport and interaction state, and produces a
fresh scene on demand. Geometry is recomputed on every render; only the
two interaction variables persist between renders.
"""

from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

import structlog

from .encoding import marker_radius
from .exceptions import MapError
from .interaction import Event, InteractionState, transition
from .interpolation import DEFAULT_GRID_SIZE, DEFAULT_INFLUENCE_FRACTION
from .models import MapInput
from .pipeline import RenderPass, run_pipeline
from .projection import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_MARGIN,
    DEFAULT_MAX_HEIGHT,
    Margins,
    Viewport,
)
from .scene import Scene, build_scene

logger = structlog.get_logger()

ResizeListener = Callable[[float], None]


class ResizeEvents:
    """Fan-out of container width changes to subscribed listeners."""

    def __init__(self):
        self._listeners: List[ResizeListener] = []

    def subscribe(self, listener: ResizeListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ResizeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, width: float) -> None:
        for listener in list(self._listeners):
            listener(width)

    def __len__(self) -> int:
        return len(self._listeners)


class SpatialCostRenderer:
    """Renders the neighbourhood cost map for one postcode."""

    def __init__(self, map_input: Optional[MapInput] = None,
                 container_width: float = 800,
                 grid_size: float = DEFAULT_GRID_SIZE,
                 influence_fraction: float = DEFAULT_INFLUENCE_FRACTION,
                 aspect_ratio: float = DEFAULT_ASPECT_RATIO,
                 max_height: float = DEFAULT_MAX_HEIGHT,
                 margin: float = DEFAULT_MARGIN):
        self.map_input = map_input
        self.grid_size = grid_size
        self.influence_fraction = influence_fraction
        self.aspect_ratio = aspect_ratio
        self.max_height = max_height
        self.margins = Margins(margin, margin, margin, margin)
        self.state = InteractionState()
        self.viewport = self._viewport_for(container_width)

    def _viewport_for(self, container_width: float) -> Viewport:
        return Viewport.for_container(container_width, self.aspect_ratio,
                                      self.max_height, self.margins)

    # ── Inputs ────────────────────────────────────────────────────

    def set_input(self, map_input: MapInput) -> None:
        self.map_input = map_input

    def resize(self, container_width: float) -> None:
        self.viewport = self._viewport_for(container_width)
        logger.debug("Viewport resized", width=self.viewport.width,
                     height=self.viewport.height)

    def dispatch(self, event: Event) -> InteractionState:
        self.state = transition(self.state, event)
        return self.state

    @contextmanager
    def mounted(self, events: ResizeEvents) -> Iterator["SpatialCostRenderer"]:
        """Listen for resizes while the map is displayed; always unsubscribe."""
        events.subscribe(self.resize)
        try:
            yield self
        finally:
            events.unsubscribe(self.resize)

    # ── Output ────────────────────────────────────────────────────

    def render_pass(self) -> RenderPass:
        if self.map_input is None:
            raise MapError("No map input to render")
        return run_pipeline(self.map_input, self.viewport, self.grid_size,
                            self.influence_fraction)

    def render(self) -> Scene:
        return build_scene(self.render_pass(), self.state)

    def hit_test(self, x: float, y: float) -> Optional[str]:
        """
        Postcode of the topmost marker under (x, y) in plot coordinates.

        Markers are drawn in point order, so later points win overlaps.
        """
        rp = self.render_pass()
        for sp in reversed(rp.screen_points):
            radius = marker_radius(sp.point, rp.radius_scale,
                                   self.state.hovered == sp.postcode)
            if (sp.screen_x - x) ** 2 + (sp.screen_y - y) ** 2 <= radius ** 2:
                return sp.postcode
        return None
