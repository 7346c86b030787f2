"""
Core neighbourhood cost map pipeline.
"""

from .coordinates import build_point_set, synthesize_coordinates
from .exceptions import InvalidPointSetError, MapError
from .interaction import HoverEnter, HoverLeave, InteractionState, ToggleHeatmap, transition
from .models import GeoPoint, GridCell, MapInput, NeighborRecord, ScreenPoint, ToolData
from .pipeline import RenderPass, run_pipeline
from .projection import Viewport, fit_projection
from .renderer import ResizeEvents, SpatialCostRenderer
from .scene import Scene, build_scene
from .tessellation import Tessellation, compute_tessellation
from .interpolation import interpolate_grid, iter_grid_cells

__all__ = ['build_point_set', 'synthesize_coordinates', 'InvalidPointSetError', 'MapError',
           'HoverEnter', 'HoverLeave', 'InteractionState', 'ToggleHeatmap', 'transition',
           'GeoPoint', 'GridCell', 'MapInput', 'NeighborRecord', 'ScreenPoint', 'ToolData',
           'RenderPass', 'run_pipeline', 'Viewport', 'fit_projection',
           'ResizeEvents', 'SpatialCostRenderer', 'Scene', 'build_scene',
           'Tessellation', 'compute_tessellation', 'interpolate_grid', 'iter_grid_cells']
