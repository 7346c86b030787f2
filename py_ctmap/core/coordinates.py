"""
Synthetic placement of neighbouring postcodes around the centre.

Only the distance to each neighbour is reliable, so neighbours are spread
evenly on a ring around the centre in input order. The radial offset uses
the square root of the distance so that near neighbours separate and far
ones do not push the rest into a corner. The degree scale constants are a
layout choice, not a geodesic conversion; longitude is stretched relative
to latitude to look right at UK latitudes.
"""

import math
from typing import List, Sequence, Tuple

import structlog

from .models import GeoPoint, MapInput, NeighborRecord, validate_point_set

logger = structlog.get_logger()

LAT_DEGREES_PER_UNIT = 0.02
LNG_DEGREES_PER_UNIT = 0.03


def neighbor_angles(n: int) -> List[float]:
    """Angles (radians) assigned to ``n`` neighbours: 0, 2π/n, 4π/n, ..."""
    return [(i / n) * math.pi * 2 for i in range(n)]


def synthesize_offsets(distances: Sequence[float]) -> List[Tuple[float, float]]:
    """
    Compute (dlat, dlng) offsets from the centre for each distance.

    Args:
        distances: Neighbour distances in miles, in display order

    Returns:
        One (dlat, dlng) pair per distance
    """
    offsets = []
    for angle, distance in zip(neighbor_angles(len(distances)), distances):
        adjusted = math.sqrt(distance)
        offsets.append((
            math.cos(angle) * adjusted * LAT_DEGREES_PER_UNIT,
            math.sin(angle) * adjusted * LNG_DEGREES_PER_UNIT,
        ))
    return offsets


def synthesize_coordinates(center_lat: float, center_lng: float,
                           neighbors: Sequence[NeighborRecord]) -> List[Tuple[float, float]]:
    """Return a synthetic (latitude, longitude) for every neighbour."""
    offsets = synthesize_offsets([n.distance_miles for n in neighbors])
    return [(center_lat + dlat, center_lng + dlng) for dlat, dlng in offsets]


def build_point_set(map_input: MapInput) -> List[GeoPoint]:
    """
    Build the full point set for one render: centre first, then neighbours.

    Args:
        map_input: Centre location, neighbours and the user's band and cost

    Returns:
        List of GeoPoints with exactly one centre

    Raises:
        InvalidPointSetError: if postcodes collide
    """
    center = GeoPoint(
        postcode=map_input.center_postcode,
        is_center=True,
        band=map_input.user_band,
        annual_cost_pence=map_input.user_cost_pence,
        distance_miles=0.0,
        property_count=0,
        local_authority="",
        latitude=map_input.center_lat,
        longitude=map_input.center_lng,
    )

    coords = synthesize_coordinates(map_input.center_lat, map_input.center_lng,
                                    map_input.neighbors)
    points = [center]
    for record, (lat, lng) in zip(map_input.neighbors, coords):
        points.append(GeoPoint(
            postcode=record.postcode,
            is_center=False,
            band=record.average_band,
            annual_cost_pence=record.average_annual_cost_pence,
            distance_miles=record.distance_miles,
            property_count=record.property_count,
            local_authority=record.local_authority,
            latitude=lat,
            longitude=lng,
        ))

    validate_point_set(points)
    logger.debug("Point set synthesised", center=center.postcode, neighbors=len(points) - 1)
    return points
