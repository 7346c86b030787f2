"""Tests for geographic to screen projection."""

import pytest
from py_ctmap.core.models import GeoPoint
from py_ctmap.core.projection import (
    LinearScale, Margins, Viewport, fit_projection, padded_extent, project_points
)


def make_point(postcode, lat, lng, is_center=False):
    return GeoPoint(postcode=postcode, is_center=is_center, band="D",
                    annual_cost_pence=180000, distance_miles=0.0, property_count=0,
                    local_authority="", latitude=lat, longitude=lng)


class TestViewport:
    """Test viewport sizing."""

    def test_height_capped(self):
        viewport = Viewport.for_container(800)
        assert viewport.height == 500
        assert viewport.inner_width == 760
        assert viewport.inner_height == 460

    def test_height_follows_width(self):
        viewport = Viewport.for_container(400)
        assert viewport.height == 300

    def test_custom_margins(self):
        viewport = Viewport.for_container(400, margins=Margins(10, 10, 10, 10))
        assert viewport.inner_width == 380
        assert viewport.inner_height == 280

    def test_tiny_container_never_negative(self):
        viewport = Viewport.for_container(10)
        assert viewport.inner_width >= 1
        assert viewport.inner_height >= 1


class TestExtent:
    """Test padded extents."""

    def test_padding(self):
        assert padded_extent([1.0, 2.0]) == pytest.approx((0.8, 2.2))

    def test_zero_span_gets_minimum(self):
        lo, hi = padded_extent([5.0], min_span=1e-3)
        assert lo < 5.0 < hi
        assert hi - lo == pytest.approx(1e-3 * 1.4)
        assert (lo + hi) / 2 == pytest.approx(5.0)


class TestLinearScale:
    """Test the linear scale."""

    def test_endpoints(self):
        scale = LinearScale((0, 10), (100, 200))
        assert scale(0) == 100
        assert scale(10) == 200
        assert scale(5) == 150

    def test_degenerate_domain_maps_to_middle(self):
        scale = LinearScale((3, 3), (0, 50))
        assert scale(3) == 25


class TestProjection:
    """Test point projection."""

    def test_single_point_is_centered(self):
        viewport = Viewport.for_container(800)
        point = make_point("SW1A 1AA", 51.5074, -0.1278, is_center=True)
        projection = fit_projection([point], viewport)

        x, y = projection.project(point.latitude, point.longitude)
        assert x == pytest.approx(viewport.inner_width / 2)
        assert y == pytest.approx(viewport.inner_height / 2)

    def test_latitude_inverted(self):
        """Higher latitude maps to a smaller y."""
        viewport = Viewport.for_container(800)
        south = make_point("S", 51.0, 0.0, is_center=True)
        north = make_point("N", 52.0, 0.0)
        projection = fit_projection([south, north], viewport)

        _, y_south = projection.project(south.latitude, south.longitude)
        _, y_north = projection.project(north.latitude, north.longitude)
        assert y_north < y_south

    def test_longitude_left_to_right(self):
        viewport = Viewport.for_container(800)
        west = make_point("W", 51.0, -1.0, is_center=True)
        east = make_point("E", 51.0, 1.0)
        projection = fit_projection([west, east], viewport)

        x_west, _ = projection.project(west.latitude, west.longitude)
        x_east, _ = projection.project(east.latitude, east.longitude)
        assert x_west < x_east

    def test_points_inside_padding(self):
        """Extreme points sit 1/7 of the way in from each edge."""
        viewport = Viewport.for_container(800)
        points = [make_point("A", 51.0, -1.0, is_center=True), make_point("B", 52.0, 1.0)]
        screen = project_points(points, fit_projection(points, viewport))

        a, b = screen
        assert a.screen_x == pytest.approx(viewport.inner_width * 0.2 / 1.4)
        assert b.screen_x == pytest.approx(viewport.inner_width * 1.2 / 1.4)
        assert b.screen_y == pytest.approx(viewport.inner_height * 0.2 / 1.4)
        assert a.postcode == "A"
