"""Tests for colour and radius encodings."""

import pytest
from py_ctmap.core.encoding import (
    BAND_COLORS, CENTER_RADIUS, NEUTRAL_COLOR, CostColorScale, RadiusScale,
    band_color, cost_extent, marker_radius
)
from py_ctmap.core.models import Band, GeoPoint


def make_point(cost, is_center=False, band="C"):
    return GeoPoint(postcode=f"P{cost}", is_center=is_center, band=band,
                    annual_cost_pence=cost, distance_miles=1.0, property_count=10,
                    local_authority="", latitude=51.5, longitude=-0.1)


class TestBandColors:
    """Test band colour lookup."""

    def test_palette_covers_every_band(self):
        assert list(BAND_COLORS) == [b.value for b in Band]

    def test_known_band(self):
        assert band_color("A") == "#10b981"
        assert band_color("H") == "#dc2626"

    def test_lowercase_and_whitespace(self):
        assert band_color(" d ") == BAND_COLORS["D"]

    @pytest.mark.parametrize("band", ["Z", "", "AA", None])
    def test_unknown_band_falls_back(self, band):
        assert band_color(band) == NEUTRAL_COLOR


class TestCostColorScale:
    """Test the heatmap colour scale."""

    def test_low_cost_is_green_end(self):
        scale = CostColorScale(100000, 300000)
        assert scale.position(100000) == 1.0
        assert scale.position(300000) == 0.0
        assert scale(100000) == "#006837"
        assert scale(300000) == "#a50026"

    def test_midpoint(self):
        scale = CostColorScale(100000, 300000)
        assert scale.position(200000) == pytest.approx(0.5)

    def test_degenerate_domain(self):
        scale = CostColorScale(180000, 180000)
        assert scale.position(180000) == 0.5
        assert scale(180000).startswith("#")

    def test_out_of_domain_clamped(self):
        scale = CostColorScale(100000, 300000)
        assert scale.position(50000) == 1.0
        assert scale.position(400000) == 0.0


class TestRadius:
    """Test marker radius encoding."""

    def test_range_endpoints(self):
        scale = RadiusScale(100000, 400000)
        assert scale(100000) == pytest.approx(8)
        assert scale(400000) == pytest.approx(24)

    def test_square_root(self):
        """Halfway in sqrt space is halfway in radius."""
        scale = RadiusScale(0, 100)
        assert scale(25) == pytest.approx(16)

    def test_degenerate_domain(self):
        assert RadiusScale(5, 5)(5) == pytest.approx(16)

    def test_monotonic(self):
        scale = RadiusScale(120000, 400000)
        costs = [120000, 150000, 151000, 200000, 320000, 400000]
        radii = [marker_radius(make_point(c), scale) for c in costs]
        assert radii == sorted(radii)

    def test_center_fixed(self):
        scale = RadiusScale(100000, 400000)
        assert marker_radius(make_point(400000, is_center=True), scale) == CENTER_RADIUS
        assert marker_radius(make_point(100000, is_center=True), scale) == CENTER_RADIUS
        assert marker_radius(make_point(100000, is_center=True), scale, hovered=True) == CENTER_RADIUS + 4

    def test_hover_enlarges(self):
        scale = RadiusScale(100000, 400000)
        point = make_point(250000)
        assert marker_radius(point, scale, hovered=True) == pytest.approx(
            marker_radius(point, scale) * 1.3)


class TestCostExtent:
    """Test guarded aggregates."""

    def test_extent(self):
        points = [make_point(3), make_point(1), make_point(2)]
        assert cost_extent(points) == (1, 3)

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            cost_extent([])
