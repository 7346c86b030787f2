"""Tests for input models and point-set validation."""

import pytest
from pydantic import ValidationError
from py_ctmap.core.exceptions import InvalidPointSetError, MapError
from py_ctmap.core.models import (
    Band, GeoPoint, MapInput, NeighborRecord, ToolData, validate_point_set
)
from py_ctmap.core.sample_data import SAMPLE_TOOL_DATA, sample_tool_data


def make_point(postcode, is_center=False):
    return GeoPoint(postcode=postcode, is_center=is_center, band="D",
                    annual_cost_pence=180000, distance_miles=0.0, property_count=0,
                    local_authority="", latitude=51.5, longitude=-0.1)


class TestBand:
    """Test band parsing."""

    @pytest.mark.parametrize("raw,expected", [("A", Band.A), (" d ", Band.D), ("h", Band.H)])
    def test_parse_known(self, raw, expected):
        assert Band.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["Z", "", "AA", None])
    def test_parse_unknown(self, raw):
        assert Band.parse(raw) is None

    def test_unknown_band_kept_on_record(self):
        """Records keep the raw letter so the map can draw it neutrally."""
        record = NeighborRecord(postcode="E1 1AA", distance_miles=1.0, average_band="X",
                                average_annual_cost_pence=140000)
        assert record.average_band == "X"


class TestNeighborRecord:
    """Test neighbour record parsing."""

    def test_camel_case_aliases(self):
        record = NeighborRecord.model_validate({
            "postcode": "SW1A 2AA", "distance": 0.3, "averageBand": "E",
            "averageAnnualCostPence": 200000, "propertyCount": 342,
            "localAuthority": "Westminster",
        })
        assert record.distance_miles == 0.3
        assert record.average_band == "E"
        assert record.property_count == 342

    def test_snake_case_names(self):
        record = NeighborRecord(postcode="E1 1AA", distance_miles=1.0, average_band="B",
                                average_annual_cost_pence=140000)
        assert record.local_authority == ""
        assert record.latitude is None

    @pytest.mark.parametrize("distance", [-1.0, float("nan"), float("inf")])
    def test_bad_distance_rejected(self, distance):
        with pytest.raises(ValidationError):
            NeighborRecord(postcode="E1 1AA", distance_miles=distance, average_band="B",
                           average_annual_cost_pence=140000)

    def test_negative_cost_rejected(self):
        with pytest.raises(ValidationError):
            NeighborRecord(postcode="E1 1AA", distance_miles=1.0, average_band="B",
                           average_annual_cost_pence=-5)


class TestMapInput:
    """Test the map input model."""

    def test_defaults(self):
        map_input = MapInput(center_postcode="SW1A 1AA", center_lat=51.5, center_lng=-0.1)
        assert map_input.neighbors == []
        assert map_input.user_band == "D"
        assert map_input.user_cost_pence == 0

    def test_non_finite_center_rejected(self):
        with pytest.raises(ValidationError):
            MapInput(center_postcode="SW1A 1AA", center_lat=float("nan"), center_lng=-0.1)


class TestToolData:
    """Test extraction from the lookup response."""

    def test_sample_to_map_input(self):
        map_input = sample_tool_data().to_map_input()

        assert map_input.center_postcode == "SW1A 1AA"
        assert map_input.center_lat == 51.5074
        assert map_input.user_band == "D"
        assert map_input.user_cost_pence == 180000
        assert [n.postcode for n in map_input.neighbors][:2] == ["SW1A 2AA", "SW1P 1AA"]
        assert len(map_input.neighbors) == 6

    def test_missing_band_defaults_to_d(self):
        data = dict(SAMPLE_TOOL_DATA, userCouncilTaxBand=None, userAnnualCostPence=None)
        map_input = ToolData.model_validate(data).to_map_input()
        assert map_input.user_band == "D"
        assert map_input.user_cost_pence == 180000

    def test_missing_cost_uses_band_average(self):
        data = dict(SAMPLE_TOOL_DATA, userCouncilTaxBand="G", userAnnualCostPence=None)
        assert ToolData.model_validate(data).to_map_input().user_cost_pence == 320000

    def test_missing_cost_and_band_data(self):
        data = dict(SAMPLE_TOOL_DATA, councilTaxBandData={}, userAnnualCostPence=None)
        assert ToolData.model_validate(data).to_map_input().user_cost_pence == 0

    def test_optional_sections(self):
        tool_data = ToolData.model_validate({
            "postcodeMeta": {"postcode": "AB1 2CD", "latitude": 57.1, "longitude": -2.1},
        })
        assert tool_data.land_registry_data is None
        assert tool_data.to_map_input().neighbors == []


class TestValidatePointSet:
    """Test point set invariants."""

    def test_valid(self):
        validate_point_set([make_point("A", is_center=True), make_point("B")])

    def test_empty(self):
        with pytest.raises(InvalidPointSetError):
            validate_point_set([])

    def test_no_center(self):
        with pytest.raises(InvalidPointSetError):
            validate_point_set([make_point("A"), make_point("B")])

    def test_two_centers(self):
        with pytest.raises(InvalidPointSetError):
            validate_point_set([make_point("A", is_center=True), make_point("B", is_center=True)])

    def test_duplicate_postcode(self):
        with pytest.raises(InvalidPointSetError) as exc_info:
            validate_point_set([make_point("A", is_center=True), make_point("B"), make_point("B")])
        assert "B" in exc_info.value.detail

    def test_error_hierarchy(self):
        """Callers can catch either the map error base or ValueError."""
        assert issubclass(InvalidPointSetError, MapError)
        assert issubclass(InvalidPointSetError, ValueError)
