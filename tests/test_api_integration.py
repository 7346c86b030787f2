"""
Tests for the map rendering API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from py_ctmap.api.main import app
from py_ctmap.core.sample_data import SAMPLE_TOOL_DATA


class TestMapAPIEndpoints:
    """Test the API endpoints for scene, SVG and heatmap output."""

    def setup_method(self):
        """Set up test client."""
        self.client = TestClient(app)
        self.map_input = {
            "centerPostcode": "SW1A 1AA",
            "centerLat": 51.5074,
            "centerLng": -0.1278,
            "userBand": "D",
            "userCostPence": 180000,
            "neighboringPostcodes": SAMPLE_TOOL_DATA["neighboringPostcodes"][:3],
        }

    def test_root(self):
        response = self.client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self):
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_scene_from_tool_data(self):
        """Test the /maps/scene endpoint with a full lookup response."""
        response = self.client.post("/maps/scene", json={"tool_data": SAMPLE_TOOL_DATA})

        assert response.status_code == 200
        data = response.json()
        assert data["width"] == 800
        assert data["height"] == 500
        assert data["heatmap_visible"] is True
        assert len(data["defs"]) == 7
        assert data["detail"] is None

        layers = {p["layer"] for p in data["primitives"]}
        assert {"background", "heatmap-regions", "band-regions", "markers", "legend"} <= layers

    def test_scene_from_map_input_with_hover(self):
        response = self.client.post("/maps/scene", json={
            "map_input": self.map_input,
            "width": 600,
            "heatmap_visible": False,
            "hovered": "SW1P 1AA",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["width"] == 600
        assert data["heatmap_visible"] is False
        assert not any(p["layer"].startswith("heatmap") for p in data["primitives"])

        detail = data["detail"]
        assert detail["postcode"] == "SW1P 1AA"
        assert detail["delta_direction"] == "lower"
        assert detail["delta_label"] == "↓£50 less than your area"

    def test_svg(self):
        response = self.client.post("/maps/svg", json={"map_input": self.map_input})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert response.text.startswith("<svg")
        assert response.text.count("<circle") == 4 + 3

    def test_heatmap(self):
        response = self.client.post("/maps/heatmap", json={"tool_data": SAMPLE_TOOL_DATA})

        assert response.status_code == 200
        data = response.json()
        assert data["grid_size"] == 30
        assert data["plot_width"] == 760
        assert data["max_distance"] == pytest.approx(0.3 * (760 ** 2 + 460 ** 2) ** 0.5)
        assert len(data["regions"]) == 7
        assert data["regions"][0]["is_center"] is True
        assert data["cells"]

        for cell in data["cells"]:
            assert 155000 <= cell["value"] <= 295000
            assert cell["color"].startswith("#")

    def test_duplicate_postcode_rejected(self):
        payload = dict(self.map_input)
        payload["neighboringPostcodes"] = [
            SAMPLE_TOOL_DATA["neighboringPostcodes"][0],
            SAMPLE_TOOL_DATA["neighboringPostcodes"][0],
        ]
        response = self.client.post("/maps/scene", json={"map_input": payload})

        assert response.status_code == 422
        assert "duplicate" in response.json()["detail"]

    def test_missing_input_rejected(self):
        response = self.client.post("/maps/scene", json={"width": 800})
        assert response.status_code == 422

    @pytest.mark.parametrize("width", [50, 10000])
    def test_width_out_of_range(self, width):
        response = self.client.post("/maps/scene",
                                    json={"map_input": self.map_input, "width": width})
        assert response.status_code == 422
