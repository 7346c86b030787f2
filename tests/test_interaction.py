"""Tests for hover and heatmap-toggle state."""

import pytest
from py_ctmap.core.interaction import (
    CostDelta, HoverEnter, HoverLeave, InteractionState, ToggleHeatmap,
    build_detail_panel, format_pounds, transition
)
from py_ctmap.core.models import GeoPoint


def make_point(postcode, cost, is_center=False, distance=0.0, property_count=150):
    return GeoPoint(postcode=postcode, is_center=is_center, band="C",
                    annual_cost_pence=cost, distance_miles=distance, property_count=property_count,
                    local_authority="Westminster", latitude=51.5, longitude=-0.1)


POINTS = [
    make_point("SW1A 1AA", 180000, is_center=True),
    make_point("SW1A 2AA", 160000, distance=0.4),
    make_point("SW1A 2AB", 200000, distance=1.5),
]


class TestTransitions:
    """Test the state machine."""

    def test_initial_state(self):
        state = InteractionState()
        assert state.is_idle
        assert state.heatmap_visible

    def test_hover_enter_and_leave(self):
        state = transition(InteractionState(), HoverEnter("SW1A 2AA"))
        assert state.hovered == "SW1A 2AA"
        assert not state.is_idle

        state = transition(state, HoverLeave("SW1A 2AA"))
        assert state.is_idle

    def test_hover_switches_directly(self):
        state = transition(InteractionState(), HoverEnter("SW1A 2AA"))
        state = transition(state, HoverEnter("SW1A 2AB"))
        assert state.hovered == "SW1A 2AB"

    def test_stale_leave_ignored(self):
        """A late leave from a previous marker keeps the current hover."""
        state = transition(InteractionState(), HoverEnter("SW1A 2AB"))
        assert transition(state, HoverLeave("SW1A 2AA")) == state

    def test_anonymous_leave_clears(self):
        state = transition(InteractionState(), HoverEnter("SW1A 2AB"))
        assert transition(state, HoverLeave()).is_idle

    def test_toggle_is_independent_of_hover(self):
        state = transition(InteractionState(), HoverEnter("SW1A 2AA"))
        state = transition(state, ToggleHeatmap())
        assert not state.heatmap_visible
        assert state.hovered == "SW1A 2AA"

        state = transition(state, ToggleHeatmap())
        assert state.heatmap_visible

    def test_states_are_immutable(self):
        state = InteractionState()
        transition(state, ToggleHeatmap())
        assert state.heatmap_visible

    def test_unknown_event(self):
        with pytest.raises(TypeError):
            transition(InteractionState(), "click")


class TestCostDelta:
    """Test the neighbour comparison label."""

    def test_lower(self):
        delta = CostDelta(-20000)
        assert delta.direction == "lower"
        assert delta.label == "↓£200 less than your area"

    def test_higher(self):
        delta = CostDelta(20000)
        assert delta.direction == "higher"
        assert delta.label == "↑£200 more than your area"

    def test_same(self):
        assert CostDelta(0).direction == "same"

    def test_format_pounds(self):
        assert format_pounds(180000) == "£1800"
        assert format_pounds(0) == "£0"


class TestDetailPanel:
    """Test the hover detail panel."""

    def test_idle_has_no_panel(self):
        assert build_detail_panel(InteractionState(), POINTS) is None

    def test_unknown_postcode_has_no_panel(self):
        state = InteractionState(hovered="ZZ1 1ZZ")
        assert build_detail_panel(state, POINTS) is None

    def test_neighbor_panel(self):
        panel = build_detail_panel(InteractionState(hovered="SW1A 2AA"), POINTS)

        assert panel.postcode == "SW1A 2AA"
        assert panel.delta.delta_pence == -20000
        data = panel.to_dict()
        assert data["delta_direction"] == "lower"
        assert data["delta_label"] == "↓£200 less than your area"
        assert data["distance_label"] == "0.4 miles"
        assert data["annual_cost_label"] == "£1600"
        assert data["property_count"] == 150

    def test_property_count_label_grouped(self):
        points = POINTS[:1] + [make_point("E1 6AN", 150000, distance=2.0, property_count=12345)]
        data = build_detail_panel(InteractionState(hovered="E1 6AN"), points).to_dict()
        assert data["property_count_label"] == "12,345"

    def test_center_panel_has_no_delta(self):
        panel = build_detail_panel(InteractionState(hovered="SW1A 1AA"), POINTS)

        assert panel.is_center
        assert panel.delta is None
        data = panel.to_dict()
        assert "delta_label" not in data
        assert data["annual_cost_label"] == "£1800"
