"""
Hover and heatmap-toggle state for the map.

Two independent variables: which postcode (if any) is hovered, and whether
the heatmap layers are shown. Transitions are pure functions of the current
state and one event.
"""

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Union

from .models import GeoPoint


@dataclass(frozen=True)
class InteractionState:
    hovered: Optional[str] = None
    heatmap_visible: bool = True

    @property
    def is_idle(self) -> bool:
        return self.hovered is None


@dataclass(frozen=True)
class HoverEnter:
    postcode: str


@dataclass(frozen=True)
class HoverLeave:
    postcode: Optional[str] = None


@dataclass(frozen=True)
class ToggleHeatmap:
    pass


Event = Union[HoverEnter, HoverLeave, ToggleHeatmap]


def transition(state: InteractionState, event: Event) -> InteractionState:
    """
    Apply one event.

    A leave event naming a postcode other than the hovered one is ignored,
    so a late leave from a previous marker cannot clear the current hover.

    Raises:
        TypeError: for an unknown event type
    """
    if isinstance(event, HoverEnter):
        return replace(state, hovered=event.postcode)
    if isinstance(event, HoverLeave):
        if event.postcode is not None and event.postcode != state.hovered:
            return state
        return replace(state, hovered=None)
    if isinstance(event, ToggleHeatmap):
        return replace(state, heatmap_visible=not state.heatmap_visible)
    raise TypeError(f"Unknown interaction event: {event!r}")


@dataclass(frozen=True)
class CostDelta:
    """Signed difference of a neighbour's cost against the centre's."""

    delta_pence: int

    @property
    def direction(self) -> str:
        if self.delta_pence < 0:
            return "lower"
        if self.delta_pence > 0:
            return "higher"
        return "same"

    @property
    def label(self) -> str:
        pounds = format_pounds(abs(self.delta_pence))
        if self.direction == "lower":
            return f"↓{pounds} less than your area"
        if self.direction == "higher":
            return f"↑{pounds} more than your area"
        return f"={pounds} same as your area"


@dataclass(frozen=True)
class DetailPanel:
    postcode: str
    band: str
    annual_cost_pence: int
    is_center: bool
    distance_miles: Optional[float] = None
    property_count: Optional[int] = None
    delta: Optional[CostDelta] = None

    @property
    def annual_cost_label(self) -> str:
        return format_pounds(self.annual_cost_pence)

    def to_dict(self) -> dict:
        data = {
            "postcode": self.postcode,
            "band": self.band,
            "annual_cost_pence": self.annual_cost_pence,
            "annual_cost_label": self.annual_cost_label,
            "is_center": self.is_center,
        }
        if not self.is_center:
            data.update({
                "distance_miles": self.distance_miles,
                "distance_label": f"{self.distance_miles:.1f} miles",
                "property_count": self.property_count,
                "property_count_label": f"{self.property_count:,}",
                "delta_pence": self.delta.delta_pence,
                "delta_direction": self.delta.direction,
                "delta_label": self.delta.label,
            })
        return data


def format_pounds(pence: float) -> str:
    """Whole pounds with a currency sign, e.g. 180000 -> '£1800'."""
    return f"£{pence / 100:.0f}"


def build_detail_panel(state: InteractionState,
                       points: Sequence[GeoPoint]) -> Optional[DetailPanel]:
    """Detail panel for the hovered point, or None when idle or not found."""
    if state.hovered is None:
        return None

    by_postcode = {p.postcode: p for p in points}
    selected = by_postcode.get(state.hovered)
    if selected is None:
        return None

    if selected.is_center:
        return DetailPanel(postcode=selected.postcode, band=selected.band,
                           annual_cost_pence=selected.annual_cost_pence, is_center=True)

    center = next(p for p in points if p.is_center)
    return DetailPanel(
        postcode=selected.postcode,
        band=selected.band,
        annual_cost_pence=selected.annual_cost_pence,
        is_center=False,
        distance_miles=selected.distance_miles,
        property_count=selected.property_count,
        delta=CostDelta(selected.annual_cost_pence - center.annual_cost_pence),
    )
