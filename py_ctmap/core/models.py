"""
Data model for the neighbourhood cost map.

Upstream records arrive as pydantic models (the council-tax lookup response
and the subset of it the map consumes). Everything derived inside a render
pass is a frozen dataclass that lives only for that pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .exceptions import InvalidPointSetError


class Band(str, Enum):
    """Council-tax valuation band, ordinal A (lowest) to H (highest)."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Band"]:
        """Band for a loosely formatted letter (" d " -> D), or None if unrecognised."""
        if value is None:
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


DEFAULT_USER_BAND = Band.D.value


class NeighborRecord(BaseModel):
    """A neighbouring postcode as reported by the lookup service."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    postcode: str = Field(description="Neighbour postcode")
    distance_miles: float = Field(
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("distance_miles", "distanceMiles", "distance"),
        description="Distance from the centre postcode in miles",
    )
    average_band: str = Field(
        validation_alias=AliasChoices("average_band", "averageBand"),
        description="Most common band in the postcode",
    )
    average_annual_cost_pence: int = Field(
        ge=0,
        validation_alias=AliasChoices("average_annual_cost_pence", "averageAnnualCostPence"),
        description="Average annual bill in pence",
    )
    property_count: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("property_count", "propertyCount"),
    )
    local_authority: str = Field(
        default="",
        validation_alias=AliasChoices("local_authority", "localAuthority"),
    )
    # Reported coordinates are unreliable for neighbours and are never used for placement
    latitude: Optional[float] = Field(default=None, allow_inf_nan=False)
    longitude: Optional[float] = Field(default=None, allow_inf_nan=False)


class MapInput(BaseModel):
    """Everything the map core needs for one render."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    center_postcode: str = Field(
        validation_alias=AliasChoices("center_postcode", "centerPostcode")
    )
    center_lat: float = Field(
        allow_inf_nan=False, validation_alias=AliasChoices("center_lat", "centerLat")
    )
    center_lng: float = Field(
        allow_inf_nan=False, validation_alias=AliasChoices("center_lng", "centerLng")
    )
    neighbors: List[NeighborRecord] = Field(
        default_factory=list,
        validation_alias=AliasChoices("neighbors", "neighboringPostcodes"),
    )
    user_band: str = Field(
        default=DEFAULT_USER_BAND, validation_alias=AliasChoices("user_band", "userBand")
    )
    user_cost_pence: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("user_cost_pence", "userCostPence")
    )


# Upstream lookup response ----------------------------------------------------


class PostcodeMeta(BaseModel):
    """Location metadata for the searched postcode."""

    model_config = ConfigDict(populate_by_name=True)

    postcode: str
    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)
    region: str = ""
    local_authority: str = Field(default="", alias="localAuthority")


class BandCost(BaseModel):
    """Average annual cost for one band."""

    model_config = ConfigDict(populate_by_name=True)

    band: str
    average_annual_cost_pence: int = Field(ge=0, alias="averageAnnualCostPence")


class LandRegistryEstimate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    property_value_estimate_pounds: float = Field(alias="propertyValueEstimatePounds")


class InflationPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    year: int
    inflation_rate_percent: float = Field(alias="inflationRatePercent")


class ToolData(BaseModel):
    """Response shape of the council-tax lookup collaborator."""

    model_config = ConfigDict(populate_by_name=True)

    postcode_meta: PostcodeMeta = Field(alias="postcodeMeta")
    council_tax_band_data: Dict[str, BandCost] = Field(
        default_factory=dict, alias="councilTaxBandData"
    )
    land_registry_data: Optional[LandRegistryEstimate] = Field(
        default=None, alias="landRegistryData"
    )
    inflation_data: List[InflationPoint] = Field(default_factory=list, alias="inflationData")
    user_council_tax_band: Optional[str] = Field(default=None, alias="userCouncilTaxBand")
    user_annual_cost_pence: Optional[int] = Field(
        default=None, ge=0, alias="userAnnualCostPence"
    )
    average_annual_cost_pounds: float = Field(default=0.0, alias="averageAnnualCostPounds")
    estimated_savings_pounds: float = Field(default=0.0, alias="estimatedSavingsPounds")
    neighboring_postcodes: List[NeighborRecord] = Field(
        default_factory=list, alias="neighboringPostcodes"
    )

    def to_map_input(self) -> MapInput:
        """Extract the centre, neighbours and the user's band and cost."""
        band = self.user_council_tax_band or DEFAULT_USER_BAND
        cost = self.user_annual_cost_pence
        if cost is None:
            band_cost = self.council_tax_band_data.get(band)
            cost = band_cost.average_annual_cost_pence if band_cost else 0

        return MapInput(
            center_postcode=self.postcode_meta.postcode,
            center_lat=self.postcode_meta.latitude,
            center_lng=self.postcode_meta.longitude,
            neighbors=self.neighboring_postcodes,
            user_band=band,
            user_cost_pence=cost,
        )


# Render-pass entities -----------------------------------------------------------


@dataclass(frozen=True)
class GeoPoint:
    """A point to be drawn on the map."""

    postcode: str
    is_center: bool
    band: str
    annual_cost_pence: int
    distance_miles: float
    property_count: int
    local_authority: str
    latitude: float   # authoritative for the centre, synthesised otherwise
    longitude: float


@dataclass(frozen=True)
class ScreenPoint:
    """A GeoPoint with its pixel position inside the plot area."""

    point: GeoPoint
    screen_x: float
    screen_y: float

    @property
    def postcode(self) -> str:
        return self.point.postcode

    @property
    def is_center(self) -> bool:
        return self.point.is_center

    @property
    def band(self) -> str:
        return self.point.band

    @property
    def annual_cost_pence(self) -> int:
        return self.point.annual_cost_pence

    @property
    def position(self) -> Tuple[float, float]:
        return (self.screen_x, self.screen_y)


@dataclass(frozen=True)
class GridCell:
    """One heatmap cell: top-left corner, edge length and interpolated cost."""

    x: float
    y: float
    size: float
    value: float

    @property
    def center(self) -> Tuple[float, float]:
        half = self.size / 2
        return (self.x + half, self.y + half)


def validate_point_set(points: Sequence[GeoPoint]) -> None:
    """
    Check the render invariants on a point set.

    Exactly one point must be the centre and postcodes must be unique,
    since they key gradients and hover state.

    Raises:
        InvalidPointSetError: if either rule is broken
    """
    if not points:
        raise InvalidPointSetError("at least one point is required")

    centers = [p.postcode for p in points if p.is_center]
    if len(centers) != 1:
        raise InvalidPointSetError(f"expected exactly one centre point, got {len(centers)}")

    seen = set()
    for p in points:
        if p.postcode in seen:
            raise InvalidPointSetError(f"duplicate postcode '{p.postcode}'")
        seen.add(p.postcode)
