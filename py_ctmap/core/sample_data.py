"""
Demo lookup response for Westminster (SW1A 1AA), in the upstream camelCase shape.
"""

from .models import ToolData

SAMPLE_TOOL_DATA = {
    "postcodeMeta": {
        "postcode": "SW1A 1AA",
        "latitude": 51.5074,
        "longitude": -0.1278,
        "region": "Greater London",
        "localAuthority": "Westminster",
    },
    "councilTaxBandData": {
        "A": {"band": "A", "averageAnnualCostPence": 120000},
        "B": {"band": "B", "averageAnnualCostPence": 140000},
        "C": {"band": "C", "averageAnnualCostPence": 160000},
        "D": {"band": "D", "averageAnnualCostPence": 180000},
        "E": {"band": "E", "averageAnnualCostPence": 220000},
        "F": {"band": "F", "averageAnnualCostPence": 260000},
        "G": {"band": "G", "averageAnnualCostPence": 320000},
        "H": {"band": "H", "averageAnnualCostPence": 400000},
    },
    "landRegistryData": {"propertyValueEstimatePounds": 425000},
    "inflationData": [
        {"year": 2021, "inflationRatePercent": 2.6},
        {"year": 2022, "inflationRatePercent": 9.1},
        {"year": 2023, "inflationRatePercent": 7.3},
        {"year": 2024, "inflationRatePercent": 2.3},
    ],
    "userCouncilTaxBand": "D",
    "userAnnualCostPence": 180000,
    "averageAnnualCostPounds": 1600,
    "estimatedSavingsPounds": 200,
    "neighboringPostcodes": [
        {"postcode": "SW1A 2AA", "distance": 0.3, "averageBand": "E",
         "averageAnnualCostPence": 200000, "propertyCount": 342, "localAuthority": "Westminster"},
        {"postcode": "SW1P 1AA", "distance": 0.8, "averageBand": "D",
         "averageAnnualCostPence": 175000, "propertyCount": 289, "localAuthority": "Westminster"},
        {"postcode": "SW1Y 4AA", "distance": 1.2, "averageBand": "F",
         "averageAnnualCostPence": 240000, "propertyCount": 156, "localAuthority": "Westminster"},
        {"postcode": "SW1H 0AA", "distance": 1.5, "averageBand": "C",
         "averageAnnualCostPence": 165000, "propertyCount": 478, "localAuthority": "Westminster"},
        {"postcode": "SE1 7AA", "distance": 2.1, "averageBand": "C",
         "averageAnnualCostPence": 155000, "propertyCount": 521, "localAuthority": "Southwark"},
        {"postcode": "SW3 2AA", "distance": 2.4, "averageBand": "G",
         "averageAnnualCostPence": 295000, "propertyCount": 234,
         "localAuthority": "Kensington and Chelsea"},
    ],
}


def sample_tool_data() -> ToolData:
    return ToolData.model_validate(SAMPLE_TOOL_DATA)
