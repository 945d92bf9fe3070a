"""U.S. Census Bureau regions and divisions keyed by exact state label.

Lookups are by the exact label string found in the data. Abbreviated or
misspelled labels get no classification; there is no fuzzy fallback.
"""

from types import MappingProxyType
from typing import Mapping, NamedTuple


class RegionInfo(NamedTuple):
    region: str
    division: str


_NE_NEW_ENGLAND = RegionInfo("Northeast", "New England")
_NE_MID_ATLANTIC = RegionInfo("Northeast", "Mid-Atlantic")
_MW_EAST = RegionInfo("Midwest", "East North Central")
_MW_WEST = RegionInfo("Midwest", "West North Central")
_S_ATLANTIC = RegionInfo("South", "South Atlantic")
_S_EAST = RegionInfo("South", "East South Central")
_S_WEST = RegionInfo("South", "West South Central")
_W_MOUNTAIN = RegionInfo("West", "Mountain")
_W_PACIFIC = RegionInfo("West", "Pacific")

STATE_REGIONS: Mapping[str, RegionInfo] = MappingProxyType({
    "Connecticut": _NE_NEW_ENGLAND,
    "Maine": _NE_NEW_ENGLAND,
    "Massachusetts": _NE_NEW_ENGLAND,
    "New Hampshire": _NE_NEW_ENGLAND,
    "Rhode Island": _NE_NEW_ENGLAND,
    "Vermont": _NE_NEW_ENGLAND,
    # Delaware and Maryland are grouped with the Mid-Atlantic states here
    "New Jersey": _NE_MID_ATLANTIC,
    "New York": _NE_MID_ATLANTIC,
    "Pennsylvania": _NE_MID_ATLANTIC,
    "Delaware": _NE_MID_ATLANTIC,
    "Maryland": _NE_MID_ATLANTIC,
    "Illinois": _MW_EAST,
    "Indiana": _MW_EAST,
    "Michigan": _MW_EAST,
    "Ohio": _MW_EAST,
    "Wisconsin": _MW_EAST,
    "Iowa": _MW_WEST,
    "Kansas": _MW_WEST,
    "Minnesota": _MW_WEST,
    "Missouri": _MW_WEST,
    "Nebraska": _MW_WEST,
    "North Dakota": _MW_WEST,
    "South Dakota": _MW_WEST,
    "District of Columbia": _S_ATLANTIC,
    "Florida": _S_ATLANTIC,
    "Georgia": _S_ATLANTIC,
    "North Carolina": _S_ATLANTIC,
    "South Carolina": _S_ATLANTIC,
    "Virginia": _S_ATLANTIC,
    "West Virginia": _S_ATLANTIC,
    "Alabama": _S_EAST,
    "Kentucky": _S_EAST,
    "Mississippi": _S_EAST,
    "Tennessee": _S_EAST,
    "Arkansas": _S_WEST,
    "Louisiana": _S_WEST,
    "Oklahoma": _S_WEST,
    "Texas": _S_WEST,
    "Arizona": _W_MOUNTAIN,
    "Colorado": _W_MOUNTAIN,
    "Idaho": _W_MOUNTAIN,
    "Montana": _W_MOUNTAIN,
    "Nevada": _W_MOUNTAIN,
    "New Mexico": _W_MOUNTAIN,
    "Utah": _W_MOUNTAIN,
    "Wyoming": _W_MOUNTAIN,
    "Alaska": _W_PACIFIC,
    "California": _W_PACIFIC,
    "Hawaii": _W_PACIFIC,
    "Oregon": _W_PACIFIC,
    "Washington": _W_PACIFIC,
})

# 50 states + District of Columbia, alphabetical
STATE_LABELS: tuple[str, ...] = tuple(sorted(STATE_REGIONS))


def region_attributes(label: str) -> dict[str, str]:
    """Node attributes for a label: ``{"region", "division"}`` or empty."""
    info = STATE_REGIONS.get(label)
    if info is None:
        return {}
    return {"region": info.region, "division": info.division}
