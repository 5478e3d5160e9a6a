"""
Closed vocabularies of the buy box.

Property-side categories (what a lot has) and buyer-side tolerances
(what a buyer accepts), plus the table of defaults applied when a
record leaves an optional field out.
"""

from enum import Enum


class FloodZone(str, Enum):
    """FEMA flood zone of a lot."""

    ZONE_X = "Zone X"  # minimal risk
    ZONE_AE = "Zone AE"
    ZONE_A = "Zone A"
    ZONE_VE = "Zone VE"  # coastal
    UNKNOWN = "Unknown"


class Utilities(str, Enum):
    """Utilities available on a lot."""

    CITY_WATER_SEWER = "City Water & Sewer"
    CITY_WATER_ONLY = "City Water Only"
    WELL_SEPTIC = "Well/Septic"
    NONE = "None"


class RoadAccess(str, Enum):
    """Kind of road reaching a lot."""

    PAVED = "Paved"
    GRAVEL = "Gravel"
    EASEMENT = "Easement"
    NONE = "None"


class FloodZoneTolerance(str, Enum):
    """Flood risk a buyer is willing to take on."""

    NO_PREFERENCE = "No Preference"
    ANY_ZONE = "Any Zone"
    ZONE_X_ONLY = "Zone X Only"
    ZONE_AE_ACCEPTABLE = "Zone AE Acceptable"
    NONE = "None"  # no flood risk at all


class UtilitiesPreference(str, Enum):
    NO_PREFERENCE = "No Preference"
    CITY_WATER_SEWER_REQUIRED = "City Water & Sewer Required"
    CITY_WATER_REQUIRED = "City Water Required"
    WELL_SEPTIC_ACCEPTABLE = "Well/Septic Acceptable"


class RoadAccessRequirement(str, Enum):
    NO_PREFERENCE = "No Preference"
    PAVED_REQUIRED = "Paved Required"
    GRAVEL_ACCEPTABLE = "Gravel Acceptable"
    EASEMENT_ACCEPTABLE = "Easement Acceptable"


class StrengthLevel(str, Enum):
    """Match tier derived from the total score."""

    STRONG = "Strong"
    MODERATE = "Moderate"
    WEAK = "Weak"
    POOR = "Poor"


# Value used when a record omits a field (or sends null for it).
# A None maximum means the range is open-ended.
FIELD_DEFAULTS = {
    # Property
    "address": "",
    "zoning": "Residential",
    "flood_zone": FloodZone.UNKNOWN,
    "utilities": Utilities.NONE,
    "road_access": RoadAccess.PAVED,
    # BuyerProfile
    "target_counties": [],
    "price_range_min": 0.0,
    "price_range_max": None,
    "lot_size_min_acres": 0.0,
    "lot_size_max_acres": None,
    "flood_zone_tolerance": FloodZoneTolerance.NO_PREFERENCE,
    "utilities_preference": UtilitiesPreference.NO_PREFERENCE,
    "road_access_requirement": RoadAccessRequirement.NO_PREFERENCE,
    "last_purchase_date": None,
    "total_lots_acquired_6mo": 0,
    "total_lots_acquired_12mo": 0,
    "typical_offer_percentage": None,
    "company_name": "",
    "full_name": "",
    "active_status": True,
}
