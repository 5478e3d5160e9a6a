"""
Data models.

- Property: the land listing being offered
- BuyerProfile: a buyer and their buy box
"""

from buyerscout.models.enums import (
    FIELD_DEFAULTS,
    FloodZone,
    FloodZoneTolerance,
    RoadAccess,
    RoadAccessRequirement,
    StrengthLevel,
    Utilities,
    UtilitiesPreference,
)
from buyerscout.models.property import Property
from buyerscout.models.buyer import BuyerProfile

__all__ = [
    # Records
    "Property",
    "BuyerProfile",
    # Vocabularies
    "FloodZone",
    "FloodZoneTolerance",
    "Utilities",
    "UtilitiesPreference",
    "RoadAccess",
    "RoadAccessRequirement",
    "StrengthLevel",
    "FIELD_DEFAULTS",
]
