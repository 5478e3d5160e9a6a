"""
Property model

A land listing entered by the user to be matched against the
buyer database.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from buyerscout.models.enums import FIELD_DEFAULTS, FloodZone, RoadAccess, Utilities


class Property(BaseModel):
    """
    Land listing being offered.

    Only county, price, lot size, flood zone, utilities and road access
    take part in scoring; address and zoning are carried for display
    and outreach.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    address: str = Field(default=FIELD_DEFAULTS["address"], description="Street address")
    county: str = Field(..., min_length=1, description="Florida county")
    asking_price: float = Field(..., ge=0, allow_inf_nan=False, description="Asking price in USD")
    lot_size_acres: float = Field(..., gt=0, allow_inf_nan=False, description="Lot size in acres")
    zoning: str = Field(default=FIELD_DEFAULTS["zoning"], description="Zoning (not scored)")
    flood_zone: FloodZone = Field(default=FIELD_DEFAULTS["flood_zone"])
    utilities: Utilities = Field(default=FIELD_DEFAULTS["utilities"])
    road_access: RoadAccess = Field(default=FIELD_DEFAULTS["road_access"])

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null in an optional field means "use the default"
        if isinstance(data, dict):
            return {
                key: value
                for key, value in data.items()
                if not (value is None and key in FIELD_DEFAULTS)
            }
        return data
