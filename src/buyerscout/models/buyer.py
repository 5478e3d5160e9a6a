"""
Buyer model

A land buyer from the buyer database together with their buy box:
the counties, price and lot size ranges and site conditions they
purchase.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from buyerscout.models.enums import (
    FIELD_DEFAULTS,
    FloodZoneTolerance,
    RoadAccessRequirement,
    UtilitiesPreference,
)


class BuyerProfile(BaseModel):
    """
    Buyer record with contact details, buy box and recent activity.

    A maximum of None (or 0, as some database exports write it)
    means the range has no upper bound.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    # Identity and contact
    id: Optional[str] = Field(None, description="Buyer id in the database")
    company_name: str = Field(default=FIELD_DEFAULTS["company_name"])
    full_name: str = Field(default=FIELD_DEFAULTS["full_name"], description="Contact name")
    buyer_type: Optional[str] = Field(None, description="Builder, Developer, Land Bank...")
    phone: Optional[str] = None
    email: Optional[str] = None
    preferred_contact_method: Optional[str] = None

    # Buy box
    target_counties: list[str] = Field(default_factory=list)
    price_range_min: float = Field(default=FIELD_DEFAULTS["price_range_min"], ge=0, allow_inf_nan=False)
    price_range_max: Optional[float] = Field(default=FIELD_DEFAULTS["price_range_max"], ge=0)
    lot_size_min_acres: float = Field(default=FIELD_DEFAULTS["lot_size_min_acres"], ge=0, allow_inf_nan=False)
    lot_size_max_acres: Optional[float] = Field(default=FIELD_DEFAULTS["lot_size_max_acres"], ge=0)
    flood_zone_tolerance: FloodZoneTolerance = Field(default=FIELD_DEFAULTS["flood_zone_tolerance"])
    utilities_preference: UtilitiesPreference = Field(default=FIELD_DEFAULTS["utilities_preference"])
    road_access_requirement: RoadAccessRequirement = Field(
        default=FIELD_DEFAULTS["road_access_requirement"]
    )
    purchase_strategy: Optional[str] = Field(None, description="Infill Lots, Scattered Lots...")
    buy_box_notes: Optional[str] = None

    # Activity
    active_status: bool = Field(default=FIELD_DEFAULTS["active_status"])
    last_purchase_date: Optional[date] = Field(default=FIELD_DEFAULTS["last_purchase_date"])
    total_lots_acquired_6mo: int = Field(default=FIELD_DEFAULTS["total_lots_acquired_6mo"], ge=0)
    total_lots_acquired_12mo: int = Field(default=FIELD_DEFAULTS["total_lots_acquired_12mo"], ge=0)
    typical_offer_percentage: Optional[float] = Field(
        default=FIELD_DEFAULTS["typical_offer_percentage"], gt=0, le=100, allow_inf_nan=False
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: value
                for key, value in data.items()
                if not (value is None and key in FIELD_DEFAULTS)
            }
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Any:
        if value is None:
            return None
        return str(value)

    @field_validator("last_purchase_date", mode="before")
    @classmethod
    def _date_part_only(cls, value: Any) -> Any:
        # exports carry full ISO timestamps; only the day matters
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    @field_validator("price_range_max", "lot_size_max_acres")
    @classmethod
    def _zero_is_unbounded(cls, value: Optional[float]) -> Optional[float]:
        if value is None or value == 0 or value == float("inf"):
            return None
        return value

    @field_validator("typical_offer_percentage", mode="before")
    @classmethod
    def _zero_offer_is_unset(cls, value: Any) -> Any:
        # 0 means "not recorded": the configured default offer applies
        if value == 0 or value == "0":
            return None
        return value

    @model_validator(mode="after")
    def _check_ranges(self) -> "BuyerProfile":
        if self.price_range_max is not None and self.price_range_max < self.price_range_min:
            raise ValueError("price_range_max must be >= price_range_min")
        if self.lot_size_max_acres is not None and self.lot_size_max_acres < self.lot_size_min_acres:
            raise ValueError("lot_size_max_acres must be >= lot_size_min_acres")
        return self

    @property
    def display_name(self) -> str:
        """Company name, falling back to the contact name."""
        return self.company_name or self.full_name or "This buyer"

    @property
    def first_name(self) -> str:
        parts = self.full_name.split()
        return parts[0] if parts else "there"
