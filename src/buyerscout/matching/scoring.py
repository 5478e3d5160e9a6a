"""
Match score engine.

Scores how well a land listing fits one buyer's buy box:
- Seven criteria scored 0-100 (county, price, lot size, flood zone,
  utilities, road access, purchase recency)
- Fixed weights summing to 100, combined into a 0-100 total
- Confidence indicators derived from the breakdown

Scoring is pure: the result depends only on the two records and the
reference date used for recency.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional, Union

from buyerscout.models import (
    BuyerProfile,
    FloodZone,
    FloodZoneTolerance,
    Property,
    RoadAccess,
    RoadAccessRequirement,
    Utilities,
    UtilitiesPreference,
)

WEIGHTS: dict[str, int] = {
    "county": 25,
    "price": 20,
    "lot_size": 15,
    "flood_zone": 12,
    "utilities": 10,
    "road_access": 8,
    "recency": 10,
}

# Property category -> buyer tolerances it satisfies
FLOOD_ZONE_COMPATIBILITY: dict[FloodZone, frozenset[FloodZoneTolerance]] = {
    FloodZone.ZONE_X: frozenset({
        FloodZoneTolerance.ZONE_X_ONLY,
        FloodZoneTolerance.ZONE_AE_ACCEPTABLE,
        FloodZoneTolerance.ANY_ZONE,
        FloodZoneTolerance.NO_PREFERENCE,
    }),
    FloodZone.ZONE_AE: frozenset({
        FloodZoneTolerance.ZONE_AE_ACCEPTABLE,
        FloodZoneTolerance.ANY_ZONE,
        FloodZoneTolerance.NO_PREFERENCE,
    }),
    FloodZone.ZONE_A: frozenset({
        FloodZoneTolerance.ANY_ZONE,
        FloodZoneTolerance.NO_PREFERENCE,
    }),
    FloodZone.ZONE_VE: frozenset({
        FloodZoneTolerance.ANY_ZONE,
        FloodZoneTolerance.NO_PREFERENCE,
    }),
    FloodZone.UNKNOWN: frozenset(FloodZoneTolerance),
}

UTILITIES_COMPATIBILITY: dict[Utilities, frozenset[UtilitiesPreference]] = {
    Utilities.CITY_WATER_SEWER: frozenset(UtilitiesPreference),
    Utilities.CITY_WATER_ONLY: frozenset({
        UtilitiesPreference.CITY_WATER_REQUIRED,
        UtilitiesPreference.WELL_SEPTIC_ACCEPTABLE,
        UtilitiesPreference.NO_PREFERENCE,
    }),
    Utilities.WELL_SEPTIC: frozenset({
        UtilitiesPreference.WELL_SEPTIC_ACCEPTABLE,
        UtilitiesPreference.NO_PREFERENCE,
    }),
    Utilities.NONE: frozenset({UtilitiesPreference.NO_PREFERENCE}),
}

ROAD_ACCESS_COMPATIBILITY: dict[RoadAccess, frozenset[RoadAccessRequirement]] = {
    RoadAccess.PAVED: frozenset(RoadAccessRequirement),
    RoadAccess.GRAVEL: frozenset({
        RoadAccessRequirement.GRAVEL_ACCEPTABLE,
        RoadAccessRequirement.EASEMENT_ACCEPTABLE,
        RoadAccessRequirement.NO_PREFERENCE,
    }),
    RoadAccess.EASEMENT: frozenset({
        RoadAccessRequirement.EASEMENT_ACCEPTABLE,
        RoadAccessRequirement.NO_PREFERENCE,
    }),
    RoadAccess.NONE: frozenset({RoadAccessRequirement.NO_PREFERENCE}),
}

# (max days since last purchase, score), checked in order
RECENCY_BUCKETS: tuple[tuple[int, int], ...] = (
    (30, 100),
    (60, 90),
    (90, 80),
    (180, 60),
    (365, 40),
)
RECENCY_STALE_SCORE = 20
RECENCY_UNKNOWN_SCORE = 30

FLOOD_ZONE_NO_RISK_MISMATCH_SCORE = 20
FLOOD_ZONE_MISMATCH_SCORE = 50
UTILITIES_MISMATCH_SCORE = 30
ROAD_ACCESS_MISMATCH_SCORE = 25


@dataclass
class Confidence:
    """Secondary indicators shown next to the total score (0-100 each)."""

    market_fit: int
    price_fit: int
    location_match: int
    buyer_activity: int


@dataclass
class MatchResult:
    """Score of one property against one buyer."""

    total_score: int
    breakdown: dict[str, int]
    confidence: Confidence
    weights: dict[str, int] = field(default_factory=lambda: dict(WEIGHTS))


def round_half_up(value: float) -> int:
    """Rounds to the nearest integer, halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def today() -> date:
    """Reference date for recency when the caller does not pass one."""
    return date.today()


def as_property(value: Union[Property, Mapping[str, Any]]) -> Property:
    if isinstance(value, Property):
        return value
    return Property.model_validate(value)


def as_buyer(value: Union[BuyerProfile, Mapping[str, Any]]) -> BuyerProfile:
    if isinstance(value, BuyerProfile):
        return value
    return BuyerProfile.model_validate(value)


def score_county(county: str, target_counties: list[str]) -> int:
    wanted = {c.strip().casefold() for c in target_counties}
    # TODO: partial credit for counties adjacent to a target county
    return 100 if county.strip().casefold() in wanted else 0


def score_price(asking_price: float, price_min: float, price_max: Optional[float]) -> int:
    upper = math.inf if price_max is None else price_max

    if price_min <= asking_price <= upper:
        width = upper - price_min
        if math.isinf(width) or width == 0:
            return 100
        midpoint = (price_min + upper) / 2
        distance = abs(asking_price - midpoint) / width
        return round_half_up(100 - distance * 30)

    if asking_price < price_min:
        # Below the range usually still works for the buyer
        percent_below = (price_min - asking_price) / price_min
        return round_half_up(max(60, 90 - percent_below * 100))

    percent_above = (asking_price - upper) / upper
    return round_half_up(max(0, 70 - percent_above * 200))


def score_lot_size(acres: float, min_acres: float, max_acres: Optional[float]) -> int:
    upper = math.inf if max_acres is None else max_acres

    if min_acres <= acres <= upper:
        return 100
    if acres < min_acres:
        percent_below = (min_acres - acres) / min_acres
        return round_half_up(max(20, 80 - percent_below * 100))
    percent_above = (acres - upper) / upper
    return round_half_up(max(20, 80 - percent_above * 100))


def score_flood_zone(zone: FloodZone, tolerance: FloodZoneTolerance) -> int:
    if tolerance in (FloodZoneTolerance.NO_PREFERENCE, FloodZoneTolerance.ANY_ZONE):
        return 100
    if tolerance in FLOOD_ZONE_COMPATIBILITY.get(zone, frozenset()):
        return 100
    if tolerance is FloodZoneTolerance.NONE and zone is not FloodZone.ZONE_X:
        return FLOOD_ZONE_NO_RISK_MISMATCH_SCORE
    return FLOOD_ZONE_MISMATCH_SCORE


def score_utilities(utilities: Utilities, preference: UtilitiesPreference) -> int:
    if preference is UtilitiesPreference.NO_PREFERENCE:
        return 100
    if preference in UTILITIES_COMPATIBILITY.get(utilities, frozenset()):
        return 100
    return UTILITIES_MISMATCH_SCORE


def score_road_access(road: RoadAccess, requirement: RoadAccessRequirement) -> int:
    if requirement is RoadAccessRequirement.NO_PREFERENCE:
        return 100
    if requirement in ROAD_ACCESS_COMPATIBILITY.get(road, frozenset()):
        return 100
    return ROAD_ACCESS_MISMATCH_SCORE


def days_since(last_purchase: date, now: date) -> int:
    """Whole days elapsed; a purchase dated after `now` counts as today."""
    return max(0, (now - last_purchase).days)


def score_recency(last_purchase: Optional[date], now: date) -> int:
    if last_purchase is None:
        return RECENCY_UNKNOWN_SCORE
    elapsed = days_since(last_purchase, now)
    for max_days, score in RECENCY_BUCKETS:
        if elapsed <= max_days:
            return score
    return RECENCY_STALE_SCORE


def _clamp(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def calculate_match_score(
    property: Union[Property, Mapping[str, Any]],
    buyer: Union[BuyerProfile, Mapping[str, Any]],
    now: Optional[Union[date, datetime]] = None,
) -> MatchResult:
    """
    Scores a property against a buyer's buy box.

    Args:
        property: Property or a mapping with its fields
        buyer: BuyerProfile or a mapping with its fields
        now: Reference date for purchase recency (default: today)

    Returns:
        MatchResult with the 0-100 total, the breakdown and confidence

    Raises:
        pydantic.ValidationError: If either record is malformed
    """
    prop = as_property(property)
    profile = as_buyer(buyer)
    if now is None:
        now = today()
    elif isinstance(now, datetime):
        now = now.date()

    breakdown = {
        "county": score_county(prop.county, profile.target_counties),
        "price": score_price(prop.asking_price, profile.price_range_min, profile.price_range_max),
        "lot_size": score_lot_size(
            prop.lot_size_acres, profile.lot_size_min_acres, profile.lot_size_max_acres
        ),
        "flood_zone": score_flood_zone(prop.flood_zone, profile.flood_zone_tolerance),
        "utilities": score_utilities(prop.utilities, profile.utilities_preference),
        "road_access": score_road_access(prop.road_access, profile.road_access_requirement),
        "recency": score_recency(profile.last_purchase_date, now),
    }

    weighted = sum(breakdown[name] * weight for name, weight in WEIGHTS.items())
    total_score = round_half_up(weighted / sum(WEIGHTS.values()))

    confidence = Confidence(
        market_fit=_clamp(breakdown["county"] * 0.4 + breakdown["recency"] * 0.6),
        price_fit=_clamp(breakdown["price"]),
        location_match=_clamp(breakdown["county"]),
        buyer_activity=_clamp(profile.total_lots_acquired_6mo * 10 + breakdown["recency"] * 0.5),
    )

    return MatchResult(
        total_score=total_score,
        breakdown=breakdown,
        confidence=confidence,
    )
