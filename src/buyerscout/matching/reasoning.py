"""
Rule-based explanation of a match score.

Turns the score breakdown into matched / not matched statements,
a tiered summary and a suggested offer range.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from buyerscout.config import get_settings
from buyerscout.matching.scoring import MatchResult, as_buyer, as_property, round_half_up
from buyerscout.models import BuyerProfile, Property, StrengthLevel

MATCHED_THRESHOLD = 80
PRICE_NEAR_THRESHOLD = 50
RECENCY_MODERATE_THRESHOLD = 50
OFFER_SPREAD_POINTS = 10

# (minimum total score, level), checked in order
STRENGTH_TIERS: tuple[tuple[int, StrengthLevel], ...] = (
    (80, StrengthLevel.STRONG),
    (60, StrengthLevel.MODERATE),
    (40, StrengthLevel.WEAK),
)

SUMMARY_TEMPLATES = {
    StrengthLevel.STRONG: (
        "Strong match - {company} has a high likelihood of interest "
        "based on their buying patterns."
    ),
    StrengthLevel.MODERATE: (
        "Moderate match - Some criteria align but there may be negotiation needed."
    ),
    StrengthLevel.WEAK: (
        "Weak match - Limited criteria alignment, consider as backup option."
    ),
    StrengthLevel.POOR: (
        "Poor match - Most criteria don't align with this buyer's preferences."
    ),
}


@dataclass
class SuggestedOffer:
    low: int
    high: int


@dataclass
class MatchReasoning:
    """Human readable explanation of a MatchResult."""

    matched: list[str] = field(default_factory=list)
    not_matched: list[str] = field(default_factory=list)
    summary: str = ""
    suggested_offer: SuggestedOffer = field(default_factory=lambda: SuggestedOffer(0, 0))
    strength_level: StrengthLevel = StrengthLevel.POOR


def strength_for(total_score: int) -> StrengthLevel:
    for minimum, level in STRENGTH_TIERS:
        if total_score >= minimum:
            return level
    return StrengthLevel.POOR


def format_money(amount: float) -> str:
    return f"${amount:,.0f}"


def format_acres(acres: float) -> str:
    return f"{acres:g}"


def price_range_text(buyer: BuyerProfile) -> str:
    if buyer.price_range_max is None:
        return f"{format_money(buyer.price_range_min)}+"
    return f"{format_money(buyer.price_range_min)}-{format_money(buyer.price_range_max)}"


def lot_range_text(buyer: BuyerProfile) -> str:
    if buyer.lot_size_max_acres is None:
        return f"{format_acres(buyer.lot_size_min_acres)}+"
    return f"{format_acres(buyer.lot_size_min_acres)}-{format_acres(buyer.lot_size_max_acres)}"


def suggest_offer(asking_price: float, offer_percentage: Optional[float] = None) -> SuggestedOffer:
    """
    Offer range as a share of the asking price.

    The high end sits 10 points above the buyer's typical offer
    percentage.
    """
    pct = offer_percentage if offer_percentage is not None else get_settings().default_offer_percentage
    return SuggestedOffer(
        low=round_half_up(asking_price * pct / 100),
        high=round_half_up(asking_price * (pct + OFFER_SPREAD_POINTS) / 100),
    )


def generate_match_reasoning(
    property: Union[Property, Mapping[str, Any]],
    buyer: Union[BuyerProfile, Mapping[str, Any]],
    match_result: MatchResult,
) -> MatchReasoning:
    """
    Explains a match score in plain language.

    Args:
        property: The scored property
        buyer: The scored buyer
        match_result: Output of calculate_match_score for the same pair

    Returns:
        MatchReasoning with statements, summary, offer range and tier
    """
    prop = as_property(property)
    profile = as_buyer(buyer)
    breakdown = match_result.breakdown
    matched: list[str] = []
    not_matched: list[str] = []

    if breakdown["county"] >= MATCHED_THRESHOLD:
        matched.append(f"Actively buys in {prop.county} County")
    else:
        not_matched.append(f"{prop.county} County is not in their primary target area")

    price = format_money(prop.asking_price)
    if breakdown["price"] >= MATCHED_THRESHOLD:
        matched.append(f"Price of {price} fits within their {price_range_text(profile)} range")
    elif breakdown["price"] >= PRICE_NEAR_THRESHOLD:
        matched.append("Price is slightly outside their preferred range but may still be acceptable")
    else:
        not_matched.append(f"Price of {price} is outside their {price_range_text(profile)} range")

    acres = format_acres(prop.lot_size_acres)
    if breakdown["lot_size"] >= MATCHED_THRESHOLD:
        matched.append(f"Lot size of {acres} acres matches their {lot_range_text(profile)} acre preference")
    else:
        not_matched.append(
            f"Lot size of {acres} acres is outside their {lot_range_text(profile)} acre preference"
        )

    flood = prop.flood_zone.value
    tolerance = profile.flood_zone_tolerance.value
    if breakdown["flood_zone"] >= MATCHED_THRESHOLD:
        matched.append(f"Flood zone {flood} is acceptable (tolerance: {tolerance})")
    else:
        not_matched.append(f"Flood zone {flood} may be an issue (prefers {tolerance})")

    utilities = prop.utilities.value
    if breakdown["utilities"] >= MATCHED_THRESHOLD:
        matched.append(f"Utilities setup ({utilities}) meets their requirements")
    else:
        not_matched.append(
            f"Utilities ({utilities}) don't match preference ({profile.utilities_preference.value})"
        )

    road = prop.road_access.value
    if breakdown["road_access"] >= MATCHED_THRESHOLD:
        matched.append(f"Road access ({road}) meets their requirements")
    else:
        not_matched.append(
            f"Road access ({road}) doesn't meet requirement ({profile.road_access_requirement.value})"
        )

    if breakdown["recency"] >= MATCHED_THRESHOLD:
        matched.append("Recently active buyer with purchases in the last 60 days")
    elif breakdown["recency"] >= RECENCY_MODERATE_THRESHOLD:
        matched.append("Moderately active with purchases in the last 6 months")
    elif profile.last_purchase_date is None:
        not_matched.append("No recorded purchase history")
    else:
        not_matched.append(
            f"Last purchase was on {profile.last_purchase_date.isoformat()}, more than 6 months ago"
        )

    level = strength_for(match_result.total_score)

    return MatchReasoning(
        matched=matched,
        not_matched=not_matched,
        summary=SUMMARY_TEMPLATES[level].format(company=profile.display_name),
        suggested_offer=suggest_offer(prop.asking_price, profile.typical_offer_percentage),
        strength_level=level,
    )
