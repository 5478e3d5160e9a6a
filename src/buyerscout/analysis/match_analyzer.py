"""
AI analysis of a property / buyer match.

Asks the LLM for a structured write-up of why a buyer fits a property.
Runs only for matches above the analysis threshold; any provider or
parsing failure yields a generic analysis built from the records.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

import structlog

from buyerscout.analysis.llm_providers import BaseLLMProvider, get_llm_provider
from buyerscout.matching.reasoning import lot_range_text, price_range_text, format_money, suggest_offer
from buyerscout.models import BuyerProfile, Property

logger = structlog.get_logger()


ANALYSIS_SYSTEM_PROMPT = (
    "You are an experienced Florida land disposition analyst. "
    "Follow the user instructions exactly and answer only with valid JSON."
)

ANALYSIS_USER_PROMPT_TEMPLATE = """Analyze this land buyer match for a Florida property.

Rules:
- Ground every statement in the data below. Do not invent facts.
- Offers are whole US dollars.
- Likelihoods and the recommendation score are integers from 0 to 100.
- Respond ONLY with valid JSON using this exact structure:
{{
  "whyGoodFit": ["2-4 short reasons"],
  "criteriaMatched": ["criteria the property meets"],
  "criteriaNotMatched": ["criteria the property misses"],
  "recommendationScore": 0,
  "recommendationExplanation": "1-2 sentences",
  "suggestedOfferLow": 0,
  "suggestedOfferHigh": 0,
  "offerRationale": "1 sentence",
  "likelihoodToRespond": 0,
  "likelihoodToBuy": 0,
  "negotiationTips": ["2-3 short tips"]
}}

PROPERTY:
- Address: {address}
- County: {county}
- Asking Price: {asking_price}
- Lot Size: {lot_size} acres
- Zoning: {zoning}
- Flood Zone: {flood_zone}
- Utilities: {utilities}
- Road Access: {road_access}

BUYER:
- Company: {company}
- Type: {buyer_type}
- Target Counties: {target_counties}
- Price Range: {price_range}
- Lot Size Preference: {lot_range} acres
- Recent Deals (6mo): {deals_6mo}
- Flood Zone Tolerance: {flood_tolerance}
- Utilities Preference: {utilities_preference}
- Purchase Strategy: {strategy}

MATCH SCORE: {match_score}%"""


@dataclass
class MatchAnalysis:
    """Structured AI analysis of one match."""

    why_good_fit: list[str] = field(default_factory=list)
    criteria_matched: list[str] = field(default_factory=list)
    criteria_not_matched: list[str] = field(default_factory=list)
    recommendation_score: int = 0
    recommendation_explanation: str = ""
    suggested_offer_low: int = 0
    suggested_offer_high: int = 0
    offer_rationale: str = ""
    likelihood_to_respond: int = 0
    likelihood_to_buy: int = 0
    negotiation_tips: list[str] = field(default_factory=list)
    is_fallback: bool = False


def _as_str_list(value: Any, limit: int = 6) -> Optional[list[str]]:
    if not isinstance(value, list):
        return None
    items = [str(item).strip() for item in value if str(item).strip()]
    return items[:limit]


def _as_percent(value: Any) -> Optional[int]:
    try:
        return max(0, min(100, int(round(float(value)))))
    except (TypeError, ValueError, OverflowError):
        return None


def _as_amount(value: Any) -> Optional[int]:
    try:
        amount = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return None
    return amount if amount >= 0 else None


class MatchAnalyzer:
    """Writes an AI analysis of a property in the context of one buyer."""

    def __init__(self, provider: Optional[BaseLLMProvider] = None):
        self._provider: BaseLLMProvider = provider or get_llm_provider()

    def _build_prompt(self, property: Property, buyer: BuyerProfile, match_score: int) -> str:
        return ANALYSIS_USER_PROMPT_TEMPLATE.format(
            address=property.address or "Not provided",
            county=property.county,
            asking_price=format_money(property.asking_price),
            lot_size=f"{property.lot_size_acres:g}",
            zoning=property.zoning,
            flood_zone=property.flood_zone.value,
            utilities=property.utilities.value,
            road_access=property.road_access.value,
            company=buyer.display_name,
            buyer_type=buyer.buyer_type or "Unknown",
            target_counties=", ".join(buyer.target_counties) or "None listed",
            price_range=price_range_text(buyer),
            lot_range=lot_range_text(buyer),
            deals_6mo=buyer.total_lots_acquired_6mo,
            flood_tolerance=buyer.flood_zone_tolerance.value,
            utilities_preference=buyer.utilities_preference.value,
            strategy=buyer.purchase_strategy or "Unknown",
            match_score=match_score,
        )

    def fallback(self, property: Property, buyer: BuyerProfile, match_score: int) -> MatchAnalysis:
        """Generic analysis used when the LLM cannot be reached or parsed."""
        offer = suggest_offer(property.asking_price, buyer.typical_offer_percentage)
        return MatchAnalysis(
            why_good_fit=[
                f"{buyer.display_name} operates in {property.county} County",
                "Price point aligns with their typical acquisitions",
            ],
            criteria_matched=["County match", "Price range compatibility"],
            criteria_not_matched=[],
            recommendation_score=match_score,
            recommendation_explanation="Based on buying patterns and criteria alignment.",
            suggested_offer_low=offer.low,
            suggested_offer_high=offer.high,
            offer_rationale="Standard market offer range for residential land.",
            likelihood_to_respond=70,
            likelihood_to_buy=50,
            negotiation_tips=[
                "Lead with recent comparable sales",
                "Highlight development potential",
            ],
            is_fallback=True,
        )

    def _parse(self, data: dict, default: MatchAnalysis) -> MatchAnalysis:
        """Reads the JSON reply, keeping the default for missing or bad fields."""

        def pick(key: str, convert, fallback_value):
            value = convert(data.get(key))
            return fallback_value if value is None else value

        def text(value: Any) -> Optional[str]:
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        low = pick("suggestedOfferLow", _as_amount, default.suggested_offer_low)
        high = pick("suggestedOfferHigh", _as_amount, default.suggested_offer_high)
        if high < low:
            low, high = default.suggested_offer_low, default.suggested_offer_high

        return MatchAnalysis(
            why_good_fit=pick("whyGoodFit", _as_str_list, default.why_good_fit),
            criteria_matched=pick("criteriaMatched", _as_str_list, default.criteria_matched),
            criteria_not_matched=pick("criteriaNotMatched", _as_str_list, default.criteria_not_matched),
            recommendation_score=pick("recommendationScore", _as_percent, default.recommendation_score),
            recommendation_explanation=pick(
                "recommendationExplanation", text, default.recommendation_explanation
            )[:400],
            suggested_offer_low=low,
            suggested_offer_high=high,
            offer_rationale=pick("offerRationale", text, default.offer_rationale)[:300],
            likelihood_to_respond=pick("likelihoodToRespond", _as_percent, default.likelihood_to_respond),
            likelihood_to_buy=pick("likelihoodToBuy", _as_percent, default.likelihood_to_buy),
            negotiation_tips=pick("negotiationTips", _as_str_list, default.negotiation_tips),
        )

    async def analyze(
        self,
        property: Property,
        buyer: BuyerProfile,
        match_score: int,
    ) -> MatchAnalysis:
        """
        Generates the analysis for one match.

        Args:
            property: Property being offered
            buyer: Matched buyer
            match_score: Total score from the match engine

        Returns:
            MatchAnalysis (is_fallback=True when the LLM was not usable)
        """
        default = self.fallback(property, buyer, match_score)
        try:
            data = await self._provider.generate_json(
                system_prompt=ANALYSIS_SYSTEM_PROMPT,
                user_prompt=self._build_prompt(property, buyer, match_score),
                temperature=0.3,
                max_tokens=900,
            )
        except Exception as e:
            logger.warning("Error generating AI analysis", buyer_id=buyer.id, error=str(e))
            return default

        analysis = self._parse(data, default)
        logger.info(
            "Match analyzed",
            buyer_id=buyer.id,
            match_score=match_score,
            recommendation_score=analysis.recommendation_score,
        )
        return analysis
