"""
Outreach templates for contacting a matched buyer.

Default SMS, email and call script are built from the records; the
LLM can personalize them, falling back to the defaults on failure.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from buyerscout.analysis.llm_providers import BaseLLMProvider, get_llm_provider
from buyerscout.matching.reasoning import format_acres, format_money, price_range_text
from buyerscout.models import BuyerProfile, FloodZone, Property

logger = structlog.get_logger()


OUTREACH_SYSTEM_PROMPT = (
    "You write short, professional outreach for a Florida land wholesaler. "
    "Answer only with valid JSON."
)

OUTREACH_USER_PROMPT_TEMPLATE = """Generate highly personalized outreach templates for a land deal.

Reference the buyer's specific activity and how this property fits their criteria.
Do not invent facts. Respond ONLY with valid JSON:
{{
  "sms": "under 320 characters",
  "email": "subject line first, then the body",
  "callScript": "opening, pitch, qualifying questions, close"
}}

BUYER:
- Name: {full_name}
- Company: {company}
- Type: {buyer_type}
- Recent deals: {deals_6mo} in last 6 months
- Target counties: {target_counties}
- Price range: {price_range}

PROPERTY:
- Address: {address}
- County: {county}
- Price: {price}
- Size: {acres} acres
- Zoning: {zoning}
- Match Score: {match_score}%"""


@dataclass
class OutreachTemplates:
    sms: str
    email: str
    call_script: str
    is_fallback: bool = False


def default_templates(buyer: BuyerProfile, property: Property) -> OutreachTemplates:
    """Fill-in-the-blanks templates that need no LLM."""
    first_name = buyer.first_name
    acres = format_acres(property.lot_size_acres)
    price = format_money(property.asking_price)
    address = property.address or "[property address]"
    flood = (
        property.flood_zone.value
        if property.flood_zone is not FloodZone.UNKNOWN
        else "To be verified"
    )

    sms = (
        f"Hi {first_name}, I have a {acres} acre lot in {property.county} County at {price}. "
        "Based on your recent activity, thought this might fit your buy box. Interested in details?"
    )

    email = f"""Subject: {acres} Acre Lot in {property.county} County - {price}

Hi {first_name},

I came across your recent land acquisitions in Florida and wanted to reach out about a property that matches your buying criteria.

Property Details:
- Location: {address}
- County: {property.county}
- Size: {acres} acres
- Asking Price: {price}
- Zoning: {property.zoning}
- Flood Zone: {flood}
- Utilities: {property.utilities.value}

Given your focus on {property.county} County and similar properties, I believe this could be a strong fit for {buyer.display_name}.

Would you like to schedule a quick call to discuss?

Best regards"""

    call_script = f"""OPENING:
"Hi, is this {buyer.full_name or first_name}? This is [Your Name]. I'm reaching out because I noticed {buyer.display_name} has been actively acquiring lots in {property.county} County."

PROPERTY PITCH:
"I have a {acres} acre lot at {address}. It's listed at {price}, {property.zoning.lower()} zoning, flood zone {flood}."

QUALIFYING QUESTIONS:
- "Is this size and location something you're currently looking at?"
- "What's your typical timeline for closing on a property like this?"
- "Do you have any specific requirements I should know about?"

CLOSE:
"Would you like me to send over the property details and we can set up a time to discuss further?\""""

    return OutreachTemplates(sms=sms, email=email, call_script=call_script, is_fallback=True)


class OutreachWriter:
    """Personalizes outreach templates with the LLM."""

    def __init__(self, provider: Optional[BaseLLMProvider] = None):
        self._provider: BaseLLMProvider = provider or get_llm_provider()

    def _build_prompt(self, buyer: BuyerProfile, property: Property, match_score: int) -> str:
        return OUTREACH_USER_PROMPT_TEMPLATE.format(
            full_name=buyer.full_name or "Unknown",
            company=buyer.display_name,
            buyer_type=buyer.buyer_type or "Unknown",
            deals_6mo=buyer.total_lots_acquired_6mo,
            target_counties=", ".join(buyer.target_counties) or "None listed",
            price_range=price_range_text(buyer),
            address=property.address or "Not provided",
            county=property.county,
            price=format_money(property.asking_price),
            acres=format_acres(property.lot_size_acres),
            zoning=property.zoning,
            match_score=match_score,
        )

    async def generate(
        self,
        buyer: BuyerProfile,
        property: Property,
        match_score: int,
    ) -> OutreachTemplates:
        """Generates personalized templates; any missing piece keeps its default."""
        defaults = default_templates(buyer, property)
        try:
            data = await self._provider.generate_json(
                system_prompt=OUTREACH_SYSTEM_PROMPT,
                user_prompt=self._build_prompt(buyer, property, match_score),
                temperature=0.6,
                max_tokens=1200,
            )
        except Exception as e:
            logger.warning("Error generating outreach", buyer_id=buyer.id, error=str(e))
            return defaults

        sms = str(data.get("sms") or "").strip()
        email = str(data.get("email") or "").strip()
        call_script = str(data.get("callScript") or "").strip()

        logger.info("Outreach generated", buyer_id=buyer.id)
        return OutreachTemplates(
            sms=sms or defaults.sms,
            email=email or defaults.email,
            call_script=call_script or defaults.call_script,
            is_fallback=not (sms and email and call_script),
        )
