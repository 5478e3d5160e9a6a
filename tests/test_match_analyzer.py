import asyncio
import json

import pytest
from tenacity import wait_none

from buyerscout.analysis import BaseLLMProvider, MatchAnalyzer

from conftest import FakeProvider

REPLY = {
    "whyGoodFit": ["Buys infill lots in Orange County", "Price sits mid-range"],
    "criteriaMatched": ["County", "Price", "Lot size"],
    "criteriaNotMatched": [],
    "recommendationScore": 92,
    "recommendationExplanation": "Strong fit for their infill program.",
    "suggestedOfferLow": 36000,
    "suggestedOfferHigh": 41000,
    "offerRationale": "In line with their recent closings.",
    "likelihoodToRespond": 85,
    "likelihoodToBuy": 64,
    "negotiationTips": ["Mention utilities are in place"],
}


def _analyze(provider, prop, buyer, score=90):
    return asyncio.run(MatchAnalyzer(provider=provider).analyze(prop, buyer, score))


def test_parses_reply(orange_property, orange_buyer):
    provider = FakeProvider(json.dumps(REPLY))
    analysis = _analyze(provider, orange_property, orange_buyer)

    assert analysis.is_fallback is False
    assert analysis.why_good_fit == REPLY["whyGoodFit"]
    assert analysis.recommendation_score == 92
    assert (analysis.suggested_offer_low, analysis.suggested_offer_high) == (36000, 41000)
    assert analysis.likelihood_to_respond == 85
    assert analysis.negotiation_tips == ["Mention utilities are in place"]


def test_prompt_carries_both_records(orange_property, orange_buyer):
    provider = FakeProvider(json.dumps(REPLY))
    _analyze(provider, orange_property, orange_buyer, score=77)

    prompt = provider.calls[0]
    assert "County: Orange" in prompt
    assert "Asking Price: $50,000" in prompt
    assert "Company: Sunshine Homes LLC" in prompt
    assert "Price Range: $10,000-$100,000" in prompt
    assert "MATCH SCORE: 77%" in prompt


def test_code_fenced_reply(orange_property, orange_buyer):
    provider = FakeProvider("```json\n" + json.dumps(REPLY) + "\n```")
    analysis = _analyze(provider, orange_property, orange_buyer)
    assert analysis.recommendation_score == 92


def test_invalid_json_falls_back(orange_property, orange_buyer):
    analysis = _analyze(FakeProvider("Sure! Here is my analysis."), orange_property, orange_buyer, score=81)

    assert analysis.is_fallback is True
    assert analysis.recommendation_score == 81
    assert analysis.likelihood_to_respond == 70
    assert analysis.likelihood_to_buy == 50
    assert (analysis.suggested_offer_low, analysis.suggested_offer_high) == (37500, 42500)
    assert analysis.why_good_fit[0] == "Sunshine Homes LLC operates in Orange County"


def test_empty_reply_falls_back(orange_property, orange_buyer):
    assert _analyze(FakeProvider(""), orange_property, orange_buyer).is_fallback is True


def test_bad_fields_keep_defaults(orange_property, orange_buyer):
    reply = dict(
        REPLY,
        recommendationScore="very high",
        likelihoodToBuy=140,
        whyGoodFit="not a list",
        suggestedOfferLow=45000,
        suggestedOfferHigh=30000,
    )
    analysis = _analyze(FakeProvider(json.dumps(reply)), orange_property, orange_buyer, score=88)

    assert analysis.recommendation_score == 88
    assert analysis.likelihood_to_buy == 100
    assert analysis.why_good_fit[0] == "Sunshine Homes LLC operates in Orange County"
    # Inverted offers are replaced by the computed range
    assert (analysis.suggested_offer_low, analysis.suggested_offer_high) == (37500, 42500)


def test_provider_errors_are_retried_then_fall_back(monkeypatch, orange_property, orange_buyer):
    monkeypatch.setattr(BaseLLMProvider.generate_json.retry, "wait", wait_none())
    provider = FakeProvider(error=RuntimeError("rate limited"))

    analysis = _analyze(provider, orange_property, orange_buyer)

    assert analysis.is_fallback is True
    assert len(provider.calls) == 3


@pytest.mark.parametrize("pct, expected", [(None, (37500, 42500)), (80, (40000, 45000))])
def test_fallback_offer_uses_buyer_percentage(orange_property, orange_buyer, pct, expected):
    buyer = orange_buyer.model_copy(update={"typical_offer_percentage": pct})
    analysis = MatchAnalyzer(provider=FakeProvider()).fallback(orange_property, buyer, 70)
    assert (analysis.suggested_offer_low, analysis.suggested_offer_high) == expected
