import asyncio
from datetime import timedelta

import pytest

from buyerscout.analysis import MatchAnalysis, OutreachWriter
from buyerscout.matching import BuyerMatch, MatchingEngine, sort_matches

from conftest import REFERENCE_DATE, FakeProvider


class StubAnalyzer:
    def __init__(self):
        self.calls = []

    async def analyze(self, property, buyer, match_score):
        self.calls.append((buyer.id, match_score))
        return MatchAnalysis(why_good_fit=[f"{buyer.company_name} fits"], recommendation_score=match_score)


@pytest.fixture
def buyers():
    return [
        {
            "id": "far",
            "company_name": "Panhandle Parcels",
            "target_counties": ["Escambia"],
            "price_range_min": 100000,
            "price_range_max": 200000,
            "lot_size_min_acres": 5,
            "lot_size_max_acres": 10,
            "flood_zone_tolerance": "None",
            "total_lots_acquired_6mo": 9,
        },
        {
            "id": "best",
            "company_name": "Sunshine Homes LLC",
            "target_counties": ["Orange"],
            "price_range_min": 10000,
            "price_range_max": 100000,
            "lot_size_min_acres": 0.1,
            "lot_size_max_acres": 1,
            "last_purchase_date": (REFERENCE_DATE - timedelta(days=10)).isoformat(),
            "total_lots_acquired_6mo": 3,
        },
        {
            "id": "mid",
            "company_name": "Atlantic Lot Buyers",
            "target_counties": ["Orange", "Seminole"],
            "price_range_min": 60000,
            "price_range_max": 90000,
            "lot_size_min_acres": 0.5,
            "lot_size_max_acres": 2,
            "total_lots_acquired_6mo": 1,
        },
    ]


@pytest.fixture
def engine():
    return MatchingEngine(analyzer=StubAnalyzer())


def test_rank_by_score(engine, orange_property, buyers):
    matches = engine.rank_buyers(orange_property, buyers, now=REFERENCE_DATE)

    assert [m.buyer.id for m in matches] == ["best", "mid", "far"]
    assert matches[0].score == 100
    scores = [m.score for m in matches]
    assert scores == sorted(scores, reverse=True)


def test_rank_by_name_and_activity(engine, orange_property, buyers):
    by_name = engine.rank_buyers(orange_property, buyers, now=REFERENCE_DATE, sort_by="name")
    assert [m.buyer.company_name for m in by_name] == [
        "Atlantic Lot Buyers",
        "Panhandle Parcels",
        "Sunshine Homes LLC",
    ]

    by_activity = engine.rank_buyers(orange_property, buyers, now=REFERENCE_DATE, sort_by="activity")
    assert [m.buyer.id for m in by_activity] == ["far", "best", "mid"]


def test_min_score_and_limit(engine, orange_property, buyers):
    matches = engine.rank_buyers(orange_property, buyers, now=REFERENCE_DATE, min_score=60)
    assert all(m.score >= 60 for m in matches)
    assert "far" not in [m.buyer.id for m in matches]

    top = engine.rank_buyers(orange_property, buyers, now=REFERENCE_DATE, limit=1)
    assert [m.buyer.id for m in top] == ["best"]


def test_min_score_defaults_to_settings(monkeypatch, orange_property, buyers):
    monkeypatch.setenv("MATCH_MIN_SCORE", "90")
    matches = MatchingEngine(analyzer=StubAnalyzer()).rank_buyers(
        orange_property, buyers, now=REFERENCE_DATE
    )
    assert [m.buyer.id for m in matches] == ["best"]


def test_unknown_sort_key_is_rejected(engine, orange_property, buyers):
    with pytest.raises(ValueError, match="Unsupported sort key"):
        engine.rank_buyers(orange_property, buyers, sort_by="distance")
    with pytest.raises(ValueError):
        sort_matches([], "distance")


def test_reasoning_is_attached_on_request(engine, orange_property, buyers):
    plain = engine.rank_buyers(orange_property, buyers, now=REFERENCE_DATE)
    assert all(m.reasoning is None for m in plain)

    explained = engine.rank_buyers(orange_property, buyers, now=REFERENCE_DATE, with_reasoning=True)
    assert all(m.reasoning is not None for m in explained)
    assert "Sunshine Homes LLC" in explained[0].reasoning.summary


def test_empty_collection(engine, orange_property):
    assert engine.rank_buyers(orange_property, [], now=REFERENCE_DATE) == []


def test_analysis_only_above_threshold(engine, orange_property, buyers):
    matches = engine.rank_buyers(orange_property, buyers, now=REFERENCE_DATE)

    asyncio.run(engine.analyze_matches(orange_property, matches, threshold=70))

    analyzed = [m for m in matches if m.analysis is not None]
    assert analyzed
    assert all(m.score >= 70 for m in analyzed)
    assert all(m.analysis is None for m in matches if m.score < 70)
    assert engine.analyzer.calls[0] == ("best", 100)


def test_buyer_match_score_property(engine, orange_property, buyers):
    match = engine.rank_buyers(orange_property, buyers, now=REFERENCE_DATE)[0]
    assert isinstance(match, BuyerMatch)
    assert match.score == match.result.total_score


def test_name_sort_uses_displayed_name(engine, orange_property, buyers):
    buyers.append({"id": "solo", "full_name": "Bea Lopez", "target_counties": ["Orange"]})

    by_name = engine.rank_buyers(orange_property, buyers, now=REFERENCE_DATE, sort_by="name")

    assert [m.buyer.display_name for m in by_name] == [
        "Atlantic Lot Buyers",
        "Bea Lopez",
        "Panhandle Parcels",
        "Sunshine Homes LLC",
    ]


def test_outreach_only_above_threshold(orange_property, buyers):
    engine = MatchingEngine(outreach_writer=OutreachWriter(provider=FakeProvider("")))
    matches = engine.rank_buyers(orange_property, buyers, now=REFERENCE_DATE)

    asyncio.run(engine.draft_outreach(orange_property, matches, threshold=70))

    drafted = {m.buyer.id: m.outreach for m in matches}
    assert drafted["far"] is None
    assert drafted["best"].is_fallback is True
    assert drafted["best"].sms.startswith("Hi there, I have a 0.25 acre lot in Orange County")
