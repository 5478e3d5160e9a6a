"""
Matching.

Scores properties against buyers' buy boxes, explains the scores and
ranks the buyer database.
"""

from buyerscout.matching.scoring import (
    WEIGHTS,
    Confidence,
    MatchResult,
    calculate_match_score,
)
from buyerscout.matching.reasoning import (
    MatchReasoning,
    SuggestedOffer,
    generate_match_reasoning,
)
from buyerscout.matching.filters import BuyerSearchFilters, filter_buyers
from buyerscout.matching.engine import BuyerMatch, MatchingEngine, sort_matches

__all__ = [
    # Scoring
    "WEIGHTS",
    "Confidence",
    "MatchResult",
    "calculate_match_score",
    # Reasoning
    "MatchReasoning",
    "SuggestedOffer",
    "generate_match_reasoning",
    # Search
    "BuyerSearchFilters",
    "filter_buyers",
    # Ranking
    "BuyerMatch",
    "MatchingEngine",
    "sort_matches",
]
