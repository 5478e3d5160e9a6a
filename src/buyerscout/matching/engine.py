"""
Buyer matching engine.

Implements:
- Scoring: every buyer in the collection against one property
- Ranking: minimum score filter and sort (score, name or activity)
- AI analysis: optional LLM write-up for the best matches only
- Outreach: SMS, email and call script drafts for the same matches
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Union

import structlog

from buyerscout.config import get_settings
from buyerscout.matching.reasoning import MatchReasoning, generate_match_reasoning
from buyerscout.matching.scoring import MatchResult, as_buyer, as_property, calculate_match_score, today
from buyerscout.models import BuyerProfile, Property

if TYPE_CHECKING:
    from buyerscout.analysis import MatchAnalysis, MatchAnalyzer, OutreachTemplates, OutreachWriter

logger = structlog.get_logger()

SORT_KEYS = ("score", "name", "activity")


@dataclass
class BuyerMatch:
    """Match result for one buyer."""

    buyer: BuyerProfile
    result: MatchResult
    reasoning: Optional[MatchReasoning] = None
    analysis: Optional["MatchAnalysis"] = None
    outreach: Optional["OutreachTemplates"] = None

    @property
    def score(self) -> int:
        return self.result.total_score


def sort_matches(matches: list[BuyerMatch], sort_by: str = "score") -> list[BuyerMatch]:
    """
    Orders matches for display.

    - score: total score, highest first
    - name: display name (company, else contact), A to Z
    - activity: lots acquired in the last 6 months, most first

    Raises:
        ValueError: If sort_by is not one of SORT_KEYS
    """
    if sort_by == "score":
        return sorted(matches, key=lambda m: m.score, reverse=True)
    if sort_by == "name":
        return sorted(matches, key=lambda m: m.buyer.display_name.casefold())
    if sort_by == "activity":
        return sorted(matches, key=lambda m: m.buyer.total_lots_acquired_6mo, reverse=True)
    raise ValueError(f"Unsupported sort key: {sort_by}. Use one of {', '.join(SORT_KEYS)}")


class MatchingEngine:
    """
    Ranks a buyer collection against a property.

    Flow:
    1. Score every buyer (pure, synchronous)
    2. Drop buyers under the minimum score
    3. Sort and cut to the limit
    4. Optionally ask the LLM for an analysis and outreach drafts for
       the matches above the analysis threshold
    """

    def __init__(
        self,
        analyzer: Optional["MatchAnalyzer"] = None,
        outreach_writer: Optional["OutreachWriter"] = None,
    ):
        self.settings = get_settings()
        self._analyzer = analyzer
        self._outreach_writer = outreach_writer

    @property
    def analyzer(self) -> "MatchAnalyzer":
        # Built on first use: the provider needs an API key
        if self._analyzer is None:
            from buyerscout.analysis import MatchAnalyzer

            self._analyzer = MatchAnalyzer()
        return self._analyzer

    @property
    def outreach_writer(self) -> "OutreachWriter":
        if self._outreach_writer is None:
            from buyerscout.analysis import OutreachWriter

            self._outreach_writer = OutreachWriter()
        return self._outreach_writer

    def rank_buyers(
        self,
        property: Union[Property, Mapping[str, Any]],
        buyers: Iterable[Union[BuyerProfile, Mapping[str, Any]]],
        now: Optional[Union[date, datetime]] = None,
        min_score: Optional[int] = None,
        sort_by: str = "score",
        limit: Optional[int] = None,
        with_reasoning: bool = False,
    ) -> list[BuyerMatch]:
        """
        Scores and ranks buyers for a property.

        Args:
            property: Property being offered
            buyers: Buyer collection (order irrelevant)
            now: Reference date for recency, shared by every buyer
            min_score: Minimum total score (default: settings.match_min_score)
            sort_by: score, name or activity
            limit: Maximum number of matches returned
            with_reasoning: Attach a MatchReasoning to each match

        Returns:
            List of BuyerMatch in display order
        """
        if sort_by not in SORT_KEYS:
            raise ValueError(f"Unsupported sort key: {sort_by}. Use one of {', '.join(SORT_KEYS)}")

        prop = as_property(property)
        reference = now or today()
        threshold = self.settings.match_min_score if min_score is None else min_score

        scored = 0
        matches = []
        for raw_buyer in buyers:
            buyer = as_buyer(raw_buyer)
            result = calculate_match_score(prop, buyer, now=reference)
            scored += 1
            if result.total_score < threshold:
                continue
            match = BuyerMatch(buyer=buyer, result=result)
            if with_reasoning:
                match.reasoning = generate_match_reasoning(prop, buyer, result)
            matches.append(match)

        matches = sort_matches(matches, sort_by)
        if limit is not None:
            matches = matches[:limit]

        logger.info(
            "Buyers ranked",
            county=prop.county,
            scored=scored,
            above_threshold=len(matches),
            min_score=threshold,
            top_score=matches[0].score if matches else None,
        )
        return matches

    async def analyze_matches(
        self,
        property: Union[Property, Mapping[str, Any]],
        matches: list[BuyerMatch],
        threshold: Optional[int] = None,
    ) -> list[BuyerMatch]:
        """
        Attaches an AI analysis to the matches at or above the threshold.

        Analyzer failures fall back to a generic analysis, so every
        eligible match ends up with one.
        """
        prop = as_property(property)
        minimum = self.settings.ai_analysis_threshold if threshold is None else threshold

        analyzed = 0
        for match in matches:
            if match.score < minimum:
                continue
            match.analysis = await self.analyzer.analyze(
                property=prop,
                buyer=match.buyer,
                match_score=match.score,
            )
            analyzed += 1

        logger.info("AI analysis completed", analyzed=analyzed, threshold=minimum)
        return matches

    async def draft_outreach(
        self,
        property: Union[Property, Mapping[str, Any]],
        matches: list[BuyerMatch],
        threshold: Optional[int] = None,
    ) -> list[BuyerMatch]:
        """
        Attaches outreach templates to the matches at or above the threshold.

        Uses the same threshold as the AI analysis; a failed LLM call
        leaves the default templates on the match.
        """
        prop = as_property(property)
        minimum = self.settings.ai_analysis_threshold if threshold is None else threshold

        drafted = 0
        for match in matches:
            if match.score < minimum:
                continue
            match.outreach = await self.outreach_writer.generate(
                buyer=match.buyer,
                property=prop,
                match_score=match.score,
            )
            drafted += 1

        logger.info("Outreach drafted", drafted=drafted, threshold=minimum)
        return matches
