"""
Buyer search filters.

Narrows the buyer database down to buyers whose buy box overlaps the
searched criteria, before (or instead of) scoring a specific property.
"""

from typing import Iterable, Optional

from pydantic import BaseModel, Field

from buyerscout.models import BuyerProfile

CONSISTENT_HISTORY_MIN_DEALS_12MO = 5


class BuyerSearchFilters(BaseModel):
    """
    Search panel criteria. Every filter left at its default lets all
    buyers through.
    """

    counties: list[str] = Field(
        default_factory=list, description="Keep buyers targeting any of these counties"
    )
    price_min: float = Field(0, ge=0)
    price_max: Optional[float] = Field(None, ge=0, description="None = no upper bound")
    lot_size_min: float = Field(0, ge=0)
    lot_size_max: Optional[float] = Field(None, ge=0, description="None = no upper bound")
    min_deals: int = Field(0, ge=0, description="Minimum lots acquired in the last 6 months")
    strategy: Optional[str] = Field(None, description="Purchase strategy, None = all")
    buyer_type: Optional[str] = Field(None, description="Buyer type, None = all")
    active_only: bool = False
    consistent_history: bool = Field(
        False, description="Keep buyers with 5+ lots in the last 12 months"
    )


def _ranges_overlap(
    low: float,
    high: Optional[float],
    other_low: float,
    other_high: Optional[float],
) -> bool:
    # None is an open upper end
    if high is not None and high < other_low:
        return False
    if other_high is not None and low > other_high:
        return False
    return True


def matches_filters(buyer: BuyerProfile, filters: BuyerSearchFilters) -> bool:
    if filters.counties:
        wanted = {c.strip().casefold() for c in filters.counties}
        if not any(c.strip().casefold() in wanted for c in buyer.target_counties):
            return False

    if not _ranges_overlap(
        buyer.price_range_min, buyer.price_range_max, filters.price_min, filters.price_max
    ):
        return False

    if not _ranges_overlap(
        buyer.lot_size_min_acres, buyer.lot_size_max_acres, filters.lot_size_min, filters.lot_size_max
    ):
        return False

    if filters.min_deals and buyer.total_lots_acquired_6mo < filters.min_deals:
        return False
    if filters.strategy and buyer.purchase_strategy != filters.strategy:
        return False
    if filters.buyer_type and buyer.buyer_type != filters.buyer_type:
        return False
    if filters.active_only and not buyer.active_status:
        return False
    if (
        filters.consistent_history
        and buyer.total_lots_acquired_12mo < CONSISTENT_HISTORY_MIN_DEALS_12MO
    ):
        return False
    return True


def filter_buyers(
    buyers: Iterable[BuyerProfile],
    filters: BuyerSearchFilters,
) -> list[BuyerProfile]:
    """Returns the buyers passing every filter, in input order."""
    return [buyer for buyer in buyers if matches_filters(buyer, filters)]
