from buyerscout.matching import BuyerSearchFilters, filter_buyers
from buyerscout.models import BuyerProfile

BUYERS = [
    BuyerProfile(
        id="1",
        company_name="Sunshine Homes LLC",
        buyer_type="Builder",
        target_counties=["Orange", "Osceola"],
        price_range_min=15000,
        price_range_max=90000,
        lot_size_min_acres=0.15,
        lot_size_max_acres=1,
        purchase_strategy="Infill Lots",
        total_lots_acquired_6mo=7,
        total_lots_acquired_12mo=15,
    ),
    BuyerProfile(
        id="2",
        company_name="Heartland Development Group",
        buyer_type="Developer",
        target_counties=["Polk"],
        price_range_min=50000,
        price_range_max=400000,
        lot_size_min_acres=2,
        lot_size_max_acres=40,
        purchase_strategy="Subdivision Tracts",
        total_lots_acquired_6mo=2,
        total_lots_acquired_12mo=6,
    ),
    BuyerProfile(
        id="3",
        company_name="First Coast Lot Buyers",
        buyer_type="Individual Investor",
        target_counties=["Duval"],
        price_range_min=5000,
        price_range_max=30000,
        active_status=False,
        total_lots_acquired_6mo=0,
        total_lots_acquired_12mo=1,
    ),
    BuyerProfile(
        id="4",
        company_name="Everglades Land Bank",
        buyer_type="Land Bank",
        target_counties=["Miami-Dade", "orange"],
        price_range_min=20000,
        lot_size_min_acres=0.25,
        total_lots_acquired_6mo=4,
        total_lots_acquired_12mo=9,
    ),
]


def _ids(filters):
    return [buyer.id for buyer in filter_buyers(BUYERS, filters)]


def test_default_filters_keep_everyone():
    assert _ids(BuyerSearchFilters()) == ["1", "2", "3", "4"]


def test_county_filter_is_case_insensitive():
    assert _ids(BuyerSearchFilters(counties=["ORANGE"])) == ["1", "4"]
    assert _ids(BuyerSearchFilters(counties=["Polk", "Duval"])) == ["2", "3"]


def test_price_filter_keeps_overlapping_ranges():
    assert _ids(BuyerSearchFilters(price_min=100000)) == ["2", "4"]
    assert _ids(BuyerSearchFilters(price_max=10000)) == ["3"]
    assert _ids(BuyerSearchFilters(price_min=35000, price_max=45000)) == ["1", "4"]


def test_lot_size_filter():
    assert _ids(BuyerSearchFilters(lot_size_min=5)) == ["2", "3", "4"]
    assert _ids(BuyerSearchFilters(lot_size_max=0.2)) == ["1", "3"]


def test_activity_filters():
    assert _ids(BuyerSearchFilters(min_deals=4)) == ["1", "4"]
    assert _ids(BuyerSearchFilters(consistent_history=True)) == ["1", "2", "4"]
    assert _ids(BuyerSearchFilters(active_only=True)) == ["1", "2", "4"]


def test_strategy_and_type_filters():
    assert _ids(BuyerSearchFilters(strategy="Infill Lots")) == ["1"]
    assert _ids(BuyerSearchFilters(buyer_type="Land Bank")) == ["4"]
    assert _ids(BuyerSearchFilters(buyer_type="Land Bank", strategy="Infill Lots")) == []
