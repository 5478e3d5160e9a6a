from datetime import date, timedelta

import pytest

from buyerscout.analysis import BaseLLMProvider, LLMResponse
from buyerscout.config import get_settings
from buyerscout.models import BuyerProfile, Property

REFERENCE_DATE = date(2026, 1, 31)


class FakeProvider(BaseLLMProvider):
    """LLM provider returning canned replies (or raising)."""

    provider_name = "fake"

    def __init__(self, text: str = "", error: Exception = None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate(self, system_prompt, user_prompt, temperature=0.2, max_tokens=4096):
        self.calls.append(user_prompt)
        if self.error is not None:
            raise self.error
        return LLMResponse(text=self.text, model="fake-model", provider=self.provider_name)


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def orange_property():
    return Property(
        address="123 Main St, Orlando, FL",
        county="Orange",
        asking_price=50000,
        lot_size_acres=0.25,
        flood_zone="Zone X",
        utilities="City Water & Sewer",
        road_access="Paved",
    )


@pytest.fixture
def orange_buyer():
    return BuyerProfile(
        id="b-1",
        company_name="Sunshine Homes LLC",
        full_name="Maria Delgado",
        buyer_type="Builder",
        target_counties=["Orange"],
        price_range_min=10000,
        price_range_max=100000,
        lot_size_min_acres=0.1,
        lot_size_max_acres=1,
        last_purchase_date=REFERENCE_DATE - timedelta(days=10),
        total_lots_acquired_6mo=3,
    )
