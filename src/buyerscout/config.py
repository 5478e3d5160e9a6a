"""
Centralized configuration.
Loads environment variables and defines global settings.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py -> buyerscout/ -> src/ -> project root (where .env lives)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Buyer database
    buyers_data_path: str = Field(
        str(_PROJECT_ROOT / "data" / "buyers.json"),
        description="JSON file holding the buyer database",
    )

    # Matching
    default_offer_percentage: float = Field(
        75.0, gt=0, le=100, description="Offer % of asking price when the buyer has none"
    )
    match_min_score: int = Field(
        0, ge=0, le=100, description="Minimum total score to include a buyer in a ranking"
    )
    ai_analysis_threshold: int = Field(
        60, ge=0, le=100, description="Minimum total score before requesting an AI analysis"
    )

    # LLM Provider
    llm_provider: str = Field(
        "groq",
        description="LLM provider to use: 'gemini' or 'groq'"
    )

    # Gemini
    gemini_api_key: Optional[str] = Field(None, description="Google Gemini API key")
    gemini_model: str = Field("gemini-2.0-flash", description="Gemini model")

    # Groq
    groq_api_key: Optional[str] = Field(None, description="Groq API key")
    groq_model: str = Field(
        "llama-3.1-8b-instant",
        description="Groq model (llama-3.1-8b-instant, llama-3.3-70b-versatile)"
    )

    # Logging
    log_level: str = Field("INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """Returns the cached settings."""
    return Settings()


# Reference data used by the CLI and filters
FLORIDA_COUNTIES = [
    "Alachua", "Baker", "Bay", "Bradford", "Brevard", "Broward", "Calhoun",
    "Charlotte", "Citrus", "Clay", "Collier", "Columbia", "DeSoto", "Dixie",
    "Duval", "Escambia", "Flagler", "Franklin", "Gadsden", "Gilchrist",
    "Glades", "Gulf", "Hamilton", "Hardee", "Hendry", "Hernando", "Highlands",
    "Hillsborough", "Holmes", "Indian River", "Jackson", "Jefferson",
    "Lafayette", "Lake", "Lee", "Leon", "Levy", "Liberty", "Madison",
    "Manatee", "Marion", "Martin", "Miami-Dade", "Monroe", "Nassau",
    "Okaloosa", "Okeechobee", "Orange", "Osceola", "Palm Beach", "Pasco",
    "Pinellas", "Polk", "Putnam", "Santa Rosa", "Sarasota", "Seminole",
    "St. Johns", "St. Lucie", "Sumter", "Suwannee", "Taylor", "Union",
    "Volusia", "Wakulla", "Walton", "Washington",
]

BUYER_TYPES = [
    "Builder",
    "Developer",
    "Individual Investor",
    "LLC/Investment Group",
    "Land Bank",
]

PURCHASE_STRATEGIES = ["Infill Lots", "Scattered Lots", "Subdivision Tracts"]
