"""
AI analysis.

LLM write-ups of matches (Gemini/Groq) and buyer outreach templates.
"""

from buyerscout.analysis.llm_providers import (
    BaseLLMProvider,
    GeminiProvider,
    GroqProvider,
    LLMReplyError,
    LLMResponse,
    get_llm_provider,
)
from buyerscout.analysis.match_analyzer import MatchAnalysis, MatchAnalyzer
from buyerscout.analysis.outreach import OutreachTemplates, OutreachWriter, default_templates

__all__ = [
    # Analyzers
    "MatchAnalysis",
    "MatchAnalyzer",
    "OutreachTemplates",
    "OutreachWriter",
    "default_templates",
    # LLM providers
    "get_llm_provider",
    "BaseLLMProvider",
    "GeminiProvider",
    "GroqProvider",
    "LLMReplyError",
    "LLMResponse",
]
