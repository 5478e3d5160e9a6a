"""
Chat model access for the analyzers.

Every analyzer in this package asks for one JSON object per prompt, so
the contract lives here:
- Providers implement a single raw completion call in JSON mode
- BaseLLMProvider.generate_json retries transport failures and turns the
  reply into a dict, raising LLMReplyError when it cannot
- get_llm_provider picks the provider named in settings
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import structlog
from tenacity import retry, retry_if_not_exception_type, stop_after_attempt, wait_exponential

from buyerscout.config import get_settings

logger = structlog.get_logger()


class LLMReplyError(ValueError):
    """The model answered, but not with a usable JSON object."""


@dataclass
class LLMResponse:
    text: str
    model: str
    provider: str
    tokens_used: Optional[int] = None


def strip_code_fences(text: Optional[str]) -> str:
    """Removes a markdown ``` / ```json wrapper around a reply."""
    text = (text or "").strip()
    if text.startswith("```"):
        parts = text.split("```")
        if len(parts) >= 2:
            text = parts[1].strip()
            if text.startswith("json"):
                text = text[4:].strip()
    return text


def parse_json_object(text: Optional[str]) -> dict[str, Any]:
    """
    Reads the JSON object out of a model reply.

    Raises:
        LLMReplyError: If the reply is empty, is not JSON, or is a JSON
            value other than an object
    """
    body = strip_code_fences(text)
    if not body:
        raise LLMReplyError("Empty reply")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise LLMReplyError(f"Reply is not valid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise LLMReplyError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class BaseLLMProvider(ABC):
    """
    A chat model reachable through a vendor SDK.

    Subclasses name the settings holding their key and model, build the
    SDK client in _connect and implement generate.
    """

    provider_name: str = "base"
    api_key_setting: str = ""
    model_setting: str = ""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        settings = get_settings()
        self.api_key = api_key or getattr(settings, self.api_key_setting, None)
        self.model = model or getattr(settings, self.model_setting, "")

        if not self.api_key:
            raise ValueError(f"{self.api_key_setting.upper()} is not configured")

        self.client = self._connect()
        logger.info("LLM provider ready", provider=self.provider_name, model=self.model)

    def _connect(self) -> Any:
        raise NotImplementedError

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        """One completion with the reply constrained to JSON."""

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_not_exception_type(LLMReplyError),
        reraise=True,
    )
    async def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 4096,
    ) -> dict[str, Any]:
        """
        Runs a completion and returns the reply as a dict.

        Provider errors are retried up to 3 attempts with exponential
        wait; a malformed reply raises LLMReplyError on the first attempt.

        Raises:
            LLMReplyError: If the reply is not a JSON object
        """
        response = await self.generate(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        logger.debug(
            "LLM reply received",
            provider=response.provider,
            model=response.model,
            tokens=response.tokens_used,
        )
        return parse_json_object(response.text)


class GeminiProvider(BaseLLMProvider):
    """Google Gemini through google-genai; the system prompt goes in as system_instruction."""

    provider_name = "gemini"
    api_key_setting = "gemini_api_key"
    model_setting = "gemini_model"

    def _connect(self):
        from google import genai

        return genai.Client(api_key=self.api_key)

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        from google.genai import types

        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=user_prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=temperature,
                max_output_tokens=max_tokens,
                response_mime_type="application/json",
            ),
        )
        usage = getattr(response, "usage_metadata", None)

        return LLMResponse(
            text=response.text or "",
            model=self.model,
            provider=self.provider_name,
            tokens_used=getattr(usage, "total_token_count", None),
        )


class GroqProvider(BaseLLMProvider):
    """
    Groq chat completions in JSON object mode.

    llama-3.1-8b-instant is enough for the short analyses; switch
    GROQ_MODEL to llama-3.3-70b-versatile for better outreach copy.
    """

    provider_name = "groq"
    api_key_setting = "groq_api_key"
    model_setting = "groq_model"

    def _connect(self):
        from groq import AsyncGroq

        return AsyncGroq(api_key=self.api_key)

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            response_format={"type": "json_object"},
        )

        return LLMResponse(
            text=response.choices[0].message.content or "",
            model=self.model,
            provider=self.provider_name,
            tokens_used=response.usage.total_tokens if response.usage else None,
        )


PROVIDERS: dict[str, type[BaseLLMProvider]] = {
    GroqProvider.provider_name: GroqProvider,
    GeminiProvider.provider_name: GeminiProvider,
}


def get_llm_provider(
    provider: Optional[str] = None,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> BaseLLMProvider:
    """
    Builds the provider named by `provider` or settings.llm_provider.

    Raises:
        ValueError: Unknown provider name, or its API key is not set
    """
    name = (provider or get_settings().llm_provider).strip().lower()
    try:
        provider_class = PROVIDERS[name]
    except KeyError:
        raise ValueError(
            f"Unsupported LLM provider: {name}. Use one of: {', '.join(sorted(PROVIDERS))}"
        ) from None
    return provider_class(api_key=api_key, model=model)
