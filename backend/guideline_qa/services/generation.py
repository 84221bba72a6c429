from __future__ import annotations

import logging
from typing import Protocol

from openai import AsyncOpenAI

from guideline_qa.core import config
from guideline_qa.core.errors import ProviderFailure
from guideline_qa.core.llm_status import is_llm_enabled, openai_api_key

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class OpenAIGenerator:
    """Single-turn chat completion against the OpenAI API."""

    def __init__(self, client: AsyncOpenAI, model: str):
        self.client = client
        self.model = model

    async def generate(self, prompt: str) -> str:
        resp = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
        )
        text = resp.choices[0].message.content if resp.choices else None
        if not text or not text.strip():
            raise ProviderFailure("provider returned an empty response")
        return text


_generator: OpenAIGenerator | None = None
_generator_key: tuple[str, str] | None = None


def build_generator(settings: config.Settings) -> OpenAIGenerator | None:
    if not is_llm_enabled():
        return None
    return OpenAIGenerator(AsyncOpenAI(api_key=openai_api_key()), settings.openai_model)


def get_generator() -> TextGenerator | None:
    """FastAPI dependency. None means the provider is not configured.

    The client is cached per (model, api key) and rebuilt when either changes.
    """
    global _generator, _generator_key
    if not is_llm_enabled():
        return None
    key = (config.settings.openai_model, openai_api_key())
    if _generator is None or _generator_key != key:
        _generator = build_generator(config.settings)
        _generator_key = key
    return _generator
