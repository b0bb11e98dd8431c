"""
Generative text backends.

This module defines the contract the AI gateway uses to talk to a hosted
large language model: a backend creates model handles bound to a model
identifier and a fixed generation configuration, and can list the model
identifiers it offers for text generation.  Concrete implementations are
provided for Gemini (``google-generativeai``) and OpenAI (``openai``).
Applications select the backend via environment variables or pass an
instance of :class:`LLMBackend` to the gateway directly.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional

from ..config import Settings, load_settings

logger = logging.getLogger(__name__)

# Fastest and cheapest first.
GEMINI_CANDIDATES: List[str] = [
    "gemini-1.5-flash-8b",
    "gemini-2.0-flash-exp",
    "gemini-1.5-flash",
    "gemini-1.5-flash-latest",
    "gemini-1.5-pro",
    "gemini-pro",
]

OPENAI_CANDIDATES: List[str] = [
    "gpt-4o-mini",
    "gpt-4o",
    "gpt-4-turbo",
    "gpt-3.5-turbo",
]


@dataclass(frozen=True)
class GenerationConfig:
    """Sampling parameters shared by every model handle."""

    temperature: float = 0.8
    max_output_tokens: int = 2048


class LLMModel(ABC):
    """A handle bound to one model identifier."""

    def __init__(self, model_name: str, config: GenerationConfig) -> None:
        self.model_name = model_name
        self.config = config

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Return the full text response for ``prompt``."""
        raise NotImplementedError

    @abstractmethod
    def stream(self, prompt: str) -> AsyncIterator[str]:
        """Yield text chunks for ``prompt`` as the model produces them."""
        raise NotImplementedError


class LLMBackend(ABC):
    """Abstract base class for generative text backends."""

    name: str = "backend"
    candidates: List[str] = []

    @abstractmethod
    def create_model(self, model_name: str, config: GenerationConfig) -> LLMModel:
        raise NotImplementedError

    @abstractmethod
    async def list_models(self) -> List[str]:
        """Return identifiers of models that support text generation."""
        raise NotImplementedError


class GeminiModel(LLMModel):
    def __init__(self, genai, model_name: str, config: GenerationConfig) -> None:  # type: ignore[no-untyped-def]
        super().__init__(model_name, config)
        self._model = genai.GenerativeModel(
            model_name,
            generation_config=genai.GenerationConfig(
                temperature=config.temperature,
                max_output_tokens=config.max_output_tokens,
            ),
        )

    async def generate(self, prompt: str) -> str:
        response = await self._model.generate_content_async(prompt)
        return response.text

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        response = await self._model.generate_content_async(prompt, stream=True)
        async for chunk in response:
            text = chunk.text
            if text:
                yield text


class GeminiBackend(LLMBackend):
    """Backend that uses Google Generative AI (Gemini) via google-generativeai."""

    name = "gemini"

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        try:
            import google.generativeai as genai  # type: ignore
        except ImportError as exc:
            raise RuntimeError(
                "google-generativeai package is required for GeminiBackend. Install it via pip."
            ) from exc
        self.genai = genai
        if not api_key:
            logger.warning("GEMINI_API_KEY missing; Gemini model probes will fail.")
        self.genai.configure(api_key=api_key)
        # An explicitly configured model is probed before the defaults.
        self.candidates = ([model] if model else []) + [m for m in GEMINI_CANDIDATES if m != model]

    def create_model(self, model_name: str, config: GenerationConfig) -> LLMModel:
        return GeminiModel(self.genai, model_name, config)

    async def list_models(self) -> List[str]:
        models = await asyncio.to_thread(lambda: list(self.genai.list_models()))
        return [
            m.name.replace("models/", "")
            for m in models
            if "generateContent" in (getattr(m, "supported_generation_methods", None) or [])
        ]


class OpenAIModel(LLMModel):
    def __init__(self, client, model_name: str, config: GenerationConfig) -> None:  # type: ignore[no-untyped-def]
        super().__init__(model_name, config)
        self._client = client

    async def generate(self, prompt: str) -> str:
        response = await self._client.chat.completions.create(
            model=self.model_name,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.config.temperature,
            max_tokens=self.config.max_output_tokens,
        )
        return response.choices[0].message.content or ""

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        response = await self._client.chat.completions.create(
            model=self.model_name,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.config.temperature,
            max_tokens=self.config.max_output_tokens,
            stream=True,
        )
        async for chunk in response:
            if not chunk.choices:
                continue
            text = chunk.choices[0].delta.content
            if text:
                yield text


class OpenAIBackend(LLMBackend):
    """Backend that uses the OpenAI chat completions API."""

    name = "openai"

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        try:
            from openai import AsyncOpenAI  # type: ignore
        except ImportError as exc:
            raise RuntimeError(
                "openai package is required for OpenAIBackend. Install it via pip."
            ) from exc
        if not api_key:
            raise ValueError("OPENAI_API_KEY not provided")
        self.client = AsyncOpenAI(api_key=api_key)
        self.candidates = ([model] if model else []) + [m for m in OPENAI_CANDIDATES if m != model]

    def create_model(self, model_name: str, config: GenerationConfig) -> LLMModel:
        return OpenAIModel(self.client, model_name, config)

    async def list_models(self) -> List[str]:
        names: List[str] = []
        async for model in self.client.models.list():
            if model.id.startswith("gpt-"):
                names.append(model.id)
        return names


def get_default_backend(settings: Optional[Settings] = None) -> LLMBackend:
    """Return an :class:`LLMBackend` based on configuration and API keys.

    The resolution order is:

    1. If ``LLM_PROVIDER`` is ``"gemini"`` or ``"openai"`` the
       corresponding backend is selected.  If it cannot be initialised a
       warning is logged and automatic detection is used.
    2. If a Gemini key is present, return :class:`GeminiBackend`.
    3. If ``OPENAI_API_KEY`` is present, return :class:`OpenAIBackend`.
    4. Otherwise return a keyless :class:`GeminiBackend`; its probes fail
       and the gateway stays uninitialized.
    """
    if settings is None:
        settings = load_settings()
    preferred = (settings.llm_provider or "").lower()
    if preferred == "openai":
        try:
            return OpenAIBackend(settings.openai_api_key, settings.openai_model)
        except Exception as exc:  # noqa: BLE001
            logger.warning("LLM_PROVIDER=openai but failed to initialise OpenAIBackend: %s", exc)
    elif preferred == "gemini":
        return GeminiBackend(settings.gemini_api_key, settings.gemini_model)
    elif preferred:
        logger.warning("Unknown LLM_PROVIDER value '%s'; falling back to automatic detection", preferred)
    if settings.gemini_api_key:
        return GeminiBackend(settings.gemini_api_key, settings.gemini_model)
    if settings.openai_api_key:
        try:
            return OpenAIBackend(settings.openai_api_key, settings.openai_model)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to initialise OpenAIBackend: %s", exc)
    logger.info("No LLM API keys found; using Gemini backend without a key")
    return GeminiBackend(None, settings.gemini_model)
