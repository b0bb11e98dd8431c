"""
AI gateway with model fallback and a response cache.

On first use the gateway probes the backend's candidate models in
order, keeping the first one that answers a tiny prompt with non-empty
text inside the probe timeout.  If every candidate fails it asks the
backend which models exist and probes those it has not tried yet.  The
probe sequence runs at most once per gateway; concurrent callers share
it.  If nothing answers, every generation call raises
:class:`GatewayNotInitializedError` without contacting the backend.

Generated text is memoised in a :class:`~jobhub.ai.cache.ResponseCache`
keyed by the first 100 characters of the prompt.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Iterable, List, Optional

from ..config import Settings
from .backends import GenerationConfig, LLMBackend, LLMModel, get_default_backend
from .cache import ResponseCache, fingerprint
from .errors import GatewayNotInitializedError, GenerationError

logger = logging.getLogger(__name__)

PROBE_PROMPT = "OK"
PROBE_TIMEOUT = 8.0


class AIGateway:
    """Single entry point for text generation against one selected model."""

    def __init__(
        self,
        backend: LLMBackend,
        *,
        candidates: Optional[Iterable[str]] = None,
        generation_config: Optional[GenerationConfig] = None,
        probe_timeout: float = PROBE_TIMEOUT,
        cache: Optional[ResponseCache] = None,
    ) -> None:
        self.backend = backend
        self.candidates: List[str] = list(candidates if candidates is not None else backend.candidates)
        self.generation_config = generation_config or GenerationConfig()
        self.probe_timeout = probe_timeout
        self.cache = cache if cache is not None else ResponseCache()
        self.active_model_name: Optional[str] = None
        self._model: Optional[LLMModel] = None
        self._init_task: Optional["asyncio.Task[None]"] = None

    @property
    def ready(self) -> bool:
        return self._model is not None

    async def ensure_ready(self) -> None:
        """Run the probe sequence once and wait for it to finish."""
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._initialize())
        # Shielded so that a cancelled caller does not abort the shared probe.
        await asyncio.shield(self._init_task)

    async def _initialize(self) -> None:
        logger.info("Starting %s gateway initialization...", self.backend.name)
        tried = set()
        for model_name in self.candidates:
            tried.add(model_name)
            if await self._try_model(model_name):
                return

        try:
            logger.info("Fetching available models from %s...", self.backend.name)
            available = await self.backend.list_models()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not list models: %s", exc)
            available = []
        else:
            logger.info("Available models: %s", ", ".join(available) or "none")
        for model_name in available:
            if model_name in tried:
                continue
            tried.add(model_name)
            if await self._try_model(model_name):
                return

        logger.error(
            "No valid %s model could be initialized. Check that the API key is valid, "
            "was issued for the right product, and that the models are available in your region.",
            self.backend.name,
        )

    async def _try_model(self, model_name: str) -> bool:
        logger.info("Trying model: %s", model_name)
        try:
            model = self.backend.create_model(model_name, self.generation_config)
            text = await asyncio.wait_for(model.generate(PROBE_PROMPT), timeout=self.probe_timeout)
        except asyncio.TimeoutError:
            logger.info("Model %s timed out after %.1fs", model_name, self.probe_timeout)
            return False
        except Exception as exc:  # noqa: BLE001
            status = getattr(exc, "status_code", None) or getattr(exc, "code", None) or "unknown"
            logger.info("Model %s failed (%s): %s", model_name, status, str(exc)[:60])
            return False
        if not text:
            logger.info("Model %s returned an empty probe response", model_name)
            return False
        self._model = model
        self.active_model_name = model_name
        logger.info("Using model: %s (probe response: %s...)", model_name, text[:30])
        return True

    async def _require_model(self) -> LLMModel:
        await self.ensure_ready()
        if self._model is None:
            raise GatewayNotInitializedError()
        return self._model

    async def generate(self, prompt: str) -> str:
        """Return generated text for ``prompt``, served from the cache when fresh."""
        model = await self._require_model()
        key = fingerprint(prompt)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        try:
            text = await model.generate(prompt)
        except Exception as exc:  # noqa: BLE001
            logger.error("Generation with %s failed: %s", self.active_model_name, exc)
            raise GenerationError() from exc
        self.cache.set(key, text)
        return text

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        """Return an async iterator of text chunks for ``prompt``.

        Readiness is checked before the iterator is returned.  A fresh
        cache entry is replayed as a single chunk; otherwise chunks come
        from the model and are not cached.
        """
        model = await self._require_model()
        cached = self.cache.get(fingerprint(prompt))
        if cached is not None:
            return _replay(cached)
        return _relay(model, prompt)


async def _replay(text: str) -> AsyncIterator[str]:
    yield text


async def _relay(model: LLMModel, prompt: str) -> AsyncIterator[str]:
    try:
        async for chunk in model.stream(prompt):
            yield chunk
    except Exception as exc:  # noqa: BLE001
        logger.error("Streaming with %s failed: %s", model.model_name, exc)
        raise GenerationError() from exc


def gateway_from_settings(settings: Settings, backend: Optional[LLMBackend] = None) -> AIGateway:
    """Build a gateway for the configured backend, probe timeout and cache bounds."""
    return AIGateway(
        backend or get_default_backend(settings),
        probe_timeout=settings.probe_timeout,
        cache=ResponseCache(ttl=settings.cache_ttl, max_entries=settings.cache_size),
    )
