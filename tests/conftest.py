"""Shared fakes for the browser and the LLM backends.

No test talks to a real browser or model API: the browser session is
given a launcher that returns :class:`FakeBrowser`, and the gateway is
given a :class:`FakeBackend` whose models answer from canned behaviours.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

import pytest

from jobhub.ai.backends import GenerationConfig, LLMBackend, LLMModel

HANG = "hang"


class FakePage:
    def __init__(self, browser: "FakeBrowser") -> None:
        self.browser = browser
        self.url = ""

    async def goto(self, url: str, **kwargs: object) -> None:
        self.url = url
        self.browser.visits.append((url, kwargs))

    async def wait_for_selector(self, selector: str, **kwargs: object) -> None:
        self.browser.waited_for.append(selector)

    async def content(self) -> str:
        return self.browser.html

    async def close(self) -> None:
        self.browser.pages_closed += 1
        if self.browser.fail_close:
            raise RuntimeError("page close failed")


class FakeBrowser:
    def __init__(self, html: str = "<html></html>", fail_close: bool = False) -> None:
        self.html = html
        self.fail_close = fail_close
        self.pages_opened = 0
        self.pages_closed = 0
        self.page_kwargs: List[Dict[str, object]] = []
        self.visits: List[tuple] = []
        self.waited_for: List[str] = []
        self.closed = False

    async def new_page(self, **kwargs: object) -> FakePage:
        self.pages_opened += 1
        self.page_kwargs.append(kwargs)
        return FakePage(self)

    async def close(self) -> None:
        self.closed = True


class FakeLauncher:
    """Counts launches; yields once so concurrent callers can pile up."""

    def __init__(self, browser: Optional[FakeBrowser] = None, failures: int = 0) -> None:
        self.browser = browser or FakeBrowser()
        self.failures = failures
        self.calls = 0

    async def __call__(self) -> FakeBrowser:
        self.calls += 1
        await asyncio.sleep(0)
        if self.calls <= self.failures:
            raise RuntimeError("launch failed")
        return self.browser


class FakeModel(LLMModel):
    def __init__(self, backend: "FakeBackend", model_name: str, config: GenerationConfig) -> None:
        super().__init__(model_name, config)
        self.backend = backend

    async def generate(self, prompt: str) -> str:
        if prompt == "OK":
            self.backend.probes.append(self.model_name)
            behaviour = self.backend.behaviours.get(self.model_name, "OK")
            if behaviour == HANG:
                await asyncio.sleep(3600)
            if isinstance(behaviour, Exception):
                raise behaviour
            return behaviour
        self.backend.generate_calls.append(prompt)
        if isinstance(self.backend.reply, Exception):
            raise self.backend.reply
        return self.backend.reply

    async def stream(self, prompt: str):
        self.backend.stream_calls.append(prompt)
        for chunk in self.backend.chunks:
            if isinstance(chunk, Exception):
                raise chunk
            yield chunk


class FakeBackend(LLMBackend):
    name = "fake"

    def __init__(
        self,
        candidates: Optional[List[str]] = None,
        behaviours: Optional[Dict[str, object]] = None,
        discovered: Optional[List[str]] = None,
        reply: object = "generated text",
    ) -> None:
        self.candidates = candidates if candidates is not None else ["fast-model"]
        self.behaviours = behaviours or {}
        self.discovered = discovered
        self.reply = reply
        self.chunks: List[object] = ["Hello", ", ", "world"]
        self.probes: List[str] = []
        self.generate_calls: List[str] = []
        self.stream_calls: List[str] = []
        self.list_calls = 0
        self.created: List[str] = []

    def create_model(self, model_name: str, config: GenerationConfig) -> LLMModel:
        self.created.append(model_name)
        return FakeModel(self, model_name, config)

    async def list_models(self) -> List[str]:
        self.list_calls += 1
        if self.discovered is None:
            raise RuntimeError("discovery unavailable")
        return list(self.discovered)


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def fake_browser() -> FakeBrowser:
    return FakeBrowser()
