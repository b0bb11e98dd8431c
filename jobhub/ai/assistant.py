"""
Career assistant features built on the AI gateway.

Each public coroutine owns its failure translation: résumé parsing
escalates any failure to :class:`ResumeParseError`, chat raises
:class:`AIResponseError`, while job recommendations and market analysis
degrade to an empty result.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel

from .errors import AIResponseError, ResumeParseError
from .extract import JobRecommendation, MarketAnalysis, ResumeProfile, parse_model, parse_model_list
from .gateway import AIGateway
from .prompts import (
    ChatContext,
    build_chat_prompt,
    build_market_prompt,
    build_recommendation_prompt,
    build_resume_prompt,
    build_stream_prompt,
)

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 5

ResumeLike = Union[ResumeProfile, Mapping[str, object]]


def _as_mapping(data: Optional[ResumeLike]) -> Mapping[str, object]:
    if data is None:
        return {}
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True)
    return data


class CareerAssistant:
    """JobHub AI: résumé parsing, job matching, chat and market insights."""

    def __init__(self, gateway: AIGateway) -> None:
        self.gateway = gateway

    async def parse_resume(self, resume_text: str) -> ResumeProfile:
        try:
            if not resume_text:
                raise ValueError("resume text is empty")
            text = await self.gateway.generate(build_resume_prompt(resume_text))
            parsed = parse_model(text, ResumeProfile)
            if not parsed.ok:
                raise ValueError(f"Failed to extract JSON: {parsed.error.reason}")  # type: ignore[union-attr]
            return parsed.value  # type: ignore[return-value]
        except Exception as exc:  # noqa: BLE001
            logger.error("parse_resume failed: %s", exc)
            raise ResumeParseError() from exc

    async def recommend_jobs(
        self,
        resume_data: ResumeLike,
        available_jobs: Sequence[Mapping[str, object]],
    ) -> List[JobRecommendation]:
        try:
            prompt = build_recommendation_prompt(_as_mapping(resume_data), available_jobs or [])
            text = await self.gateway.generate(prompt)
        except Exception as exc:  # noqa: BLE001
            logger.error("recommend_jobs failed: %s", exc)
            return []
        return parse_model_list(text, JobRecommendation).unwrap_or([])[:MAX_RECOMMENDATIONS]

    async def chat(self, message: str, context: Optional[ChatContext] = None) -> str:
        try:
            return await self.gateway.generate(build_chat_prompt(message, self._normalize(context)))
        except Exception as exc:  # noqa: BLE001
            logger.error("chat failed: %s", exc)
            raise AIResponseError() from exc

    async def chat_stream(self, message: str, context: Optional[ChatContext] = None) -> AsyncIterator[str]:
        try:
            chunks = await self.gateway.stream(build_stream_prompt(message, self._normalize(context)))
        except Exception as exc:  # noqa: BLE001
            logger.error("chat_stream failed: %s", exc)
            raise AIResponseError("Failed to get AI stream response") from exc
        return _guard_stream(chunks)

    async def analyze_market(self, jobs: Sequence[Mapping[str, object]]) -> Optional[MarketAnalysis]:
        try:
            text = await self.gateway.generate(build_market_prompt(jobs or []))
        except Exception as exc:  # noqa: BLE001
            logger.error("analyze_market failed: %s", exc)
            return None
        return parse_model(text, MarketAnalysis).unwrap_or(None)  # type: ignore[arg-type]

    @staticmethod
    def _normalize(context: Optional[ChatContext]) -> ChatContext:
        context = context or ChatContext()
        if isinstance(context.resume_data, BaseModel):
            context = ChatContext(
                resume_data=_as_mapping(context.resume_data),
                available_jobs=context.available_jobs,
                chat_history=context.chat_history,
            )
        return context


async def _guard_stream(chunks: AsyncIterator[str]) -> AsyncIterator[str]:
    try:
        async for chunk in chunks:
            yield chunk
    except Exception as exc:  # noqa: BLE001
        raise AIResponseError("Failed to get AI stream response") from exc
