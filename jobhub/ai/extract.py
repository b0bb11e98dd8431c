"""
Structured extraction from free-form model output.

Models are asked for bare JSON but routinely wrap it in prose or code
fences.  The helpers here locate the first well-formed JSON object or
array in the text and validate it against a pydantic schema.  They
never raise: callers receive an :class:`Extraction` that carries either
a value or an :class:`ExtractionError` and decide for themselves whether
a failure is fatal.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_decoder = json.JSONDecoder()


@dataclass(frozen=True)
class ExtractionError:
    reason: str
    raw: str = ""


@dataclass(frozen=True)
class Extraction(Generic[T]):
    """Either ``value`` or ``error`` is set."""

    value: Optional[T] = None
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        return self.value if self.error is None else default  # type: ignore[return-value]


def _fail(reason: str, text: str) -> Extraction[Any]:
    logger.debug("Extraction failed: %s", reason)
    return Extraction(error=ExtractionError(reason=reason, raw=text[:200]))


def _first_json(text: str, opener: str, kind: type) -> Extraction[Any]:
    if not text:
        return _fail("empty text", "")
    start = text.find(opener)
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, kind):
                return Extraction(value=value)
        start = text.find(opener, start + 1)
    return _fail(f"no well-formed JSON {kind.__name__} found", text)


def extract_json_object(text: str) -> Extraction[dict]:
    """Return the first well-formed JSON object embedded in ``text``."""
    return _first_json(text, "{", dict)


def extract_json_array(text: str) -> Extraction[list]:
    """Return the first well-formed JSON array embedded in ``text``."""
    return _first_json(text, "[", list)


def parse_model(text: str, schema: Type[M]) -> Extraction[M]:
    """Extract a JSON object from ``text`` and validate it as ``schema``."""
    found = extract_json_object(text)
    if not found.ok:
        return found  # type: ignore[return-value]
    try:
        return Extraction(value=schema.model_validate(found.value))
    except ValidationError as exc:
        return _fail(f"schema validation failed: {exc.error_count()} error(s)", text)


def parse_model_list(text: str, schema: Type[M]) -> Extraction[List[M]]:
    """Extract a JSON array from ``text``; items that fail ``schema`` are dropped."""
    found = extract_json_array(text)
    if not found.ok:
        return found  # type: ignore[return-value]
    items: List[M] = []
    for raw in found.value or []:
        try:
            items.append(schema.model_validate(raw))
        except ValidationError:
            logger.debug("Dropping invalid %s entry: %r", schema.__name__, raw)
    return Extraction(value=items)


# --- Schemas -----------------------------------------------------------------


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # Models emit null for unknown fields; the defaults apply instead.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ExperienceEntry(_Schema):
    title: str = ""
    company: str = ""
    duration: str = ""


class EducationEntry(_Schema):
    degree: str = ""
    institution: str = ""
    year: str = ""


class ResumeProfile(_Schema):
    """Structured résumé returned by the parser."""

    name: str = ""
    email: str = ""
    phone: str = ""
    skills: List[str] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    summary: str = ""
    total_experience: float = Field(default=0, ge=0, alias="totalExperience")


class JobRecommendation(_Schema):
    job_id: str = Field(alias="jobId", min_length=1)
    match_score: float = Field(alias="matchScore", strict=True)
    reasons: List[str] = Field(default_factory=list)


class MarketAnalysis(_Schema):
    top_skills: List[str] = Field(default_factory=list, alias="topSkills")
    salary_trends: str = Field(default="", alias="salaryTrends")
    popular_locations: List[str] = Field(default_factory=list, alias="popularLocations")
    insights: List[str] = Field(default_factory=list)
