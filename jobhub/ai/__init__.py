"""
AI subsystem for JobHub.

* `backends` – Gemini and OpenAI implementations of the generative
  text backend contract.
* `gateway` – Model probing with fallback, single-flight
  initialization and cached generation.
* `prompts` – Job/general classification of chat messages and prompt
  templates.
* `extract` – JSON extraction from model output and the pydantic
  schemas it is validated against.
* `assistant` – Résumé parsing, job recommendations, chat and market
  analysis.
"""

from .assistant import CareerAssistant  # noqa: F401
from .backends import GenerationConfig, LLMBackend, get_default_backend  # noqa: F401
from .cache import ResponseCache  # noqa: F401
from .errors import (  # noqa: F401
    AIResponseError,
    GatewayNotInitializedError,
    GenerationError,
    ResumeParseError,
)
from .gateway import AIGateway, gateway_from_settings  # noqa: F401
from .prompts import ChatContext, is_job_related  # noqa: F401
