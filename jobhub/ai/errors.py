"""Exceptions raised by the AI gateway and the career assistant."""

from __future__ import annotations


class GatewayError(RuntimeError):
    """Base class for gateway failures."""


class GatewayNotInitializedError(GatewayError):
    """No backend model passed the startup probe."""

    def __init__(self, message: str = "No active model initialized") -> None:
        super().__init__(message)


class GenerationError(GatewayError):
    """The active model failed to produce a response."""

    def __init__(self, message: str = "Failed to get AI response") -> None:
        super().__init__(message)


class AssistantError(RuntimeError):
    """Base class for career assistant failures."""


class ResumeParseError(AssistantError):
    def __init__(self, message: str = "Failed to parse resume") -> None:
        super().__init__(message)


class AIResponseError(AssistantError):
    def __init__(self, message: str = "Failed to get AI response") -> None:
        super().__init__(message)
