"""
Runtime configuration.

Settings are read from environment variables (optionally seeded from a
``.env`` file via python-dotenv).  Portal definitions for the scraper
live in a YAML file, see ``config.yaml`` at the repository root.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import yaml  # type: ignore
from dotenv import load_dotenv


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Process-wide settings resolved from the environment."""

    llm_provider: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: Optional[str] = None
    probe_timeout: float = 8.0
    cache_ttl: float = 300.0
    cache_size: int = 100
    headless: bool = True
    scrape_retries: int = 2
    log_level: str = "INFO"


def load_settings(env: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> Settings:
    """Build :class:`Settings` from ``env`` (defaults to ``os.environ``).

    When ``dotenv`` is true a ``.env`` file in the working directory is
    loaded first; values already present in the environment win.
    """
    if env is None:
        if dotenv:
            load_dotenv()
        env = os.environ
    return Settings(
        llm_provider=(env.get("LLM_PROVIDER") or None),
        gemini_api_key=env.get("GEMINI_API_KEY") or env.get("GOOGLE_API_KEY") or None,
        gemini_model=env.get("GEMINI_MODEL") or env.get("GOOGLE_MODEL") or None,
        openai_api_key=env.get("OPENAI_API_KEY") or None,
        openai_model=env.get("OPENAI_MODEL") or None,
        probe_timeout=float(env.get("JOBHUB_PROBE_TIMEOUT") or 8.0),
        cache_ttl=float(env.get("JOBHUB_CACHE_TTL") or 300.0),
        cache_size=int(env.get("JOBHUB_CACHE_SIZE") or 100),
        headless=_env_bool(env.get("JOBHUB_HEADLESS"), True),
        scrape_retries=int(env.get("JOBHUB_SCRAPE_RETRIES") or 2),
        log_level=(env.get("JOBHUB_LOG_LEVEL") or "INFO").upper(),
    )


def load_yaml_config(config_path: str) -> Dict[str, object]:
    """Load a YAML configuration file, returning an empty dict for empty files."""
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}
