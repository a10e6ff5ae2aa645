from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional


def _env(name: str, default: str) -> str:
    return str(os.getenv(name, default)).strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    try:
        return float(_env(name, str(default)))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(_env(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    ai_enabled: bool = True
    ai_model: str = "gpt-4o"
    ai_base_url: str = "https://api.openai.com/v1"
    ai_timeout: float = 20.0
    graph_samples: int = 100
    log_level: str = "INFO"

    @property
    def ai_available(self) -> bool:
        return self.ai_enabled and bool(self.api_key)


def load_settings() -> Settings:
    return Settings(
        api_key=_env("OPENAI_API_KEY", "") or None,
        ai_enabled=_env_bool("CONIC_AI_ENABLED", True),
        ai_model=_env("CONIC_AI_MODEL", "gpt-4o"),
        ai_base_url=_env("CONIC_AI_BASE_URL", "https://api.openai.com/v1"),
        ai_timeout=_env_float("CONIC_AI_TIMEOUT", 20.0),
        graph_samples=_env_int("CONIC_GRAPH_POINTS", 100),
        log_level=_env("CONIC_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
