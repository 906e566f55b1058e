from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from dotenv import find_dotenv, load_dotenv


def _load_env() -> None:
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path, override=False)


_load_env()


def _get_env(key: str, default: str | None = None) -> str | None:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class ModelConfig:
    """Configuration for a model. name is the provider alias."""

    name: str
    model: str = ""
    api_key: str | None = None
    base_url: str | None = None
    max_tokens: int = 16000
    temperature: float = 0.7
    timeout: float = 120.0

    def __post_init__(self):
        if not self.model:
            self.model = self.name


@dataclass
class Settings:
    openai_api_key: str | None = field(default_factory=lambda: _get_env("OPENAI_API_KEY"))
    openai_base_url: str = field(
        default_factory=lambda: _get_env("OPENAI_BASE_URL", "https://api.openai.com/v1")
    )
    openai_model: str = field(default_factory=lambda: _get_env("OPENAI_MODEL", "gpt-4o"))

    anthropic_api_key: str | None = field(default_factory=lambda: _get_env("ANTHROPIC_API_KEY"))
    anthropic_base_url: str = field(
        default_factory=lambda: _get_env("ANTHROPIC_BASE_URL", "https://api.anthropic.com")
    )
    anthropic_model: str = field(
        default_factory=lambda: _get_env("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
    )

    model_timeout_seconds: float = field(default_factory=lambda: _get_float("MODEL_TIMEOUT_SECONDS", 120.0))
    max_tokens: int = field(default_factory=lambda: _get_int("MAX_TOKENS", 16000))
    temperature: float = field(default_factory=lambda: _get_float("TEMPERATURE", 0.7))
    max_turns: int = field(default_factory=lambda: _get_int("MAX_AGENT_TURNS", 40))
    bridge_wait_timeout: float = field(default_factory=lambda: _get_float("BRIDGE_WAIT_TIMEOUT", 0.1))

    log_dir: str | None = field(default_factory=lambda: _get_env("LOG_DIR"))
    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "INFO"))


def _anthropic_openai_base(base_url: str) -> str:
    # Anthropic serves its OpenAI-compatible API under /v1.
    base = base_url.rstrip("/")
    return base if base.endswith("/v1") else f"{base}/v1"


def resolve_model(settings: Settings) -> ModelConfig:
    """Anthropic when its key is configured, otherwise OpenAI."""
    if settings.anthropic_api_key:
        return ModelConfig(
            name="anthropic",
            model=settings.anthropic_model,
            api_key=settings.anthropic_api_key,
            base_url=_anthropic_openai_base(settings.anthropic_base_url),
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout=settings.model_timeout_seconds,
        )
    return ModelConfig(
        name="openai",
        model=settings.openai_model,
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        timeout=settings.model_timeout_seconds,
    )


_settings: Settings | None = None
_runtime_overrides: dict[str, Any] = {}


def _apply_runtime_overrides(settings: Settings) -> None:
    for key, value in _runtime_overrides.items():
        if value is not None and hasattr(settings, key):
            setattr(settings, key, value)


def update_runtime_overrides(overrides: dict[str, Any]) -> None:
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        _runtime_overrides[key] = value
    if _settings is not None:
        _apply_runtime_overrides(_settings)


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    _apply_runtime_overrides(_settings)
    return _settings


def refresh_settings() -> Settings:
    """Rebuild settings from environment variables."""
    global _settings
    _settings = Settings()
    _apply_runtime_overrides(_settings)
    return _settings


__all__ = [
    "ModelConfig",
    "Settings",
    "get_settings",
    "refresh_settings",
    "resolve_model",
    "update_runtime_overrides",
]
