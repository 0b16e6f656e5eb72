"""
Runtime configuration - Environment driven settings for a running game.

Values come from the process environment (after .env is loaded) and are
validated up front, so a bad deployment fails at start-up instead of on
the first narrated turn.
"""

import os
from collections.abc import Mapping
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from adventure.engine.world import DEFAULT_WORLD_ID

DEFAULT_APP_NAME = "Terminal Adventure"
DEFAULT_SESSIONS_FILE = "./data/sessions.json"
DEFAULT_PROVIDER = "ollama"
DEFAULT_MODEL = "qwen3-coder:30b"
DEFAULT_OLLAMA_URL = "http://localhost:11434"


class LLMSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_OLLAMA_URL
    timeout_ms: int = 60000
    health_timeout_ms: int = 3000
    temperature: float = 0.6
    max_tokens: int = 900
    max_history_messages: int = 40

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def health_timeout_seconds(self) -> float:
        return self.health_timeout_ms / 1000


class RuntimeConfig(BaseModel):
    """Validated runtime settings"""

    model_config = ConfigDict(frozen=True)

    app_name: str = DEFAULT_APP_NAME
    world_id: str = DEFAULT_WORLD_ID
    sessions_file: str = DEFAULT_SESSIONS_FILE
    llm: LLMSettings = LLMSettings()


def _string(env: Mapping[str, str], name: str, default: str) -> str:
    value = str(env.get(name, default)).strip()
    if not value:
        raise ValueError(f"{name} must not be empty")
    return value


def _integer(env: Mapping[str, str], name: str, default: int, low: int, high: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")
    return value


def _number(env: Mapping[str, str], name: str, default: float, low: float, high: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = float(str(raw).strip())
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")
    return value


def _url(env: Mapping[str, str], name: str, default: str) -> str:
    raw = _string(env, name, default)
    parsed = urlparse(raw)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"{name} must be a valid http(s) URL, got {raw!r}")
    return raw.rstrip("/")


def load_runtime_config(env: Mapping[str, str] | None = None) -> RuntimeConfig:
    """
    Build RuntimeConfig from environment variables.

    Args:
        env: Mapping to read instead of os.environ (.env is not loaded then)

    Raises:
        ValueError: If any variable is present but invalid
    """
    if env is None:
        load_dotenv()
        env = os.environ

    return RuntimeConfig(
        app_name=_string(env, "APP_NAME", DEFAULT_APP_NAME),
        world_id=_string(env, "WORLD_ID", DEFAULT_WORLD_ID),
        sessions_file=_string(env, "SESSIONS_FILE_PATH", DEFAULT_SESSIONS_FILE),
        llm=LLMSettings(
            provider=_string(env, "LLM_PROVIDER", DEFAULT_PROVIDER),
            model=_string(env, "LLM_MODEL", DEFAULT_MODEL),
            base_url=_url(env, "OLLAMA_BASE_URL", DEFAULT_OLLAMA_URL),
            timeout_ms=_integer(env, "LLM_TIMEOUT_MS", 60000, 1000, 300000),
            health_timeout_ms=_integer(env, "OLLAMA_HEALTH_TIMEOUT_MS", 3000, 500, 30000),
            temperature=_number(env, "LLM_TEMPERATURE", 0.6, 0.0, 2.0),
            max_tokens=_integer(env, "LLM_MAX_TOKENS", 900, 1, 32768),
            max_history_messages=_integer(env, "LLM_MAX_HISTORY_MESSAGES", 40, 2, 1000),
        ),
    )
