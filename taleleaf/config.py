from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any
import json
import os
import re

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


@dataclass(frozen=True)
class ContextWindowConfig:
    max_context_tokens: int = 1800
    page_focused_max_tokens: int = 900
    desired_k_min: int = 4
    desired_k_max: int = 8
    max_paragraphs_cap: int = 8
    max_paragraph_chars: int = 900
    chunk_fetch_limit: int = 200
    page_focused_chunk_limit: int = 2
    estimated_output_tokens: int = 500
    prompt_buffer_tokens: int = 200


@dataclass(frozen=True)
class StorageConfig:
    backend: str = "postgres"
    database_url: str | None = None
    data_file: str | None = None
    pool_min_size: int = 1
    pool_max_size: int = 10


@dataclass(frozen=True)
class LLMConfig:
    provider: str = "gemini"
    model: str = "gemini-2.5-flash"
    api_key: str | None = None
    temperature: float = 0.3
    max_tokens: int = 1024


@dataclass(frozen=True)
class APIConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    log_file: str | None = None


@dataclass(frozen=True)
class AppConfig:
    context_window: ContextWindowConfig = field(default_factory=ContextWindowConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_ENV_PATTERN = re.compile(r"\$\{([^:}]+):-?([^}]*)\}")


def _expand_env(value: Any) -> Any:
    """Expand ${VAR:-default} references in strings inside dicts/lists."""
    if isinstance(value, str):
        return _ENV_PATTERN.sub(
            lambda m: os.environ.get(m.group(1), m.group(2)), value
        )
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    return value


def _coalesce(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _coalesce(merged[key], value)
        else:
            merged[key] = value
    return merged


def _from_dict(data: dict[str, Any]) -> AppConfig:
    return AppConfig(
        context_window=ContextWindowConfig(**data.get("context_window", {})),
        storage=StorageConfig(**data.get("storage", {})),
        llm=LLMConfig(**data.get("llm", {})),
        api=APIConfig(**data.get("api", {})),
        logging=LoggingConfig(**data.get("logging", {})),
    )


def load_config(path: str | Path | None) -> AppConfig:
    if path is None:
        return AppConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".json"}:
        data = json.loads(raw)
    else:
        data = yaml.safe_load(raw) or {}

    merged = _coalesce(asdict(AppConfig()), _expand_env(data))
    return _from_dict(merged)


def apply_env_overrides(config: AppConfig) -> AppConfig:
    """Fill unset secrets and log level from the environment."""
    data = asdict(config)

    env_url = os.getenv("DATABASE_URL")
    if env_url and not config.storage.database_url:
        data["storage"]["database_url"] = env_url

    env_key = os.getenv("GEMINI_API_KEY")
    if env_key and not config.llm.api_key:
        data["llm"]["api_key"] = env_key

    env_level = os.getenv("TALELEAF_LOG_LEVEL")
    if env_level:
        data["logging"]["level"] = env_level.upper()

    return _from_dict(data)
