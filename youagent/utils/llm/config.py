"""Configuration manager for LLM providers.

Reads configuration from ~/.youagent/config.toml and environment variables.
Environment variables take precedence over config file values.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Mapping, Optional, cast

from .constants import (
    DEFAULT_API_TIMEOUT,
    DEFAULT_EMBEDDING_MODELS,
    DEFAULT_MODELS,
    OLLAMA_TIMEOUT,
)

ProviderType = Literal["gemini", "openai", "ollama"]

PROVIDERS: tuple[ProviderType, ...] = ("gemini", "openai", "ollama")

DEFAULT_CONFIG_PATH = Path.home() / ".youagent" / "config.toml"


@dataclass
class GeminiConfig:
    """Configuration for Gemini provider."""

    api_key: str = ""
    default_model: str = DEFAULT_MODELS["gemini"]
    embedding_model: str = DEFAULT_EMBEDDING_MODELS["gemini"]
    timeout: float = DEFAULT_API_TIMEOUT


@dataclass
class OpenAIConfig:
    """Configuration for OpenAI provider."""

    api_key: str = ""
    default_model: str = DEFAULT_MODELS["openai"]
    embedding_model: str = DEFAULT_EMBEDDING_MODELS["openai"]
    base_url: str = ""  # Optional, for Azure/custom endpoints
    timeout: float = DEFAULT_API_TIMEOUT


@dataclass
class OllamaConfig:
    """Configuration for Ollama provider."""

    base_url: str = "http://localhost:11434"
    default_model: str = DEFAULT_MODELS["ollama"]
    embedding_model: str = DEFAULT_EMBEDDING_MODELS["ollama"]
    timeout: float = OLLAMA_TIMEOUT


@dataclass
class LLMConfig:
    """Main LLM configuration."""

    provider: ProviderType = "gemini"
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    ollama: OllamaConfig = field(default_factory=OllamaConfig)


def _load_toml(path: Path) -> dict:
    """Parse a TOML file, returning an empty dict when it does not exist."""
    if not path.exists():
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f)


def _env(*names: str) -> Optional[str]:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


def load_config(config_path: Optional[Path] = None) -> LLMConfig:
    """Load LLM configuration from file and environment.

    Configuration sources (in order of precedence):
    1. Environment variables (YOUAGENT_*, plus the vendors' own key variables)
    2. Config file (~/.youagent/config.toml)
    3. Default values
    """
    path = config_path or DEFAULT_CONFIG_PATH
    llm_config = _load_toml(path).get("llm", {})

    config = LLMConfig()
    config.provider = _get_provider_type(
        _env("YOUAGENT_LLM_PROVIDER") or llm_config.get("provider", "gemini")
    )

    gemini_section = llm_config.get("gemini", {})
    config.gemini = GeminiConfig(
        api_key=(
            _env("YOUAGENT_GEMINI_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")
            or gemini_section.get("api_key", "")
        ),
        default_model=(
            _env("YOUAGENT_GEMINI_MODEL")
            or gemini_section.get("default_model", DEFAULT_MODELS["gemini"])
        ),
        embedding_model=(
            _env("YOUAGENT_GEMINI_EMBEDDING_MODEL")
            or gemini_section.get("embedding_model", DEFAULT_EMBEDDING_MODELS["gemini"])
        ),
        timeout=float(
            _env("YOUAGENT_GEMINI_TIMEOUT") or gemini_section.get("timeout", DEFAULT_API_TIMEOUT)
        ),
    )

    openai_section = llm_config.get("openai", {})
    config.openai = OpenAIConfig(
        api_key=(
            _env("YOUAGENT_OPENAI_API_KEY", "OPENAI_API_KEY")
            or openai_section.get("api_key", "")
        ),
        default_model=(
            _env("YOUAGENT_OPENAI_MODEL")
            or openai_section.get("default_model", DEFAULT_MODELS["openai"])
        ),
        embedding_model=(
            _env("YOUAGENT_OPENAI_EMBEDDING_MODEL")
            or openai_section.get("embedding_model", DEFAULT_EMBEDDING_MODELS["openai"])
        ),
        base_url=_env("YOUAGENT_OPENAI_BASE_URL") or openai_section.get("base_url", ""),
        timeout=float(
            _env("YOUAGENT_OPENAI_TIMEOUT") or openai_section.get("timeout", DEFAULT_API_TIMEOUT)
        ),
    )

    ollama_section = llm_config.get("ollama", {})
    config.ollama = OllamaConfig(
        base_url=(
            _env("YOUAGENT_OLLAMA_BASE_URL")
            or ollama_section.get("base_url", "http://localhost:11434")
        ),
        default_model=(
            _env("YOUAGENT_OLLAMA_MODEL")
            or ollama_section.get("default_model", DEFAULT_MODELS["ollama"])
        ),
        embedding_model=(
            _env("YOUAGENT_OLLAMA_EMBEDDING_MODEL")
            or ollama_section.get("embedding_model", DEFAULT_EMBEDDING_MODELS["ollama"])
        ),
        timeout=float(
            _env("YOUAGENT_OLLAMA_TIMEOUT") or ollama_section.get("timeout", OLLAMA_TIMEOUT)
        ),
    )

    return config


def _get_provider_type(value: str) -> ProviderType:
    """Normalize a provider name; unknown values fall back to "gemini"."""
    value = value.lower().strip()
    if value in PROVIDERS:
        return cast(ProviderType, value)
    return "gemini"


def save_config(
    provider: ProviderType,
    credentials: Mapping[str, str],
    config_path: Optional[Path] = None,
) -> Path:
    """Write configuration to TOML file with owner-only permissions.

    Args:
        provider: The LLM provider type ("gemini", "openai", "ollama").
        credentials: Provider-specific credentials.
            For gemini/openai: {"api_key": "..."}
            For ollama: {"base_url": "..."}
        config_path: Optional path to config file. Defaults to ~/.youagent/config.toml.

    Returns:
        The path written.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    gemini_key = credentials.get("api_key", "") if provider == "gemini" else ""
    openai_key = credentials.get("api_key", "") if provider == "openai" else ""
    openai_base_url = credentials.get("base_url", "") if provider == "openai" else ""
    ollama_base_url = (
        credentials.get("base_url", "http://localhost:11434")
        if provider == "ollama"
        else "http://localhost:11434"
    )

    lines = [
        "# YouAgent - LLM Configuration",
        "# Generated by `youagent init`",
        "",
        "[llm]",
        f'provider = "{provider}"',
        "",
        "[llm.gemini]",
        f'api_key = "{gemini_key}"',
        f'default_model = "{DEFAULT_MODELS["gemini"]}"',
        f'embedding_model = "{DEFAULT_EMBEDDING_MODELS["gemini"]}"',
        "timeout = 30.0",
        "",
        "[llm.openai]",
        f'api_key = "{openai_key}"',
        f'default_model = "{DEFAULT_MODELS["openai"]}"',
        f'embedding_model = "{DEFAULT_EMBEDDING_MODELS["openai"]}"',
        f'base_url = "{openai_base_url}"',
        "timeout = 30.0",
        "",
        "[llm.ollama]",
        f'base_url = "{ollama_base_url}"',
        f'default_model = "{DEFAULT_MODELS["ollama"]}"',
        f'embedding_model = "{DEFAULT_EMBEDDING_MODELS["ollama"]}"',
        "timeout = 120.0",
    ]

    path.write_text("\n".join(lines) + "\n")
    # Owner read/write only: the file holds API keys
    os.chmod(path, 0o600)
    return path
