"""Multi-provider LLM module for YouAgent.

Supports Gemini, OpenAI and Ollama behind one interface providing
embeddings and (streamed) text generation. Configuration is read from
~/.youagent/config.toml with YOUAGENT_* environment overrides.

Example config.toml:
    [llm]
    provider = "gemini"

    [llm.gemini]
    api_key = "your-api-key"
    default_model = "gemini-2.0-flash"
    embedding_model = "text-embedding-004"
    timeout = 30.0

    [llm.ollama]
    base_url = "http://localhost:11434"
    default_model = "llama3.2"
    embedding_model = "nomic-embed-text"
"""

from .config import (
    DEFAULT_CONFIG_PATH,
    PROVIDERS,
    GeminiConfig,
    LLMConfig,
    OllamaConfig,
    OpenAIConfig,
    ProviderType,
    load_config,
    save_config,
)
from .manager import LLMManager
from .provider import LLMProvider, is_rate_limit_error, translate_error

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "PROVIDERS",
    "GeminiConfig",
    "LLMConfig",
    "LLMManager",
    "LLMProvider",
    "OllamaConfig",
    "OpenAIConfig",
    "ProviderType",
    "is_rate_limit_error",
    "load_config",
    "save_config",
    "translate_error",
]
