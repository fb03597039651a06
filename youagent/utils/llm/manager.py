"""LLM Manager: builds the configured provider on first use."""

from typing import Optional

from youagent.errors import ConfigError

from .config import LLMConfig, load_config
from .constants import EMBEDDING_DIMENSION
from .provider import LLMProvider


class LLMManager:
    """Manages LLM provider instantiation.

    Uses lazy initialization - provider is only created when first needed.
    An instance is passed to whatever needs a provider; there is no global.
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        dimension: int = EMBEDDING_DIMENSION,
    ) -> None:
        self._config = config
        self._dimension = dimension
        self._provider: Optional[LLMProvider] = None

    @property
    def config(self) -> LLMConfig:
        """Get configuration, loading from file if needed."""
        if self._config is None:
            self._config = load_config()
        return self._config

    def get_provider(self) -> Optional[LLMProvider]:
        """Return the configured provider, or None when credentials are missing."""
        if self._provider is not None:
            return self._provider

        provider_type = self.config.provider

        if provider_type == "gemini":
            from .gemini import GeminiProvider

            if not self.config.gemini.api_key:
                return None
            self._provider = GeminiProvider(
                api_key=self.config.gemini.api_key,
                default_model=self.config.gemini.default_model,
                embedding_model=self.config.gemini.embedding_model,
                timeout=self.config.gemini.timeout,
                dimension=self._dimension,
            )

        elif provider_type == "openai":
            from .openai import OpenAIProvider

            if not self.config.openai.api_key:
                return None
            self._provider = OpenAIProvider(
                api_key=self.config.openai.api_key,
                default_model=self.config.openai.default_model,
                embedding_model=self.config.openai.embedding_model,
                base_url=self.config.openai.base_url or None,
                timeout=self.config.openai.timeout,
                dimension=self._dimension,
            )

        elif provider_type == "ollama":
            from .ollama import OllamaProvider

            self._provider = OllamaProvider(
                base_url=self.config.ollama.base_url,
                default_model=self.config.ollama.default_model,
                embedding_model=self.config.ollama.embedding_model,
                timeout=self.config.ollama.timeout,
            )

        return self._provider

    def require_provider(self) -> LLMProvider:
        """Like get_provider, but raise ConfigError instead of returning None."""
        provider = self.get_provider()
        if provider is None:
            raise ConfigError(
                f"No credentials configured for LLM provider '{self.config.provider}'. "
                "Run `youagent init` or set the provider's API key variable."
            )
        return provider
