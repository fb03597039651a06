"""Abstract base class for LLM providers."""

import logging
from abc import ABC, abstractmethod
from typing import Iterator, Optional

from youagent.errors import RateLimited, UpstreamFailure

from .constants import MAX_PROMPT_LENGTH

logger = logging.getLogger(__name__)

_RATE_LIMIT_MARKERS = ("429", "rate limit", "resource exhausted", "resource_exhausted", "quota")


def is_rate_limit_error(exc: BaseException) -> bool:
    """Best-effort detection of HTTP 429 / quota errors across SDKs."""
    for attr in ("status_code", "code"):
        if getattr(exc, attr, None) == 429:
            return True
    response = getattr(exc, "response", None)
    if getattr(response, "status_code", None) == 429:
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _RATE_LIMIT_MARKERS)


def translate_error(exc: Exception, provider: str, operation: str) -> Exception:
    """Map an SDK/transport exception onto RateLimited or UpstreamFailure."""
    if isinstance(exc, (RateLimited, UpstreamFailure)):
        return exc
    message = f"{provider} {operation} failed: {type(exc).__name__}: {exc}"
    if is_rate_limit_error(exc):
        return RateLimited(message)
    return UpstreamFailure(message)


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    All providers expose embeddings and text generation behind one
    interface. Failures raise RateLimited (HTTP 429 / quota) or
    UpstreamFailure so callers can decide whether to retry.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider name (e.g., 'gemini', 'openai', 'ollama')."""
        ...

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Return the default generation model for this provider."""
        ...

    @property
    @abstractmethod
    def embedding_model(self) -> str:
        """Return the embedding model for this provider."""
        ...

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed texts, returning one vector per input in the same order.

        Raises:
            RateLimited: On HTTP 429 or quota exhaustion.
            UpstreamFailure: On any other provider error.
        """
        ...

    @abstractmethod
    def generate_text(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: str | None = None,
        sanitize: bool = True,
    ) -> str:
        """Generate a complete answer.

        Args:
            prompt: The user prompt.
            system: Optional system instruction.
            model: Model to use (defaults to provider's default_model).
            sanitize: If True, truncate prompt to max safe length.
        """
        ...

    @abstractmethod
    def generate_stream(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: str | None = None,
        sanitize: bool = True,
    ) -> Iterator[str]:
        """Stream answer chunks as they are generated."""
        ...

    def _sanitize_prompt(self, prompt: str, max_length: int = MAX_PROMPT_LENGTH) -> str:
        """Truncate prompt to max safe length for LLM processing."""
        return prompt[:max_length] if len(prompt) > max_length else prompt

    def _check_embeddings(self, texts: list[str], vectors: list[list[float]]) -> list[list[float]]:
        if len(vectors) != len(texts):
            raise UpstreamFailure(
                f"{self.name} returned {len(vectors)} embeddings for {len(texts)} texts"
            )
        return vectors
