"""Ollama LLM provider using httpx for API calls."""

import json
import logging
from typing import Any, Iterator, Optional

import httpx

from .constants import DEFAULT_EMBEDDING_MODELS, DEFAULT_MODELS, OLLAMA_TIMEOUT
from .provider import LLMProvider, translate_error

logger = logging.getLogger(__name__)


class OllamaProvider(LLMProvider):
    """LLM provider for Ollama local models.

    Talks to the Ollama HTTP API directly; no SDK dependency required.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        default_model: str = DEFAULT_MODELS["ollama"],
        embedding_model: str = DEFAULT_EMBEDDING_MODELS["ollama"],
        timeout: float = OLLAMA_TIMEOUT,
    ) -> None:
        """Initialize Ollama provider.

        Args:
            base_url: Ollama server URL (default: http://localhost:11434).
            default_model: Default generation model.
            embedding_model: Embedding model (nomic-embed-text is 768-d).
            timeout: Request timeout in seconds (higher for local inference).
        """
        self._base_url = base_url.rstrip("/")
        self._default_model = default_model
        self._embedding_model = embedding_model
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "ollama"

    @property
    def default_model(self) -> str:
        return self._default_model

    @property
    def embedding_model(self) -> str:
        return self._embedding_model

    def _payload(self, prompt: str, system: Optional[str], model: str | None, stream: bool) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": model or self._default_model,
            "prompt": prompt,
            "stream": stream,
        }
        if system:
            payload["system"] = system
        return payload

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        try:
            response = httpx.post(
                f"{self._base_url}/api/embed",
                json={"model": self._embedding_model, "input": texts},
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            logger.debug("Ollama embedding failed: %s: %s", type(e).__name__, e)
            raise translate_error(e, self.name, "embedding") from e
        return self._check_embeddings(texts, data.get("embeddings") or [])

    def generate_text(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: str | None = None,
        sanitize: bool = True,
    ) -> str:
        text = self._sanitize_prompt(prompt) if sanitize else prompt
        try:
            response = httpx.post(
                f"{self._base_url}/api/generate",
                json=self._payload(text, system, model, stream=False),
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            logger.debug("Ollama generation failed: %s: %s", type(e).__name__, e)
            raise translate_error(e, self.name, "generation") from e
        return data.get("response", "")

    def generate_stream(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: str | None = None,
        sanitize: bool = True,
    ) -> Iterator[str]:
        text = self._sanitize_prompt(prompt) if sanitize else prompt
        try:
            with httpx.stream(
                "POST",
                f"{self._base_url}/api/generate",
                json=self._payload(text, system, model, stream=True),
                timeout=self._timeout,
            ) as response:
                response.raise_for_status()
                for line in response.iter_lines():
                    if not line:
                        continue
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    if data.get("response"):
                        yield data["response"]
        except Exception as e:
            logger.debug("Ollama streaming failed: %s: %s", type(e).__name__, e)
            raise translate_error(e, self.name, "streaming") from e
