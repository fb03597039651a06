"""Gemini LLM provider using google-genai SDK."""

import logging
from typing import Any, Iterator, Optional

from youagent.errors import UpstreamFailure

from .constants import (
    DEFAULT_API_TIMEOUT,
    DEFAULT_EMBEDDING_MODELS,
    DEFAULT_MODELS,
    EMBEDDING_DIMENSION,
)
from .provider import LLMProvider, translate_error

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """LLM provider for Google Gemini models.

    Uses the google-genai SDK for API access.
    """

    def __init__(
        self,
        api_key: str,
        default_model: str = DEFAULT_MODELS["gemini"],
        embedding_model: str = DEFAULT_EMBEDDING_MODELS["gemini"],
        timeout: float = DEFAULT_API_TIMEOUT,
        dimension: int = EMBEDDING_DIMENSION,
    ) -> None:
        """Initialize Gemini provider.

        Args:
            api_key: Google API key for Gemini.
            default_model: Default generation model.
            embedding_model: Embedding model (768-dimensional by default).
            timeout: Request timeout in seconds.
            dimension: Requested embedding dimensionality.
        """
        self._api_key = api_key
        self._default_model = default_model
        self._embedding_model = embedding_model
        self._timeout = timeout
        self._dimension = dimension
        self._client: Any = None

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return self._default_model

    @property
    def embedding_model(self) -> str:
        return self._embedding_model

    def _get_client(self) -> Any:
        """Get or create the Gemini client."""
        if self._client is None:
            try:
                from google import genai

                self._client = genai.Client(
                    api_key=self._api_key,
                    http_options={"timeout": int(self._timeout * 1000)},
                )
            except ImportError as exc:
                raise UpstreamFailure(
                    "google-genai package is required for Gemini provider. "
                    "Install with: pip install google-genai"
                ) from exc
        return self._client

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        client = self._get_client()
        try:
            response = client.models.embed_content(
                model=self._embedding_model,
                contents=texts,
                config={"output_dimensionality": self._dimension},
            )
        except Exception as e:
            logger.debug("Gemini embedding failed: %s: %s", type(e).__name__, e)
            raise translate_error(e, self.name, "embedding") from e
        vectors = [list(item.values) for item in (response.embeddings or [])]
        return self._check_embeddings(texts, vectors)

    def generate_text(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: str | None = None,
        sanitize: bool = True,
    ) -> str:
        client = self._get_client()
        text = self._sanitize_prompt(prompt) if sanitize else prompt
        config = {"system_instruction": system} if system else None

        try:
            response = client.models.generate_content(
                model=model or self._default_model,
                contents=text,
                config=config,
            )
        except Exception as e:
            logger.debug("Gemini generation failed: %s: %s", type(e).__name__, e)
            raise translate_error(e, self.name, "generation") from e
        return response.text or ""

    def generate_stream(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: str | None = None,
        sanitize: bool = True,
    ) -> Iterator[str]:
        client = self._get_client()
        text = self._sanitize_prompt(prompt) if sanitize else prompt
        config = {"system_instruction": system} if system else None

        try:
            for chunk in client.models.generate_content_stream(
                model=model or self._default_model,
                contents=text,
                config=config,
            ):
                if chunk.text:
                    yield chunk.text
        except Exception as e:
            logger.debug("Gemini streaming failed: %s: %s", type(e).__name__, e)
            raise translate_error(e, self.name, "streaming") from e
