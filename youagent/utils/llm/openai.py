"""OpenAI LLM provider using the openai SDK."""

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


class OpenAIProvider(LLMProvider):
    """LLM provider for OpenAI models.

    Also supports Azure OpenAI and other OpenAI-compatible endpoints via
    base_url.
    """

    def __init__(
        self,
        api_key: str,
        default_model: str = DEFAULT_MODELS["openai"],
        embedding_model: str = DEFAULT_EMBEDDING_MODELS["openai"],
        base_url: str | None = None,
        timeout: float = DEFAULT_API_TIMEOUT,
        dimension: int = EMBEDDING_DIMENSION,
    ) -> None:
        self._api_key = api_key
        self._default_model = default_model
        self._embedding_model = embedding_model
        self._base_url = base_url
        self._timeout = timeout
        self._dimension = dimension
        self._client: Any = None

    @property
    def name(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return self._default_model

    @property
    def embedding_model(self) -> str:
        return self._embedding_model

    def _get_client(self) -> Any:
        """Get or create the OpenAI client."""
        if self._client is None:
            try:
                from openai import OpenAI

                kwargs: dict[str, Any] = {
                    "api_key": self._api_key,
                    "timeout": self._timeout,
                    # Retries are handled by with_retries
                    "max_retries": 0,
                }
                if self._base_url:
                    kwargs["base_url"] = self._base_url
                self._client = OpenAI(**kwargs)
            except ImportError as exc:
                raise UpstreamFailure(
                    "openai package is required for OpenAI provider. "
                    "Install with: pip install openai"
                ) from exc
        return self._client

    @staticmethod
    def _messages(prompt: str, system: Optional[str]) -> list[dict[str, str]]:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        client = self._get_client()
        try:
            response = client.embeddings.create(
                model=self._embedding_model,
                input=texts,
                dimensions=self._dimension,
            )
        except Exception as e:
            logger.debug("OpenAI embedding failed: %s: %s", type(e).__name__, e)
            raise translate_error(e, self.name, "embedding") from e
        # The API returns items with an explicit index; keep input order.
        items = sorted(response.data, key=lambda item: item.index)
        return self._check_embeddings(texts, [list(item.embedding) for item in items])

    def generate_text(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: str | None = None,
        sanitize: bool = True,
    ) -> str:
        client = self._get_client()
        text = self._sanitize_prompt(prompt) if sanitize else prompt

        try:
            response = client.chat.completions.create(
                model=model or self._default_model,
                messages=self._messages(text, system),
            )
        except Exception as e:
            logger.debug("OpenAI generation failed: %s: %s", type(e).__name__, e)
            raise translate_error(e, self.name, "generation") from e
        if response.choices and response.choices[0].message.content:
            return response.choices[0].message.content
        return ""

    def generate_stream(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: str | None = None,
        sanitize: bool = True,
    ) -> Iterator[str]:
        client = self._get_client()
        text = self._sanitize_prompt(prompt) if sanitize else prompt

        try:
            stream = client.chat.completions.create(
                model=model or self._default_model,
                messages=self._messages(text, system),
                stream=True,
            )
            for chunk in stream:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        except Exception as e:
            logger.debug("OpenAI streaming failed: %s: %s", type(e).__name__, e)
            raise translate_error(e, self.name, "streaming") from e
