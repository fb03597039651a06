"""Connector interface."""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from youagent.models import Document, SourceTag


class Connector(ABC):
    """Fetches one kind of public content and normalizes it into Documents."""

    source: SourceTag
    name: str

    def __init__(self, client: Optional[httpx.Client] = None, timeout: float = 30.0) -> None:
        self._client = client
        self._timeout = timeout

    @abstractmethod
    def fetch(self) -> list[Document]:
        """Return the current documents for this source.

        Raises:
            ConnectorError: When the source cannot be fetched or parsed.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(source={self.source!r})"
