"""Domain models."""

from .document import (
    SOURCE_LABELS,
    SOURCE_TAGS,
    Consent,
    ContentType,
    ContextFragment,
    Document,
    SourceTag,
)

__all__ = [
    "SOURCE_LABELS",
    "SOURCE_TAGS",
    "Consent",
    "ContentType",
    "ContextFragment",
    "Document",
    "SourceTag",
]
