"""Answer synthesis: cited prompt construction and (streamed) generation."""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

from youagent.models import SOURCE_LABELS, ContextFragment
from youagent.utils.dates import format_date
from youagent.utils.llm import LLMProvider

logger = logging.getLogger(__name__)

NO_CONTEXT_MESSAGE = "No relevant information found."

SYSTEM_PROMPT = """You are a personal AI agent that answers questions about a person based on their public footprint (GitHub, Blog, Resume, Twitter).

Your role:
1. Answer questions using ONLY the provided context
2. ALWAYS cite sources with absolute dates
3. Be concise but comprehensive
4. If information is not in the context, say so clearly

Citation format:
- Use inline citations: (Source: GitHub — 2025-09-01)
- Always include the source name and absolute date
- For multiple sources, list them: (Sources: GitHub — 2025-09-01; Blog — 2025-08-15)

Guidelines:
- Never invent or assume information that is not in the context
- Always use absolute dates (YYYY-MM-DD format)
- Be precise about what the sources say
- Acknowledge gaps in knowledge"""


def source_label(source: str) -> str:
    return SOURCE_LABELS.get(source, source)


def format_fragment(index: int, fragment: ContextFragment) -> str:
    """One numbered context block: header, optional URL line, content."""
    title = f" — {fragment.title}" if fragment.title else ""
    lines = [
        f"[{index}] Source: {source_label(fragment.source)}{title} ({format_date(fragment.date)})"
    ]
    if fragment.url:
        lines.append(f"URL: {fragment.url}")
    lines.append(f"Content: {fragment.content}")
    return "\n".join(lines) + "\n"


def build_context_block(fragments: Sequence[ContextFragment]) -> str:
    return "\n---\n\n".join(
        format_fragment(idx, fragment) for idx, fragment in enumerate(fragments, start=1)
    )


def build_prompt(query: str, fragments: Sequence[ContextFragment]) -> str:
    """User prompt carrying the numbered context and the question."""
    return (
        f"Context:\n{build_context_block(fragments)}\n"
        f"---\n\n"
        f"Question: {query}\n\n"
        f"Answer (with citations):"
    )


def synthesize(
    provider: LLMProvider, query: str, fragments: Sequence[ContextFragment]
) -> str:
    """Generate the full answer. Empty context short-circuits to NO_CONTEXT_MESSAGE."""
    if not fragments:
        return NO_CONTEXT_MESSAGE
    try:
        return provider.generate_text(build_prompt(query, fragments), system=SYSTEM_PROMPT)
    except Exception:
        logger.exception("Synthesis failed")
        raise


def synthesize_stream(
    provider: LLMProvider, query: str, fragments: Sequence[ContextFragment]
) -> Iterator[str]:
    """Yield answer chunks as the provider streams them."""
    if not fragments:
        yield NO_CONTEXT_MESSAGE
        return
    try:
        yield from provider.generate_stream(
            build_prompt(query, fragments), system=SYSTEM_PROMPT
        )
    except Exception:
        logger.exception("Synthesis stream failed")
        raise
