"""Keyword-based intent classification and retrieval plans.

Classification is a flat, ordered rule table evaluated first-match-wins:
coding, then career, then branding, otherwise general. A message such as
"my latest repo for the job" is therefore "coding"; that priority is part
of the contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from youagent.models import SOURCE_TAGS, SourceTag


class Intent(str, Enum):
    """What the user is asking about."""

    CODING = "coding"
    CAREER = "career"
    BRANDING = "branding"
    GENERAL = "general"


# Ordered: earlier rules win. Matching is by substring of the lowercased text.
INTENT_RULES: list[tuple[Intent, frozenset[str]]] = [
    (
        Intent.CODING,
        frozenset(
            {
                "code",
                "repo",
                "github",
                "project",
                "programming",
                "technical",
                "library",
                "framework",
            }
        ),
    ),
    (
        Intent.CAREER,
        frozenset(
            {
                "job",
                "career",
                "resume",
                "cv",
                "cover letter",
                "experience",
                "work",
                "role",
                "position",
                "hire",
                "interview",
            }
        ),
    ),
    (
        Intent.BRANDING,
        frozenset(
            {
                "tweet",
                "twitter",
                "social",
                "blog",
                "article",
                "post",
                "brand",
                "online presence",
            }
        ),
    ),
]

FRESHNESS_TERMS: frozenset[str] = frozenset(
    {"latest", "recent", "today", "this week", "refresh", "update"}
)


@dataclass(frozen=True)
class Plan:
    """Retrieval parameters derived from one message."""

    intent: Intent
    eligible_categories: frozenset[SourceTag]
    max_results: int
    force_fresh: bool = False


# intent -> (eligible categories, max results)
DEFAULT_PLAN_TABLE: Mapping[Intent, tuple[frozenset[SourceTag], int]] = {
    Intent.CODING: (frozenset({"profile-host", "document"}), 15),
    Intent.CAREER: (frozenset({"document", "profile-host"}), 10),
    Intent.BRANDING: (frozenset({"social", "feed"}), 20),
    Intent.GENERAL: (frozenset(SOURCE_TAGS), 10),
}


def _matches(text: str, terms: frozenset[str]) -> bool:
    return any(term in text for term in terms)


def classify_intent(text: str) -> Intent:
    """Classify a message; never fails, falls back to GENERAL."""
    lowered = text.lower()
    for intent, terms in INTENT_RULES:
        if _matches(lowered, terms):
            return intent
    return Intent.GENERAL


def needs_fresh_data(text: str) -> bool:
    """True when the message asks for recent information."""
    return _matches(text.lower(), FRESHNESS_TERMS)


def make_plan(
    text: str,
    table: Mapping[Intent, tuple[frozenset[SourceTag], int]] = DEFAULT_PLAN_TABLE,
) -> Plan:
    """Derive the retrieval plan for a message.

    `table` may override the defaults; intents missing from it use
    DEFAULT_PLAN_TABLE.
    """
    intent = classify_intent(text)
    categories, max_results = table.get(intent, DEFAULT_PLAN_TABLE[intent])
    return Plan(
        intent=intent,
        eligible_categories=frozenset(categories),
        max_results=max_results,
        force_fresh=needs_fresh_data(text),
    )
