"""Application logic layer."""

from .context import TRUNCATION_MARKER, pick_context
from .engine import Answer, Engine
from .indexer import Indexer, RefreshReport
from .planner import (
    DEFAULT_PLAN_TABLE,
    Intent,
    Plan,
    classify_intent,
    make_plan,
    needs_fresh_data,
)
from .synthesis import build_prompt, synthesize, synthesize_stream

__all__ = [
    "Answer",
    "DEFAULT_PLAN_TABLE",
    "Engine",
    "Indexer",
    "Intent",
    "Plan",
    "RefreshReport",
    "TRUNCATION_MARKER",
    "build_prompt",
    "classify_intent",
    "make_plan",
    "needs_fresh_data",
    "pick_context",
    "synthesize",
    "synthesize_stream",
]
