"""Constants for LLM module.

Centralizes default models, timeouts and limits shared by the providers.
"""

# =============================================================================
# Prompt Processing
# =============================================================================

# Maximum prompt length (chars) for sanitization.
# Large enough for the biggest context block (20 fragments of 2000 chars)
# plus headers and the question.
MAX_PROMPT_LENGTH = 60000

# =============================================================================
# Timeout Settings (seconds)
# =============================================================================

# Default timeout for cloud API providers (Gemini, OpenAI)
DEFAULT_API_TIMEOUT = 30.0

# Local models can be slow on the first request while loading into memory.
OLLAMA_TIMEOUT = 120.0

# =============================================================================
# Default Models
# =============================================================================

DEFAULT_MODELS = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
    "ollama": "llama3.2",
}

# Every default embedding model produces (or is asked for) 768 dimensions,
# matching the vector index default.
DEFAULT_EMBEDDING_MODELS = {
    "gemini": "text-embedding-004",
    "openai": "text-embedding-3-small",
    "ollama": "nomic-embed-text",
}

EMBEDDING_DIMENSION = 768
