"""Error taxonomy shared by the stores, connectors and LLM providers."""

from typing import Any, Optional


class YouAgentError(Exception):
    """Base class for all domain errors. `code` is stable for JSON output."""

    code = "YOUAGENT_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.details = details


class DimensionMismatch(YouAgentError, ValueError):
    """Vector length disagrees with the store dimension."""

    code = "DIMENSION_MISMATCH"

    def __init__(self, expected: int, actual: int, what: str = "vector") -> None:
        super().__init__(
            f"{what} has dimension {actual}, expected {expected}",
            details={"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class StoreUnavailable(YouAgentError):
    """Durable backing storage cannot be opened or was closed."""

    code = "STORE_UNAVAILABLE"


class RateLimited(YouAgentError):
    """Upstream collaborator rejected the call for rate/quota reasons."""

    code = "RATE_LIMITED"


class UpstreamFailure(YouAgentError):
    """Generic collaborator failure (network, parse, auth)."""

    code = "UPSTREAM_FAILURE"


class ConnectorError(UpstreamFailure):
    """A content connector could not fetch or parse its source."""

    code = "CONNECTOR_ERROR"


class ConfigError(YouAgentError):
    """Required configuration is missing or invalid."""

    code = "CONFIG_ERROR"
