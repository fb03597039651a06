"""YouAgent: question answering over your own public footprint."""

from importlib.metadata import PackageNotFoundError, version as _package_version


def _get_version() -> str:
    """Version from package metadata (single source of truth: pyproject.toml)."""
    try:
        return _package_version("youagent")
    except PackageNotFoundError:
        return "0.0.0-dev"


__version__ = _get_version()
