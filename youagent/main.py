"""Entry point: logging setup, then the Typer app."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .cli import app
from .config import get_settings
from .utils.redact import RedactSecretsFilter

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 3

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"


def _log_target() -> tuple[Path, str]:
    try:
        settings = get_settings()
    except Exception as exc:
        print(f"Warning: settings could not be loaded for logging: {exc}", file=sys.stderr)
        return Path.home() / ".youagent" / "youagent.log", "INFO"
    return settings.log_file, settings.log_level


def setup_logging() -> None:
    """Send DEBUG and up to the rotating log file, WARNING and up to stderr.

    The root level follows YOUAGENT_LOG_LEVEL. Both handlers mask secrets.
    """
    log_file, log_level = _log_target()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    redact_filter = RedactSecretsFilter()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    file_handler.setLevel(logging.DEBUG)
    file_handler.addFilter(redact_filter)

    # Answers go to stdout; stderr only carries problems.
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    console_handler.setLevel(logging.WARNING)
    console_handler.addFilter(redact_filter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level))
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def main() -> None:
    setup_logging()
    app()


if __name__ == "__main__":
    main()
