"""Logging bootstrap: JSON records through structlog, or plain text."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import structlog

APP_LOGGER_PREFIX = "gemini_chat"
DEFAULT_LOG_FILE = "~/.local/state/gemini-chat/app.log"
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
QUIET_LIBRARIES = ("httpx", "httpcore")


class AppLoggerFilter(logging.Filter):
    """Pass only records from this package; the TUI owns the terminal."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name.startswith(APP_LOGGER_PREFIX)


def _shared_processors() -> list[Any]:
    """Processors applied to structlog events and stdlib records alike."""
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        # Turns exc_info into an "exception" traceback string.
        structlog.processors.format_exc_info,
    ]


def _json_formatter() -> structlog.stdlib.ProcessorFormatter:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(
            ensure_ascii=False, separators=(",", ":")
        ),
        # Stdlib records carry their fields via ``extra=``.
        foreign_pre_chain=[structlog.stdlib.ExtraAdder(), *_shared_processors()],
    )


def _build_formatter(structured: bool) -> logging.Formatter:
    if structured:
        return _json_formatter()
    return logging.Formatter(PLAIN_FORMAT)


def _open_log_file(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    """Create the log file (and parents) readable by the owner only."""
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    if os.name == "posix":
        try:
            path.chmod(0o600)
        except OSError:
            logging.getLogger(__name__).warning(
                "Unable to enforce 0600 permissions for %s", path
            )
    return handler


def configure_logging(logging_config: dict[str, Any]) -> None:
    """Install handlers on the root logger from the ``[logging]`` section."""
    level = getattr(
        logging, str(logging_config.get("level", "INFO")).upper(), logging.INFO
    )
    formatter = _build_formatter(bool(logging_config.get("structured", True)))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(max(level, logging.WARNING))
    stderr_handler.setFormatter(formatter)
    stderr_handler.addFilter(AppLoggerFilter())
    root.addHandler(stderr_handler)

    if logging_config.get("log_to_file", False):
        target = Path(
            str(logging_config.get("log_file_path") or DEFAULT_LOG_FILE)
        ).expanduser()
        root.addHandler(_open_log_file(target, level, formatter))

    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
