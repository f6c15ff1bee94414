"""
Logging Setup.

structlog is layered over the standard logging module: library and
application records go through the same handlers, rendered as JSON lines
(file, and console when format is "json") or as coloured console output.
Settings come from config/settings/logging.yaml, validated by LoggingSchema;
keyword arguments to setup_logging() take precedence over the file.

Each record carries timestamp, level, logger, event, func_name and lineno.
Callers that know where a record originates tag it with a source, one of
VALID_SOURCES, either per record through log_with_source() or for a whole
process through structlog's context variables (the CLI binds "cli").

Usage:
    from noteprompt.core.logging import get_logger, log_with_source, setup_logging

    setup_logging()
    logger = get_logger(__name__)
    logger.info("Note store opened", extra={"url": url})
    log_with_source(logger, "sharing", "info", "Shortcut launched", shortcut="SendToClaude")
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.typing import Processor

from noteprompt.core.config import find_project_root, load_yaml_config
from noteprompt.core.config_schema import FileHandlerSchema, LoggingSchema

VALID_SOURCES = frozenset({
    "cli",
    "editor",
    "storage",
    "events",
    "sharing",
    "internal",
})

_QUIET_LIBRARIES = ("sqlalchemy.engine", "aiosqlite")

_settings: LoggingSchema | None = None


def _load_settings() -> LoggingSchema:
    """Read logging.yaml once per process."""
    global _settings
    if _settings is None:
        _settings = LoggingSchema(**load_yaml_config("logging.yaml"))
    return _settings


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _file_handler(file_settings: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    """Rotating JSONL handler under the project root."""
    log_path = find_project_root() / file_settings.path
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_settings.max_bytes,
        backupCount=file_settings.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Replaces any handlers already on the root logger, so calling it again
    reconfigures logging rather than duplicating output.

    Args:
        level: Level name, e.g. "DEBUG"; defaults to logging.yaml
        format_type: "json" or "console"; defaults to logging.yaml
        enable_console: Write to stdout; defaults to logging.yaml
        enable_file_logging: Write the JSONL file; defaults to logging.yaml
    """
    settings = _load_settings()
    level = level or settings.level
    format_type = format_type or settings.format
    if enable_console is None:
        enable_console = settings.handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = settings.handlers.file.enabled

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=processors,
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    if enable_console:
        if format_type == "console":
            console_formatter = structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(colors=True),
                foreign_pre_chain=processors,
            )
        else:
            console_formatter = json_formatter
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(console_formatter)
        root.addHandler(console_handler)

    if enable_file_logging:
        root.addHandler(_file_handler(settings.handlers.file, json_formatter))

    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """structlog logger for a module; pass __name__."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Emit one record tagged with source.

    Raises:
        ValueError: If source is not in VALID_SOURCES
        AttributeError: If level is not a logger method
    """
    if source not in VALID_SOURCES:
        raise ValueError(f"Unknown log source: {source!r}")
    getattr(logger, level.lower())(message, source=source, **kwargs)
