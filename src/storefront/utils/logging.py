"""Logging configuration for the storefront.

Standard library logging owns the handlers: stdout, plus two size-rotated
files under `LOG_DIR` (everything, and errors only). structlog formats the
events it hands to them: JSON in production and staging, coloured key-value
lines with Rich tracebacks everywhere else.

Request-scoped values such as the caller's user id are bound with
`bind_request_context` and appear on every line logged until the request ends.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

from storefront.config import current_env

_LEVEL_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_MAX_LOG_BYTES = 10 * 1024 * 1024
_LOG_BACKUPS = 5

# Gateway HTTP traffic is logged by the stripe SDK and urllib3 at INFO
_CHATTY_LOGGERS = ("stripe", "urllib3", "asyncio")

_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
    structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.FILENAME,
            structlog.processors.CallsiteParameter.LINENO,
            structlog.processors.CallsiteParameter.FUNC_NAME,
        ]
    ),
]


def get_log_level() -> str:
    """Get log level based on environment."""
    return os.getenv("LOG_LEVEL", _LEVEL_BY_ENV.get(current_env(), "INFO")).upper()


def _rotating_file(path: Path, level: str | int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(level: str, log_dir: str, log_file_prefix: str) -> None:
    """Replace the root logger's handlers with stdout and the two rotating files."""
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating_file(directory / f"{log_file_prefix}.log", level),
        _rotating_file(directory / f"{log_file_prefix}_error.log", logging.ERROR),
    ]

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer(env: str) -> Any:
    if env in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def setup_structlog(env: str | None = None) -> None:
    structlog.configure(
        processors=[*_PROCESSORS, _renderer(env or current_env())],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(
    level: str | None = None,
    log_dir: str | None = None,
    log_file_prefix: str = "storefront",
) -> None:
    """Configure all logging for the application."""
    setup_stdlib_logging(
        level=level or get_log_level(),
        log_dir=log_dir or os.getenv("LOG_DIR", "logs"),
        log_file_prefix=log_file_prefix,
    )
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(**kwargs: Any) -> None:
    """Bind values (request id, user id) included in every log line of the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
