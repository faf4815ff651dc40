"""
Structured logging configuration.

Use ``get_logger`` from this module in the application layer (middleware,
services, routes). The storage and cache layers log through the standard
``logging`` module so they stay usable without the app wired up.
"""
from typing import Optional, Any, Iterable
import logging
import structlog
from admin_service.config.settings import get_settings
from admin_service.api.middleware.request_id import add_request_id_to_log


MASK = "***"


def mask_sensitive_keys(data: Any, keys: Iterable[str]) -> Any:
    """
    Return a copy of ``data`` with the values of sensitive keys masked.

    Nested dictionaries and lists are walked recursively.

    Example:
        >>> mask_sensitive_keys({"email": "a@b.c", "password": "x"}, ["password"])
        {'email': 'a@b.c', 'password': '***'}
    """
    keys = set(keys)
    if isinstance(data, dict):
        return {
            key: MASK if key in keys and value is not None else mask_sensitive_keys(value, keys)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive_keys(item, keys) for item in data]
    return data


def sensitive_keys_processor(logger_obj: Any, method_name: str, event_dict: dict) -> dict:
    """Structlog processor that masks configured sensitive keys."""
    return mask_sensitive_keys(event_dict, get_settings().log_sensitive_keys)


def configure_logging() -> None:
    """
    Configure structured logging.

    Processor chain:
    - Context variable merging (``structlog.contextvars.bind_contextvars``)
    - Request ID and correlation ID
    - Log level and ISO timestamp
    - Sensitive key masking
    - Exception formatting
    - JSON (production) or colored console rendering
    """
    settings = get_settings()

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True, pad_event=25)

    processors = [
        structlog.contextvars.merge_contextvars,
        add_request_id_to_log,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        sensitive_keys_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdlib loggers used by the storage and cache layers
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s")


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a logger instance with structured logging support.

    Usage:
        >>> logger = get_logger(__name__)
        >>> logger.info("cache invalidated", family="church", evicted=3)
    """
    return structlog.get_logger(name)
