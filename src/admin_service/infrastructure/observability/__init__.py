"""Logging setup."""

from admin_service.infrastructure.observability.logging import (
    configure_logging,
    get_logger,
    mask_sensitive_keys,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_keys",
]
