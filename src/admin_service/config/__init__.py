"""Configuration management for the admin service."""

from admin_service.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
