"""Shared utilities used across services and the HTTP layer."""

__all__ = [
    "error_handlers",
    "exceptions",
    "logging_config",
]
