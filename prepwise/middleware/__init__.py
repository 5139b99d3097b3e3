"""Middleware and exception handling for the evaluation API."""

from .error_handler import APIError, ValidationAPIError, setup_exception_handlers
from .logging import LoggingMiddleware, configure_logging

__all__ = [
    "APIError",
    "ValidationAPIError",
    "setup_exception_handlers",
    "LoggingMiddleware",
    "configure_logging",
]
