"""Core infrastructure components."""

from bankr.core.exceptions import (
    BankrError,
    EngineError,
    QueryValidationError,
    StartupError,
)
from bankr.core.logging import RequestLoggingMiddleware, setup_logging

__all__ = [
    "BankrError",
    "EngineError",
    "QueryValidationError",
    "StartupError",
    "RequestLoggingMiddleware",
    "setup_logging",
]
