"""
Error hierarchy for Bankr.

Exception Hierarchy:
    BankrError (base)
    ├── QueryValidationError   bad user input, reported as 400
    ├── StartupError           unusable data sources, aborts startup
    └── EngineError            search engine failure, reported as a generic 500

A partially malformed abbreviation list is not an error: the registry keeps
the entries that parsed and logs the rest (see ``RegistrySnapshot.rejected``).
"""

from __future__ import annotations

from typing import Any


class BankrError(Exception):
    """Base exception for all Bankr errors."""

    public_message = "Something went wrong. Please report to admin."

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Client-facing payload. Never includes engine internals."""
        return {"message": self.public_message}


class QueryValidationError(BankrError):
    """Raised for queries or page numbers the service cannot accept."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context=context)
        self.public_message = message


class StartupError(BankrError):
    """Raised when the service cannot be initialized.

    Components raise it and propagate it; only the top-level entry point
    decides whether to abort the process.
    """


class EngineError(BankrError):
    """Raised when the search engine fails to open, index or query."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context=context)
        self.operation = operation
        self.cause = cause
