"""
Error types raised during startup, request handling and shutdown.
"""

from typing import Optional


class BudgetApiError(Exception):
    """Base class for all application errors."""

    http_status: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Startup, never surfaced over HTTP

class ConfigurationError(BudgetApiError):
    """A required setting is missing or a value is malformed."""


class ServerConnectionError(BudgetApiError):
    """The Actual server is unreachable or rejected the credentials."""


class BudgetLoadError(BudgetApiError):
    """The budget file could not be found, downloaded or opened."""


# Request handling

class InvalidParameterError(BudgetApiError):
    """A path or query parameter is malformed."""

    http_status = 400


class DelegateError(BudgetApiError):
    """A budget query failed."""

    def __init__(self, message: str, query: Optional[str] = None):
        super().__init__(message)
        self.query = query


class DelegateTimeoutError(DelegateError):
    """A budget query did not finish within the configured timeout."""


# Shutdown

class ShutdownError(BudgetApiError):
    """Releasing the budget connection failed."""
