"""Custom exceptions for the persistence_manager package."""

from __future__ import annotations


class PersistenceError(Exception):
    """Base exception for all persistence-related errors."""


class PersistenceConfigError(PersistenceError):
    """Raised when a store or manager is misconfigured."""


class StoreError(PersistenceError):
    """Raised when a store operation fails."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Store error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class StoreConnectionError(StoreError):
    """Raised when the backend cannot be opened or is unavailable."""


class StoreWriteError(StoreError):
    """Raised when a write transaction fails to commit."""
