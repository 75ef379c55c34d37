"""Common repository errors used across graph storage adapters."""

from __future__ import annotations


class RepositoryError(RuntimeError):
    """Base class for storage layer failures."""


class GraphNotFound(RepositoryError):
    """Raised when a requested graph does not exist."""


class StoreError(RepositoryError):
    """Raised when a backing store lookup or write fails."""


class StoreUnavailableError(StoreError):
    """Raised when the backing store is temporarily unavailable."""


class UnresolvableItem(RepositoryError):
    """Raised when a detached graph is asked to resolve its link."""


class ValidationError(RepositoryError):
    """Raised when an item fails validation before persistence."""


class InvalidName(ValidationError):
    """Raised when a graph name does not satisfy the naming rule."""


class InvalidAlias(ValidationError):
    """Raised when a graph alias does not satisfy the naming rule."""


class InvalidIdentifier(ValidationError):
    """Raised when a graph id does not satisfy the identifier rule."""


class InvalidPattern(ValidationError):
    """Raised when a filter pattern cannot be compiled."""
