"""Graph storage abstractions and adapters."""

from .base import GraphRepository
from .errors import (GraphNotFound, InvalidAlias, InvalidIdentifier,
                     InvalidName, InvalidPattern, RepositoryError, StoreError,
                     StoreUnavailableError, UnresolvableItem, ValidationError)

__all__ = [
    "GraphRepository",
    "GraphNotFound",
    "InvalidAlias",
    "InvalidIdentifier",
    "InvalidName",
    "InvalidPattern",
    "RepositoryError",
    "StoreError",
    "StoreUnavailableError",
    "UnresolvableItem",
    "ValidationError",
]
