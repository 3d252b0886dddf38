"""Service layer for graph consistency and lifecycle logic."""

from archrepo_api.services.errors import (
    ArchRepoError,
    ConflictError,
    DependencyBlockedError,
    NotFoundError,
    ValidationError,
)
from archrepo_api.services.store import EntityStore

__all__ = [
    "ArchRepoError",
    "ConflictError",
    "DependencyBlockedError",
    "EntityStore",
    "NotFoundError",
    "ValidationError",
]
