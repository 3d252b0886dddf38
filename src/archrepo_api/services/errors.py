"""Error taxonomy for graph consistency and lifecycle operations.

Every error carries a machine-readable `rule` and an HTTP status so the
transport layer can render it without inspecting the failure.
"""

from typing import Any


class ArchRepoError(Exception):
    """Base class for domain errors reported synchronously to the caller."""

    status_code: int = 400
    rule: str = "error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "rule": self.rule, **self.context}


class NotFoundError(ArchRepoError):
    """A referenced id does not resolve."""

    status_code = 404
    rule = "not-found"

    def __init__(self, entity: str, entity_id: Any, message: str | None = None):
        super().__init__(
            message or f"{entity} with id {entity_id} not found",
            entity=entity,
            id=entity_id,
        )
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(ArchRepoError):
    """A structural invariant of the graph would be violated."""

    status_code = 422

    def __init__(self, rule: str, message: str, **context: Any) -> None:
        super().__init__(message, **context)
        self.rule = rule


class ConflictError(ArchRepoError):
    """A uniqueness or membership invariant would be violated."""

    status_code = 409

    def __init__(self, rule: str, message: str, **context: Any) -> None:
        super().__init__(message, **context)
        self.rule = rule


class DependencyBlockedError(ArchRepoError):
    """Deletion refused because other records still reference the target."""

    status_code = 409
    rule = "dependency-blocked"

    def __init__(
        self, user_id: int, category: str, count: int, description: str
    ) -> None:
        super().__init__(
            f"Cannot delete user {user_id}: user has {description}",
            id=user_id,
            category=category,
            count=count,
        )
        self.user_id = user_id
        self.category = category
        self.count = count
