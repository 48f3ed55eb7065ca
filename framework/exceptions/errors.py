"""
Repository error taxonomy.

Raised by repositories and surfaced unchanged to callers; the engine
exception, when there is one, is kept as ``__cause__``.
"""

from typing import Any, Optional


class RepositoryError(Exception):
    """Base class for data access errors."""

    def __init__(self, message: str, detail: Optional[Any] = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class NotFoundError(RepositoryError):
    """No entity with the given identifier exists."""

    def __init__(self, entity: str, identifier: Any):
        self.entity = entity
        self.identifier = identifier
        super().__init__(
            f"{entity} not found: {identifier}",
            detail={"entity": entity, "id": str(identifier)},
        )


class ValidationError(RepositoryError):
    """Staged data violated a store constraint; detected at commit."""


class PersistenceError(RepositoryError):
    """Commit failed: connectivity loss, conflicting write or other engine failure."""
