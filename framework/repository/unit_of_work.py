"""
Unit of Work: one session per logical operation, shared by its repositories.
"""

from typing import Callable, Dict, Optional, Type
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.exceptions.errors import PersistenceError, ValidationError
from framework.logging.logger import get_logger

logger = get_logger("unit_of_work")


async def commit_session(session: AsyncSession) -> None:
    """Commit a session all-or-nothing; roll back and raise a repository error on failure."""
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        logger.warning(f"Commit rejected by constraint: {exc.orig}")
        raise ValidationError("Constraint violation", detail=str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.warning(f"Commit failed: {exc}")
        raise PersistenceError("Commit failed", detail=str(exc)) from exc


class UnitOfWork:
    """Hands out repositories bound to one shared session and owns its commit/rollback."""

    def __init__(self, session: Optional[AsyncSession] = None):
        """Initialize UnitOfWork; session must be provided."""
        if session is None:
            raise ValueError("Session must be provided. Pass the request-scoped session explicitly.")

        self.session = session
        self._repositories: Dict[str, object] = {}

    def get_repository(self, repo_class: Type, factory: Optional[Callable] = None):
        """Get or create a repository instance (one per class for this unit of work)."""
        cache_key = repo_class.__name__
        if cache_key not in self._repositories:
            build = factory or repo_class
            self._repositories[cache_key] = build(self.session)
        return self._repositories[cache_key]

    async def commit(self) -> None:
        """Commit all changes."""
        await commit_session(self.session)

    async def rollback(self) -> None:
        """Rollback all changes."""
        await self.session.rollback()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            await self.rollback()
        else:
            await self.commit()
