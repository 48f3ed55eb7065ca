"""
Repository pattern: data access abstraction, decouples service layer from database session.
"""

from .base import BaseRepository, IRepository
from .unit_of_work import UnitOfWork, commit_session

__all__ = ["BaseRepository", "IRepository", "UnitOfWork", "commit_session"]
