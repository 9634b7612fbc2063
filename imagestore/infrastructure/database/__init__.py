"""
Infrastructure Database - ORM model and stored file repositories.
"""

from .models import Base, StoredFileORM
from .repositories import (
    SQLAlchemyStoredFileRepository,
    InMemoryStoredFileRepository,
    create_session_factory,
)

__all__ = [
    "Base",
    "StoredFileORM",
    "SQLAlchemyStoredFileRepository",
    "InMemoryStoredFileRepository",
    "create_session_factory",
]
