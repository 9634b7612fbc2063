"""
Infrastructure Layer - Event bus, storage adapters and persistence.
"""

from imagestore.infrastructure.events import ImageStorageEventBus
from imagestore.infrastructure.storage import (
    StorageAdapterRegistry,
    LocalStorageAdapter,
    InMemoryStorageAdapter,
)
from imagestore.infrastructure.database import (
    SQLAlchemyStoredFileRepository,
    InMemoryStoredFileRepository,
)

__all__ = [
    "ImageStorageEventBus",
    "StorageAdapterRegistry",
    "LocalStorageAdapter",
    "InMemoryStorageAdapter",
    "SQLAlchemyStoredFileRepository",
    "InMemoryStoredFileRepository",
]
